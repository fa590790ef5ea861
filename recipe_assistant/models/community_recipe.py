"""Community recipe model for recipes users share publicly."""

import enum

from sqlalchemy import Integer, String, Text, Boolean, Float, Enum, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class RecipeStatus(enum.Enum):
    """Publication status of a shared recipe."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class CommunityRecipe(Base, TimestampMixin):
    """Model for storing shared recipes.

    likes, favorites and try_count mirror the number of active
    UserInteraction rows of each type; average_rating and rating_count
    mirror the RecipeRating rows keyed on this recipe.
    """

    __tablename__ = "community_recipes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    author_id: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    cooking_time: Mapped[str | None] = mapped_column(String(100), nullable=True)
    difficulty: Mapped[str | None] = mapped_column(String(50), nullable=True)
    servings: Mapped[str | None] = mapped_column(String(100), nullable=True)
    ingredients: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    steps: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    nutrition: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    tips: Mapped[list | None] = mapped_column(JSON, nullable=True)
    tags: Mapped[list | None] = mapped_column(JSON, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    author_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    author_comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_public: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    likes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    favorites: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    try_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    average_rating: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    rating_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    status: Mapped[RecipeStatus] = mapped_column(
        Enum(RecipeStatus), default=RecipeStatus.PUBLISHED, nullable=False
    )

    # Relationship to interactions
    interactions: Mapped[list["UserInteraction"]] = relationship(
        "UserInteraction", back_populates="recipe"
    )

    def __repr__(self) -> str:
        return f"<CommunityRecipe(id={self.id}, name='{self.name}')>"
