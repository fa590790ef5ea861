"""Recipe rating model for storing per-user recipe judgments."""

from datetime import datetime

from sqlalchemy import Integer, String, Text, Boolean, DateTime, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class RecipeRating(Base, TimestampMixin):
    """Model for storing one user's rating of one recipe.

    recipe_key is "#<id>" for recipes with a stable id (community recipes)
    and the plain recipe name otherwise, so generated recipes sharing a name
    share a rating row.

    ingredients and tags are snapshots taken at rating time.
    """

    __tablename__ = "recipe_ratings"
    __table_args__ = (
        UniqueConstraint("user_id", "recipe_key", name="uq_recipe_rating"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    recipe_key: Mapped[str] = mapped_column(String(255), nullable=False)
    recipe_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    ingredients: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    tried: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    tried_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    difficulty_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    taste_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    health_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        return f"<RecipeRating(user='{self.user_id}', recipe='{self.recipe_name}', rating={self.rating})>"
