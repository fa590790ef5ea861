"""User interaction model for likes, favorites and tries."""

import enum

from sqlalchemy import Integer, String, Boolean, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class InteractionType(str, enum.Enum):
    """Kinds of interaction a user can toggle on a community recipe."""

    LIKE = "like"
    FAVORITE = "favorite"
    TRY = "try"


class UserInteraction(Base, TimestampMixin):
    """Model for storing a user's interaction with a community recipe."""

    __tablename__ = "user_interactions"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "recipe_id", "interaction_type", name="uq_user_interaction"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(50), nullable=False)
    recipe_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("community_recipes.id"), nullable=False
    )
    interaction_type: Mapped[InteractionType] = mapped_column(
        Enum(InteractionType, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Relationship to recipe
    recipe: Mapped["CommunityRecipe"] = relationship(
        "CommunityRecipe", back_populates="interactions"
    )

    def __repr__(self) -> str:
        return f"<UserInteraction(user='{self.user_id}', recipe_id={self.recipe_id}, type={self.interaction_type.value})>"
