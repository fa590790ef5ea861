"""Dietary preferences model for storing explicit user settings."""

from sqlalchemy import Integer, String, Boolean
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class DietaryPreference(Base, TimestampMixin):
    """Model for storing the preferences a user sets by hand.

    Unlike PreferenceSignal these are never learned; they feed the
    recipe generation prompt.
    """

    __tablename__ = "dietary_preferences"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    low_salt: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    low_oil: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    spicy: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    vegetarian: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    cuisine: Mapped[str] = mapped_column(String(100), default="", nullable=False)

    def __repr__(self) -> str:
        return f"<DietaryPreference(user='{self.user_id}')>"
