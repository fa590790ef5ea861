"""Learned preference signals, one row per (user, category, value)."""

import enum
from datetime import datetime

from sqlalchemy import Integer, String, DateTime, Enum, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, utcnow

MAX_SIGNAL_STRENGTH = 10


class SignalCategory(str, enum.Enum):
    """Taste dimensions the learner tracks."""

    INGREDIENT = "ingredient"
    CUISINE = "cuisine"
    COOKING_METHOD = "cooking_method"
    DIFFICULTY = "difficulty"
    COOKING_TIME = "cooking_time"
    NUTRITION = "nutrition"


class PreferenceSignal(Base, TimestampMixin):
    """Model for storing one learned taste signal.

    strength grows by the reinforcement increment and is capped at
    MAX_SIGNAL_STRENGTH; usage_count grows by one per reinforcement.
    Signals never decay and are never deleted.
    """

    __tablename__ = "preference_signals"
    __table_args__ = (
        UniqueConstraint("user_id", "category", "value", name="uq_preference_signal"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    category: Mapped[SignalCategory] = mapped_column(
        Enum(SignalCategory, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    value: Mapped[str] = mapped_column(String(255), nullable=False)
    strength: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    usage_count: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    last_updated: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return (
            f"<PreferenceSignal(user='{self.user_id}', {self.category.value}="
            f"'{self.value}', strength={self.strength})>"
        )
