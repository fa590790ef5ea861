"""Database models for the recipe assistant."""

from .base import Base, TimestampMixin, utcnow
from .preference_signal import PreferenceSignal, SignalCategory, MAX_SIGNAL_STRENGTH
from .recipe_rating import RecipeRating
from .dietary_preference import DietaryPreference
from .community_recipe import CommunityRecipe, RecipeStatus
from .user_interaction import UserInteraction, InteractionType

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "utcnow",
    # Learned signals
    "PreferenceSignal",
    "SignalCategory",
    "MAX_SIGNAL_STRENGTH",
    # Ratings and explicit preferences
    "RecipeRating",
    "DietaryPreference",
    # Community
    "CommunityRecipe",
    "RecipeStatus",
    "UserInteraction",
    "InteractionType",
]
