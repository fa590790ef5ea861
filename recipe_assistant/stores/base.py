"""Store interfaces and the records they exchange."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime

from ..models import SignalCategory


@dataclass
class SignalRecord:
    """One learned signal as returned by a SignalStore."""

    user_id: str
    category: SignalCategory
    value: str
    strength: int
    usage_count: int
    last_updated: datetime


@dataclass
class RatingRecord:
    """One user's rating of one recipe as returned by a RatingStore."""

    user_id: str
    recipe_key: str
    recipe_name: str
    rating: int
    ingredients: list = field(default_factory=list)
    tags: list = field(default_factory=list)
    comment: str | None = None
    tried: bool = False
    tried_date: datetime | None = None
    difficulty_rating: int | None = None
    taste_rating: int | None = None
    health_rating: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class DietaryRecord:
    """Explicit dietary settings for one user."""

    user_id: str
    low_salt: bool = False
    low_oil: bool = False
    spicy: bool = False
    vegetarian: bool = False
    cuisine: str = ""


# Fields a rating upsert may set; every upsert overwrites all of them.
RATING_FIELDS = (
    "recipe_name",
    "ingredients",
    "tags",
    "rating",
    "comment",
    "tried",
    "tried_date",
    "difficulty_rating",
    "taste_rating",
    "health_rating",
)

DIETARY_FIELDS = ("low_salt", "low_oil", "spicy", "vegetarian", "cuisine")


class SignalStore(ABC):
    """Per-user store of learned signals."""

    @abstractmethod
    def upsert_signal(
        self, user_id: str, category: SignalCategory, value: str, increment: int = 1
    ) -> SignalRecord:
        """Atomically create or reinforce the (user, category, value) signal.

        A new signal starts with strength=increment and usage_count=1; an
        existing one gets strength=min(10, strength + increment) and
        usage_count + 1.
        """

    @abstractmethod
    def list_signals(self, user_id: str) -> list[SignalRecord]:
        """All signals of a user, in no particular order."""


class RatingStore(ABC):
    """Per-user store of recipe ratings."""

    @abstractmethod
    def find_rating(self, user_id: str, recipe_key: str) -> RatingRecord | None:
        ...

    @abstractmethod
    def upsert_rating(
        self, user_id: str, recipe_key: str, fields: dict
    ) -> tuple[RatingRecord, bool]:
        """Create or overwrite a rating. Returns (record, created)."""

    @abstractmethod
    def list_ratings(self, user_id: str) -> list[RatingRecord]:
        ...

    @abstractmethod
    def list_ratings_for_recipe(
        self, recipe_name: str | None = None, recipe_key: str | None = None
    ) -> list[RatingRecord]:
        """Every user's ratings of a recipe, by name or by key."""


class DietaryPreferenceStore(ABC):
    """Per-user explicit dietary settings."""

    @abstractmethod
    def get_preference(self, user_id: str) -> DietaryRecord | None:
        ...

    @abstractmethod
    def set_preference(self, user_id: str, fields: dict) -> DietaryRecord:
        """Merge fields into the user's settings, creating them if needed."""
