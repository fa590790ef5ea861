"""Rating-based preference profiles and recommendation scores.

Scores are additive heuristics with no normalization: they only order one
user's candidates against each other and mean nothing across users or over
time.
"""

import math
from collections import Counter
from dataclasses import dataclass, field

from .recipes import Recipe, as_list, normalize_ingredient
from .stores import RatingRecord

FAVORITE_MIN_RATING = 4
INGREDIENT_WEIGHT = 2
TAG_WEIGHT = 1.5
DIFFICULTY_BONUS = 3
DEFAULT_DIFFICULTY_LEVEL = 2

DIFFICULTY_LEVELS = {
    "简单": 1,
    "easy": 1,
    "中等": 2,
    "medium": 2,
    "困难": 3,
    "hard": 3,
}


@dataclass
class UserPreferenceProfile:
    """Derived view of a user's rating history. Never persisted."""

    favorite_ingredients: Counter = field(default_factory=Counter)
    favorite_tags: Counter = field(default_factory=Counter)
    preferred_difficulty: int | None = None
    preferred_taste: int | None = None
    preferred_health: int | None = None


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _rounded_average(values: list[int]) -> int | None:
    if not values:
        return None
    return round_half_up(sum(values) / len(values))


def snapshot_ingredient_names(items: list) -> list[str]:
    """Ingredient names from a stored snapshot of strings or objects."""
    names = []
    for item in as_list(items):
        ingredient = normalize_ingredient(item)
        if ingredient:
            names.append(ingredient.name)
    return names


def build_preference_profile(ratings: list[RatingRecord]) -> UserPreferenceProfile:
    """Build a profile from a user's ratings.

    Favourite ingredients and tags come from ratings of 4 stars or more;
    the preferred difficulty, taste and health levels average every rating
    that set them.
    """
    profile = UserPreferenceProfile()

    for rating in ratings:
        if rating.rating < FAVORITE_MIN_RATING:
            continue
        profile.favorite_ingredients.update(snapshot_ingredient_names(rating.ingredients))
        profile.favorite_tags.update(str(tag) for tag in as_list(rating.tags))

    profile.preferred_difficulty = _rounded_average(
        [r.difficulty_rating for r in ratings if r.difficulty_rating]
    )
    profile.preferred_taste = _rounded_average(
        [r.taste_rating for r in ratings if r.taste_rating]
    )
    profile.preferred_health = _rounded_average(
        [r.health_rating for r in ratings if r.health_rating]
    )
    return profile


def difficulty_level(label: str) -> int:
    """Map a difficulty label to 1-3; unknown labels count as medium."""
    return DIFFICULTY_LEVELS.get(label.strip().lower(), DEFAULT_DIFFICULTY_LEVEL)


def calculate_recommendation_score(recipe: Recipe, profile: UserPreferenceProfile) -> float:
    score = 0

    for name in recipe.ingredient_names:
        score += INGREDIENT_WEIGHT * profile.favorite_ingredients.get(name, 0)

    for tag in recipe.tags:
        score += TAG_WEIGHT * profile.favorite_tags.get(tag, 0)

    # Closer to the preferred difficulty scores higher; can go negative
    if profile.preferred_difficulty and recipe.difficulty:
        distance = abs(difficulty_level(recipe.difficulty) - profile.preferred_difficulty)
        score += DIFFICULTY_BONUS - distance

    return score
