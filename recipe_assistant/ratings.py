"""Recipe ratings and rating-based re-ranking."""

import logging
import math
from collections import Counter

from .errors import ValidationError
from .models import utcnow
from .recipes import as_list, normalize_recipe, recipe_key
from .scoring import (
    FAVORITE_MIN_RATING,
    build_preference_profile,
    calculate_recommendation_score,
    snapshot_ingredient_names,
)
from .stores import RatingRecord, RatingStore

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5
SUB_RATINGS = ("difficulty_rating", "taste_rating", "health_rating")


def _round1(value: float) -> float:
    return math.floor(value * 10 + 0.5) / 10


def _average(values: list[int]) -> float:
    return _round1(sum(values) / len(values)) if values else 0


def _distribution(ratings: list[RatingRecord]) -> dict[int, int]:
    counts = Counter(r.rating for r in ratings)
    return {stars: counts.get(stars, 0) for stars in range(MIN_RATING, MAX_RATING + 1)}


def rating_to_dict(record: RatingRecord) -> dict:
    """Serialize a rating for the HTTP layer."""
    return {
        "userId": record.user_id,
        "recipeName": record.recipe_name,
        "recipeKey": record.recipe_key,
        "ingredients": record.ingredients,
        "tags": record.tags,
        "rating": record.rating,
        "comment": record.comment,
        "tried": record.tried,
        "triedDate": record.tried_date.isoformat() if record.tried_date else None,
        "difficultyRating": record.difficulty_rating,
        "tasteRating": record.taste_rating,
        "healthRating": record.health_rating,
        "createdAt": record.created_at.isoformat() if record.created_at else None,
        "updatedAt": record.updated_at.isoformat() if record.updated_at else None,
    }


def _check_range(name: str, value, required: bool = False) -> None:
    if value is None:
        if required:
            raise ValidationError(f"{name} is required")
        return
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer between {MIN_RATING} and {MAX_RATING}")
    if value < MIN_RATING or value > MAX_RATING:
        raise ValidationError(f"{name} must be between {MIN_RATING} and {MAX_RATING}")


class RatingService:
    """Rating CRUD plus the rating-driven recommendation scorer."""

    def __init__(self, rating_store: RatingStore):
        self.rating_store = rating_store

    def add_rating(self, user_id: str, recipe_data: dict, rating_data: dict) -> tuple[RatingRecord, bool]:
        """Add or overwrite the user's rating of a recipe.

        rating_data keys: rating (required), comment, tried,
        difficulty_rating, taste_rating, health_rating.

        Returns:
            Tuple of (rating record, created).

        Raises:
            ValidationError: If a rating is outside 1-5 or the recipe has no name.
        """
        recipe = normalize_recipe(recipe_data)
        if not recipe.name:
            raise ValidationError("recipe name is required")

        _check_range("rating", rating_data.get("rating"), required=True)
        for name in SUB_RATINGS:
            _check_range(name, rating_data.get(name))

        tried = bool(rating_data.get("tried", False))
        fields = {
            "recipe_name": recipe.name,
            "ingredients": [ingredient.to_dict() for ingredient in recipe.ingredients],
            "tags": list(recipe.tags),
            "rating": rating_data["rating"],
            "comment": rating_data.get("comment"),
            "tried": tried,
            "tried_date": utcnow() if tried else None,
        }
        for name in SUB_RATINGS:
            fields[name] = rating_data.get(name)

        key = recipe_key(recipe.name, recipe.recipe_id)
        record, created = self.rating_store.upsert_rating(user_id, key, fields)
        logger.info(
            f"{'Added' if created else 'Updated'} rating for {user_id} on "
            f"'{recipe.name}': {record.rating} stars"
        )
        return record, created

    def get_user_rating(self, user_id: str, recipe_name: str, recipe_id: str | None = None) -> RatingRecord | None:
        return self.rating_store.find_rating(user_id, recipe_key(recipe_name, recipe_id))

    def get_user_rating_history(self, user_id: str, limit: int | None = 20) -> list[RatingRecord]:
        """Most recently updated ratings first."""
        ratings = self.rating_store.list_ratings(user_id)
        ratings.sort(key=lambda r: r.updated_at or r.created_at, reverse=True)
        if limit is None:
            return ratings
        return ratings[: max(limit, 0)]

    def summarize(self, ratings: list[RatingRecord]) -> dict:
        """Averages, star distribution and tried count for a set of ratings."""
        if not ratings:
            return {
                "averageRating": 0,
                "totalRatings": 0,
                "ratingDistribution": {},
                "averageDifficulty": 0,
                "averageTaste": 0,
                "averageHealth": 0,
                "triedCount": 0,
            }

        return {
            "averageRating": _average([r.rating for r in ratings]),
            "totalRatings": len(ratings),
            "ratingDistribution": _distribution(ratings),
            "averageDifficulty": _average([r.difficulty_rating for r in ratings if r.difficulty_rating]),
            "averageTaste": _average([r.taste_rating for r in ratings if r.taste_rating]),
            "averageHealth": _average([r.health_rating for r in ratings if r.health_rating]),
            "triedCount": sum(1 for r in ratings if r.tried),
        }

    def get_recipe_average_rating(self, recipe_name: str) -> dict:
        """Rating statistics across every user for a recipe name."""
        return self.summarize(self.rating_store.list_ratings_for_recipe(recipe_name=recipe_name))

    def get_user_rating_stats(self, user_id: str) -> dict:
        """Totals, favourites and recent activity for one user."""
        history = self.get_user_rating_history(user_id, limit=None)
        stats = {
            "totalRatings": len(history),
            "averageRating": 0,
            "ratingDistribution": {},
            "favoriteIngredients": {},
            "favoriteTags": {},
            "triedCount": 0,
            "recentActivity": [],
        }
        if not history:
            return stats

        favorites = [r for r in history if r.rating >= FAVORITE_MIN_RATING]
        stats["averageRating"] = _average([r.rating for r in history])
        stats["ratingDistribution"] = _distribution(history)
        stats["triedCount"] = sum(1 for r in history if r.tried)
        stats["favoriteIngredients"] = dict(
            Counter(name for r in favorites for name in snapshot_ingredient_names(r.ingredients))
        )
        stats["favoriteTags"] = dict(Counter(str(tag) for r in favorites for tag in as_list(r.tags)))
        stats["recentActivity"] = [
            {
                "recipeName": r.recipe_name,
                "rating": r.rating,
                "tried": r.tried,
                "updatedAt": r.updated_at.isoformat() if r.updated_at else None,
            }
            for r in history[:5]
        ]
        return stats

    def adjust_recommendations_by_rating(self, user_id: str, recipes: list[dict]) -> list[dict]:
        """Re-rank recipes by the user's rating history.

        Users without ratings get the input list back untouched. Any failure
        also returns the input list untouched.
        """
        try:
            ratings = self.rating_store.list_ratings(user_id)
            if not ratings:
                return recipes

            profile = build_preference_profile(ratings)
            scored = [
                {
                    **recipe,
                    "recommendationScore": calculate_recommendation_score(
                        normalize_recipe(recipe), profile
                    ),
                }
                for recipe in recipes
            ]
            # sorted() is stable, so equal scores keep their input order
            return sorted(scored, key=lambda r: r["recommendationScore"], reverse=True)
        except Exception as e:
            logger.exception(f"Failed to adjust recommendations for {user_id}: {e}")
            return recipes
