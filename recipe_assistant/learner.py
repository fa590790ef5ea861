"""Preference learning from recipe selections.

When a user picks one recipe out of a candidate set, every taste signal the
pick implies is reinforced in the SignalStore. Learning is best effort: a
failed update is logged and skipped, and the remaining updates still run.
"""

import logging
from collections import defaultdict

from .models import SignalCategory
from .recipes import Recipe, normalize_recipe
from .signals import (
    categorize_cooking_time,
    extract_cooking_methods,
    extract_ingredients,
    ingredient_frequency,
    nutrition_signals,
)
from .stores import SignalStore

logger = logging.getLogger(__name__)

RECURRING_INGREDIENT_INCREMENT = 2
DEFAULT_INCREMENT = 1


class PreferenceLearner:
    """Turns selections into reinforced PreferenceSignals."""

    def __init__(self, signal_store: SignalStore):
        self.signal_store = signal_store

    def collect_signals(
        self, selected: Recipe, candidates: list[Recipe]
    ) -> list[tuple[SignalCategory, str, int]]:
        """Every (category, value, increment) a selection implies.

        Ingredients that also appear in other candidates count double.
        """
        signals = []

        for ingredient in extract_ingredients(selected):
            if ingredient_frequency(ingredient, candidates) > 1:
                increment = RECURRING_INGREDIENT_INCREMENT
            else:
                increment = DEFAULT_INCREMENT
            signals.append((SignalCategory.INGREDIENT, ingredient, increment))

        for method in extract_cooking_methods(selected):
            signals.append((SignalCategory.COOKING_METHOD, method, DEFAULT_INCREMENT))

        if selected.difficulty:
            signals.append((SignalCategory.DIFFICULTY, selected.difficulty, DEFAULT_INCREMENT))

        if selected.cooking_time:
            bucket = categorize_cooking_time(selected.cooking_time)
            signals.append((SignalCategory.COOKING_TIME, bucket, DEFAULT_INCREMENT))

        for label in nutrition_signals(selected.nutrition):
            signals.append((SignalCategory.NUTRITION, label, DEFAULT_INCREMENT))

        # Tags feed the cuisine category
        for tag in selected.tags:
            signals.append((SignalCategory.CUISINE, tag, DEFAULT_INCREMENT))

        return signals

    def update_preference(
        self, user_id: str, category: SignalCategory, value: str, increment: int = 1
    ) -> bool:
        """Reinforce a single signal. Returns False if the store failed."""
        try:
            signal = self.signal_store.upsert_signal(user_id, category, value, increment)
        except Exception as e:
            logger.exception(f"Failed to update preference {category.value}={value!r} for {user_id}: {e}")
            return False

        logger.debug(
            f"Updated preference {category.value}={value!r} for {user_id} "
            f"(strength {signal.strength}, used {signal.usage_count}x)"
        )
        return True

    def learn_from_selection(
        self, user_id: str, selected_recipe: dict, all_recipes: list[dict]
    ) -> list[tuple[str, str]]:
        """Learn from a user picking selected_recipe out of all_recipes.

        Returns the (category, value) pairs that were stored.
        """
        selected = normalize_recipe(selected_recipe)
        candidates = [normalize_recipe(recipe) for recipe in all_recipes or []]

        logger.info(f"Learning preferences for {user_id} from '{selected.name}'")

        applied = []
        for category, value, increment in self.collect_signals(selected, candidates):
            if self.update_preference(user_id, category, value, increment):
                applied.append((category.value, value))

        logger.info(f"Stored {len(applied)} preference signals for {user_id}")
        return applied

    def get_user_preferences(self, user_id: str) -> dict[str, list[dict]]:
        """Signals grouped by category, strongest and most used first."""
        signals = sorted(
            self.signal_store.list_signals(user_id),
            key=lambda s: (-s.strength, -s.usage_count),
        )

        grouped = defaultdict(list)
        for signal in signals:
            grouped[signal.category.value].append(
                {
                    "value": signal.value,
                    "strength": signal.strength,
                    "usageCount": signal.usage_count,
                }
            )
        return dict(grouped)

    def get_preference_stats(self, user_id: str) -> dict:
        """Summary counts plus the top value of each category."""
        preferences = self.get_user_preferences(user_id)
        return {
            "totalSignals": sum(len(entries) for entries in preferences.values()),
            "categoryCounts": {
                category: len(entries) for category, entries in preferences.items()
            },
            "topPreferences": {
                category: entries[0] for category, entries in preferences.items()
            },
        }
