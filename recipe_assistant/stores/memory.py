"""In-memory stores for tests and ephemeral deployments.

State lives on the store instance, so two stores never share data.
"""

import threading
from copy import deepcopy
from dataclasses import replace

from ..models import MAX_SIGNAL_STRENGTH, SignalCategory, utcnow
from .base import (
    DIETARY_FIELDS,
    RATING_FIELDS,
    DietaryPreferenceStore,
    DietaryRecord,
    RatingRecord,
    RatingStore,
    SignalRecord,
    SignalStore,
)


def _copy_rating(rating: RatingRecord) -> RatingRecord:
    return replace(rating, ingredients=deepcopy(rating.ingredients or []), tags=list(rating.tags or []))


class InMemorySignalStore(SignalStore):
    def __init__(self):
        self._signals: dict[tuple[str, SignalCategory, str], SignalRecord] = {}
        self._lock = threading.Lock()

    def upsert_signal(self, user_id, category, value, increment=1):
        key = (user_id, SignalCategory(category), value)
        with self._lock:
            now = utcnow()
            signal = self._signals.get(key)
            if signal is None:
                signal = SignalRecord(
                    user_id=user_id,
                    category=key[1],
                    value=value,
                    strength=min(MAX_SIGNAL_STRENGTH, increment),
                    usage_count=1,
                    last_updated=now,
                )
                self._signals[key] = signal
            else:
                signal.strength = min(MAX_SIGNAL_STRENGTH, signal.strength + increment)
                signal.usage_count += 1
                signal.last_updated = now
            return replace(signal)

    def list_signals(self, user_id):
        with self._lock:
            return [
                replace(signal)
                for (owner, _, _), signal in self._signals.items()
                if owner == user_id
            ]


class InMemoryRatingStore(RatingStore):
    def __init__(self):
        self._ratings: dict[tuple[str, str], RatingRecord] = {}
        self._lock = threading.Lock()

    def find_rating(self, user_id, recipe_key):
        with self._lock:
            rating = self._ratings.get((user_id, recipe_key))
            return _copy_rating(rating) if rating else None

    def upsert_rating(self, user_id, recipe_key, fields):
        values = {name: fields[name] for name in RATING_FIELDS if name in fields}
        with self._lock:
            now = utcnow()
            existing = self._ratings.get((user_id, recipe_key))
            if existing is None:
                record = RatingRecord(
                    user_id=user_id,
                    recipe_key=recipe_key,
                    created_at=now,
                    updated_at=now,
                    **values,
                )
                created = True
            else:
                record = replace(existing, updated_at=now, **values)
                created = False
            self._ratings[(user_id, recipe_key)] = _copy_rating(record)
            return _copy_rating(record), created

    def list_ratings(self, user_id):
        with self._lock:
            return [
                _copy_rating(rating)
                for (owner, _), rating in self._ratings.items()
                if owner == user_id
            ]

    def list_ratings_for_recipe(self, recipe_name=None, recipe_key=None):
        with self._lock:
            return [
                _copy_rating(rating)
                for rating in self._ratings.values()
                if (recipe_name is None or rating.recipe_name == recipe_name)
                and (recipe_key is None or rating.recipe_key == recipe_key)
            ]


class InMemoryDietaryPreferenceStore(DietaryPreferenceStore):
    def __init__(self):
        self._preferences: dict[str, DietaryRecord] = {}
        self._lock = threading.Lock()

    def get_preference(self, user_id):
        with self._lock:
            preference = self._preferences.get(user_id)
            return replace(preference) if preference else None

    def set_preference(self, user_id, fields):
        values = {name: fields[name] for name in DIETARY_FIELDS if name in fields}
        with self._lock:
            current = self._preferences.get(user_id) or DietaryRecord(user_id=user_id)
            updated = replace(current, **values)
            self._preferences[user_id] = updated
            return replace(updated)
