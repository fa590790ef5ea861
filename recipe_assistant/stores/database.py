"""SQLAlchemy-backed stores.

Every call opens its own session through session_scope, so the stores can
be shared across requests and threads.
"""

import logging

from sqlalchemy import case, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from ..database import session_scope
from ..models import (
    MAX_SIGNAL_STRENGTH,
    DietaryPreference,
    PreferenceSignal,
    RecipeRating,
    SignalCategory,
    utcnow,
)
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

logger = logging.getLogger(__name__)


def _signal_record(row: PreferenceSignal) -> SignalRecord:
    return SignalRecord(
        user_id=row.user_id,
        category=row.category,
        value=row.value,
        strength=row.strength,
        usage_count=row.usage_count,
        last_updated=row.last_updated,
    )


def _rating_record(row: RecipeRating) -> RatingRecord:
    return RatingRecord(
        user_id=row.user_id,
        recipe_key=row.recipe_key,
        recipe_name=row.recipe_name,
        rating=row.rating,
        ingredients=list(row.ingredients or []),
        tags=list(row.tags or []),
        comment=row.comment,
        tried=row.tried,
        tried_date=row.tried_date,
        difficulty_rating=row.difficulty_rating,
        taste_rating=row.taste_rating,
        health_rating=row.health_rating,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _dietary_record(row: DietaryPreference) -> DietaryRecord:
    return DietaryRecord(
        user_id=row.user_id,
        low_salt=row.low_salt,
        low_oil=row.low_oil,
        spicy=row.spicy,
        vegetarian=row.vegetarian,
        cuisine=row.cuisine,
    )


class DatabaseSignalStore(SignalStore):
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def _signal_filter(self, user_id: str, category: SignalCategory, value: str):
        return (
            PreferenceSignal.user_id == user_id,
            PreferenceSignal.category == category,
            PreferenceSignal.value == value,
        )

    def _increment(
        self, db: Session, user_id: str, category: SignalCategory, value: str, increment: int
    ) -> bool:
        """Conditional in-place increment. Returns False if the row is missing."""
        now = utcnow()
        raised = PreferenceSignal.strength + increment
        result = db.execute(
            update(PreferenceSignal)
            .where(*self._signal_filter(user_id, category, value))
            .values(
                strength=case(
                    (raised > MAX_SIGNAL_STRENGTH, MAX_SIGNAL_STRENGTH), else_=raised
                ),
                usage_count=PreferenceSignal.usage_count + 1,
                last_updated=now,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    def upsert_signal(self, user_id, category, value, increment=1):
        category = SignalCategory(category)
        with session_scope(self._session_factory) as db:
            if not self._increment(db, user_id, category, value, increment):
                try:
                    with db.begin_nested():
                        db.add(
                            PreferenceSignal(
                                user_id=user_id,
                                category=category,
                                value=value,
                                strength=min(MAX_SIGNAL_STRENGTH, increment),
                                usage_count=1,
                                last_updated=utcnow(),
                            )
                        )
                except IntegrityError:
                    # Another request inserted the same signal first
                    logger.debug(f"Signal insert raced for {user_id}/{category.value}/{value}")
                    self._increment(db, user_id, category, value, increment)

            row = db.execute(
                select(PreferenceSignal).where(*self._signal_filter(user_id, category, value))
            ).scalar_one()
            return _signal_record(row)

    def list_signals(self, user_id):
        with session_scope(self._session_factory) as db:
            rows = db.execute(
                select(PreferenceSignal).where(PreferenceSignal.user_id == user_id)
            ).scalars()
            return [_signal_record(row) for row in rows]


class DatabaseRatingStore(RatingStore):
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def _find(self, db: Session, user_id: str, recipe_key: str) -> RecipeRating | None:
        return db.execute(
            select(RecipeRating).where(
                RecipeRating.user_id == user_id, RecipeRating.recipe_key == recipe_key
            )
        ).scalar_one_or_none()

    def find_rating(self, user_id, recipe_key):
        with session_scope(self._session_factory) as db:
            row = self._find(db, user_id, recipe_key)
            return _rating_record(row) if row else None

    def upsert_rating(self, user_id, recipe_key, fields):
        values = {name: fields[name] for name in RATING_FIELDS if name in fields}
        with session_scope(self._session_factory) as db:
            row = self._find(db, user_id, recipe_key)
            created = row is None
            if created:
                row = RecipeRating(user_id=user_id, recipe_key=recipe_key, **values)
                try:
                    with db.begin_nested():
                        db.add(row)
                except IntegrityError:
                    row = self._find(db, user_id, recipe_key)
                    created = False
            if not created:
                for name, value in values.items():
                    setattr(row, name, value)
            db.flush()
            return _rating_record(row), created

    def list_ratings(self, user_id):
        with session_scope(self._session_factory) as db:
            rows = db.execute(
                select(RecipeRating).where(RecipeRating.user_id == user_id)
            ).scalars()
            return [_rating_record(row) for row in rows]

    def list_ratings_for_recipe(self, recipe_name=None, recipe_key=None):
        query = select(RecipeRating)
        if recipe_name is not None:
            query = query.where(RecipeRating.recipe_name == recipe_name)
        if recipe_key is not None:
            query = query.where(RecipeRating.recipe_key == recipe_key)
        with session_scope(self._session_factory) as db:
            return [_rating_record(row) for row in db.execute(query).scalars()]


class DatabaseDietaryPreferenceStore(DietaryPreferenceStore):
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def get_preference(self, user_id):
        with session_scope(self._session_factory) as db:
            row = db.execute(
                select(DietaryPreference).where(DietaryPreference.user_id == user_id)
            ).scalar_one_or_none()
            return _dietary_record(row) if row else None

    def set_preference(self, user_id, fields):
        values = {name: fields[name] for name in DIETARY_FIELDS if name in fields}
        with session_scope(self._session_factory) as db:
            row = db.execute(
                select(DietaryPreference).where(DietaryPreference.user_id == user_id)
            ).scalar_one_or_none()
            if row is None:
                row = DietaryPreference(
                    user_id=user_id,
                    low_salt=False,
                    low_oil=False,
                    spicy=False,
                    vegetarian=False,
                    cuisine="",
                )
                db.add(row)
            for name, value in values.items():
                setattr(row, name, value)
            db.flush()
            return _dietary_record(row)
