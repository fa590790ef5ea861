import pytest
from sqlalchemy import insert, select

from recipe_assistant.config import Settings
from recipe_assistant.database import session_scope
from recipe_assistant.learner import PreferenceLearner
from recipe_assistant.models import PreferenceSignal, SignalCategory
from recipe_assistant.ratings import RatingService
from recipe_assistant.stores import (
    DatabaseDietaryPreferenceStore,
    DatabaseRatingStore,
    DatabaseSignalStore,
    InMemorySignalStore,
    build_stores,
)

from .samples import PASTA, TOMATO_EGG


class RacingSignalStore(DatabaseSignalStore):
    """Another writer inserts the signal between the UPDATE and the INSERT."""

    def __init__(self, session_factory, existing_strength):
        super().__init__(session_factory)
        self.existing_strength = existing_strength
        self.raced = False

    def _increment(self, db, user_id, category, value, increment):
        if not self.raced:
            self.raced = True
            db.execute(
                insert(PreferenceSignal).values(
                    user_id=user_id,
                    category=category,
                    value=value,
                    strength=self.existing_strength,
                    usage_count=1,
                )
            )
            return False
        return super()._increment(db, user_id, category, value, increment)


@pytest.fixture
def db_signal_store(session_factory):
    return DatabaseSignalStore(session_factory)


@pytest.fixture
def db_rating_store(session_factory):
    return DatabaseRatingStore(session_factory)


def test_signal_upsert_creates_with_increment(db_signal_store):
    signal = db_signal_store.upsert_signal("u1", SignalCategory.INGREDIENT, "tomato", 2)

    assert signal.strength == 2
    assert signal.usage_count == 1
    assert signal.category == SignalCategory.INGREDIENT


def test_signal_upsert_caps_strength(db_signal_store, session_factory):
    for _ in range(12):
        signal = db_signal_store.upsert_signal("u1", SignalCategory.COOKING_METHOD, "steam")

    assert signal.strength == 10
    assert signal.usage_count == 12

    with session_scope(session_factory) as db:
        rows = db.execute(select(PreferenceSignal)).scalars().all()
        assert len(rows) == 1


def test_signals_are_scoped_to_user(db_signal_store):
    db_signal_store.upsert_signal("u1", SignalCategory.CUISINE, "川菜")
    db_signal_store.upsert_signal("u2", SignalCategory.CUISINE, "川菜")

    assert len(db_signal_store.list_signals("u1")) == 1
    assert db_signal_store.list_signals("u3") == []


def test_learner_on_database_matches_memory(db_signal_store):
    memory_store = InMemorySignalStore()
    for store in (db_signal_store, memory_store):
        learner = PreferenceLearner(store)
        learner.learn_from_selection("u1", TOMATO_EGG, [TOMATO_EGG, PASTA])
        learner.learn_from_selection("u1", TOMATO_EGG, [TOMATO_EGG, PASTA])

    assert PreferenceLearner(db_signal_store).get_user_preferences("u1") == PreferenceLearner(
        memory_store
    ).get_user_preferences("u1")


def test_rating_upsert_overwrites(db_rating_store):
    record, created = db_rating_store.upsert_rating(
        "u1", "#7", {"recipe_name": "Pasta", "rating": 4, "comment": "good", "tags": ["italian"]}
    )
    assert created is True
    assert record.created_at is not None

    record, created = db_rating_store.upsert_rating(
        "u1", "#7", {"recipe_name": "Pasta", "rating": 2, "comment": None}
    )
    assert created is False
    assert record.rating == 2
    assert record.comment is None
    assert db_rating_store.find_rating("u1", "#7").rating == 2
    assert len(db_rating_store.list_ratings("u1")) == 1


def test_rating_service_on_database(db_rating_store):
    service = RatingService(db_rating_store)
    service.add_rating("u1", TOMATO_EGG, {"rating": 5, "tried": True})
    service.add_rating("u2", TOMATO_EGG, {"rating": 3})
    service.add_rating("u1", PASTA, {"rating": 4})

    assert service.get_recipe_average_rating("番茄炒蛋")["averageRating"] == 4.0
    assert len(db_rating_store.list_ratings_for_recipe(recipe_key="#7")) == 1

    adjusted = service.adjust_recommendations_by_rating(
        "u1", [{"name": "x", "ingredients": ["beef"]}, {"name": "y", "ingredients": ["番茄"]}]
    )
    assert [r["name"] for r in adjusted] == ["y", "x"]


def test_dietary_preference_merges(session_factory):
    store = DatabaseDietaryPreferenceStore(session_factory)
    assert store.get_preference("u1") is None

    store.set_preference("u1", {"low_salt": True})
    record = store.set_preference("u1", {"cuisine": "川菜", "unknown": 1})

    assert record.low_salt is True
    assert record.cuisine == "川菜"
    assert store.get_preference("u1").spicy is False


def test_build_stores_selects_backend(session_factory):
    memory = build_stores(Settings(storage_backend="memory", database_url="sqlite://"))
    assert isinstance(memory.signals, InMemorySignalStore)

    database = build_stores(
        Settings(storage_backend="database", database_url="sqlite://"), session_factory
    )
    assert isinstance(database.ratings, DatabaseRatingStore)

    with pytest.raises(ValueError):
        build_stores(Settings(storage_backend="database", database_url="sqlite://"))


def test_signal_insert_race_falls_back_to_capped_increment(session_factory):
    store = RacingSignalStore(session_factory, existing_strength=9)

    signal = store.upsert_signal("u1", SignalCategory.INGREDIENT, "tomato", 3)

    assert store.raced is True
    assert signal.strength == 10
    assert signal.usage_count == 2
    with session_scope(session_factory) as db:
        rows = db.execute(select(PreferenceSignal)).scalars().all()
        assert len(rows) == 1
