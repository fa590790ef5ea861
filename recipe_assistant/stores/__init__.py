"""Signal, rating and dietary preference stores.

build_stores picks one store family from configuration; callers only ever
see the abstract interfaces.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.orm import sessionmaker

from ..config import Settings
from .base import (
    DietaryPreferenceStore,
    DietaryRecord,
    RatingRecord,
    RatingStore,
    SignalRecord,
    SignalStore,
)
from .database import (
    DatabaseDietaryPreferenceStore,
    DatabaseRatingStore,
    DatabaseSignalStore,
)
from .memory import (
    InMemoryDietaryPreferenceStore,
    InMemoryRatingStore,
    InMemorySignalStore,
)

logger = logging.getLogger(__name__)


@dataclass
class Stores:
    signals: SignalStore
    ratings: RatingStore
    dietary: DietaryPreferenceStore


def build_stores(settings: Settings, session_factory: sessionmaker | None = None) -> Stores:
    """Build the store family named by settings.storage_backend."""
    if settings.storage_backend == "memory":
        logger.info("Using in-memory stores")
        return Stores(
            signals=InMemorySignalStore(),
            ratings=InMemoryRatingStore(),
            dietary=InMemoryDietaryPreferenceStore(),
        )

    if session_factory is None:
        raise ValueError("Database stores need a session factory")
    logger.info("Using database stores")
    return Stores(
        signals=DatabaseSignalStore(session_factory),
        ratings=DatabaseRatingStore(session_factory),
        dietary=DatabaseDietaryPreferenceStore(session_factory),
    )


__all__ = [
    "Stores",
    "build_stores",
    "SignalStore",
    "RatingStore",
    "DietaryPreferenceStore",
    "SignalRecord",
    "RatingRecord",
    "DietaryRecord",
    "InMemorySignalStore",
    "InMemoryRatingStore",
    "InMemoryDietaryPreferenceStore",
    "DatabaseSignalStore",
    "DatabaseRatingStore",
    "DatabaseDietaryPreferenceStore",
]
