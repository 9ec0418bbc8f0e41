"""Store factory functions for creating store instances."""

from datetime import datetime
from typing import Callable, Optional

from woodshop.database.sqlalchemy_db import SQLAlchemyDatabase


def create_memory_database(
    id_factory: Optional[Callable[[], str]] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> SQLAlchemyDatabase:
    """Create an isolated in-memory store.

    Every call returns a separate store; nothing is written to disk and all
    data is gone once the instance is discarded.

    Args:
        id_factory: Optional callable returning fresh ids. Defaults to uuid4 hex.
        clock: Optional callable returning the current timestamp. Defaults to
            ``datetime.now(UTC)``.

    Returns:
        SQLAlchemyDatabase instance backed by in-memory SQLite
    """
    db = SQLAlchemyDatabase("sqlite://", id_factory=id_factory, clock=clock)
    db.connect()
    db.initialize_schema()
    return db
