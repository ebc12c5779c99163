"""Persistence infrastructure."""

from squawker.infrastructure.persistence.database import Database
from squawker.infrastructure.persistence.preference_store import SqlitePreferenceStore
from squawker.infrastructure.persistence.squawk_provider import (
    ResolvedRoute,
    Route,
    SquawkProvider,
    StoreResult,
    match_route,
)
from squawker.infrastructure.persistence.squawk_store import SqliteSquawkStore

__all__ = [
    "Database",
    "ResolvedRoute",
    "Route",
    "SqlitePreferenceStore",
    "SqliteSquawkStore",
    "SquawkProvider",
    "StoreResult",
    "match_route",
]
