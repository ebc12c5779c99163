"""Database connection management."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from urllib.parse import urlparse

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel


class Database:
    """Non-blocking database connection manager.

    Manages SQLite database connections using SQLModel and aiosqlite. The
    schema version is kept in `PRAGMA user_version`; when a database with a
    different version is opened, all tables are dropped and recreated.

    Attributes:
        url: SQLAlchemy connection URL.
        engine: Async database engine (available after initialize()).

    Example:
        >>> database = Database("sqlite+aiosqlite:///./data/squawker.db")
        >>> await database.initialize()
        >>> async with database.get_session() as session:
        ...     result = await session.execute(select(Squawk))
        >>> await database.close()
    """

    def __init__(self, url: str, schema_version: int = 1) -> None:
        """Initialize Database with connection URL.

        Args:
            url: SQLAlchemy-style connection URL.
            schema_version: Expected schema version, must be positive.

        Raises:
            ValueError: If URL is empty or invalid format, or the schema
                version is not positive.
        """
        if not url:
            raise ValueError("Database URL cannot be empty")
        if schema_version < 1:
            raise ValueError(f"Schema version must be positive: {schema_version}")

        self._validate_url(url)
        self._url = url
        self._schema_version = schema_version
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    def _validate_url(self, url: str) -> None:
        """Validate URL format.

        Raises:
            ValueError: If URL format is invalid.
        """
        try:
            parsed = urlparse(url)
            if not parsed.scheme or "+" not in parsed.scheme:
                raise ValueError(f"Invalid database URL format: {url}")
        except Exception as e:
            raise ValueError(f"Invalid database URL format: {url}") from e

    @property
    def url(self) -> str:
        """Get the connection URL."""
        return self._url

    @property
    def schema_version(self) -> int:
        """Get the expected schema version."""
        return self._schema_version

    @property
    def engine(self) -> AsyncEngine:
        """Get the async engine.

        Raises:
            RuntimeError: If database is not initialized.
        """
        if self._engine is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self._engine

    async def initialize(self) -> None:
        """Initialize database engine and create tables.

        Creates parent directories for SQLite file if they don't exist,
        then creates the async engine and all registered SQLModel tables.
        """
        self._ensure_parent_directory()

        self._engine = create_async_engine(
            self._url,
            echo=False,
        )

        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        async with self._engine.begin() as conn:
            if self._engine.dialect.name == "sqlite":
                await self._migrate(conn)
            await conn.run_sync(SQLModel.metadata.create_all)

    async def _migrate(self, conn: AsyncConnection) -> None:
        """Drop all tables if the stored schema version is stale."""
        result = await conn.execute(text("PRAGMA user_version"))
        stored_version = result.scalar() or 0

        if stored_version and stored_version != self._schema_version:
            await conn.run_sync(SQLModel.metadata.drop_all)

        if stored_version != self._schema_version:
            # PRAGMA does not accept bound parameters
            await conn.execute(text(f"PRAGMA user_version = {self._schema_version:d}"))

    async def get_stored_schema_version(self) -> int:
        """Return the schema version recorded in the database file."""
        async with self.engine.connect() as conn:
            result = await conn.execute(text("PRAGMA user_version"))
            return int(result.scalar() or 0)

    def _ensure_parent_directory(self) -> None:
        """Create parent directory for SQLite file if it doesn't exist."""
        parsed = urlparse(self._url)
        if parsed.scheme.startswith("sqlite"):
            db_path = parsed.path
            if db_path.startswith("///"):
                db_path = db_path[3:]
            elif db_path.startswith("/"):
                db_path = db_path[1:]

            if db_path and db_path != ":memory:":
                parent_dir = Path(db_path).parent
                parent_dir.mkdir(parents=True, exist_ok=True)

    async def close(self) -> None:
        """Close database connection and dispose engine."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None

    @asynccontextmanager
    async def get_session(self) -> AsyncIterator[AsyncSession]:
        """Get a database session.

        Yields:
            AsyncSession: Database session with auto-commit on success
                and auto-rollback on exception.

        Raises:
            RuntimeError: If database is not initialized or has been closed.
        """
        if self._session_factory is None:
            raise RuntimeError("Database not initialized or has been closed.")

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
