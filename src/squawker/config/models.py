"""Pydantic models for application configuration."""

from typing import Literal

from pydantic import BaseModel, Field

from squawker.domain.contract import INSTRUCTOR_KEYS


class DatabaseConfig(BaseModel):
    """Database connection configuration."""

    url: str = Field(
        default="sqlite+aiosqlite:///data/squawker.db",
        description=(
            "SQLAlchemy-style database connection URL "
            "(e.g., 'sqlite+aiosqlite:///path/to/db')."
        ),
    )
    schema_version: int = Field(
        default=1,
        description=(
            "Schema version. Tables are dropped and recreated when the stored "
            "version differs."
        ),
    )


class NotificationConfig(BaseModel):
    """User alert configuration."""

    channel_id: str = "Squawker"
    max_characters: int = Field(
        default=30,
        gt=0,
        description="Longest message shown in an alert before truncation.",
    )
    title_template: str = Field(
        default="{{ author }}",
        description="Jinja2 template for the alert title; receives `author`.",
    )


class FollowingConfig(BaseModel):
    """Author keys the user can follow."""

    author_keys: list[str] = Field(default_factory=lambda: list(INSTRUCTOR_KEYS))


class TransportConfig(BaseModel):
    """Topic management API configuration."""

    base_url: str = "https://iid.googleapis.com"
    server_key: str = Field(
        ...,
        description="Server key sent as `Authorization: key=...`.",
    )
    registration_token: str | None = Field(
        default=None,
        description="Initial registration token; replaced by token events.",
    )


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "0.0.0.0"
    port: int = 8080


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "text"] = "json"


class AppConfig(BaseModel):
    """Application configuration."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    notification: NotificationConfig = Field(default_factory=NotificationConfig)
    following: FollowingConfig = Field(default_factory=FollowingConfig)
    transport: TransportConfig | None = None
