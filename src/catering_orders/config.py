"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    implicit_note_pairings: str | None = None
    catalog_cache_ttl_seconds: int = 300
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_implicit_pairings(raw: str | None) -> frozenset[tuple[str, str]]:
    """Parse ``source:linked`` item id pairs whose merges add no note."""
    if raw is None:
        return frozenset()
    pairs: set[tuple[str, str]] = set()
    for chunk in raw.split(","):
        value = chunk.strip()
        if not value or ":" not in value:
            continue
        source, linked = (part.strip() for part in value.split(":", 1))
        if source and linked:
            pairs.add((source, linked))
    return frozenset(pairs)
