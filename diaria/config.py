"""Environment-based configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from sqlalchemy.engine import URL


@dataclass(frozen=True)
class SiteGame:
    """One upstream API game per time slot."""

    draw_time: str
    site_game_id: str


SITE_GAMES: tuple[SiteGame, ...] = (
    SiteGame("11am", "693ae5bbd7b13e9daed23b31"),
    SiteGame("3pm", "693ae5bbd7b13e9daed23b07"),
    SiteGame("9pm", "693ae5bbd7b13e9daed23b1f"),
)


def resolve_database_url() -> str:
    """Resolve DB connection string.

    Priority:
      1) DATABASE_URL (explicit)
      2) Build from PG* env vars (common Postgres convention)
      3) Fallback to local sqlite
    """

    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit

    host = os.getenv("PGHOST")
    user = os.getenv("PGUSER")
    database = os.getenv("PGDATABASE")
    port_raw = os.getenv("PGPORT")

    if host and user and database:
        password = os.getenv("PGPASSWORD")
        sslmode = os.getenv("PGSSLMODE", "prefer")

        try:
            port = int(port_raw) if port_raw else 5432
        except ValueError:
            port = 5432

        query = {"sslmode": sslmode} if sslmode else {}
        url = URL.create(
            drivername="postgresql+psycopg2",
            username=user,
            password=password,
            host=host,
            port=port,
            database=database,
            query=query,
        )
        return url.render_as_string(hide_password=False)

    return "sqlite:///./diaria.db"


def parse_periods(raw: str | None) -> tuple[int, ...]:
    """Parse a comma separated list of lookback windows (days)."""

    if not raw:
        return (30, 60, 90, 180)
    periods = tuple(int(p) for p in raw.split(",") if p.strip())
    if not periods or any(p <= 0 for p in periods):
        raise ValueError(f"Invalid STAT_PERIODS: {raw!r}")
    return periods


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, "") or default)
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, "") or default)
    except ValueError:
        return default


def _env(name: str, default: str | None = None):  # type: ignore[no-untyped-def]
    return field(default_factory=lambda: os.getenv(name, default))


@dataclass(frozen=True)
class BaseConfig:
    """Base configuration shared by all environments.

    Values are read from the environment when the config is instantiated,
    so a ``.env`` loaded beforehand is honoured.
    """

    APP_ENV: str = _env("APP_ENV", "development")
    DATABASE_URL: str = field(default_factory=resolve_database_url)
    LOG_LEVEL: str = _env("LOG_LEVEL", "INFO")

    # Upstream sources
    HTML_SOURCE_URL: str = _env("HTML_SOURCE_URL", "https://www.lotodehonduras.com/la-diaria/")
    RESULTS_API_BASE: str = _env("RESULTS_API_BASE", "https://client-back.temp.kiskooloterias.com/honduras")
    FETCH_TIMEOUT_SECONDS: float = field(default_factory=lambda: _float_env("FETCH_TIMEOUT_SECONDS", 15.0))
    FETCH_MAX_REDIRECTS: int = field(default_factory=lambda: _int_env("FETCH_MAX_REDIRECTS", 3))
    HTTP_RETRIES: int = field(default_factory=lambda: _int_env("HTTP_RETRIES", 0))

    # Outbound notifications
    NOTIFY_URL: str = _env("NOTIFY_URL", "http://localhost:3002/api/lottery/notify-results")
    INTERNAL_API_KEY: str | None = field(default_factory=lambda: os.getenv("INTERNAL_API_KEY") or None)

    # Draw calendar
    TIMEZONE: str = _env("TIMEZONE", "America/Tegucigalpa")
    STAT_PERIODS: tuple[int, ...] = field(default_factory=lambda: parse_periods(os.getenv("STAT_PERIODS")))


@dataclass(frozen=True)
class DevelopmentConfig(BaseConfig):
    """Development configuration."""

    DEBUG: bool = True


@dataclass(frozen=True)
class ProductionConfig(BaseConfig):
    """Production configuration."""

    DEBUG: bool = False


def get_config() -> type[BaseConfig]:
    """Resolve configuration class based on APP_ENV."""

    env = os.getenv("APP_ENV", "development").lower().strip()
    if env == "production":
        return ProductionConfig
    return DevelopmentConfig
