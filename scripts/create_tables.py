"""Create database tables in the configured database.

Reads DATABASE_URL from .env / environment and creates the draws, stats and
markov tables.

Usage:
  python scripts/create_tables.py
"""

from __future__ import annotations

import pathlib
import sys

from dotenv import load_dotenv
from sqlalchemy import text

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from diaria.config import resolve_database_url  # noqa: E402
from diaria.db import create_app_engine, create_session_factory  # noqa: E402


def main() -> int:
    """Create all ORM tables in the target database."""

    load_dotenv()
    env_local = PROJECT_ROOT / ".env.local"
    if env_local.exists():
        load_dotenv(dotenv_path=env_local, override=True)

    engine = create_app_engine(resolve_database_url())
    create_session_factory(engine)

    # create_all() does not add indexes to existing tables.
    # For PostgreSQL, apply the lookup indexes idempotently.
    if engine.dialect.name == "postgresql":
        ddl = [
            "CREATE INDEX IF NOT EXISTS ix_lottery_draws_draw_time ON lottery_draws (draw_time)",
            "CREATE INDEX IF NOT EXISTS ix_lottery_stats_scope ON lottery_stats (period_days, draw_time)",
            "CREATE INDEX IF NOT EXISTS ix_lottery_markov_scope ON lottery_markov (from_number, draw_time)",
        ]
        with engine.begin() as conn:
            for stmt in ddl:
                conn.execute(text(stmt))

    print("Tables created (or already exist).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
