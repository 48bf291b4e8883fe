"""Import an exported JSON history of draw results.

The file holds a list of ``{"date": "YYYY-MM-DD", "time": "11am", "number": "07"}``
items. Slots already stored are left untouched.

Usage:
  python scripts/import_history.py lottery-data-combined.json
  python scripts/import_history.py data.json --database-url sqlite:///./diaria.db
"""

from __future__ import annotations

import argparse
import json
import logging
import pathlib
import sys
from collections.abc import Sequence

from dotenv import load_dotenv
from tqdm import tqdm

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from diaria.config import resolve_database_url  # noqa: E402
from diaria.db import create_app_engine, create_session_factory  # noqa: E402
from diaria.repositories.draw_repository import DrawRepository  # noqa: E402
from diaria.services.history_import import parse_history  # noqa: E402
from diaria.services.parsing import collect  # noqa: E402

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Import historical draw results into the database")
    parser.add_argument("path", type=pathlib.Path, help="JSON file with the exported results")
    parser.add_argument("--database-url", dest="database_url", type=str, default=None)
    parser.add_argument("--batch", dest="batch", type=int, default=500, help="records per progress step")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    load_dotenv()

    items = json.loads(args.path.read_text(encoding="utf-8"))
    if not isinstance(items, list):
        raise SystemExit(f"{args.path}: expected a JSON list")
    logger.info("Importing %s records...", len(items))

    records = collect(parse_history(items), logger, "import")

    engine = create_app_engine(str(args.database_url or resolve_database_url()))
    session_factory = create_session_factory(engine)
    repo = DrawRepository()

    imported = 0
    batch = max(int(args.batch), 1)
    with session_factory() as db:
        for start in tqdm(range(0, len(records), batch), desc="Importing"):
            imported += repo.insert_if_absent(db, records[start : start + batch])

        first, last = repo.date_range(db)
        total = repo.count(db)

    logger.info("Imported: %s", imported)
    logger.info("Skipped (duplicates or invalid): %s", len(items) - imported)
    logger.info("Total records: %s (%s to %s)", total, first, last)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
