"""Sync the mountain catalog from a spreadsheet.

The sheet has one row per mountain and language with the columns:
key, language, description, altitude, has_death_zone, location,
first_climber, first_climbed_date, mountain_img, country_flag_img.

Usage:
    python -m scripts.sync_mountains data/mountains.xlsx
"""

import logging
from pathlib import Path
from typing import Any

import polars as pl
from sqlalchemy.orm import Session as DBSession

from paharnama.services.mountain_service import MountainService, SyncResult

logger = logging.getLogger(__name__)

DEFAULT_SHEET_PATH = Path("data/mountains.xlsx")


def read_rows(path: Path) -> list[dict[str, Any]]:
    """Read the first sheet of an .xlsx file, or a .csv file, into row dicts.

    Empty cells come back as None.
    """
    try:
        if path.suffix.lower() == ".csv":
            df = pl.read_csv(path, infer_schema_length=0)
        else:
            df = pl.read_excel(path)
    except Exception as e:
        raise ValueError(f"Failed to read mountain sheet {path}: {e}") from e

    return df.to_dicts()


def sync_mountains(db: DBSession, path: Path) -> SyncResult:
    """Upsert every row of the sheet into the catalog."""
    rows = read_rows(path)
    logger.info(f"Syncing {len(rows)} rows from {path}")
    return MountainService(db).sync_rows(rows)


if __name__ == "__main__":
    """Run as standalone script."""
    import sys

    from paharnama.config import settings
    from paharnama.database import Database

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    sheet_path = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_SHEET_PATH
    database = Database(settings.database_url)
    database.open()
    db = database.session()
    try:
        result = sync_mountains(db, sheet_path)
        logger.info(
            f"Mountain sync completed: {result.rows} rows, "
            f"{result.mountains_created} created, {result.mountains_updated} updated"
        )
    except Exception:
        logger.exception("Mountain sync failed")
        sys.exit(1)
    finally:
        db.close()
        database.close()
