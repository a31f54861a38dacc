"""Create the canteen database (if missing) and apply database/schema.sql.

Usage: APP_ENV=development python scripts/init_db.py
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.canteen_admin.canteen_admin.database.bootstrap import apply_schema, list_tables


def main() -> None:
    load_dotenv(REPO_ROOT / ".env", override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    db_config = importlib.import_module(get_settings_module()).DB_CONFIG
    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    logging.info("Database %s ready with tables: %s", db_config["database"], ", ".join(list_tables(db_config)))


if __name__ == "__main__":
    main()
