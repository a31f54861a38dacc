"""Load the demo roster and (re)create the demo admin account.

Run scripts/init_db.py first. Login afterwards: admin@canteen.local / admin123.
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

from src.canteen_admin.canteen_admin.database.bootstrap import apply_seed_sql, ensure_demo_admin


def main() -> None:
    load_dotenv(REPO_ROOT / ".env", override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    db_config = importlib.import_module(get_settings_module()).DB_CONFIG
    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_demo_admin(db_config)
    logging.info("Demo data loaded into %s", db_config["database"])


if __name__ == "__main__":
    main()
