"""Schema and demo-data setup for a fresh canteen database.

Used by `scripts/init_db.py`, `scripts/seed_db.py` and by `create_app()` when
AUTO_INIT_DB / AUTO_SEED_DB are on.
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)

# A quoted literal, a line comment, a statement terminator or any other run of text.
_SQL_TOKEN = re.compile(r"""'(?:\\.|[^'\\])*'|"(?:\\.|[^"\\])*"|--[^\n]*|;|[^'";-]+|-""", re.S)
_DB_SWITCH = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;")


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a script on top-level ';', dropping `--` comments."""
    buf: list[str] = []
    for token in _SQL_TOKEN.findall(sql):
        if token.startswith("--"):
            continue
        if token == ";":
            stmt = "".join(buf).strip()
            buf = []
            if stmt:
                yield stmt
            continue
        buf.append(token)

    tail = "".join(buf).strip()
    if tail:
        yield tail


@contextmanager
def _session(cfg: DBConfig, *, use_database: bool = True, dictionary: bool = False):
    kwargs = {
        "host": cfg.host,
        "port": cfg.port,
        "user": cfg.user,
        "password": cfg.password,
        "connection_timeout": cfg.connect_timeout,
        "use_pure": True,
    }
    if use_database:
        kwargs["database"] = cfg.database

    conn = mysql.connector.connect(**kwargs)
    try:
        cur = conn.cursor(dictionary=dictionary)
        yield cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def _run_script(db_config: dict, path: str | Path) -> int:
    # The database name comes from settings, so scripts may not pick their own.
    sql = _DB_SWITCH.sub("", Path(path).read_text(encoding="utf-8"))
    count = 0
    with _session(DBConfig.from_dict(db_config)) as cur:
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
    return count


def ensure_database_exists(db_config: dict) -> None:
    cfg = DBConfig.from_dict(db_config)
    with _session(cfg, use_database=False) as cur:
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{cfg.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    logger.info("Applied %d schema statements from %s", _run_script(db_config, schema_path), schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    logger.info("Applied %d seed statements from %s", _run_script(db_config, seed_path), seed_path)


def ensure_demo_admin(db_config: dict, *, email: str = "admin@canteen.local", password: str = "admin123") -> None:
    """Create the demo superadmin, or reset its password if it exists."""
    with _session(DBConfig.from_dict(db_config), dictionary=True) as cur:
        cur.execute(
            """
            INSERT INTO admins (name, email, password_hash, role, is_active)
            VALUES (%s, %s, %s, 'superadmin', 1)
            ON DUPLICATE KEY UPDATE password_hash=VALUES(password_hash), is_active=1
            """,
            ("Canteen Admin", email.lower(), generate_password_hash(password)),
        )


def list_tables(db_config: dict) -> list[str]:
    with _session(DBConfig.from_dict(db_config)) as cur:
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
