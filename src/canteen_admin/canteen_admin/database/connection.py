from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import mysql.connector

from ..core.constants import STORE_CONNECT_TIMEOUT_SECONDS, STORE_LOCK_WAIT_TIMEOUT_SECONDS
from ..core.exceptions import StoreUnavailable

logger = logging.getLogger(__name__)


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    connect_timeout: int = STORE_CONNECT_TIMEOUT_SECONDS
    lock_wait_timeout: int = STORE_LOCK_WAIT_TIMEOUT_SECONDS

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config["host"]),
            port=int(db_config.get("port", 3306)),
            user=str(db_config["user"]),
            password=str(db_config["password"]),
            database=str(db_config["database"]),
            connect_timeout=int(db_config.get("connect_timeout", STORE_CONNECT_TIMEOUT_SECONDS)),
            lock_wait_timeout=int(db_config.get("lock_wait_timeout", STORE_LOCK_WAIT_TIMEOUT_SECONDS)),
        )


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Note: We create short-lived connections per operation, each bounded by
    `connect_timeout` and with `innodb_lock_wait_timeout` set for the session.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        try:
            conn = mysql.connector.connect(
                host=self._config.host,
                port=int(self._config.port),
                user=self._config.user,
                password=self._config.password,
                database=self._config.database,
                connection_timeout=int(self._config.connect_timeout),
                autocommit=False,
            )
        except mysql.connector.Error as e:
            logger.warning("Record store connection failed: %s", e)
            raise StoreUnavailable("Record store is unavailable") from e

        try:
            cur = conn.cursor()
            try:
                cur.execute("SET SESSION innodb_lock_wait_timeout = %s", (int(self._config.lock_wait_timeout),))
            finally:
                cur.close()
        except mysql.connector.Error as e:
            conn.close()
            logger.warning("Record store session setup failed: %s", e)
            raise StoreUnavailable("Record store is unavailable") from e
        return conn
