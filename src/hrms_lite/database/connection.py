from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import mysql.connector
from mysql.connector import pooling


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 10

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "DBConfig":
        return cls(
            host=str(values.get("host", "localhost")),
            port=int(values.get("port", 3306)),
            user=str(values.get("user", "root")),
            password=str(values.get("password", "")),
            database=str(values.get("database", "hrms_lite")),
            pool_size=int(values.get("pool_size", 10)),
        )


class DatabaseConnection:
    """Connection factory backed by a small pool, one per database config.

    Callers borrow a connection per operation; ``close()`` hands it back.
    """

    _instances: dict[DBConfig, "DatabaseConnection"] = {}

    def __init__(self, config: DBConfig):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = None

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if config not in cls._instances:
            cls._instances[config] = DatabaseConnection(config)
        return cls._instances[config]

    @property
    def config(self) -> DBConfig:
        return self._config

    def _get_pool(self) -> pooling.MySQLConnectionPool:
        # Created lazily so the app can start before MySQL is reachable.
        if self._pool is None:
            self._pool = pooling.MySQLConnectionPool(
                pool_name=f"hrms_{self._config.database}",
                pool_size=self._config.pool_size,
                host=self._config.host,
                port=self._config.port,
                user=self._config.user,
                password=self._config.password,
                database=self._config.database,
                autocommit=False,
            )
        return self._pool

    def connect(self):
        return self._get_pool().get_connection()

    def ping(self) -> bool:
        """True when a pooled connection can reach the server."""
        try:
            conn = self.connect()
        except mysql.connector.Error:
            return False
        try:
            conn.ping(reconnect=True)
            return True
        except mysql.connector.Error:
            return False
        finally:
            conn.close()
