from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, ContextManager, Iterator, Optional, Protocol

import mysql.connector

logger = logging.getLogger(__name__)


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "hris_db")),
        )


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Outside a transaction every repository call opens a short-lived
    connection. Inside ``transaction()`` all calls share one connection that
    is committed (or rolled back) when the block ends.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config
        self._active: ContextVar[Any] = ContextVar(f"hris_tx_{id(self)}", default=None)

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
        )

    @property
    def current(self):
        """Connection of the enclosing transaction, if any."""
        return self._active.get()

    @contextmanager
    def transaction(self) -> Iterator[Any]:
        outer = self._active.get()
        if outer is not None:
            # Nested blocks join the outer transaction.
            yield outer
            return

        conn = self.connect()
        token = self._active.set(conn)
        try:
            yield conn
            conn.commit()
        except Exception:
            logger.warning("Transaction rolled back")
            conn.rollback()
            raise
        finally:
            self._active.reset(token)
            conn.close()


class Transactional(Protocol):
    """Anything that can open a unit of work (``DatabaseConnection`` in production)."""

    def transaction(self) -> ContextManager[Any]:
        raise NotImplementedError
