from __future__ import annotations

import pytest

from src.hris.hris.database.connection import DatabaseConnection, DBConfig
from src.hris.hris.database.mysql_base import db_cursor, normalize_mysql_time, to_float


class RecordingConnection:
    def __init__(self):
        self.commits = 0
        self.rollbacks = 0
        self.closed = False
        self.cursors = 0

    def cursor(self, dictionary=False):
        self.cursors += 1
        return RecordingCursor()

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = True


class RecordingCursor:
    def close(self):
        pass


class FakeDatabase(DatabaseConnection):
    def __init__(self):
        super().__init__(DBConfig.from_dict({}))
        self.opened: list[RecordingConnection] = []

    def connect(self):
        conn = RecordingConnection()
        self.opened.append(conn)
        return conn


def test_cursor_outside_transaction_commits_per_call():
    db = FakeDatabase()

    with db_cursor(db):
        pass
    with db_cursor(db):
        pass

    assert len(db.opened) == 2
    assert all(c.commits == 1 and c.closed for c in db.opened)


def test_cursor_outside_transaction_rolls_back_on_error():
    db = FakeDatabase()

    with pytest.raises(RuntimeError):
        with db_cursor(db):
            raise RuntimeError("boom")

    (conn,) = db.opened
    assert conn.rollbacks == 1 and conn.commits == 0 and conn.closed


def test_transaction_shares_one_connection_and_commits_once():
    db = FakeDatabase()

    with db.transaction() as tx_conn:
        with db_cursor(db) as (conn_a, _):
            pass
        with db_cursor(db) as (conn_b, _):
            pass
        with db.transaction() as nested:
            assert nested is tx_conn

    assert conn_a is conn_b is tx_conn
    assert len(db.opened) == 1
    assert tx_conn.cursors == 2
    assert tx_conn.commits == 1 and tx_conn.closed
    assert db.current is None


def test_transaction_rolls_back_everything_on_error():
    db = FakeDatabase()

    with pytest.raises(ValueError):
        with db.transaction():
            with db_cursor(db):
                pass
            raise ValueError("second insert failed")

    (conn,) = db.opened
    assert conn.commits == 0
    assert conn.rollbacks == 1
    assert conn.closed
    assert db.current is None


def test_db_config_defaults():
    cfg = DBConfig.from_dict({"port": "3307"})

    assert cfg.port == 3307
    assert cfg.host == "localhost"
    assert cfg.database == "hris_db"


def test_value_normalisers():
    from datetime import time, timedelta
    from decimal import Decimal

    assert normalize_mysql_time(timedelta(hours=8, minutes=30)) == time(8, 30)
    assert normalize_mysql_time("17:00") == time(17, 0)
    assert normalize_mysql_time(None) is None
    assert to_float(Decimal("1.25")) == 1.25
    assert to_float(None) == 0.0
