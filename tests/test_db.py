from datetime import datetime
from decimal import Decimal
from unittest import mock

import pymysql
import pytest

from game_rental.config import DatabaseSettings
from game_rental.db import Store
from game_rental.errors import StartupConnectionError, StoreError


@pytest.fixture
def cursor():
    return mock.MagicMock()


@pytest.fixture
def connection(cursor):
    conn = mock.MagicMock()
    conn.cursor.return_value.__enter__.return_value = cursor
    return conn


def test_query_returns_rows_as_text(connection, cursor):
    cursor.fetchall.return_value = [
        ("g1", "Halo", Decimal("19.99"), None),
        ("g2", "Doom", Decimal("5.00"), datetime(2026, 1, 2, 3, 4, 5)),
    ]
    store = Store(connection)

    rows = store.query("SELECT * FROM Catalog WHERE genre = %s", ("Shooter",))

    cursor.execute.assert_called_once_with("SELECT * FROM Catalog WHERE genre = %s", ("Shooter",))
    assert rows == [
        ["g1", "Halo", "19.99", None],
        ["g2", "Doom", "5.00", "2026-01-02 03:04:05"],
    ]


def test_query_one_empty(connection, cursor):
    cursor.fetchall.return_value = ()
    assert Store(connection).query_one("SELECT 1") is None


def test_execute_returns_rowcount(connection, cursor):
    cursor.execute.return_value = 3
    assert Store(connection).execute("UPDATE Users SET role = %s", ("manager",)) == 3


def test_driver_errors_become_store_errors(connection, cursor):
    cursor.execute.side_effect = pymysql.err.ProgrammingError(1064, "syntax error")
    store = Store(connection)

    with pytest.raises(StoreError, match="syntax error"):
        store.query("SELEC nonsense")
    with pytest.raises(StoreError):
        store.execute("UPDAT nonsense")


def test_transaction_commits(connection):
    store = Store(connection)

    with store.transaction():
        store.execute("INSERT INTO Catalog VALUES (%s)", ("x",))

    connection.begin.assert_called_once_with()
    connection.commit.assert_called_once_with()
    connection.rollback.assert_not_called()


def test_transaction_rolls_back_and_reraises(connection, cursor):
    cursor.execute.side_effect = [1, pymysql.err.IntegrityError(1062, "duplicate")]
    store = Store(connection)

    with pytest.raises(StoreError, match="duplicate"):
        with store.transaction():
            store.execute("INSERT INTO RentalOrder VALUES (%s)", ("a",))
            store.execute("INSERT INTO TrackingInfo VALUES (%s)", ("b",))

    connection.rollback.assert_called_once_with()
    connection.commit.assert_not_called()


def test_connect_failure_is_startup_error():
    settings = DatabaseSettings(database="rental", port=3306, user="nobody", password="", host="localhost")
    with mock.patch("game_rental.db.pymysql.connect", side_effect=pymysql.err.OperationalError(2003, "refused")):
        with pytest.raises(StartupConnectionError, match="refused"):
            Store.connect(settings)


def test_connect_uses_settings():
    settings = DatabaseSettings(database="rental", port=3307, user="app", password="secret", host="db")
    with mock.patch("game_rental.db.pymysql.connect") as connect:
        store = Store.connect(settings)

    kwargs = connect.call_args.kwargs
    assert kwargs["host"] == "db"
    assert kwargs["port"] == 3307
    assert kwargs["user"] == "app"
    assert kwargs["password"] == "secret"
    assert kwargs["database"] == "rental"
    assert kwargs["autocommit"] is True
    assert isinstance(store, Store)


def test_context_manager_closes_once(connection):
    with Store(connection) as store:
        pass
    store.close()
    connection.close.assert_called_once_with()
