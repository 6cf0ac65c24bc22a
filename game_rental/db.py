from contextlib import contextmanager

import pymysql
from pymysql import Error

from game_rental.config import DB_CHARSET
from game_rental.errors import StartupConnectionError, StoreError
from game_rental.log import get_logger

log = get_logger(__name__)


def _as_text(value):
    if value is None:
        return None
    return str(value)


class Store:
    """
    The one connection the client holds for its whole session.

    Rows come back as lists of column values rendered as text, NULL stays None.
    """

    def __init__(self, connection):
        self._conn = connection

    @classmethod
    def connect(cls, settings):
        log.info("connecting to %s@%s:%s/%s", settings.user, settings.host, settings.port, settings.database)
        try:
            conn = pymysql.connect(
                host=settings.host,
                port=int(settings.port),
                user=settings.user,
                password=settings.password,
                database=settings.database,
                charset=DB_CHARSET,
                autocommit=True,
            )
        except (Error, ValueError) as e:
            raise StartupConnectionError(str(e)) from e
        return cls(conn)

    def execute(self, sql, params=()) -> int:
        log.debug("execute: %s %r", sql, params)
        try:
            with self._conn.cursor() as cursor:
                return cursor.execute(sql, params)
        except Error as e:
            raise StoreError(str(e)) from e

    def query(self, sql, params=()) -> list:
        log.debug("query: %s %r", sql, params)
        try:
            with self._conn.cursor() as cursor:
                cursor.execute(sql, params)
                rows = cursor.fetchall()
        except Error as e:
            raise StoreError(str(e)) from e
        return [[_as_text(v) for v in row] for row in rows]

    def query_one(self, sql, params=()):
        rows = self.query(sql, params)
        return rows[0] if rows else None

    @contextmanager
    def transaction(self):
        try:
            self._conn.begin()
        except Error as e:
            raise StoreError(str(e)) from e
        try:
            yield self
        except Exception:
            log.warning("rolling back transaction")
            try:
                self._conn.rollback()
            except Error as e:
                log.error("rollback failed: %s", e)
            raise
        try:
            self._conn.commit()
        except Error as e:
            raise StoreError(str(e)) from e

    def close(self):
        if self._conn is None:
            return
        try:
            self._conn.close()
        except Error as e:
            log.warning("error closing connection: %s", e)
        finally:
            self._conn = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
