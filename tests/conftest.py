from contextlib import contextmanager

import pytest

from game_rental.console import Console
from game_rental.errors import StoreError


class FakeStore:
    """Records every statement; answers queries from registered SQL fragments."""

    def __init__(self):
        self.executed = []
        self.queries = []
        self.commits = 0
        self.rollbacks = 0
        self.fail_on = None
        self._answers = []

    def answer(self, fragment, rows):
        # rows: a list of rows, or a callable taking the params
        self._answers.insert(0, (fragment, rows))

    def query(self, sql, params=()):
        self.queries.append((sql, params))
        for fragment, rows in self._answers:
            if fragment in sql:
                result = rows(params) if callable(rows) else rows
                return [list(r) for r in result]
        return []

    def query_one(self, sql, params=()):
        rows = self.query(sql, params)
        return rows[0] if rows else None

    def execute(self, sql, params=()):
        if self.fail_on and self.fail_on in sql:
            raise StoreError(f"rejected: {self.fail_on}")
        self.executed.append((" ".join(sql.split()), params))
        return 1

    def executed_matching(self, fragment):
        return [(sql, params) for sql, params in self.executed if fragment in sql]

    @contextmanager
    def transaction(self):
        mark = len(self.executed)
        try:
            yield self
        except Exception:
            del self.executed[mark:]
            self.rollbacks += 1
            raise
        self.commits += 1


class ScriptedConsole(Console):
    def __init__(self, answers):
        self.answers = list(answers)
        self.prompts = []
        super().__init__(self._next)

    def _next(self, prompt):
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def make_console():
    def factory(*answers):
        return ScriptedConsole(answers)

    return factory


@pytest.fixture
def role_of(store):
    """Register the role the Users table reports for a login."""

    roles = {}
    store.answer("SELECT role FROM Users", lambda params: [[roles[params[0]]]] if params[0] in roles else [])

    def register(login, role):
        roles[login] = role

    return register
