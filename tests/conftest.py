import importlib
import sys
from pathlib import Path

import pytest
from neo4j.exceptions import Neo4jError

# Ensure the package under test is importable without installation
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


# Substrings that identify each query shape in the fake store
FAVORITE_IDS = "RETURN m.tmdbId AS id"
MOVIE_LIST = "ORDER BY m.`"
MOVIE_DETAIL = "AS ratingCount"
SIMILAR_MOVIES = "count(*) AS inCommon"
PEOPLE_LIST = "toLower(p.name)"
PERSON_DETAIL = "MATCH (p:Person {tmdbId: $id})"
SIMILAR_PEOPLE = "collect(m {"
GENRES = "MATCH (g:Genre)"
RATINGS = "[r:RATED]->(:Movie"


class StoreSyntaxError(Neo4jError):
    code = "Neo.ClientError.Statement.SyntaxError"
    message = "Invalid input"


class StoreTerminated(Neo4jError):
    code = "Neo.ClientError.Transaction.Terminated"
    message = "The transaction has been terminated."


class StoreTimedOut(Neo4jError):
    code = "Neo.ClientError.Transaction.TransactionTimedOutClientConfiguration"
    message = "The transaction has been terminated due to timeout."


class FakeResult:
    def __init__(self, rows):
        self._rows = rows

    def data(self):
        return [dict(row) for row in self._rows]


class FakeTransaction:
    def __init__(self, driver, timeout=None):
        self.driver = driver
        self.timeout = timeout
        self.closed = False

    def run(self, text, parameters=None):
        parameters = dict(parameters or {})
        self.driver.queries.append((text, parameters))
        for marker, exc in self.driver.failures:
            if marker in text:
                raise exc
        for marker, rows in self.driver.responses:
            if marker in text:
                return FakeResult(rows(parameters) if callable(rows) else rows)
        return FakeResult([])

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.closed = True
        return False


class FakeSession:
    def __init__(self, driver, config):
        self.driver = driver
        self.config = config
        self.transactions = []
        self.closed = False

    def begin_transaction(self, timeout=None):
        tx = FakeTransaction(self.driver, timeout=timeout)
        self.transactions.append(tx)
        return tx

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.closed = True
        return False


class FakeDriver:
    """
    Stand-in for neo4j.Driver that records sessions and queries.

    Responses are registered per query shape with ``respond(marker, rows)``;
    ``rows`` may be a callable receiving the bound parameters so tests can
    emulate store-side SKIP/LIMIT.
    """

    def __init__(self):
        self.responses = []
        self.failures = []
        self.queries = []
        self.sessions = []

    def respond(self, marker, rows):
        self.responses.append((marker, rows))
        return self

    def fail(self, marker, exc):
        self.failures.append((marker, exc))
        return self

    def session(self, **config):
        session = FakeSession(self, config)
        self.sessions.append(session)
        return session

    def queries_matching(self, marker):
        return [(text, params) for text, params in self.queries if marker in text]


def paged(rows):
    """Rows served the way the store applies SKIP then LIMIT."""
    def _serve(parameters):
        skip = parameters["skip"]
        return rows[skip:skip + parameters["limit"]]
    return _serve


def movie_row(tmdb_id, title, **props):
    return {"movie": {"tmdbId": tmdb_id, "title": title, **props}}


def person_row(tmdb_id, name, **extra):
    return {"person": {"tmdbId": tmdb_id, "name": name}, **extra}


@pytest.fixture
def fake_driver():
    return FakeDriver()


@pytest.fixture
def fresh_config(monkeypatch):
    """
    Reload config under a patched environment, then restore module state.
    """
    import neoflix_catalog.config as config

    yield config
    monkeypatch.undo()
    importlib.reload(config)
