import logging
import threading
from contextlib import contextmanager

from neo4j import Driver, GraphDatabase, READ_ACCESS
from neo4j.exceptions import DriverError, Neo4jError

from .config import (
    NEO4J_URI,
    NEO4J_USERNAME,
    NEO4J_PASSWORD,
    NEO4J_DATABASE,
    MAX_CONNECTION_POOL_SIZE,
    QUERY_TIMEOUT,
)
from .errors import Cancelled, QueryFailure

logger = logging.getLogger(__name__)

# Server codes meaning the transaction was stopped from outside (timeout or kill)
_CANCELLED_CODE_MARKERS = ("Terminated", "TimedOut", "LockClientStopped")

# Global driver instance; the neo4j driver is thread-safe and owns the pool
_driver: Driver | None = None
_driver_lock = threading.Lock()


def get_driver() -> Driver:
    """Get or create the global driver."""
    global _driver
    if _driver is None:
        with _driver_lock:
            if _driver is None:
                _driver = GraphDatabase.driver(
                    NEO4J_URI,
                    auth=(NEO4J_USERNAME, NEO4J_PASSWORD),
                    max_connection_pool_size=MAX_CONNECTION_POOL_SIZE,
                )
                logger.info(f"Created Neo4j driver for {NEO4J_URI}")
    return _driver


def close_driver() -> None:
    """Close the global driver. Call on application shutdown."""
    global _driver
    with _driver_lock:
        if _driver is not None:
            _driver.close()
            _driver = None
            logger.info("Neo4j driver closed")


def translate_error(exc: Exception) -> QueryFailure:
    """Map a neo4j driver exception onto the catalog error taxonomy."""
    code = getattr(exc, "code", None)
    message = getattr(exc, "message", None) or str(exc) or type(exc).__name__
    if code and any(marker in code for marker in _CANCELLED_CODE_MARKERS):
        return Cancelled(message, code=code)
    return QueryFailure(message, code=code)


@contextmanager
def read_transaction(driver: Driver | None = None):
    """
    Open one read-only session and one explicit transaction around a block.

    Explicit transactions are used instead of managed transaction functions
    so the driver never retries on our behalf; transient failures reach the
    caller as QueryFailure. Both the transaction and the session are closed
    on every exit path, including errors raised by the caller's own code.

    Args:
        driver: Driver to use; defaults to the global driver
    """
    driver = driver or get_driver()

    try:
        with driver.session(database=NEO4J_DATABASE, default_access_mode=READ_ACCESS) as session:
            with session.begin_transaction(timeout=QUERY_TIMEOUT) as tx:
                yield tx
    except (Neo4jError, DriverError) as exc:
        failure = translate_error(exc)
        logger.warning(f"Read transaction failed: {failure}")
        raise failure from exc


def run_query(tx, query) -> list[dict]:
    """
    Execute a CypherQuery inside an open transaction and collect every row.

    Rows are consumed eagerly so nothing streams past the transaction.
    """
    logger.debug(f"Running {query.name} with parameters {sorted(query.parameters)}")
    result = tx.run(query.text, query.parameters)
    rows = result.data()
    logger.debug(f"{query.name} returned {len(rows)} rows")
    return rows
