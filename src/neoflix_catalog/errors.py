"""Exception types raised by the catalog services."""


class CatalogError(Exception):
    """Base class for every error surfaced by this package."""


class InvalidParameter(CatalogError, ValueError):
    """A caller-supplied value was rejected before touching the store."""


class QueryFailure(CatalogError):
    """The store failed to execute a query, or the connection broke."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.code = code


class Cancelled(QueryFailure):
    """The transaction was terminated or timed out before completing."""


class NotFound(CatalogError, LookupError):
    """A single-entity lookup matched nothing."""

    def __init__(self, kind: str, identifier: str):
        super().__init__(f"{kind} '{identifier}' not found")
        self.kind = kind
        self.id = identifier
