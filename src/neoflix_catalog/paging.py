"""
Validated paging and sorting parameters shared by every list query.

A PagingSpec is the only way a sort property or direction reaches query
text, so construction fails fast on anything outside the allow-lists.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from .config import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    MOVIE_SORT_FIELDS,
    PERSON_SORT_FIELDS,
    RATING_SORT_FIELDS,
    DEFAULT_MOVIE_SORT,
    DEFAULT_PERSON_SORT,
    DEFAULT_RATING_SORT,
)
from .errors import InvalidParameter


class SortOrder(Enum):
    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def parse(cls, value: str | SortOrder | None) -> SortOrder:
        if value is None:
            return cls.ASC
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        if not text:
            return cls.ASC
        try:
            return cls(text.upper())
        except ValueError:
            raise InvalidParameter(f"order must be ASC or DESC, got {value!r}") from None


class EntityKind(Enum):
    MOVIE = "movie"
    PERSON = "person"
    RATING = "rating"

    @property
    def sort_fields(self) -> tuple[str, ...]:
        return _SORT_FIELDS[self]

    @property
    def default_sort(self) -> str:
        return _DEFAULT_SORTS[self]


_SORT_FIELDS = {
    EntityKind.MOVIE: MOVIE_SORT_FIELDS,
    EntityKind.PERSON: PERSON_SORT_FIELDS,
    EntityKind.RATING: RATING_SORT_FIELDS,
}

_DEFAULT_SORTS = {
    EntityKind.MOVIE: DEFAULT_MOVIE_SORT,
    EntityKind.PERSON: DEFAULT_PERSON_SORT,
    EntityKind.RATING: DEFAULT_RATING_SORT,
}


def _parse_int(name: str, value, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
        try:
            return int(value)
        except ValueError:
            raise InvalidParameter(f"{name} must be an integer, got {value!r}") from None
    # bool is an int subclass; floats are accepted only when whole
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidParameter(f"{name} must be an integer, got {value!r}")
    return value


@dataclass(frozen=True)
class PagingSpec:
    """
    Sort, order, skip, limit and optional free-text filter for one list query.

    Use ``PagingSpec.from_params`` for raw (string or missing) inputs; the
    constructor itself expects already-typed values and validates them.
    """

    kind: EntityKind
    sort: str
    order: SortOrder = SortOrder.ASC
    skip: int = 0
    limit: int = DEFAULT_LIMIT
    query: str | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not isinstance(self.kind, EntityKind):
            raise InvalidParameter(f"unknown entity kind {self.kind!r}")
        if self.sort not in self.kind.sort_fields:
            raise InvalidParameter(
                f"cannot sort {self.kind.value} by {self.sort!r}; "
                f"allowed: {', '.join(self.kind.sort_fields)}"
            )
        if not isinstance(self.order, SortOrder):
            raise InvalidParameter(f"order must be ASC or DESC, got {self.order!r}")
        for name in ("skip", "limit"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidParameter(f"{name} must be an integer, got {value!r}")
        if self.skip < 0:
            raise InvalidParameter("skip must be non-negative")
        if self.limit <= 0:
            raise InvalidParameter("limit must be positive")
        if self.limit > MAX_LIMIT:
            raise InvalidParameter(f"limit must not exceed {MAX_LIMIT}")
        if self.query is not None and not isinstance(self.query, str):
            raise InvalidParameter("query must be a string")

    @classmethod
    def from_params(
        cls,
        kind: EntityKind,
        sort: str | None = None,
        order: str | SortOrder | None = None,
        skip=None,
        limit=None,
        query: str | None = None,
    ) -> PagingSpec:
        """Build a spec from raw request-style values, applying defaults."""
        if query is not None:
            if not isinstance(query, str):
                raise InvalidParameter(f"query must be a string, got {query!r}")
            query = query.strip() or None
        return cls(
            kind=kind,
            sort=sort or kind.default_sort,
            order=SortOrder.parse(order),
            skip=_parse_int("skip", skip, 0),
            limit=_parse_int("limit", limit, DEFAULT_LIMIT),
            query=query,
        )

    @classmethod
    def movies(cls, **params) -> PagingSpec:
        return cls.from_params(EntityKind.MOVIE, **params)

    @classmethod
    def people(cls, **params) -> PagingSpec:
        return cls.from_params(EntityKind.PERSON, **params)

    @classmethod
    def ratings(cls, **params) -> PagingSpec:
        return cls.from_params(EntityKind.RATING, **params)

    def next_page(self) -> PagingSpec:
        return replace(self, skip=self.skip + self.limit)

    @property
    def parameters(self) -> dict:
        return {"skip": self.skip, "limit": self.limit}
