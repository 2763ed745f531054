"""
Cypher builders for the catalog's list, category and detail lookups.

Every template here is a fixed string. The only fragments formatted into
query text are a sort property taken from a validated PagingSpec and its
SortOrder value; everything else (ids, free text, skip/limit) is bound as a
query parameter.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .config import EXCLUDED_GENRE
from .errors import InvalidParameter
from .paging import EntityKind, PagingSpec


@dataclass(frozen=True)
class CypherQuery:
    name: str
    text: str
    parameters: dict = field(default_factory=dict)


class MovieFilter(Enum):
    """One-hop patterns that restrict which movies a list query returns."""

    ALL = "all"
    GENRE = "genre"
    ACTOR = "actor"
    DIRECTOR = "director"
    FAVORITE = "favorite"


# (pattern, name of the bound parameter carrying the category id)
_MOVIE_PATTERNS: dict[MovieFilter, tuple[str, str | None]] = {
    MovieFilter.ALL: ("MATCH (m:Movie)", None),
    MovieFilter.GENRE: ("MATCH (m:Movie)-[:IN_GENRE]->(:Genre {name: $name})", "name"),
    MovieFilter.ACTOR: ("MATCH (:Person {tmdbId: $id})-[:ACTED_IN]->(m:Movie)", "id"),
    MovieFilter.DIRECTOR: ("MATCH (:Person {tmdbId: $id})-[:DIRECTED]->(m:Movie)", "id"),
    MovieFilter.FAVORITE: ("MATCH (:User {userId: $userId})-[:HAS_FAVORITE]->(m:Movie)", "userId"),
}

MOVIE_LIST_TEMPLATE = """
{pattern}
WHERE m.`{sort}` IS NOT NULL
RETURN m {{ .* }} AS movie
ORDER BY m.`{sort}` {order}, m.tmdbId ASC
SKIP $skip
LIMIT $limit
"""

MOVIE_DETAIL_QUERY = """
MATCH (m:Movie {tmdbId: $id})
RETURN m { .* } AS movie,
       [ (a:Person)-[r:ACTED_IN]->(m) | a { .*, role: r.role } ] AS actors,
       [ (d:Person)-[:DIRECTED]->(m) | d { .* } ] AS directors,
       [ (m)-[:IN_GENRE]->(g:Genre) | g.name ] AS genres,
       COUNT { (m)<-[:RATED]-(:User) } AS ratingCount
LIMIT 1
"""

PERSON_LIST_TEMPLATE = """
MATCH (p:Person)
WHERE $q IS NULL OR toLower(p.name) CONTAINS toLower($q)
RETURN p {{ .* }} AS person
ORDER BY p.`{sort}` {order}, p.tmdbId ASC
SKIP $skip
LIMIT $limit
"""

PERSON_DETAIL_QUERY = """
MATCH (p:Person {tmdbId: $id})
RETURN p { .* } AS person,
       COUNT { (p)-[:ACTED_IN]->(:Movie) } AS actedCount,
       COUNT { (p)-[:DIRECTED]->(:Movie) } AS directedCount
LIMIT 1
"""

FAVORITE_IDS_QUERY = """
MATCH (:User {userId: $userId})-[:HAS_FAVORITE]->(m:Movie)
RETURN m.tmdbId AS id
"""

GENRE_TEMPLATE = """
MATCH (g:Genre)
WHERE g.name <> $excluded{name_filter}
CALL {{
    WITH g
    OPTIONAL MATCH (g)<-[:IN_GENRE]-(m:Movie)
    WHERE m.imdbRating IS NOT NULL AND m.poster IS NOT NULL
    RETURN m.poster AS poster
    ORDER BY m.imdbRating DESC, m.tmdbId ASC
    LIMIT 1
}}
RETURN g {{ .* }} AS genre,
       COUNT {{ (g)<-[:IN_GENRE]-(:Movie) }} AS movies,
       poster
ORDER BY g.name ASC
"""

RATING_LIST_TEMPLATE = """
MATCH (u:User)-[r:RATED]->(:Movie {{tmdbId: $id}})
RETURN r {{ .rating, .timestamp }} AS rating,
       u {{ .userId, .name }} AS user
ORDER BY r.`{sort}` {order}, u.userId ASC
SKIP $skip
LIMIT $limit
"""


def require_id(name: str, value) -> str:
    """Reject missing or blank identifiers before they reach the store."""
    if value is None or not str(value).strip():
        raise InvalidParameter(f"{name} must not be empty")
    return str(value).strip()


def order_fragments(paging: PagingSpec, kind: EntityKind) -> dict[str, str]:
    """
    Return the sort/order fragments for a template.

    Re-checks the allow-list so a spec built for another entity kind can
    never leak its sort property into the wrong query.
    """
    if paging.kind is not kind:
        raise InvalidParameter(f"expected {kind.value} paging, got {paging.kind.value}")
    if paging.sort not in kind.sort_fields:
        raise InvalidParameter(f"cannot sort {kind.value} by {paging.sort!r}")
    return {"sort": paging.sort, "order": paging.order.value}


def movie_list_query(
    paging: PagingSpec,
    movie_filter: MovieFilter = MovieFilter.ALL,
    category_id: str | None = None,
) -> CypherQuery:
    pattern, param_name = _MOVIE_PATTERNS[movie_filter]
    text = MOVIE_LIST_TEMPLATE.format(pattern=pattern, **order_fragments(paging, EntityKind.MOVIE))
    parameters = dict(paging.parameters)
    if param_name is not None:
        parameters[param_name] = require_id(movie_filter.value, category_id)
    return CypherQuery(f"movies_by_{movie_filter.value}", text, parameters)


def movie_detail_query(movie_id: str) -> CypherQuery:
    return CypherQuery("movie_detail", MOVIE_DETAIL_QUERY, {"id": require_id("movie id", movie_id)})


def person_list_query(paging: PagingSpec) -> CypherQuery:
    text = PERSON_LIST_TEMPLATE.format(**order_fragments(paging, EntityKind.PERSON))
    return CypherQuery("people", text, {**paging.parameters, "q": paging.query})


def person_detail_query(person_id: str) -> CypherQuery:
    return CypherQuery("person_detail", PERSON_DETAIL_QUERY, {"id": require_id("person id", person_id)})


def favorite_ids_query(user_id: str) -> CypherQuery:
    return CypherQuery("favorite_ids", FAVORITE_IDS_QUERY, {"userId": require_id("user id", user_id)})


def genre_query(name: str | None = None) -> CypherQuery:
    parameters = {"excluded": EXCLUDED_GENRE}
    name_filter = ""
    if name is not None:
        parameters["name"] = require_id("genre", name)
        name_filter = " AND g.name = $name"
    return CypherQuery(
        "genre" if name is not None else "genres",
        GENRE_TEMPLATE.format(name_filter=name_filter),
        parameters,
    )


def rating_list_query(movie_id: str, paging: PagingSpec) -> CypherQuery:
    text = RATING_LIST_TEMPLATE.format(**order_fragments(paging, EntityKind.RATING))
    return CypherQuery("ratings", text, {**paging.parameters, "id": require_id("movie id", movie_id)})
