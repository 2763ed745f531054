"""
Similarity ranking for movies and people.

The store does the traversal, scoring, ordering and SKIP/LIMIT so paging
stays correct across the whole candidate set. The same ordering is
expressed here as Python sort keys; the services re-apply it to each page
so equal scores always come back in ``tmdbId`` order, whatever order the
store produced them in.

Movie similarity:
    Candidates share at least one first-degree connection (genre, actor or
    director) with the source movie. ``inCommon`` counts the distinct
    shared-connection paths and ``score = imdbRating * inCommon``.
    Unrated candidates are dropped, not scored as zero.

Person similarity:
    Candidates share at least one ACTED_IN/DIRECTED credit with the source
    person on a common movie. ``inCommon`` is the collected list of shared
    movies with the relation type that linked the candidate, and ranking is
    by the size of that list.
"""
from __future__ import annotations

from typing import Iterable

from .models import Movie, Person
from .paging import EntityKind, PagingSpec
from .queries import CypherQuery, require_id
from .errors import InvalidParameter

MOVIE_SIMILARITY_QUERY = """
MATCH (source:Movie {tmdbId: $id})-[:IN_GENRE|ACTED_IN|DIRECTED]-(shared)-[:IN_GENRE|ACTED_IN|DIRECTED]-(m:Movie)
WHERE m <> source AND m.imdbRating IS NOT NULL
WITH m, count(*) AS inCommon
WITH m, inCommon, m.imdbRating * inCommon AS score
ORDER BY score DESC, m.tmdbId ASC
SKIP $skip
LIMIT $limit
RETURN m { .* } AS movie, inCommon
"""

PERSON_SIMILARITY_QUERY = """
MATCH (source:Person {tmdbId: $id})-[:ACTED_IN|DIRECTED]->(m:Movie)<-[r:ACTED_IN|DIRECTED]-(p:Person)
WHERE p <> source
WITH p, collect(m { .tmdbId, .title, type: type(r) }) AS inCommon
ORDER BY size(inCommon) DESC, p.tmdbId ASC
SKIP $skip
LIMIT $limit
RETURN p { .* } AS person,
       inCommon,
       COUNT { (p)-[:ACTED_IN]->(:Movie) } AS actedCount,
       COUNT { (p)-[:DIRECTED]->(:Movie) } AS directedCount
"""


def _check_kind(paging: PagingSpec, kind: EntityKind) -> None:
    if paging.kind is not kind:
        raise InvalidParameter(f"expected {kind.value} paging, got {paging.kind.value}")


def movie_similarity_query(movie_id: str, paging: PagingSpec) -> CypherQuery:
    # Ordering is fixed by score; only skip/limit of the spec apply.
    _check_kind(paging, EntityKind.MOVIE)
    return CypherQuery(
        "similar_movies",
        MOVIE_SIMILARITY_QUERY,
        {**paging.parameters, "id": require_id("movie id", movie_id)},
    )


def person_similarity_query(person_id: str, paging: PagingSpec) -> CypherQuery:
    _check_kind(paging, EntityKind.PERSON)
    return CypherQuery(
        "similar_people",
        PERSON_SIMILARITY_QUERY,
        {**paging.parameters, "id": require_id("person id", person_id)},
    )


def movie_score(rating: float | None, in_common: int) -> float:
    """Rating-weighted count of shared connections."""
    if rating is None:
        raise ValueError("unrated movies cannot be scored")
    return float(rating) * in_common


def movie_sort_key(movie: Movie) -> tuple:
    return (-(movie.score or 0.0), movie.tmdb_id)


def person_sort_key(person: Person) -> tuple:
    return (-len(person.in_common or ()), person.tmdb_id)


def rank_movies(movies: Iterable[Movie]) -> list[Movie]:
    """Order by score descending, then tmdbId ascending."""
    return sorted(movies, key=movie_sort_key)


def rank_people(people: Iterable[Person]) -> list[Person]:
    """Order by number of shared credits descending, then tmdbId ascending."""
    return sorted(people, key=person_sort_key)
