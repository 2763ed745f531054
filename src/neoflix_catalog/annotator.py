"""Turn raw query rows into entity records."""
from __future__ import annotations

import logging
from typing import Iterable

from .errors import QueryFailure
from .models import Genre, Movie, Person, Rating
from .similarity import movie_score

logger = logging.getLogger(__name__)


def _identifier(properties: dict, kind: str) -> str:
    tmdb_id = properties.get("tmdbId")
    if tmdb_id is None:
        raise QueryFailure(f"{kind} row is missing tmdbId")
    return tmdb_id


def annotate_movie(record: dict, favorites: Iterable[str] = frozenset()) -> Movie:
    """
    Build a Movie from a row with a ``movie`` property map.

    Detail projections (actors, directors, genres, ratingCount) are moved
    onto the record as produced by the query. When the row carries an
    ``inCommon`` count the similarity score is attached as well.
    """
    properties = dict(record["movie"])
    tmdb_id = _identifier(properties, "movie")
    # Computed fields always come from this package, never from stored properties
    for key in ("favorite", "score"):
        properties.pop(key, None)

    movie = Movie(tmdb_id=tmdb_id, properties=properties, favorite=tmdb_id in favorites)

    if "actors" in record:
        movie.actors = list(record["actors"] or [])
    if "directors" in record:
        movie.directors = list(record["directors"] or [])
    if "genres" in record:
        movie.genres = list(record["genres"] or [])
    if "ratingCount" in record:
        movie.rating_count = record["ratingCount"]
    if "inCommon" in record:
        movie.score = movie_score(properties.get("imdbRating"), record["inCommon"])

    return movie


def annotate_person(record: dict) -> Person:
    properties = dict(record["person"])
    person = Person(tmdb_id=_identifier(properties, "person"), properties=properties)

    if "actedCount" in record:
        person.acted_count = record["actedCount"]
    if "directedCount" in record:
        person.directed_count = record["directedCount"]
    if "inCommon" in record:
        person.in_common = list(record["inCommon"] or [])

    return person


def annotate_genre(record: dict) -> Genre:
    properties = dict(record["genre"])
    return Genre(
        name=properties.pop("name"),
        properties=properties,
        movies=record.get("movies") or 0,
        poster=record.get("poster"),
    )


def annotate_rating(record: dict) -> Rating:
    rating = record.get("rating") or {}
    return Rating(
        rating=rating.get("rating"),
        timestamp=rating.get("timestamp"),
        user=dict(record.get("user") or {}),
    )


def annotate_movies(records: Iterable[dict], favorites: Iterable[str] = frozenset()) -> list[Movie]:
    favorites = frozenset(favorites)
    return [annotate_movie(record, favorites) for record in records]


def annotate_people(records: Iterable[dict]) -> list[Person]:
    return [annotate_person(record) for record in records]
