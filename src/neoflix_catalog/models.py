"""
Entity records returned by the catalog services.

Each record keeps the fields this package computes as typed attributes and
carries every other stored property untouched in ``properties``, so new
properties in the graph show up in output without code changes.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Movie:
    tmdb_id: str
    properties: dict[str, Any] = field(default_factory=dict)
    favorite: bool = False

    # Detail fetch only
    actors: list[dict] | None = None
    directors: list[dict] | None = None
    genres: list[str] | None = None
    rating_count: int | None = None

    # Similarity queries only
    score: float | None = None

    @property
    def title(self) -> str | None:
        return self.properties.get("title")

    @property
    def imdb_rating(self) -> float | None:
        return self.properties.get("imdbRating")

    def to_dict(self) -> dict[str, Any]:
        out = {**self.properties, "tmdbId": self.tmdb_id, "favorite": self.favorite}
        if self.actors is not None:
            out["actors"] = self.actors
        if self.directors is not None:
            out["directors"] = self.directors
        if self.genres is not None:
            out["genres"] = self.genres
        if self.rating_count is not None:
            out["ratingCount"] = self.rating_count
        if self.score is not None:
            out["score"] = self.score
        return out


@dataclass
class Person:
    tmdb_id: str
    properties: dict[str, Any] = field(default_factory=dict)
    acted_count: int | None = None
    directed_count: int | None = None
    in_common: list[dict] | None = None

    @property
    def name(self) -> str | None:
        return self.properties.get("name")

    def to_dict(self) -> dict[str, Any]:
        out = {**self.properties, "tmdbId": self.tmdb_id}
        if self.acted_count is not None:
            out["actedCount"] = self.acted_count
        if self.directed_count is not None:
            out["directedCount"] = self.directed_count
        if self.in_common is not None:
            out["inCommon"] = self.in_common
        return out


@dataclass
class Genre:
    name: str
    properties: dict[str, Any] = field(default_factory=dict)
    movies: int = 0
    poster: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {**self.properties, "name": self.name, "movies": self.movies, "poster": self.poster}


@dataclass
class Rating:
    rating: float | None
    timestamp: Any
    user: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"rating": self.rating, "timestamp": self.timestamp, "user": self.user}
