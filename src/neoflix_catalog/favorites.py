import logging

from neo4j import Driver

from .annotator import annotate_movies
from .database import read_transaction, run_query
from .errors import InvalidParameter
from .models import Movie
from .paging import PagingSpec
from .queries import MovieFilter, favorite_ids_query, movie_list_query

logger = logging.getLogger(__name__)


def resolve_favorites(tx, user_id: str | None) -> frozenset[str]:
    """
    Return the tmdbIds of the movies a user has added to their favorites.

    Anonymous callers (no user id) get an empty set without a query being
    issued. A user with no favorites also gets an empty set.
    """
    if not user_id:
        return frozenset()

    rows = run_query(tx, favorite_ids_query(user_id))
    favorites = frozenset(row["id"] for row in rows if row.get("id") is not None)
    logger.debug(f"Resolved {len(favorites)} favorites for user {user_id}")
    return favorites


class FavoriteService:
    """Read-only view of a user's "My Favorites" list."""

    def __init__(self, driver: Driver | None = None):
        self._driver = driver

    def find_all(self, user_id: str, paging: PagingSpec | None = None) -> list[Movie]:
        if not user_id:
            raise InvalidParameter("user id is required to list favorites")
        paging = paging or PagingSpec.movies()
        query = movie_list_query(paging, MovieFilter.FAVORITE, user_id)

        with read_transaction(self._driver) as tx:
            rows = run_query(tx, query)
            # Every row matched through HAS_FAVORITE, so all are favorites
            return annotate_movies(rows, {row["movie"].get("tmdbId") for row in rows})
