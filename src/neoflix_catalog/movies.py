"""
Movie catalog queries.

Every public method opens exactly one read transaction, resolves the
caller's favorites inside it, issues one catalog query, and annotates the
rows before the transaction closes. Paging is applied by the store only;
the returned page is never re-sliced.
"""
from neo4j import Driver

from .annotator import annotate_movie, annotate_movies
from .database import read_transaction, run_query
from .errors import NotFound
from .favorites import resolve_favorites
from .models import Movie
from .paging import PagingSpec
from .queries import CypherQuery, MovieFilter, movie_detail_query, movie_list_query
from .similarity import movie_similarity_query, rank_movies


class MovieService:
    def __init__(self, driver: Driver | None = None):
        self._driver = driver

    def find_all(self, user_id: str | None = None, paging: PagingSpec | None = None) -> list[Movie]:
        """Paginated list of movies ordered by the paging sort property."""
        query = movie_list_query(paging or PagingSpec.movies())
        return self._find_many(query, user_id)

    def find_all_by_genre(
        self, genre: str, user_id: str | None = None, paging: PagingSpec | None = None
    ) -> list[Movie]:
        """Paginated list of movies in the named genre."""
        query = movie_list_query(paging or PagingSpec.movies(), MovieFilter.GENRE, genre)
        return self._find_many(query, user_id)

    def find_all_by_actor_id(
        self, actor_id: str, user_id: str | None = None, paging: PagingSpec | None = None
    ) -> list[Movie]:
        """Paginated list of movies the person ACTED_IN."""
        query = movie_list_query(paging or PagingSpec.movies(), MovieFilter.ACTOR, actor_id)
        return self._find_many(query, user_id)

    def find_all_by_director_id(
        self, director_id: str, user_id: str | None = None, paging: PagingSpec | None = None
    ) -> list[Movie]:
        """Paginated list of movies the person DIRECTED."""
        query = movie_list_query(paging or PagingSpec.movies(), MovieFilter.DIRECTOR, director_id)
        return self._find_many(query, user_id)

    def find_one_by_id(self, movie_id: str, user_id: str | None = None) -> Movie:
        """
        Single movie with its actors, directors, genres and number of ratings.

        Raises:
            NotFound: no movie has this tmdbId
        """
        query = movie_detail_query(movie_id)

        with read_transaction(self._driver) as tx:
            favorites = resolve_favorites(tx, user_id)
            rows = run_query(tx, query)
            if not rows:
                raise NotFound("Movie", movie_id)
            return annotate_movie(rows[0], favorites)

    def find_all_by_similarity(
        self, movie_id: str, user_id: str | None = None, paging: PagingSpec | None = None
    ) -> list[Movie]:
        """Movies sharing genres, actors or directors, best score first."""
        query = movie_similarity_query(movie_id, paging or PagingSpec.movies())
        return rank_movies(self._find_many(query, user_id))

    def _find_many(self, query: CypherQuery, user_id: str | None) -> list[Movie]:
        with read_transaction(self._driver) as tx:
            favorites = resolve_favorites(tx, user_id)
            rows = run_query(tx, query)
            return annotate_movies(rows, favorites)
