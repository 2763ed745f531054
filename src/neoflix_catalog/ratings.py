from neo4j import Driver

from .annotator import annotate_rating
from .database import read_transaction, run_query
from .models import Rating
from .paging import PagingSpec
from .queries import rating_list_query


class RatingService:
    def __init__(self, driver: Driver | None = None):
        self._driver = driver

    def find_all_by_movie_id(self, movie_id: str, paging: PagingSpec | None = None) -> list[Rating]:
        """Paginated reviews left for a movie, with the reviewing user."""
        query = rating_list_query(movie_id, paging or PagingSpec.ratings())

        with read_transaction(self._driver) as tx:
            return [annotate_rating(row) for row in run_query(tx, query)]
