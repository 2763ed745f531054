from neo4j import Driver

from .annotator import annotate_genre
from .database import read_transaction, run_query
from .errors import NotFound
from .models import Genre
from .queries import genre_query


class GenreService:
    """Genres with their movie counts and a representative poster."""

    def __init__(self, driver: Driver | None = None):
        self._driver = driver

    def find_all(self) -> list[Genre]:
        with read_transaction(self._driver) as tx:
            return [annotate_genre(row) for row in run_query(tx, genre_query())]

    def find_one_by_name(self, name: str) -> Genre:
        query = genre_query(name)

        with read_transaction(self._driver) as tx:
            rows = run_query(tx, query)
            if not rows:
                raise NotFound("Genre", name)
            return annotate_genre(rows[0])
