from neo4j import Driver

from .annotator import annotate_people, annotate_person
from .database import read_transaction, run_query
from .errors import NotFound
from .models import Person
from .paging import PagingSpec
from .queries import person_detail_query, person_list_query
from .similarity import person_similarity_query, rank_people


class PeopleService:
    def __init__(self, driver: Driver | None = None):
        self._driver = driver

    def find_all(self, paging: PagingSpec | None = None) -> list[Person]:
        """
        Paginated list of people (actors or directors).

        ``paging.query`` filters on a case-insensitive substring of the name.
        """
        query = person_list_query(paging or PagingSpec.people())

        with read_transaction(self._driver) as tx:
            return annotate_people(run_query(tx, query))

    def find_one_by_id(self, person_id: str) -> Person:
        """Single person with acted/directed counts; NotFound if missing."""
        query = person_detail_query(person_id)

        with read_transaction(self._driver) as tx:
            rows = run_query(tx, query)
            if not rows:
                raise NotFound("Person", person_id)
            return annotate_person(rows[0])

    def find_all_by_similarity(self, person_id: str, paging: PagingSpec | None = None) -> list[Person]:
        """People sharing credits with this person, most shared titles first."""
        query = person_similarity_query(person_id, paging or PagingSpec.people())

        with read_transaction(self._driver) as tx:
            people = annotate_people(run_query(tx, query))
        return rank_people(people)
