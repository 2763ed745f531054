import pytest

from conftest import (
    FAVORITE_IDS,
    MOVIE_DETAIL,
    MOVIE_LIST,
    SIMILAR_MOVIES,
    StoreSyntaxError,
    movie_row,
    paged,
)
from neoflix_catalog.errors import InvalidParameter, NotFound, QueryFailure
from neoflix_catalog.movies import MovieService
from neoflix_catalog.paging import PagingSpec


def _catalog(n):
    return [movie_row(str(i), f"Movie {i:02d}", released=f"20{i:02d}-01-01") for i in range(n)]


def test_find_all_by_genre_example(fake_driver):
    # Rows in the order the store returns them for released DESC
    fake_driver.respond(MOVIE_LIST, [
        movie_row("1", "New", released="2020-01-01"),
        movie_row("2", "Old", released="2019-01-01"),
    ])
    spec = PagingSpec.movies(sort="released", order="DESC", skip=0, limit=2)

    movies = MovieService(fake_driver).find_all_by_genre("Action", "", spec)

    assert [m.title for m in movies] == ["New", "Old"]
    assert all(m.favorite is False for m in movies)
    text, params = fake_driver.queries_matching(MOVIE_LIST)[0]
    assert "ORDER BY m.`released` DESC" in text
    assert params == {"skip": 0, "limit": 2, "name": "Action"}


def test_anonymous_caller_issues_no_favorites_query(fake_driver):
    fake_driver.respond(MOVIE_LIST, _catalog(3))

    movies = MovieService(fake_driver).find_all(None, PagingSpec.movies(limit=3))

    assert len(movies) == 3
    assert not fake_driver.queries_matching(FAVORITE_IDS)
    assert not any(m.favorite for m in movies)


def test_favorites_resolved_in_same_transaction(fake_driver):
    fake_driver.respond(FAVORITE_IDS, [{"id": "1"}, {"id": "42"}])
    fake_driver.respond(MOVIE_LIST, _catalog(3))

    movies = MovieService(fake_driver).find_all("user-1", PagingSpec.movies(limit=3))

    assert {m.tmdb_id: m.favorite for m in movies} == {"0": False, "1": True, "2": False}
    assert len(fake_driver.sessions) == 1
    session = fake_driver.sessions[0]
    assert len(session.transactions) == 1
    assert session.closed
    # Favorites lookup runs before the catalog query
    assert FAVORITE_IDS in fake_driver.queries[0][0]
    assert fake_driver.queries[0][1] == {"userId": "user-1"}


def test_store_pagination_is_not_reapplied(fake_driver):
    fake_driver.respond(MOVIE_LIST, paged(_catalog(10)))
    service = MovieService(fake_driver)
    first = PagingSpec.movies(skip=2, limit=3)

    page_one = service.find_all(None, first)
    page_two = service.find_all(None, first.next_page())

    # The store already skipped two rows; slicing again would drop them all
    assert [m.tmdb_id for m in page_one] == ["2", "3", "4"]
    assert [m.tmdb_id for m in page_two] == ["5", "6", "7"]
    assert not {m.tmdb_id for m in page_one} & {m.tmdb_id for m in page_two}


@pytest.mark.parametrize("method, category_param", [
    ("find_all_by_actor_id", "(:Person {tmdbId: $id})-[:ACTED_IN]->(m:Movie)"),
    ("find_all_by_director_id", "(:Person {tmdbId: $id})-[:DIRECTED]->(m:Movie)"),
])
def test_person_category_queries(fake_driver, method, category_param):
    fake_driver.respond(MOVIE_LIST, _catalog(1))

    movies = getattr(MovieService(fake_driver), method)("6384")

    assert len(movies) == 1
    text, params = fake_driver.queries_matching(MOVIE_LIST)[0]
    assert category_param in text
    assert params["id"] == "6384"


def test_empty_list_is_not_an_error(fake_driver):
    assert MovieService(fake_driver).find_all_by_genre("Nope") == []


def test_invalid_sort_issues_no_store_call(fake_driver):
    service = MovieService(fake_driver)

    with pytest.raises(InvalidParameter):
        service.find_all(None, PagingSpec.movies(sort="budget"))
    with pytest.raises(InvalidParameter):
        service.find_all(None, PagingSpec.people())

    assert fake_driver.sessions == []


def test_find_one_by_id_returns_details(fake_driver):
    fake_driver.respond(FAVORITE_IDS, [{"id": "603"}])
    fake_driver.respond(MOVIE_DETAIL, [{
        "movie": {"tmdbId": "603", "title": "The Matrix"},
        "actors": [{"tmdbId": "6384", "name": "Keanu Reeves", "role": "Neo"}],
        "directors": [{"tmdbId": "9339", "name": "Lilly Wachowski"}],
        "genres": ["Action"],
        "ratingCount": 7,
    }])

    movie = MovieService(fake_driver).find_one_by_id("603", "user-1")

    assert movie.favorite is True
    assert movie.rating_count == 7
    assert movie.actors[0]["role"] == "Neo"
    assert movie.genres == ["Action"]


def test_find_one_by_id_missing_raises_not_found(fake_driver):
    with pytest.raises(NotFound) as exc:
        MovieService(fake_driver).find_one_by_id("0")

    assert exc.value.id == "0"
    assert fake_driver.sessions[0].closed


def test_similarity_scores_and_order(fake_driver):
    # Store tie order deliberately not by id
    fake_driver.respond(SIMILAR_MOVIES, [
        {"movie": {"tmdbId": "b", "imdbRating": 8.0}, "inCommon": 3},
        {"movie": {"tmdbId": "z", "imdbRating": 5.0}, "inCommon": 2},
        {"movie": {"tmdbId": "a", "imdbRating": 5.0}, "inCommon": 2},
    ])

    movies = MovieService(fake_driver).find_all_by_similarity("603", None, PagingSpec.movies(limit=3))

    assert [m.tmdb_id for m in movies] == ["b", "a", "z"]
    assert [m.score for m in movies] == [24.0, 10.0, 10.0]
    scores = [m.score for m in movies]
    assert scores == sorted(scores, reverse=True)
    assert all(m.imdb_rating is not None for m in movies)
    _, params = fake_driver.queries_matching(SIMILAR_MOVIES)[0]
    assert params == {"skip": 0, "limit": 3, "id": "603"}


def test_store_failure_propagates_without_partial_results(fake_driver):
    fake_driver.fail(MOVIE_LIST, StoreSyntaxError())

    with pytest.raises(QueryFailure):
        MovieService(fake_driver).find_all("user-1")

    assert fake_driver.sessions[0].closed
