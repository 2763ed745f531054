import argparse
import atexit
import json
import logging
import sys

from .database import close_driver
from .errors import CatalogError
from .favorites import FavoriteService
from .genres import GenreService
from .movies import MovieService
from .paging import PagingSpec
from .people import PeopleService
from .ratings import RatingService

logger = logging.getLogger(__name__)

# Register cleanup on exit
atexit.register(close_driver)


def _paging_kwargs(args: argparse.Namespace) -> dict:
    return {
        "sort": args.sort,
        "order": args.order,
        "skip": args.skip,
        "limit": args.limit,
        "query": getattr(args, "query", None),
    }


def _emit(payload) -> None:
    """Write results to stdout as JSON."""
    if isinstance(payload, list):
        payload = [item.to_dict() for item in payload]
    else:
        payload = payload.to_dict()
    print(json.dumps(payload, indent=2, default=str))


def cmd_movies(args: argparse.Namespace) -> None:
    """List movies, optionally restricted to a genre, actor or director."""
    service = MovieService()
    paging = PagingSpec.movies(**_paging_kwargs(args))

    if args.genre:
        movies = service.find_all_by_genre(args.genre, args.user, paging)
    elif args.actor:
        movies = service.find_all_by_actor_id(args.actor, args.user, paging)
    elif args.director:
        movies = service.find_all_by_director_id(args.director, args.user, paging)
    else:
        movies = service.find_all(args.user, paging)

    if not movies:
        logger.info("No movies matched")
    _emit(movies)


def cmd_movie(args: argparse.Namespace) -> None:
    """Show one movie with its cast, crew, genres and rating count."""
    _emit(MovieService().find_one_by_id(args.id, args.user))


def cmd_similar_movies(args: argparse.Namespace) -> None:
    """List movies that share genres, actors or directors with a movie."""
    paging = PagingSpec.movies(**_paging_kwargs(args))
    _emit(MovieService().find_all_by_similarity(args.id, args.user, paging))


def cmd_people(args: argparse.Namespace) -> None:
    """List people, optionally filtered by name."""
    paging = PagingSpec.people(**_paging_kwargs(args))
    _emit(PeopleService().find_all(paging))


def cmd_person(args: argparse.Namespace) -> None:
    """Show one person with acted and directed counts."""
    _emit(PeopleService().find_one_by_id(args.id))


def cmd_similar_people(args: argparse.Namespace) -> None:
    """List people who share credits with a person."""
    paging = PagingSpec.people(**_paging_kwargs(args))
    _emit(PeopleService().find_all_by_similarity(args.id, paging))


def cmd_genres(args: argparse.Namespace) -> None:
    """List genres with movie counts and a poster."""
    _emit(GenreService().find_all())


def cmd_genre(args: argparse.Namespace) -> None:
    """Show one genre by name."""
    _emit(GenreService().find_one_by_name(args.name))


def cmd_ratings(args: argparse.Namespace) -> None:
    """List ratings left for a movie."""
    paging = PagingSpec.ratings(**_paging_kwargs(args))
    _emit(RatingService().find_all_by_movie_id(args.id, paging))


def cmd_favorites(args: argparse.Namespace) -> None:
    """List a user's favorite movies."""
    paging = PagingSpec.movies(**_paging_kwargs(args))
    _emit(FavoriteService().find_all(args.user_id, paging))


def _add_paging_arguments(parser: argparse.ArgumentParser, with_query: bool = False) -> None:
    parser.add_argument("--sort", help="Property to sort by (must be allow-listed)")
    parser.add_argument("--order", choices=["ASC", "DESC", "asc", "desc"], help="Sort direction (default: ASC)")
    parser.add_argument("--skip", type=int, default=0, help="Number of rows to skip")
    parser.add_argument("--limit", type=int, help="Maximum number of rows to return")
    if with_query:
        parser.add_argument("--query", "-q", help="Case-insensitive name filter")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Neoflix catalog queries")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Movie commands
    movies_parser = subparsers.add_parser("movies", help="List movies")
    category = movies_parser.add_mutually_exclusive_group()
    category.add_argument("--genre", help="Only movies in this genre")
    category.add_argument("--actor", help="Only movies this person acted in (tmdbId)")
    category.add_argument("--director", help="Only movies this person directed (tmdbId)")
    movies_parser.add_argument("--user", help="User id used to flag favorites")
    _add_paging_arguments(movies_parser)
    movies_parser.set_defaults(func=cmd_movies)

    movie_parser = subparsers.add_parser("movie", help="Show one movie with cast and genres")
    movie_parser.add_argument("id", help="Movie tmdbId")
    movie_parser.add_argument("--user", help="User id used to flag favorites")
    movie_parser.set_defaults(func=cmd_movie)

    similar_movies_parser = subparsers.add_parser("similar-movies", help="Movies similar to a movie")
    similar_movies_parser.add_argument("id", help="Movie tmdbId")
    similar_movies_parser.add_argument("--user", help="User id used to flag favorites")
    _add_paging_arguments(similar_movies_parser)
    similar_movies_parser.set_defaults(func=cmd_similar_movies)

    # People commands
    people_parser = subparsers.add_parser("people", help="List or search people")
    _add_paging_arguments(people_parser, with_query=True)
    people_parser.set_defaults(func=cmd_people)

    person_parser = subparsers.add_parser("person", help="Show one person with credit counts")
    person_parser.add_argument("id", help="Person tmdbId")
    person_parser.set_defaults(func=cmd_person)

    similar_people_parser = subparsers.add_parser("similar-people", help="People who share credits with a person")
    similar_people_parser.add_argument("id", help="Person tmdbId")
    _add_paging_arguments(similar_people_parser)
    similar_people_parser.set_defaults(func=cmd_similar_people)

    # Genre commands
    genres_parser = subparsers.add_parser("genres", help="List genres")
    genres_parser.set_defaults(func=cmd_genres)

    genre_parser = subparsers.add_parser("genre", help="Show one genre")
    genre_parser.add_argument("name", help="Genre name (e.g., 'Action')")
    genre_parser.set_defaults(func=cmd_genre)

    # Ratings and favorites
    ratings_parser = subparsers.add_parser("ratings", help="List ratings for a movie")
    ratings_parser.add_argument("id", help="Movie tmdbId")
    _add_paging_arguments(ratings_parser)
    ratings_parser.set_defaults(func=cmd_ratings)

    favorites_parser = subparsers.add_parser("favorites", help="List a user's favorite movies")
    favorites_parser.add_argument("user_id", help="User id")
    _add_paging_arguments(favorites_parser)
    favorites_parser.set_defaults(func=cmd_favorites)

    return parser


def main():
    parser = build_parser()
    args = parser.parse_args()

    # Configure logging based on verbosity
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        args.func(args)
    except CatalogError as exc:
        logger.error(str(exc))
        sys.exit(1)


if __name__ == "__main__":
    main()
