# app/services/movie_service.py

import logging
from typing import List, Tuple

from app.core.errors import MovieValidationError
from app.data_access.repository import MovieRepository
from app.models.movie import Movie, MovieCreate, MovieFilter, MovieUpdate
from app.utils.helpers import utc_now

logger = logging.getLogger(__name__)


class MovieService:
    def __init__(self, repository: MovieRepository):
        """
        Initializes the Movie Service.

        Args:
            repository: The persistence boundary used for every use case.
        """
        self.repository = repository

    async def create_movie(self, movie: MovieCreate) -> Movie:
        """
        Stamps and persists a new movie.

        The caller must already have stored the media file and set
        movie.file_path; this service performs no file I/O.

        Raises:
            MovieValidationError: If the title is empty.
            StorageError: Propagated unchanged from the repository.
        """
        if not movie.title:
            raise MovieValidationError("title is required")

        now = utc_now()
        movie.created_at = now
        movie.updated_at = now

        return await self.repository.create(movie)

    async def list_movies(self, movie_filter: MovieFilter) -> Tuple[List[Movie], int]:
        """Returns one page of matching movies and the total number of matches."""
        return await self.repository.list(movie_filter)

    async def update_movie(self, movie: MovieUpdate) -> Movie:
        """
        Refreshes updated_at and applies the supplied fields.

        Raises:
            MovieValidationError: If the movie ID is missing.
            MovieNotFoundError: If no live movie has that ID.
            StorageError: On any other database failure.
        """
        if not movie.id:
            raise MovieValidationError("movie ID is required")

        movie.updated_at = utc_now()

        return await self.repository.update(movie)

    async def delete_movie(self, movie_id: int) -> None:
        await self.repository.delete(movie_id)
        logger.debug(f"Delete completed for movie {movie_id}")
