# Persistence contract for movies
# app/data_access/repository.py

from abc import ABC, abstractmethod
from typing import List, Tuple

from app.models.movie import Movie, MovieCreate, MovieFilter, MovieUpdate


class MovieRepository(ABC):
    """
    Persistence boundary for movies.

    Implementations must treat soft-deleted records as absent on every read,
    update and delete, and raise StorageError / MovieNotFoundError from
    app.core.errors rather than driver-specific exceptions.
    """

    @abstractmethod
    async def create(self, movie: MovieCreate) -> Movie:
        """Inserts the movie and returns it with its identifier populated."""

    @abstractmethod
    async def list(self, movie_filter: MovieFilter) -> Tuple[List[Movie], int]:
        """Returns one page of matching movies (newest first) and the total match count."""

    @abstractmethod
    async def update(self, movie: MovieUpdate) -> Movie:
        """Applies the supplied fields and returns the record as now persisted."""

    @abstractmethod
    async def delete(self, movie_id: int) -> None:
        """Soft-deletes the movie."""
