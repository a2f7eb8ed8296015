"""
Shared fixtures: in-memory stand-ins for the repository and media store, and a
TestClient wired to them through FastAPI's dependency_overrides.
"""

import io
from typing import BinaryIO, Dict, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_media_store, get_movie_repository
from app.core.errors import MediaError, MovieNotFoundError, MovieValidationError, StorageError
from app.data_access.media_store import MediaStore
from app.data_access.repository import MovieRepository
from app.models.movie import Movie, MovieCreate, MovieFilter, MovieUpdate
from app.server import app
from app.utils.helpers import calculate_skip, utc_now


class InMemoryMovieRepository(MovieRepository):
    """Dict-backed repository with the same filtering, ordering and soft-delete rules as Mongo."""

    def __init__(self):
        self.rows: Dict[int, Movie] = {}
        self.next_id = 1
        self.create_calls = 0
        self.fail_with: Optional[StorageError] = None

    def _check_failure(self):
        if self.fail_with is not None:
            raise self.fail_with

    def _live(self) -> List[Movie]:
        return [m for m in self.rows.values() if m.deleted_at is None]

    @staticmethod
    def _contains(haystack: str, needle: str) -> bool:
        return needle.lower() in (haystack or "").lower()

    def _matches(self, movie: Movie, f: MovieFilter) -> bool:
        if f.title and not self._contains(movie.title, f.title):
            return False
        if f.description and not self._contains(movie.description, f.description):
            return False
        if f.genres and not any(self._contains(movie.genres, g) for g in f.genres):
            return False
        if f.artists and not any(self._contains(movie.artists, a) for a in f.artists):
            return False
        return True

    async def create(self, movie: MovieCreate) -> Movie:
        self.create_calls += 1
        self._check_failure()
        created = Movie(id=self.next_id, **movie.model_dump())
        self.rows[created.id] = created
        self.next_id += 1
        return created.model_copy()

    async def list(self, movie_filter: MovieFilter) -> Tuple[List[Movie], int]:
        self._check_failure()
        matched = [m for m in self._live() if self._matches(m, movie_filter)]
        matched.sort(key=lambda m: (m.created_at, m.id), reverse=True)
        limit = movie_filter.get_limit()
        skip = calculate_skip(movie_filter.get_page(), limit)
        return [m.model_copy() for m in matched[skip:skip + limit]], len(matched)

    async def update(self, movie: MovieUpdate) -> Movie:
        if not movie.id:
            raise MovieValidationError("movie ID is required")
        self._check_failure()
        current = self.rows.get(movie.id)
        if current is None or current.deleted_at is not None:
            raise MovieNotFoundError(movie.id)
        updated = current.model_copy(update=movie.changes())
        self.rows[movie.id] = updated
        return updated.model_copy()

    async def delete(self, movie_id: int) -> None:
        self._check_failure()
        current = self.rows.get(movie_id)
        if current is None or current.deleted_at is not None:
            raise MovieNotFoundError(movie_id)
        self.rows[movie_id] = current.model_copy(update={"deleted_at": utc_now()})


class InMemoryMediaStore(MediaStore):
    """Keeps uploaded bytes in a dict keyed by the generated path."""

    def __init__(self):
        self.files: Dict[str, bytes] = {}
        self.fail = False

    async def store(self, stream: BinaryIO, filename_hint: str) -> str:
        if self.fail:
            raise MediaError("failed to create file: disk full")
        path = f"uploads/{len(self.files) + 1}-{filename_hint}"
        self.files[path] = stream.read()
        return path


@pytest.fixture
def repository():
    return InMemoryMovieRepository()


@pytest.fixture
def media_store():
    return InMemoryMediaStore()


@pytest.fixture
def client(repository, media_store):
    app.dependency_overrides[get_movie_repository] = lambda: repository
    app.dependency_overrides[get_media_store] = lambda: media_store
    yield TestClient(app)
    # Remove overrides so tests don't leak state
    app.dependency_overrides.clear()


def movie_upload(name: str = "test.mp4", content: bytes = b"fake video bytes"):
    """Multipart `files=` payload for the create endpoint."""
    return {"movie_file": (name, io.BytesIO(content), "video/mp4")}
