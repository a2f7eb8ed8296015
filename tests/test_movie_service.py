"""
Tests for MovieService orchestration against the in-memory repository.
"""

import asyncio

import pytest

from app.core.errors import MovieNotFoundError, MovieValidationError, StorageError
from app.models.movie import MovieCreate, MovieFilter, MovieUpdate
from app.services.movie_service import MovieService


@pytest.fixture
def service(repository):
    return MovieService(repository=repository)


def candidate(**overrides):
    fields = dict(
        title="Test Movie",
        description="desc",
        duration_minutes=120,
        artists="Test Artist",
        genres="Action",
        file_path="uploads/1-test.mp4",
    )
    fields.update(overrides)
    return MovieCreate(**fields)


def test_create_stamps_equal_timestamps(service):
    created = asyncio.run(service.create_movie(candidate()))
    assert created.id == 1
    assert created.created_at == created.updated_at
    assert created.created_at.tzinfo is not None
    assert created.file_path == "uploads/1-test.mp4"


def test_create_empty_title_never_reaches_repository(service, repository):
    with pytest.raises(MovieValidationError) as exc:
        asyncio.run(service.create_movie(candidate(title="")))
    assert exc.value.message == "title is required"
    assert repository.create_calls == 0


def test_create_propagates_storage_error(service, repository):
    repository.fail_with = StorageError("failed to create movie: connection refused")
    with pytest.raises(StorageError) as exc:
        asyncio.run(service.create_movie(candidate()))
    assert exc.value.message == "failed to create movie: connection refused"


def test_list_returns_page_and_total(service):
    for i in range(5):
        asyncio.run(service.create_movie(candidate(title=f"Movie {i}")))
    movies, total = asyncio.run(service.list_movies(MovieFilter()))
    assert total == 5
    assert len(movies) == 2
    # Newest first
    assert [m.title for m in movies] == ["Movie 4", "Movie 3"]


def test_update_requires_id(service):
    with pytest.raises(MovieValidationError) as exc:
        asyncio.run(service.update_movie(MovieUpdate(title="x")))
    assert exc.value.message == "movie ID is required"


def test_update_refreshes_updated_at_only(service):
    created = asyncio.run(service.create_movie(candidate()))
    updated = asyncio.run(service.update_movie(MovieUpdate(id=created.id, title="Renamed")))
    assert updated.title == "Renamed"
    assert updated.created_at == created.created_at
    assert updated.updated_at >= created.updated_at
    # Fields that were not supplied keep their stored values
    assert updated.description == "desc"
    assert updated.duration_minutes == 120
    assert updated.file_path == created.file_path


def test_update_stamped_time_is_returned(service):
    created = asyncio.run(service.create_movie(candidate()))
    request = MovieUpdate(id=created.id, genres="Drama")
    updated = asyncio.run(service.update_movie(request))
    assert updated.updated_at == request.updated_at


def test_update_missing_movie(service):
    with pytest.raises(MovieNotFoundError) as exc:
        asyncio.run(service.update_movie(MovieUpdate(id=42, title="x")))
    assert exc.value.message == "movie with ID 42 not found"


def test_delete_then_absent_everywhere(service):
    created = asyncio.run(service.create_movie(candidate()))
    asyncio.run(service.delete_movie(created.id))

    movies, total = asyncio.run(service.list_movies(MovieFilter()))
    assert movies == []
    assert total == 0

    with pytest.raises(MovieNotFoundError):
        asyncio.run(service.update_movie(MovieUpdate(id=created.id, title="x")))

    with pytest.raises(MovieNotFoundError) as exc:
        asyncio.run(service.delete_movie(created.id))
    assert exc.value.message == f"movie with ID {created.id} not found"


def test_delete_unknown_id(service):
    with pytest.raises(MovieNotFoundError) as exc:
        asyncio.run(service.delete_movie(999))
    assert exc.value.message == "movie with ID 999 not found"
