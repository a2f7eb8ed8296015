# Domain error taxonomy shared by parser, service and repository
# app/core/errors.py


class MovieError(Exception):
    """Base class for movie domain errors. The message is shown to clients verbatim."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MovieValidationError(MovieError):
    """Malformed or missing input. Always client-caused."""


class StorageError(MovieError):
    """Any database failure, wrapped with a descriptive prefix."""


class MovieNotFoundError(StorageError):
    """The referenced movie ID has no live (non-deleted) record."""

    def __init__(self, movie_id: int):
        super().__init__(f"movie with ID {movie_id} not found")
        self.movie_id = movie_id


class MediaError(MovieError):
    """The uploaded media file could not be persisted."""
