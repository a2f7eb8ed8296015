# app/models/movie.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 2


# --- Persisted entity ---
class Movie(BaseModel):
    """A movie record as stored in the database and returned by the API."""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="System-assigned identifier.")
    title: str = Field(..., description="Movie title, never empty for a live record.")
    description: str = Field("", description="Free-text synopsis.")
    duration_minutes: Optional[int] = Field(None, description="Running time in minutes.")
    artists: str = Field("", description="Artists as a single delimited string.")
    genres: str = Field("", description="Genres as a single delimited string.")
    file_path: str = Field("", description="Storage path of the uploaded media file.")
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = Field(None, description="Set when the record is soft-deleted.")


# --- Candidates produced by the parser ---
class MovieCreate(BaseModel):
    """Candidate for the create use case. file_path and timestamps are filled in before insert."""
    title: str
    description: str = ""
    duration_minutes: int
    artists: str = ""
    genres: str = ""
    file_path: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MovieUpdate(BaseModel):
    """
    Candidate for the update use case.

    Every editable field is optional: None means "not supplied" and the stored
    value is left untouched.
    """
    id: int = 0
    title: Optional[str] = None
    description: Optional[str] = None
    duration_minutes: Optional[int] = None
    artists: Optional[str] = None
    genres: Optional[str] = None
    updated_at: Optional[datetime] = None

    def changes(self) -> dict:
        """Fields to write, excluding the identifier and anything not supplied."""
        return self.model_dump(exclude={"id"}, exclude_none=True)


# --- Request-scoped filter ---
class MovieFilter(BaseModel):
    """Match criteria plus pagination for listing movies. Zero page/limit means "use the default"."""
    title: str = ""
    description: str = ""
    genres: List[str] = Field(default_factory=list)
    artists: List[str] = Field(default_factory=list)
    page: int = 0
    limit: int = 0

    def get_page(self) -> int:
        return self.page if self.page > 0 else DEFAULT_PAGE

    def get_limit(self) -> int:
        return self.limit if self.limit > 0 else DEFAULT_PAGE_SIZE


# --- Models for Paginated API Responses ---
class PaginationData(BaseModel):
    """Metadata for paginated responses."""
    current_page: int
    per_page: int
    total_items: int
    total_pages: int


class PaginatedMovieResponse(BaseModel):
    """Response structure for paginated movie lists."""
    data: List[Movie]
    pagination: PaginationData


class MessageResponse(BaseModel):
    message: str
