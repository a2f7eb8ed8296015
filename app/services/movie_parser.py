# Request-to-domain translation for the movie endpoints
# app/services/movie_parser.py

import logging
import os
import re
from typing import Iterable, Optional, Tuple

from starlette.datastructures import FormData, QueryParams, UploadFile

from app.core.errors import MovieValidationError
from app.models.movie import MovieCreate, MovieFilter, MovieUpdate

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_EXTENSIONS = ("mp4", "mov", "mkv", "avi")

_INT_RE = re.compile(r"[+-]?\d+", re.ASCII)
# Values must fit a signed 64-bit integer, the widest integer BSON stores
_INT_MIN = -2 ** 63
_INT_MAX = 2 ** 63 - 1


def parse_int(value: Optional[str]) -> Optional[int]:
    """Strict integer parsing: optional sign and digits only, no whitespace, 64-bit range."""
    if value is None or not _INT_RE.fullmatch(value):
        return None
    number = int(value)
    if not _INT_MIN <= number <= _INT_MAX:
        return None
    return number


def _extension(filename: str) -> str:
    """Suffix from the last dot of the final path element, dot included; "" when there is none."""
    _, dot, suffix = os.path.basename(filename).rpartition(".")
    return f".{suffix}" if dot else ""


def _text(form: FormData, key: str) -> str:
    value = form.get(key)
    return value if isinstance(value, str) else ""


class MovieParser:
    """
    Validates already-read request data and turns it into domain values.

    Performs no I/O: uploaded files are handed back untouched for the media
    store to persist.
    """

    def __init__(self, allowed_extensions: Iterable[str] = DEFAULT_ALLOWED_EXTENSIONS):
        self.allowed_extensions = {f".{ext.lower().lstrip('.')}" for ext in allowed_extensions}

    def parse_create(self, form: FormData) -> Tuple[MovieCreate, UploadFile]:
        """
        Extracts a create candidate and its attached file.

        Raises:
            MovieValidationError: On the first rule that fails, checked in the
                order title, duration, file presence, file extension.
        """
        title = _text(form, "title")
        if not title:
            raise MovieValidationError("title is required")

        duration = parse_int(_text(form, "duration_minutes"))
        if duration is None:
            raise MovieValidationError("duration must be a number")

        upload = form.get("movie_file")
        if not isinstance(upload, UploadFile) or not upload.filename:
            raise MovieValidationError("movie file is required")

        ext = _extension(upload.filename).lower()
        if ext not in self.allowed_extensions:
            logger.debug(f"Rejected upload '{upload.filename}' with extension '{ext}'")
            raise MovieValidationError(f"file extension {ext} is not allowed")

        candidate = MovieCreate(
            title=title,
            description=_text(form, "description"),
            duration_minutes=duration,
            artists=_text(form, "artists"),
            genres=_text(form, "genres"),
        )
        return candidate, upload

    def parse_filter(self, query: QueryParams) -> MovieFilter:
        """Builds a MovieFilter. Absent page/limit stay 0 and resolve to defaults later."""
        page = 0
        page_str = query.get("page", "")
        if page_str:
            parsed = parse_int(page_str)
            if parsed is None:
                raise MovieValidationError(f"page number is not valid: '{page_str}'")
            if parsed <= 0:
                raise MovieValidationError(f"page number must be greater than 0: {parsed}")
            page = parsed

        limit = 0
        limit_str = query.get("limit", "")
        if limit_str:
            parsed = parse_int(limit_str)
            if parsed is None:
                raise MovieValidationError(f"limit number is not valid: '{limit_str}'")
            # 0 is accepted here and falls back to the default page size
            if parsed < 0:
                raise MovieValidationError(f"limit number must be greater than 0: {parsed}")
            limit = parsed

        return MovieFilter(
            title=query.get("title", ""),
            description=query.get("description", ""),
            genres=query.getlist("genre"),
            artists=query.getlist("artist"),
            page=page,
            limit=limit,
        )

    def parse_update(self, form: FormData) -> MovieUpdate:
        """
        Builds an update candidate. Fields that are absent or empty are left as
        None so the stored values are not overwritten.
        """
        candidate = MovieUpdate(
            title=_text(form, "title") or None,
            description=_text(form, "description") or None,
            artists=_text(form, "artists") or None,
            genres=_text(form, "genres") or None,
        )

        duration_str = _text(form, "duration_minutes")
        if duration_str:
            duration = parse_int(duration_str)
            if duration is None:
                raise MovieValidationError(f"duration must be a number: '{duration_str}'")
            candidate.duration_minutes = duration

        return candidate
