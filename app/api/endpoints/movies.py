# app/api/endpoints/movies.py

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.api.deps import get_media_store, get_movie_parser, get_movie_service
from app.core.errors import MediaError, MovieError, MovieNotFoundError, MovieValidationError
from app.data_access.media_store import MediaStore
from app.models.movie import MessageResponse, Movie, PaginatedMovieResponse, PaginationData
from app.services.movie_parser import MovieParser, parse_int
from app.services.movie_service import MovieService
from app.utils.helpers import calculate_total_pages

logger = logging.getLogger(__name__)
router = APIRouter()

INVALID_MOVIE_ID = "invalid movie ID"
MOVIE_DELETED_SUCCESSFULLY = "movie deleted successfully"


def _http_error(e: MovieError) -> HTTPException:
    """Maps a domain error onto a transport status, keeping the message verbatim."""
    if isinstance(e, MovieValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    if isinstance(e, MovieNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)


def _parse_movie_id(raw: str) -> int:
    movie_id = parse_int(raw)
    if movie_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_MOVIE_ID)
    return movie_id


@router.post(
    "/",  # POST /api/movies/
    response_model=Movie,
    status_code=status.HTTP_201_CREATED,
    summary="Create Movie",
    description="Upload a movie file together with its metadata (multipart form).",
    responses={400: {"description": "Validation error"}, 500: {"description": "Storage or media error"}},
)
async def create_movie(
    request: Request,
    parser: MovieParser = Depends(get_movie_parser),
    media_store: MediaStore = Depends(get_media_store),
    movie_service: MovieService = Depends(get_movie_service),
):
    form = await request.form()
    try:
        candidate, upload = parser.parse_create(form)
    except MovieValidationError as e:
        logger.info(f"Rejected create request: {e.message}")
        raise _http_error(e)

    # Media is stored first; if the insert fails afterwards the file stays orphaned
    try:
        candidate.file_path = await media_store.store(upload.file, upload.filename)
    except MediaError as e:
        raise _http_error(e)

    try:
        return await movie_service.create_movie(candidate)
    except MovieError as e:
        logger.error(f"Error creating movie '{candidate.title}': {e.message}")
        raise _http_error(e)


@router.get(
    "/",  # GET /api/movies/
    response_model=PaginatedMovieResponse,
    summary="List Movies",
    description="Retrieve a paginated list of movies, optionally filtered by title, description, genre or artist.",
)
@router.get(
    "/search",  # GET /api/movies/search
    response_model=PaginatedMovieResponse,
    summary="Search Movies",
    description="Alias of the list endpoint.",
)
async def list_movies(
    request: Request,
    parser: MovieParser = Depends(get_movie_parser),
    movie_service: MovieService = Depends(get_movie_service),
):
    try:
        movie_filter = parser.parse_filter(request.query_params)
    except MovieValidationError as e:
        raise _http_error(e)

    try:
        movies, total = await movie_service.list_movies(movie_filter)
    except MovieError as e:
        logger.error(f"Error listing movies: {e.message}")
        raise _http_error(e)

    per_page = movie_filter.get_limit()
    pagination = PaginationData(
        current_page=movie_filter.get_page(),
        per_page=per_page,
        total_items=total,
        total_pages=calculate_total_pages(total, per_page),
    )
    return PaginatedMovieResponse(data=movies, pagination=pagination)


@router.put(
    "/{movie_id}",  # PUT /api/movies/{movie_id}
    response_model=Movie,
    summary="Update Movie",
    description="Update the supplied fields of a movie. Fields left out or empty keep their stored value.",
    responses={404: {"description": "Movie not found"}},
)
async def update_movie(
    movie_id: str,
    request: Request,
    parser: MovieParser = Depends(get_movie_parser),
    movie_service: MovieService = Depends(get_movie_service),
):
    movie_id_int = _parse_movie_id(movie_id)
    form = await request.form()
    try:
        candidate = parser.parse_update(form)
    except MovieValidationError as e:
        raise _http_error(e)

    candidate.id = movie_id_int
    try:
        return await movie_service.update_movie(candidate)
    except MovieError as e:
        logger.warning(f"Error updating movie {movie_id_int}: {e.message}")
        raise _http_error(e)


@router.delete(
    "/{movie_id}",  # DELETE /api/movies/{movie_id}
    response_model=MessageResponse,
    summary="Delete Movie",
    description="Soft-delete a movie. It disappears from every subsequent read.",
    responses={404: {"description": "Movie not found"}},
)
async def delete_movie(
    movie_id: str,
    movie_service: MovieService = Depends(get_movie_service),
):
    movie_id_int = _parse_movie_id(movie_id)
    try:
        await movie_service.delete_movie(movie_id_int)
    except MovieError as e:
        logger.warning(f"Error deleting movie {movie_id_int}: {e.message}")
        raise _http_error(e)
    return MessageResponse(message=MOVIE_DELETED_SUCCESSFULLY)
