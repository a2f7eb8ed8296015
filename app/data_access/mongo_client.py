# MongoDB connection and repository logic
# app/data_access/mongo_client.py

import logging
from typing import Any, Dict, List, Tuple

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from app.core.errors import MovieNotFoundError, MovieValidationError, StorageError
from app.data_access.repository import MovieRepository
from app.models.movie import Movie, MovieCreate, MovieFilter, MovieUpdate
from app.utils.helpers import calculate_skip, contains_pattern, utc_now

logger = logging.getLogger(__name__)

MOVIES_COLLECTION = "movies"
COUNTERS_COLLECTION = "counters"

# Live records only; matches documents where deleted_at is null or missing
NOT_DELETED: Dict[str, Any] = {"deleted_at": None}


def build_movie_query(movie_filter: MovieFilter) -> Dict[str, Any]:
    """
    Translates a MovieFilter into a MongoDB query.

    Scalar filters become case-insensitive substring matches. Each list filter
    becomes an $or group over its delimited field; the groups are AND-ed with
    each other and with the scalar filters.
    """
    query: Dict[str, Any] = dict(NOT_DELETED)
    if movie_filter.title:
        query["title"] = contains_pattern(movie_filter.title)
    if movie_filter.description:
        query["description"] = contains_pattern(movie_filter.description)

    groups: List[Dict[str, Any]] = []
    if movie_filter.genres:
        groups.append({"$or": [{"genres": contains_pattern(g)} for g in movie_filter.genres]})
    if movie_filter.artists:
        groups.append({"$or": [{"artists": contains_pattern(a)} for a in movie_filter.artists]})
    if groups:
        query["$and"] = groups
    return query


# --- Base Repository ---
class BaseRepository:
    """Common repository logic."""
    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str):
        if db is None:
            logger.critical(f"Database not available for collection {collection_name}")
            raise StorageError("database connection not available")
        self.db = db
        self.collection: AsyncIOMotorCollection = db[collection_name]
        logger.debug(f"Initialized repository for collection: {collection_name}")


# --- Movie Repository ---
class MongoMovieRepository(BaseRepository, MovieRepository):
    def __init__(self, db: AsyncIOMotorDatabase):
        super().__init__(db, collection_name=MOVIES_COLLECTION)
        self.counters: AsyncIOMotorCollection = db[COUNTERS_COLLECTION]

    @staticmethod
    def _to_movie(doc: Dict[str, Any]) -> Movie:
        doc = dict(doc)
        doc["id"] = doc.pop("_id")
        return Movie.model_validate(doc)

    async def ensure_indexes(self) -> None:
        """Creates the indexes used by list queries. Safe to call on every startup."""
        try:
            await self.collection.create_index([("created_at", DESCENDING)])
            await self.collection.create_index("deleted_at")
        except PyMongoError as e:
            logger.error(f"DB error creating movie indexes: {e}", exc_info=True)
            raise StorageError(f"failed to create indexes: {e}") from e

    async def _next_id(self) -> int:
        """Allocates the next integer movie ID from the counters collection."""
        counter = await self.counters.find_one_and_update(
            {"_id": MOVIES_COLLECTION},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return counter["seq"]

    async def create(self, movie: MovieCreate) -> Movie:
        try:
            doc = movie.model_dump()
            doc["_id"] = await self._next_id()
            doc["deleted_at"] = None
            await self.collection.insert_one(doc)
        except PyMongoError as e:
            logger.error(f"DB error creating movie '{movie.title}': {e}", exc_info=True)
            raise StorageError(f"failed to create movie: {e}") from e

        logger.info(f"Movie created: ID {doc['_id']}, title '{movie.title}'")
        return self._to_movie(doc)

    async def list(self, movie_filter: MovieFilter) -> Tuple[List[Movie], int]:
        query = build_movie_query(movie_filter)

        # The count runs first and on its own; a failure here skips the page fetch
        try:
            total = await self.collection.count_documents(query)
        except PyMongoError as e:
            logger.error(f"DB error counting movies with filters {query}: {e}", exc_info=True)
            raise StorageError(f"failed to get total movies: {e}") from e

        page = movie_filter.get_page()
        limit = movie_filter.get_limit()
        skip = calculate_skip(page, limit)
        if skip and skip >= total:
            # Past the last page; also keeps offsets wider than 64 bits out of the query
            logger.debug(f"Page {page} (limit {limit}) is past the {total} matching movies")
            return [], total

        try:
            cursor = (
                self.collection.find(query)
                .sort([("created_at", DESCENDING), ("_id", DESCENDING)])
                .skip(skip)
                .limit(limit)
            )
            docs = await cursor.to_list(length=limit)
        except PyMongoError as e:
            logger.error(f"DB error finding movies with filters {query}: {e}", exc_info=True)
            raise StorageError(f"failed to get movies: {e}") from e

        logger.debug(f"Fetched {len(docs)} movies (page {page}, limit {limit}, total {total}) with query: {query}")
        return [self._to_movie(doc) for doc in docs], total

    async def update(self, movie: MovieUpdate) -> Movie:
        if not movie.id:
            raise MovieValidationError("movie ID is required")

        changes = movie.changes()
        live_movie = {"_id": movie.id, **NOT_DELETED}
        if changes:
            try:
                result = await self.collection.update_one(live_movie, {"$set": changes})
            except PyMongoError as e:
                logger.error(f"DB error updating movie {movie.id}: {e}", exc_info=True)
                raise StorageError(f"failed to update movie: {e}") from e

            if result.matched_count == 0:
                logger.warning(f"Update failed: movie ID {movie.id} not found.")
                raise MovieNotFoundError(movie.id)

        try:
            doc = await self.collection.find_one(live_movie)
        except PyMongoError as e:
            logger.error(f"DB error re-reading movie {movie.id}: {e}", exc_info=True)
            raise StorageError(f"failed to get updated movie: {e}") from e

        if doc is None:
            logger.warning(f"Update failed: movie ID {movie.id} not found.")
            raise MovieNotFoundError(movie.id)

        logger.info(f"Movie updated: ID {movie.id}, fields {sorted(changes)}")
        return self._to_movie(doc)

    async def delete(self, movie_id: int) -> None:
        try:
            result = await self.collection.update_one(
                {"_id": movie_id, **NOT_DELETED},
                {"$set": {"deleted_at": utc_now()}},
            )
        except PyMongoError as e:
            logger.error(f"DB error deleting movie {movie_id}: {e}", exc_info=True)
            raise StorageError(f"failed to delete movie: {e}") from e

        if result.matched_count == 0:
            logger.warning(f"Delete failed: movie ID {movie_id} not found.")
            raise MovieNotFoundError(movie_id)

        logger.info(f"Movie soft-deleted: ID {movie_id}")
