# FastAPI dependencies (database handle, repositories, services)
# app/api/deps.py

import logging
from typing import AsyncGenerator, Optional

from fastapi import Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure, PyMongoError

from app.core.config import settings
from app.core.errors import StorageError
from app.data_access.media_store import LocalMediaStore, MediaStore
from app.data_access.mongo_client import MongoMovieRepository
from app.data_access.repository import MovieRepository
from app.services.movie_parser import MovieParser
from app.services.movie_service import MovieService

logger = logging.getLogger(__name__)


class Database:
    """Holds the Mongo client for the lifetime of the application."""
    def __init__(self):
        self.client: Optional[AsyncIOMotorClient] = None
        self.db: Optional[AsyncIOMotorDatabase] = None


database = Database()


async def initialize_connections():
    """
    Initializes the MongoDB connection and the indexes the movie queries rely on.
    Call this during FastAPI startup using lifespan events.
    """
    logger.info("Initializing external connections...")
    try:
        logger.info(f"Attempting to connect to MongoDB: {settings.MONGODB_URI.get_secret_value()[:15]}...")
        client = AsyncIOMotorClient(settings.MONGODB_URI.get_secret_value(), tz_aware=True)
        # Ping the server to verify connection early
        await client.admin.command("ping")

        # Database named in the URI wins over the configured name
        db = client.get_default_database(default=settings.MONGODB_DB_NAME)
        database.client = client
        database.db = db
        logger.info(f"MongoDB client initialized successfully. Using database: '{db.name}'")

        await MongoMovieRepository(db).ensure_indexes()
    except ConnectionFailure as e:
        logger.error(f"MongoDB connection failed during initialization: {e}", exc_info=True)
        database.client = None
        database.db = None
    except (PyMongoError, StorageError) as e:
        logger.error(f"Unexpected MongoDB error during initialization: {e}", exc_info=True)


async def close_connections():
    """
    Closes the MongoDB connection.
    Call this during FastAPI shutdown using lifespan events.
    """
    logger.info("Closing external connections...")
    if database.client:
        database.client.close()
        logger.info("MongoDB client closed.")
    database.client = None
    database.db = None


# --- Database Dependency ---

async def get_db() -> AsyncGenerator[AsyncIOMotorDatabase, None]:
    """
    FastAPI dependency that yields the application's MongoDB database instance.

    Raises:
        HTTPException 503: If the database instance is not available.
    """
    if database.db is None:
        logger.critical("MongoDB database instance is not available. Check initialization.")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database service not available.",
        )
    # Motor manages connection pooling internally. Yielding the db instance is sufficient.
    yield database.db


# --- Repository / Service Dependencies ---

def get_movie_repository(db: AsyncIOMotorDatabase = Depends(get_db)) -> MovieRepository:
    return MongoMovieRepository(db)


def get_movie_service(repository: MovieRepository = Depends(get_movie_repository)) -> MovieService:
    return MovieService(repository=repository)


def get_movie_parser() -> MovieParser:
    return MovieParser(allowed_extensions=settings.ALLOWED_MOVIE_EXTENSIONS)


def get_media_store() -> MediaStore:
    return LocalMediaStore(base_dir=settings.UPLOAD_DIR)
