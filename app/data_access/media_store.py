# Persistence of uploaded movie files
# app/data_access/media_store.py

import itertools
import logging
import os
import shutil
import time
from abc import ABC, abstractmethod
from typing import BinaryIO

from fastapi.concurrency import run_in_threadpool

from app.core.errors import MediaError

logger = logging.getLogger(__name__)

_sequence = itertools.count(1)


class MediaStore(ABC):
    """Durably persists an uploaded byte stream and returns its storage path."""

    @abstractmethod
    async def store(self, stream: BinaryIO, filename_hint: str) -> str:
        """
        Writes the stream under a name the store generates.

        Raises:
            MediaError: If the file cannot be written.
        """


class LocalMediaStore(MediaStore):
    """Stores uploads on the local filesystem as <upload_dir>/<time_ns>-<seq>-<basename>."""

    def __init__(self, base_dir: str):
        self.base_dir = base_dir

    def _unique_path(self, filename_hint: str) -> str:
        # Drop any client-supplied directory components
        basename = os.path.basename(filename_hint or "") or "upload"
        return os.path.join(self.base_dir, f"{time.time_ns()}-{next(_sequence)}-{basename}")

    def _write(self, stream: BinaryIO, path: str) -> None:
        try:
            os.makedirs(self.base_dir, mode=0o750, exist_ok=True)
        except OSError as e:
            raise MediaError(f"failed to create directory: {e}") from e
        try:
            with open(path, "xb") as dst:
                shutil.copyfileobj(stream, dst)
        except OSError as e:
            # A partially written file is left in place
            raise MediaError(f"failed to create file: {e}") from e

    async def store(self, stream: BinaryIO, filename_hint: str) -> str:
        if stream is None:
            raise MediaError("no file stream to store")
        path = self._unique_path(filename_hint)
        logger.debug(f"Writing upload '{filename_hint}' to {path}")
        try:
            await run_in_threadpool(self._write, stream, path)
        except MediaError as e:
            logger.error(f"Failed to store upload '{filename_hint}': {e}", exc_info=True)
            raise
        logger.info(f"Stored upload '{filename_hint}' at {path}")
        return path
