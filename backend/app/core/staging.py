"""
Staging directory management for uploaded documents
"""
import itertools
import os
import time
from contextlib import asynccontextmanager, contextmanager
from pathlib import Path
from typing import AsyncIterator, Iterator, Union

from starlette.concurrency import run_in_threadpool

from app.core.exceptions import StorageError
from app.models.entities import UploadedDocument
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Disambiguates uploads landing in the same nanosecond
_sequence = itertools.count()


class TemporaryFileManager:
    """
    Owns the lifecycle of staged uploads.

    Each upload gets its own path under ``staging_dir``; ``release`` deletes
    it and only ever logs on failure. Use ``staged()``, or ``staged_async()``
    from a coroutine, so release happens exactly once whatever the caller
    does with the file.
    """

    def __init__(self, staging_dir: Union[str, Path]):
        self.staging_dir = Path(staging_dir)

    def _unique_path(self, filename: str) -> Path:
        token = f"{time.time_ns()}-{next(_sequence)}"
        return self.staging_dir / f"{token}-{filename}"

    def stage(self, content: bytes, filename: str, content_type: str) -> UploadedDocument:
        """Write ``content`` to a fresh path in the staging directory"""
        try:
            self.staging_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(
                f"Could not create staging directory: {e}",
                operation="create_staging_dir",
                details={"staging_dir": str(self.staging_dir)}
            ) from e

        path = self._unique_path(filename)
        try:
            # "xb" refuses to overwrite, so a path is never shared
            with open(path, "xb") as staged_file:
                staged_file.write(content)
        except OSError as e:
            self.release(path)
            raise StorageError(
                f"Could not stage upload: {e}",
                operation="stage",
                details={"path": str(path)}
            ) from e

        logger.debug(
            "upload_staged",
            staged_path=str(path),
            original_filename=filename,
            file_size=len(content)
        )

        return UploadedDocument(
            original_name=filename,
            staged_path=path,
            content_type=content_type,
            size=len(content)
        )

    def release(self, path: Union[str, Path]) -> None:
        """Delete a staged file. Never raises."""
        try:
            os.remove(path)
            logger.debug("staged_file_released", staged_path=str(path))
        except FileNotFoundError:
            logger.warning("staged_file_already_removed", staged_path=str(path))
        except OSError as e:
            logger.warning(
                "staged_file_release_failed",
                staged_path=str(path),
                error=str(e),
                error_type=type(e).__name__
            )

    @contextmanager
    def staged(self, content: bytes, filename: str, content_type: str) -> Iterator[UploadedDocument]:
        """Stage an upload for the duration of the block, then release it"""
        document = self.stage(content, filename, content_type)
        try:
            yield document
        finally:
            self.release(document.staged_path)

    @asynccontextmanager
    async def staged_async(self, content: bytes, filename: str, content_type: str) -> AsyncIterator[UploadedDocument]:
        """``staged()`` for coroutines; disk work runs in the threadpool"""
        document = await run_in_threadpool(self.stage, content, filename, content_type)
        try:
            yield document
        finally:
            await run_in_threadpool(self.release, document.staged_path)
