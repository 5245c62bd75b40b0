"""Media storage for report attachments.

The ingestion service only needs a stable reference for the uploaded
file. ``MediaStore`` is that boundary; ``LocalMediaStore`` keeps files
on disk and serves them from the application's static media mount.
"""

import uuid
from pathlib import Path
from typing import Protocol

from fastapi import UploadFile
from loguru import logger
from starlette.concurrency import run_in_threadpool

from noisewatch.core.exceptions import ValidationException

CHUNK_SIZE = 1024 * 1024  # 1MB
MAX_MEDIA_BYTES = 50 * 1024 * 1024  # 50MB


class MediaStore(Protocol):
    """Stores an uploaded file and returns a URL that references it."""

    async def save(self, upload: UploadFile) -> str:
        ...

    async def delete(self, url: str) -> None:
        ...


class LocalMediaStore:
    """Writes uploads to a local directory.

    Files get a generated name so client-supplied names can neither
    collide nor escape the directory.

    Args:
        directory: Directory the files are written to.
        url_prefix: Public URL path under which the directory is served.
        max_bytes: Largest accepted upload.
    """

    def __init__(self, directory: Path, url_prefix: str, max_bytes: int = MAX_MEDIA_BYTES) -> None:
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")
        self.max_bytes = max_bytes

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    async def save(self, upload: UploadFile) -> str:
        """Stream an upload to disk and return its public URL.

        Args:
            upload: Uploaded media part.

        Returns:
            URL path of the stored file.

        Raises:
            ValidationException: If the upload is larger than ``max_bytes``.
                Nothing is left on disk in that case.
        """
        suffix = Path(upload.filename).suffix.lower() if upload.filename else ""
        filename = f"{uuid.uuid4()}{suffix}"
        path = self.directory / filename
        size = 0

        self.ensure_directory()
        try:
            with open(path, "wb") as f:
                while chunk := await upload.read(CHUNK_SIZE):
                    size += len(chunk)
                    if size > self.max_bytes:
                        raise ValidationException(
                            f"Media file exceeds the {self.max_bytes} byte limit."
                        )
                    await run_in_threadpool(f.write, chunk)
        except Exception:
            path.unlink(missing_ok=True)
            raise

        logger.debug("Stored media {} ({} bytes)", filename, size)
        return f"{self.url_prefix}/{filename}"

    async def delete(self, url: str) -> None:
        """Remove a previously saved file; unknown URLs are ignored."""
        if not url.startswith(f"{self.url_prefix}/"):
            return
        path = self.directory / url[len(self.url_prefix) + 1:]
        if path.parent != self.directory:
            return
        await run_in_threadpool(path.unlink, missing_ok=True)
        logger.debug("Removed media {}", path.name)
