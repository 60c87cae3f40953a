"""
Image upload storage and cleanup.

Uploaded images are written to ``settings.upload_dir`` under a
time-based UUID name.  A stored file belongs to the operation that
triggered the upload: ``discard_on_error`` removes it on every failure
path of that operation, and ``discard_file`` is the best-effort delete
used once a place is gone.  Cleanup problems are logged, never raised.
"""

import logging
import os
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from fastapi import UploadFile

from places_api.config import settings
from places_api.errors import UploadInvalid

logger = logging.getLogger(__name__)

MIME_TYPE_MAP = {
    "image/png": "png",
    "image/jpg": "jpg",
    "image/jpeg": "jpeg",
}


def store_image(upload: UploadFile) -> str:
    """
    Persist an uploaded image and return its path.

    Raises:
        UploadInvalid: unsupported MIME type, empty file, or larger than
            ``settings.max_upload_bytes``
    """
    ext = MIME_TYPE_MAP.get((upload.content_type or "").lower())
    if ext is None:
        raise UploadInvalid("Invalid mime type!")

    limit = settings.max_upload_bytes
    content = upload.file.read(limit + 1)
    if not content:
        raise UploadInvalid("Uploaded image is empty.")
    if len(content) > limit:
        raise UploadInvalid(f"Image too large: maximum {limit} bytes.")

    directory = Path(settings.upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{uuid.uuid1()}.{ext}"
    path.write_bytes(content)

    logger.debug("Stored upload %s (%d bytes)", path, len(content))
    return path.as_posix()


def discard_file(path: Optional[str]) -> None:
    """Delete ``path`` if it exists. Failures are logged and swallowed."""
    if not path:
        return
    try:
        os.remove(path)
    except FileNotFoundError:
        logger.debug("Upload %s already removed", path)
    except OSError as e:
        logger.warning("Could not delete upload %s: %s", path, e)


@contextmanager
def discard_on_error(path: Optional[str]) -> Iterator[None]:
    """Delete ``path`` if the block raises, then re-raise the original error."""
    try:
        yield
    except Exception:
        discard_file(path)
        raise
