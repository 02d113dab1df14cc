import os
import uuid
import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import UploadFile

from app.config import settings
from app.exceptions import FileReadError, PayloadTooLargeError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def staged_name(original_filename: str) -> str:
    extension = os.path.splitext(original_filename or "")[1].lower()
    return f"{uuid.uuid4().hex}{extension}"


def _copy_upload(upload: UploadFile, path: str, limit: int):
    written = 0
    with open(path, "wb") as out:
        while True:
            chunk = upload.file.read(CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if written > limit:
                raise PayloadTooLargeError(detail=f"Limit is {limit} bytes")
            out.write(chunk)


def _remove(path: str):
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as error:
        logger.warning("Could not remove staged upload %s: %s", os.path.basename(path), error)


@contextmanager
def staged_upload(upload: UploadFile) -> Iterator[str]:
    """Copy an upload into the uploads area and remove it when the block exits.

    Each staged copy gets a fresh uuid-based name, so concurrent requests never
    touch each other's files. Removal happens on every exit path and a failed
    removal is only logged.
    """
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    path = os.path.join(settings.UPLOAD_DIR, staged_name(upload.filename))
    try:
        _copy_upload(upload, path, settings.MAX_UPLOAD_BYTES)
        logger.debug("Staged upload %s as %s", upload.filename, os.path.basename(path))
        yield path
    finally:
        _remove(path)


def read_staged_text(path: str) -> str:
    try:
        with open(path, "rb") as staged:
            data = staged.read()
    except OSError as error:
        logger.error("Could not read staged upload %s: %s", os.path.basename(path), error)
        raise FileReadError()

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        raise FileReadError(detail="Uploaded file must be UTF-8 encoded text")
