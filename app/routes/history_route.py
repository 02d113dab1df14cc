import re
import uuid
import logging
from urllib.parse import quote
from typing import List
from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from starlette.background import BackgroundTask

from app.db import get_db
from app.exceptions import IntegrationError, NotFoundError, ValidationError
from app.services.auth_service import get_current_user
from app.services.doc_builder_service import DocBuilderClient, get_doc_builder
from app.services.history_service import HistoryStore
from app.types.auth_type import UserContext
from app.types.history_type import HistoryResponse, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["history"])

DOWNLOAD_CHUNK_SIZE = 64 * 1024


@router.get("/history", response_model=List[HistoryResponse])
def get_history(
    db: Session = Depends(get_db),
    current_user: UserContext = Depends(get_current_user)
):
    records = HistoryStore(db).list_by_user(current_user.id)
    return [HistoryResponse.model_validate(record) for record in records]


@router.delete("/history/{history_id}", response_model=MessageResponse)
def delete_history(
    history_id: str,
    db: Session = Depends(get_db),
    current_user: UserContext = Depends(get_current_user)
):
    try:
        uuid.UUID(history_id)
    except ValueError:
        raise ValidationError("Invalid history ID")

    if not HistoryStore(db).delete_by_id(history_id, current_user.id):
        raise NotFoundError("History item not found")
    return MessageResponse(message="History item deleted")


# Builders may report formats beyond docx/pdf/pptx, so any plain path segment is accepted
FILETYPE_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def _check_download_target(filetype: str, filename: str):
    if not FILETYPE_PATTERN.match(filetype):
        raise ValidationError("Invalid file type")
    if not filename or ".." in filename or "/" in filename or "\\" in filename:
        raise ValidationError("Invalid file name")


def content_disposition(filename: str) -> str:
    """RFC 6266 attachment header: ASCII fallback plus the UTF-8 name."""
    fallback = "".join(
        char if 32 <= ord(char) < 127 and char not in '"\\' else "_" for char in filename
    )
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


@router.get("/download/{filetype}/{filename}")
def download_file(
    filetype: str,
    filename: str,
    doc_builder: DocBuilderClient = Depends(get_doc_builder),
    current_user: UserContext = Depends(get_current_user)
):
    _check_download_target(filetype, filename)
    upstream = doc_builder.open_download(filetype, filename)

    try:
        headers = {"Content-Disposition": content_disposition(filename)}
        if upstream.headers.get("content-length"):
            headers["Content-Length"] = upstream.headers["content-length"]

        return StreamingResponse(
            upstream.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE),
            media_type=upstream.headers.get("content-type", "application/octet-stream"),
            headers=headers,
            background=BackgroundTask(upstream.close),
        )
    except Exception:
        upstream.close()
        logger.exception("Error in /download for %s", filename)
        raise IntegrationError("Could not download file.")
