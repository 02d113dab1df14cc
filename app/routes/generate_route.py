import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.db import get_db
from app.exceptions import AppError, IntegrationError
from app.services.auth_service import get_current_user
from app.services.doc_builder_service import DocBuilderClient, get_doc_builder
from app.services.generation_service import handle_generate
from app.services.history_service import HistoryStore
from app.types.auth_type import UserContext

logger = logging.getLogger(__name__)

router = APIRouter(tags=["generate"])


# Plain `def` so the long document builder call runs in the threadpool
@router.post("/generate")
def generate(
    input_files: Optional[List[UploadFile]] = File(None, alias="inputFile"),
    instructions: Optional[str] = Form(None),
    output_format: Optional[str] = Form(None, alias="format"),
    db: Session = Depends(get_db),
    doc_builder: DocBuilderClient = Depends(get_doc_builder),
    current_user: UserContext = Depends(get_current_user),
):
    try:
        result = handle_generate(
            current_user,
            input_files,
            instructions,
            output_format,
            store=HistoryStore(db),
            doc_builder=doc_builder,
        )
    except AppError:
        raise
    except Exception:
        logger.exception("Error in /generate")
        raise IntegrationError()

    headers = {"X-History-Id": result.history_id} if result.history_id else None
    return JSONResponse(content=result.files, headers=headers)
