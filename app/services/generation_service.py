"""Turns an uploaded source file and instructions into a generated document.

Steps run strictly in order: validate, stage the upload, summarize, build
prompts, call the document builder, record history. The staged upload is
removed when the ``staged_upload`` block exits, whichever step failed.
"""

import os
import logging
from typing import List, Optional

from fastapi import UploadFile

from app.config import settings
from app.exceptions import (
    MissingFileError, MissingInstructionsError, StorageError, UnsupportedFormatError
)
from app.services.code_summary_service import summarize
from app.services.doc_builder_service import DocBuilderClient
from app.services.history_service import HistoryStore
from app.services.prompt_service import build_project_info_prompt, build_uml_instructions_prompt
from app.services.upload_service import read_staged_text, staged_upload
from app.types.auth_type import UserContext
from app.types.generate_type import BuildDocumentRequest, GenerationResult, OutputFormat

logger = logging.getLogger(__name__)


def require_single_upload(uploads: Optional[List[UploadFile]]) -> UploadFile:
    uploads = [upload for upload in (uploads or []) if upload is not None and upload.filename]
    if not uploads:
        raise MissingFileError()
    if len(uploads) > 1:
        raise MissingFileError("Only one file can be uploaded per request")
    return uploads[0]


def require_instructions(instructions: Optional[str]) -> str:
    if instructions is None or not instructions.strip():
        raise MissingInstructionsError()
    return instructions


def resolve_format(requested: Optional[str]) -> OutputFormat:
    if requested is None or not requested.strip():
        return OutputFormat(settings.DEFAULT_FORMAT)
    try:
        return OutputFormat(requested.strip().lower())
    except ValueError:
        allowed = ", ".join(fmt.value for fmt in OutputFormat)
        raise UnsupportedFormatError(detail=f"format must be one of: {allowed}")


def _record_history(store: HistoryStore, **fields) -> Optional[str]:
    try:
        return store.create(**fields)
    except StorageError:
        logger.exception("Document generated for user %s but history was not saved", fields["user_id"])
        if settings.HISTORY_WRITE_REQUIRED:
            raise
        return None


def handle_generate(
    user: UserContext,
    uploads: Optional[List[UploadFile]],
    instructions: Optional[str],
    output_format: Optional[str],
    store: HistoryStore,
    doc_builder: DocBuilderClient,
) -> GenerationResult:
    upload = require_single_upload(uploads)
    instructions = require_instructions(instructions)
    fmt = resolve_format(output_format)

    with staged_upload(upload) as staged_path:
        code = read_staged_text(staged_path)

        extension = os.path.splitext(upload.filename)[1].lower()
        parse_info = summarize(code, extension)
        project_info = build_project_info_prompt(code, instructions)
        uml_instructions = build_uml_instructions_prompt(code, instructions)

        payload = BuildDocumentRequest(
            code=code,
            instructions=instructions,
            format=fmt,
            project_info=project_info,
            uml_instructions=uml_instructions,
            abstract=project_info,
        )
        generated_files = doc_builder.build_document(payload)

        history_id = _record_history(
            store,
            user_id=user.id,
            file_name=upload.filename,
            format=fmt.value,
            parse_info=parse_info.as_dict(),
            project_info=project_info,
            uml_instructions=uml_instructions,
            generated_files=generated_files,
        )

    logger.info("Generated %s for user %s from %s", sorted(generated_files), user.id, upload.filename)
    return GenerationResult(files=generated_files, history_id=history_id)
