from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel


class OutputFormat(str, Enum):
    DOCX = "docx"
    PDF = "pdf"
    PPTX = "pptx"


class ParseSummary(BaseModel):
    functions: Optional[List[str]] = None
    classes: Optional[List[str]] = None
    lines: Optional[int] = None
    error: Optional[str] = None

    @classmethod
    def failed(cls, message: str) -> "ParseSummary":
        return cls(error=message)

    def as_dict(self) -> dict:
        return self.model_dump(exclude_none=True)


class BuildDocumentRequest(BaseModel):
    """Body of POST /build-document on the document builder."""

    code: str
    instructions: str
    format: OutputFormat
    project_info: str
    uml_instructions: str
    # Older builders read the project prompt from `abstract`
    abstract: str


class GenerationResult(BaseModel):
    files: Dict[str, str]
    history_id: Optional[str] = None
