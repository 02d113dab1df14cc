from typing import Any, Dict
from pydantic import BaseModel, Field
from datetime import datetime


class HistoryResponse(BaseModel):
    id: str = Field(alias="_id")
    user_id: str = Field(alias="userId")
    file_name: str = Field(alias="fileName")
    format: str
    parse_info: Dict[str, Any] = Field(alias="parseInfo")
    project_info: str = Field(alias="projectInfo")
    uml_instructions: str = Field(alias="umlInstructions")
    generated_files: Dict[str, str] = Field(alias="generatedFiles")
    created_at: datetime = Field(alias="createdAt")

    class Config:
        populate_by_name = True
        from_attributes = True


class MessageResponse(BaseModel):
    message: str
