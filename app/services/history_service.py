import logging
from typing import Dict, List

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from app.exceptions import StorageError
from app.models.history_model import HistoryRecord

logger = logging.getLogger(__name__)


class HistoryStore:
    """Per-user generation history backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        user_id: str,
        file_name: str,
        format: str,
        parse_info: Dict,
        project_info: str,
        uml_instructions: str,
        generated_files: Dict[str, str],
    ) -> str:
        record = HistoryRecord(
            user_id=user_id,
            file_name=file_name,
            format=format,
            parse_info=parse_info,
            project_info=project_info,
            uml_instructions=uml_instructions,
            generated_files=generated_files,
        )
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError as db_error:
            self.db.rollback()
            logger.error("Could not save history for user %s: %s", user_id, db_error)
            raise StorageError("Failed to save history")
        return record.id

    def list_by_user(self, user_id: str) -> List[HistoryRecord]:
        try:
            return (
                self.db.query(HistoryRecord)
                .filter(HistoryRecord.user_id == user_id)
                .order_by(HistoryRecord.created_at.desc())
                .all()
            )
        except SQLAlchemyError as db_error:
            logger.error("Could not fetch history for user %s: %s", user_id, db_error)
            raise StorageError("Failed to fetch history")

    def delete_by_id(self, record_id: str, user_id: str) -> bool:
        """Delete a record owned by ``user_id``. Other users' records count as missing."""
        try:
            record = (
                self.db.query(HistoryRecord)
                .filter(HistoryRecord.id == record_id, HistoryRecord.user_id == user_id)
                .first()
            )
            if record is None:
                return False
            self.db.delete(record)
            self.db.commit()
            return True
        except SQLAlchemyError as db_error:
            self.db.rollback()
            logger.error("Could not delete history %s: %s", record_id, db_error)
            raise StorageError("Failed to delete history")
