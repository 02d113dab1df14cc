import uuid
from sqlalchemy import Column, String, Text, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship

from app.db import Base, utcnow


class HistoryRecord(Base):
    __tablename__ = "history"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    file_name = Column(String, nullable=False)
    format = Column(String, nullable=False)
    parse_info = Column(JSON, nullable=False, default=dict)  # {functions, classes, lines} or {error}
    project_info = Column(Text, nullable=False)
    uml_instructions = Column(Text, nullable=False)
    generated_files = Column(JSON, nullable=False, default=dict)  # format -> generated filename
    created_at = Column(DateTime, nullable=False, index=True, default=utcnow)

    user = relationship("User", back_populates="history")
