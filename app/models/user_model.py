import uuid
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from app.db import Base, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    history = relationship("HistoryRecord", back_populates="user", cascade="all, delete-orphan")
