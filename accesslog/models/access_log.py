"""Access log model."""

from __future__ import annotations

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String, Text

from accesslog.models.base import Base
from accesslog.utils import utcnow


class AccessLog(Base):
    """Persisted record of one completed HTTP request."""

    __tablename__ = "access_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(String(255), nullable=False, index=True)
    user_id = Column(String(128), nullable=True, index=True)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(Text, nullable=True)
    path = Column(String(2048), nullable=False)
    method = Column(String(16), nullable=False)
    status_code = Column(Integer, nullable=False)
    response_time = Column(Integer, nullable=True)
    referer = Column(String(2048), nullable=True)
    country = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True)
    device = Column(String(50), nullable=True)
    browser = Column(String(50), nullable=True)
    os = Column(String(50), nullable=True)
    # "metadata" is reserved by the declarative base
    metadata_ = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)

    __table_args__ = (
        Index("ix_access_logs_session_created", "session_id", "created_at"),
    )


__all__ = ["AccessLog"]
