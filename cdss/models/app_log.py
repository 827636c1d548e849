"""
application error log model.
"""

from datetime import datetime
from sqlalchemy import Column, DateTime, Integer, JSON, String, Text

from cdss.models.base import Base


class AppLog(Base):
    """
    one logged application error.

    attributes:
        id: primary key
        organization_id: tenant the error happened in, if known
        user_id: signed-in user, if known
        log_type: js_error, api_error, network_error or auth_error
        message: error message
        log_metadata: free-form json context (stored in the "metadata" column)
        created_at: when the error was logged (utc)
    """

    __tablename__ = "app_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    organization_id = Column(String, nullable=True)
    user_id = Column(String, nullable=True)
    log_type = Column(String, nullable=False, index=True)
    message = Column(Text, nullable=False)
    # "metadata" is reserved on declarative classes
    log_metadata = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<AppLog(log_type='{self.log_type}', message='{self.message[:40]}')>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "organization_id": self.organization_id,
            "user_id": self.user_id,
            "log_type": self.log_type,
            "message": self.message,
            "metadata": self.log_metadata,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
