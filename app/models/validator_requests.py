from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from app.db.base import Base


class RequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ValidatorRequest(Base):
    """Model for validator_requests table
    One per registered account, decided once by an admin.
    Example:
    {
        "id": 1,
        "user_id": 2,
        "institution_name": "Test University",
        "institution_id": "INST-001",
        "document_url": "ipfs://Qm...",
        "status": "pending",
        "reviewed_by": null,
        "reviewed_at": null,
        "rejection_reason": null,
        "created_at": "2024-01-01T12:00:00"
    }
    """

    __tablename__ = "validator_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    institution_name = Column(String(255), nullable=False)
    institution_id = Column(String(100), nullable=False)
    document_url = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="pending", index=True)  # "pending", "approved", "rejected"
    reviewed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
