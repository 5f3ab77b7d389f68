from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from app.db.base import Base


class Pool(Base):
    """Model for pools table
    Example:
    {
        "id": 1,
        "code": "K7QX2M",
        "validator_id": 2,
        "name": "Class of 2024",
        "description": "Graduation diplomas",
        "tx_hash": "0x5c50...",
        "is_active": true,
        "created_at": "2024-01-01T12:00:00"
    }
    """

    __tablename__ = "pools"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(20), nullable=False, unique=True)
    validator_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    tx_hash = Column(String(66), nullable=True)  # pool payment transaction
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
