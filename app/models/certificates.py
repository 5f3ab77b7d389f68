from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from app.db.base import Base


class CertificateStatus(str, Enum):
    PENDING = "pending"
    REJECTED = "rejected"
    MINTED = "minted"


class Certificate(Base):
    """Model for certificates table
    Example:
    {
        "id": 1,
        "pool_id": 1,
        "certificator_wallet": "0x8ba1f109551bd432803012645ac136ddd64dba72",
        "recipient_name": "John Doe",
        "recipient_wallet": "0xab5801a7d398351b8be11c439e05c5b3259aec9b",
        "certificate_type": "diploma",
        "document_hash": "0x9c22ff5f21f0b81b113e63f7db6da94fedef11b2119b4088b89664fb9a3cb658",
        "metadata_uri": "ipfs://Qm...",
        "status": "minted",
        "token_id": 12,
        "tx_hash": "0x5c50...",
        "validated_at": "2024-01-02T12:00:00",
        "minted_at": "2024-01-02T12:00:00",
        "rejection_reason": null,
        "created_at": "2024-01-01T12:00:00"
    }
    """

    __tablename__ = "certificates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    pool_id = Column(
        Integer, ForeignKey("pools.id", ondelete="CASCADE"), nullable=False, index=True
    )
    certificator_wallet = Column(String(42), nullable=False, index=True)
    recipient_name = Column(String(255), nullable=False)
    recipient_wallet = Column(String(42), nullable=False)
    certificate_type = Column(String(100), nullable=False)
    document_hash = Column(String(66), nullable=False, unique=True)
    metadata_uri = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="pending", index=True)  # "pending", "rejected", "minted"
    token_id = Column(Integer, nullable=True)
    tx_hash = Column(String(66), nullable=True)
    validated_at = Column(DateTime(timezone=True), nullable=True)
    minted_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
