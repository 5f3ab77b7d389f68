from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from app.db.base import Base


class User(Base):
    """Model for users table
    Example:
    {
        "id": 1,
        "email": "registrar@uni.edu",
        "password_hash": "$2b$12$...",
        "username": "registrar",
        "role": "validator",
        "wallet_address": "0x8ba1f109551bd432803012645ac136ddd64dba72",
        "created_at": "2024-01-01T12:00:00"
    }
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True)  # stored lowercase
    password_hash = Column(String(255), nullable=False)
    username = Column(String(100), nullable=False)
    role = Column(String(20), nullable=False, default="validator")  # "admin", "validator"
    wallet_address = Column(String(42), nullable=True, index=True)  # lowercase
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
