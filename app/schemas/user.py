from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from app.schemas.my_base_model import CustomBaseModel


class UserPublic(CustomBaseModel):
    """Account fields safe to return to clients (no password hash)"""

    id: int = 0
    email: str = ""
    username: str = ""
    role: str = ""
    wallet_address: Optional[str] = None


class ValidatorRequestOut(CustomBaseModel):
    """Response model for a validator request"""

    id: int = 0
    user_id: int = 0
    institution_name: str = ""
    institution_id: str = ""
    document_url: Optional[str] = None
    status: str = ""
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None


class ProfileResponse(CustomBaseModel):
    """Response model for the current caller.

    Email logins carry the account and its latest validator request,
    wallet logins only the address.
    """

    subject: str = ""
    role: str = ""
    auth_type: str = ""
    expires_at: int = 0
    user: Optional[UserPublic] = None
    validator_request: Optional[ValidatorRequestOut] = None


class PendingRequestItem(CustomBaseModel):
    request: ValidatorRequestOut
    user: UserPublic


class ValidatorItem(CustomBaseModel):
    user: UserPublic
    institution_name: str = ""
    institution_id: str = ""
    approved_at: Optional[datetime] = None


class ValidatorDecisionRequest(BaseModel):
    """Request model for an admin decision - input validation"""

    approve: bool
    rejection_reason: Optional[str] = None


class ValidatorDecisionResponse(CustomBaseModel):
    message: str = ""
    status: str = ""


class AdminStats(CustomBaseModel):
    pending_requests: int = 0
    total_validators: int = 0
    total_pools: int = 0
    total_certificates: int = 0
    admin_wallets: list[str] = []
    pool_cost_eth: float = 0.0
