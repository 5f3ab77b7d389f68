from pydantic import BaseModel, Field

from app.schemas.my_base_model import CustomBaseModel
from app.schemas.user import UserPublic


class NonceRequest(BaseModel):
    """Request model for nonce generation - input validation"""

    address: str = Field(..., description="Wallet address, 0x followed by 40 hex characters")


class NonceResponse(CustomBaseModel):
    """Response model for nonce generation - output"""

    nonce: str = ""
    message: str = ""  # exact text the wallet must sign


class VerifyRequest(BaseModel):
    """Request model for wallet verification - input validation"""

    address: str = Field(..., description="Wallet address")
    signature: str = Field(..., description="personal_sign signature of the challenge message")


class VerifyResponse(CustomBaseModel):
    """Response model for wallet authentication - output"""

    token: str
    token_type: str = "bearer"
    role: str = ""
    wallet_address: str = ""


class LoginRequest(BaseModel):
    """Request model for email login - input validation"""

    email: str = Field(..., description="Account email")
    password: str = Field(..., description="Account password")


class LoginResponse(CustomBaseModel):
    """Response model for email authentication - output"""

    token: str
    token_type: str = "bearer"
    role: str = ""
    user: UserPublic


class RegisterRequest(BaseModel):
    """Request model for validator registration - input validation"""

    email: str = Field(..., description="Account email")
    password: str = Field(..., min_length=1, description="Account password")
    username: str = Field(..., min_length=1, description="Display name")
    institution_name: str = Field(..., min_length=1, description="Institution name")
    institution_id: str = Field(..., min_length=1, description="Institution identifier")
    document_url: str | None = Field(None, description="Supporting document reference")


class RegisterResponse(CustomBaseModel):
    message: str = "Registration submitted, waiting for admin approval"
    user: UserPublic


class ConnectWalletRequest(BaseModel):
    wallet_address: str = Field(..., description="Wallet address to link to the account")
