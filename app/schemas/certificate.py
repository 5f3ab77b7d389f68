from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.my_base_model import CustomBaseModel


class SubmitCertificateRequest(BaseModel):
    """Request model for certificate submission - input validation"""

    recipient_name: str = Field(..., min_length=1, description="Recipient full name")
    recipient_wallet: str = Field(..., description="Recipient wallet address")
    certificate_type: str = Field(..., min_length=1, description="e.g. diploma, course")
    document_hash: str = Field(..., min_length=1, description="Hash of the certified document")
    metadata_uri: Optional[str] = Field(None, description="Token metadata location")


class CertificateDecisionRequest(BaseModel):
    """Request model for a mint/reject decision - input validation"""

    approve: bool
    tx_hash: Optional[str] = Field(None, description="Mint transaction hash, required to approve")
    token_id: Optional[int] = Field(None, description="Minted token id, required to approve")
    rejection_reason: Optional[str] = None


class CertificateOut(CustomBaseModel):
    """Response model for a certificate row"""

    id: int = 0
    pool_id: int = 0
    certificator_wallet: str = ""
    recipient_name: str = ""
    recipient_wallet: str = ""
    certificate_type: str = ""
    document_hash: str = ""
    metadata_uri: Optional[str] = None
    status: str = ""
    token_id: Optional[int] = None
    tx_hash: Optional[str] = None
    validated_at: Optional[datetime] = None
    minted_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None


class CertificateSubmitResponse(CustomBaseModel):
    message: str = "Certificate submitted successfully"
    certificate: CertificateOut


class CertificateDecisionResponse(CustomBaseModel):
    message: str = ""
    status: str = ""
    token_id: Optional[int] = None
    tx_hash: Optional[str] = None


class MyCertificateItem(CustomBaseModel):
    certificate: CertificateOut
    pool_name: str = ""
    pool_code: str = ""


class CertificateIssuer(CustomBaseModel):
    institution_name: str = ""
    institution_id: str = ""
    pool_name: str = ""


class CertificateVerification(CustomBaseModel):
    """Public answer to 'was this document certified?'"""

    valid: bool = False
    message: Optional[str] = None
    certificate: Optional[CertificateOut] = None
    issuer: Optional[CertificateIssuer] = None


class PublicStats(CustomBaseModel):
    total_validators: int = 0
    total_pools: int = 0
    total_certificates: int = 0
