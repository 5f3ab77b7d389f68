from enum import Enum
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.dependencies import get_identity
from app.core.identity import Identity
from app.db.session import get_db
from app.schemas.certificate import (
    CertificateDecisionRequest,
    CertificateDecisionResponse,
    CertificateIssuer,
    CertificateOut,
    CertificateSubmitResponse,
    CertificateVerification,
    MyCertificateItem,
    PublicStats,
    SubmitCertificateRequest,
)
from app.services import certificates as certificate_service
from app.services import stats

router = APIRouter()
group_tags: List[str | Enum] = ["Certificates"]


@router.post(
    "/pools/{code}/certificates",
    tags=group_tags,
    response_model=CertificateSubmitResponse,
)
def submit_certificate(
    code: str,
    body: SubmitCertificateRequest,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> CertificateSubmitResponse:
    certificate = certificate_service.submit_certificate(
        db,
        identity,
        pool_code=code,
        recipient_name=body.recipient_name,
        recipient_wallet=body.recipient_wallet,
        certificate_type=body.certificate_type,
        document_hash=body.document_hash,
        metadata_uri=body.metadata_uri,
    )
    return CertificateSubmitResponse(certificate=CertificateOut.from_record(certificate))


@router.get(
    "/pools/{code}/certificates",
    tags=group_tags,
    response_model=List[CertificateOut],
)
def list_pool_certificates(
    code: str,
    status: Optional[str] = Query(default=None, description="Filter by status: pending, rejected, minted"),
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> List[CertificateOut]:
    return [
        CertificateOut.from_record(certificate)
        for certificate in certificate_service.list_pool_certificates(db, identity, code, status)
    ]


@router.post(
    "/certificates/{certificate_id}/decision",
    tags=group_tags,
    response_model=CertificateDecisionResponse,
)
def decide_certificate(
    certificate_id: int,
    body: CertificateDecisionRequest,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> CertificateDecisionResponse:
    certificate = certificate_service.decide_certificate(
        db,
        identity,
        certificate_id,
        approve=body.approve,
        tx_hash=body.tx_hash,
        token_id=body.token_id,
        rejection_reason=body.rejection_reason,
    )
    if body.approve:
        return CertificateDecisionResponse(
            message="Certificate approved and minted",
            status=certificate.status,
            token_id=certificate.token_id,
            tx_hash=certificate.tx_hash,
        )
    return CertificateDecisionResponse(message="Certificate rejected", status=certificate.status)


@router.get(
    "/certificates/my",
    tags=group_tags,
    response_model=List[MyCertificateItem],
)
def my_certificates(
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> List[MyCertificateItem]:
    return [
        MyCertificateItem(
            certificate=CertificateOut.from_record(certificate),
            pool_name=pool.name,
            pool_code=pool.code,
        )
        for certificate, pool in certificate_service.list_my_certificates(db, identity)
    ]


@router.get(
    "/certificates/verify/{document_hash}",
    tags=group_tags,
    response_model=CertificateVerification,
)
def verify_certificate(document_hash: str, db: Session = Depends(get_db)) -> CertificateVerification:
    """Public check that a document hash belongs to a minted certificate."""
    found = certificate_service.find_minted(db, document_hash)
    if found is None:
        return CertificateVerification(
            valid=False, message="Certificate not found or not yet minted"
        )
    certificate, pool, approved = found
    return CertificateVerification(
        valid=True,
        certificate=CertificateOut.from_record(certificate),
        issuer=CertificateIssuer(
            institution_name=approved.institution_name if approved else "",
            institution_id=approved.institution_id if approved else "",
            pool_name=pool.name,
        ),
    )


@router.get("/stats", tags=group_tags, response_model=PublicStats)
def public_stats(db: Session = Depends(get_db)) -> PublicStats:
    return PublicStats(**stats.public_stats(db))
