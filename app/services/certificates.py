"""
Certificate submission and minting decisions.

Certificators (wallet logins) submit into an active pool; the validator who
owns the pool mints or rejects each one exactly once. Document hashes are
unique for all time, whatever the certificate's status.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import BadRequest, Forbidden, NotFound
from app.core.identity import Identity
from app.core.wallet_auth import normalize_address
from app.models.certificates import Certificate, CertificateStatus
from app.models.pools import Pool
from app.models.validator_requests import ValidatorRequest
from app.services.pools import get_pool, get_pool_by_code
from app.services.validator_requests import get_approved_request
from app.services.workflow import (
    guard_decide_certificate,
    guard_submit_certificate,
    require_wallet,
)

logger = logging.getLogger(__name__)


def normalize_hash(document_hash: str) -> str:
    return document_hash.strip() if document_hash else ""


def get_certificate(db: Session, certificate_id: int) -> Optional[Certificate]:
    return db.query(Certificate).filter(Certificate.id == certificate_id).first()


def hash_in_use(db: Session, document_hash: str) -> bool:
    return (
        db.query(Certificate.id)
        .filter(Certificate.document_hash == normalize_hash(document_hash))
        .first()
        is not None
    )


def submit_certificate(
    db: Session,
    identity: Identity,
    pool_code: str,
    recipient_name: str,
    recipient_wallet: str,
    certificate_type: str,
    document_hash: str,
    metadata_uri: Optional[str] = None,
) -> Certificate:
    """
    Submit a pending certificate into an active pool.

    Raises:
        BadRequest: email login, pool missing or inactive, hash already used
        IntegrityError: a constraint failure other than the document hash
    """
    require_wallet(identity)
    document_hash = normalize_hash(document_hash)
    if not document_hash:
        raise BadRequest("document_hash is required")

    pool = get_pool_by_code(db, pool_code)
    guard_submit_certificate(identity, pool, hash_in_use(db, document_hash))

    certificate = Certificate(
        pool_id=pool.id,
        certificator_wallet=identity.wallet_address,
        recipient_name=recipient_name.strip(),
        recipient_wallet=normalize_address(recipient_wallet),
        certificate_type=certificate_type.strip(),
        document_hash=document_hash,
        metadata_uri=metadata_uri,
        status=CertificateStatus.PENDING.value,
    )
    db.add(certificate)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if not hash_in_use(db, document_hash):
            raise
        # unique document_hash, concurrent submission won
        raise BadRequest("Certificate already submitted")
    db.refresh(certificate)

    logger.info(
        "certificate %s submitted to pool %s by %s",
        certificate.id,
        pool.code,
        identity.wallet_address,
    )
    return certificate


def decide_certificate(
    db: Session,
    identity: Identity,
    certificate_id: int,
    approve: bool,
    tx_hash: Optional[str] = None,
    token_id: Optional[int] = None,
    rejection_reason: Optional[str] = None,
) -> Certificate:
    """
    Mint or reject a pending certificate.

    Approval records the mint transaction and token id; both are required.
    The transition is one conditional UPDATE on the pending row.

    Raises:
        BadRequest: wallet login, already decided, or missing mint data
        Forbidden: caller does not own the certificate's pool
        NotFound: no such certificate
    """
    certificate = get_certificate(db, certificate_id)
    pool = get_pool(db, certificate.pool_id) if certificate else None
    guard_decide_certificate(identity, certificate, pool)

    now = datetime.now(timezone.utc)
    if approve:
        if not tx_hash:
            raise BadRequest("tx_hash required for approval")
        if token_id is None:
            raise BadRequest("token_id required for approval")
        values = {
            "status": CertificateStatus.MINTED.value,
            "tx_hash": tx_hash,
            "token_id": token_id,
            "validated_at": now,
            "minted_at": now,
        }
    else:
        values = {
            "status": CertificateStatus.REJECTED.value,
            "rejection_reason": rejection_reason,
            "validated_at": now,
        }

    result = db.execute(
        update(Certificate)
        .where(
            Certificate.id == certificate_id,
            Certificate.status == CertificateStatus.PENDING.value,
        )
        .values(**values)
    )
    if result.rowcount != 1:
        db.rollback()
        raise BadRequest("Certificate already processed")
    db.commit()
    db.refresh(certificate)

    logger.info("certificate %s %s in pool %s", certificate_id, values["status"], pool.code)
    return certificate


def list_pool_certificates(
    db: Session, identity: Identity, pool_code: str, status: Optional[str] = None
) -> List[Certificate]:
    """Certificates of a pool. Email callers must own the pool or be admin."""
    pool = get_pool_by_code(db, pool_code)
    if pool is None:
        raise NotFound("Pool not found")
    if identity.is_email and pool.validator_id != identity.user_id and not identity.is_admin:
        raise Forbidden("Only the pool owner can list its certificates")

    query = db.query(Certificate).filter(Certificate.pool_id == pool.id)
    if status:
        query = query.filter(Certificate.status == status)
    return query.order_by(Certificate.created_at.desc(), Certificate.id.desc()).all()


def list_my_certificates(db: Session, identity: Identity) -> List[Tuple[Certificate, Pool]]:
    require_wallet(identity)
    return (
        db.query(Certificate, Pool)
        .join(Pool, Pool.id == Certificate.pool_id)
        .filter(Certificate.certificator_wallet == identity.wallet_address)
        .order_by(Certificate.created_at.desc(), Certificate.id.desc())
        .all()
    )


def find_minted(
    db: Session, document_hash: str
) -> Optional[Tuple[Certificate, Pool, Optional[ValidatorRequest]]]:
    """Public verification: the minted certificate for a hash with its issuer."""
    certificate = (
        db.query(Certificate)
        .filter(
            Certificate.document_hash == normalize_hash(document_hash),
            Certificate.status == CertificateStatus.MINTED.value,
        )
        .first()
    )
    if certificate is None:
        return None
    pool = get_pool(db, certificate.pool_id)
    return certificate, pool, get_approved_request(db, pool.validator_id)
