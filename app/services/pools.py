"""
Pools: validator-owned issuance channels addressed by a short code.

Codes are 6 characters from an alphabet without look-alike symbols
(no I, O, 0, 1). A fresh code is drawn until one is unused, up to
POOL_CODE_MAX_ATTEMPTS draws. An insert that loses the code to a concurrent
request draws again, within the same cap.
"""

import logging
import secrets
from typing import List, Optional, Tuple

from sqlalchemy import func, not_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import BadRequest, Internal, NotFound
from app.core.identity import Identity
from app.models.certificates import Certificate, CertificateStatus
from app.models.pools import Pool
from app.models.users import User
from app.models.validator_requests import ValidatorRequest
from app.services.accounts import get_account
from app.services.validator_requests import get_approved_request
from app.services.workflow import guard_create_pool, guard_toggle_pool, require_email

logger = logging.getLogger(__name__)

POOL_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
POOL_CODE_LENGTH = 6


def generate_pool_code() -> str:
    return "".join(secrets.choice(POOL_CODE_ALPHABET) for _ in range(POOL_CODE_LENGTH))


def normalize_code(code: str) -> str:
    return code.strip().upper() if code else ""


def code_exists(db: Session, code: str) -> bool:
    return db.query(Pool.id).filter(Pool.code == code).first() is not None


def unique_pool_code(db: Session, max_attempts: Optional[int] = None) -> str:
    attempts = max_attempts or settings.POOL_CODE_MAX_ATTEMPTS
    for _ in range(attempts):
        code = generate_pool_code()
        if not code_exists(db, code):
            return code
    logger.warning("no unused pool code after %d attempts", attempts)
    raise Internal("Could not allocate a pool code")


def get_pool(db: Session, pool_id: int) -> Optional[Pool]:
    return db.query(Pool).filter(Pool.id == pool_id).first()


def get_pool_by_code(db: Session, code: str, active_only: bool = False) -> Optional[Pool]:
    query = db.query(Pool).filter(Pool.code == normalize_code(code))
    if active_only:
        query = query.filter(Pool.is_active.is_(True))
    return query.first()


def create_pool(
    db: Session,
    identity: Identity,
    name: str,
    tx_hash: str,
    description: Optional[str] = None,
) -> Tuple[Pool, ValidatorRequest]:
    """
    Create a pool for an approved validator with a linked wallet.

    Raises:
        BadRequest: wallet login, missing name, or no linked wallet
        Forbidden: no approved validator request
        Internal: no free pool code could be drawn
    """
    require_email(identity)
    account = get_account(db, identity.user_id)
    approved = get_approved_request(db, identity.user_id) if account else None
    guard_create_pool(identity, approved, account)
    if not name or not name.strip():
        raise BadRequest("Pool name is required")

    validator_id = account.id
    attempts = settings.POOL_CODE_MAX_ATTEMPTS
    for _ in range(attempts):
        code = unique_pool_code(db)
        pool = Pool(
            code=code,
            validator_id=validator_id,
            name=name.strip(),
            description=description,
            tx_hash=tx_hash,
            is_active=True,
        )
        db.add(pool)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            if not code_exists(db, code):
                raise
            # another request took the code between the check and the insert
            logger.warning("pool code %s taken concurrently, drawing again", code)
            continue
        db.refresh(pool)
        logger.info("pool %s created by validator %s", pool.code, validator_id)
        return pool, approved

    logger.warning("pool insert lost the code race %d times", attempts)
    raise Internal("Could not allocate a pool code")


def toggle_pool(db: Session, identity: Identity, pool_id: int) -> Pool:
    """Flip activation in the database, so concurrent toggles each take effect."""
    pool = get_pool(db, pool_id)
    guard_toggle_pool(identity, pool)
    db.execute(update(Pool).where(Pool.id == pool_id).values(is_active=not_(Pool.is_active)))
    db.commit()
    db.refresh(pool)
    logger.info("pool %s active=%s", pool.code, pool.is_active)
    return pool


def list_validator_pools(db: Session, identity: Identity) -> List[dict]:
    """Own pools, newest first, with pending and minted certificate counts."""
    require_email(identity)
    pools = (
        db.query(Pool)
        .filter(Pool.validator_id == identity.user_id)
        .order_by(Pool.created_at.desc(), Pool.id.desc())
        .all()
    )
    results: List[dict] = []
    for pool in pools:
        counts = dict(
            db.query(Certificate.status, func.count(Certificate.id))
            .filter(Certificate.pool_id == pool.id)
            .group_by(Certificate.status)
            .all()
        )
        results.append(
            {
                "pool": pool,
                "pending_certificates": counts.get(CertificateStatus.PENDING.value, 0),
                "minted_certificates": counts.get(CertificateStatus.MINTED.value, 0),
            }
        )
    return results


def get_pool_details(db: Session, code: str) -> Tuple[Pool, User, Optional[ValidatorRequest]]:
    """Active pool by code with its validator and institution."""
    pool = get_pool_by_code(db, code, active_only=True)
    if pool is None:
        raise NotFound("Pool not found")
    validator = get_account(db, pool.validator_id)
    if validator is None:
        raise NotFound("Pool not found")
    return pool, validator, get_approved_request(db, pool.validator_id)
