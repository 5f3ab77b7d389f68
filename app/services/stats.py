from typing import Dict

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.certificates import Certificate, CertificateStatus
from app.models.pools import Pool
from app.models.validator_requests import RequestStatus, ValidatorRequest


def _count_requests(db: Session, status: RequestStatus) -> int:
    return (
        db.query(func.count(ValidatorRequest.id))
        .filter(ValidatorRequest.status == status.value)
        .scalar()
        or 0
    )


def public_stats(db: Session) -> Dict[str, int]:
    return {
        "total_validators": _count_requests(db, RequestStatus.APPROVED),
        "total_pools": db.query(func.count(Pool.id)).scalar() or 0,
        "total_certificates": (
            db.query(func.count(Certificate.id))
            .filter(Certificate.status == CertificateStatus.MINTED.value)
            .scalar()
            or 0
        ),
    }


def admin_stats(db: Session) -> Dict[str, int]:
    stats = public_stats(db)
    stats["pending_requests"] = _count_requests(db, RequestStatus.PENDING)
    return stats
