"""
Validator approval workflow.

A request is created with the account at registration and moves exactly
once from pending to approved or rejected by an admin decision.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.core.errors import BadRequest
from app.core.identity import Identity
from app.models.users import User
from app.models.validator_requests import RequestStatus, ValidatorRequest
from app.services.workflow import guard_decide_validator_request

logger = logging.getLogger(__name__)


def add_request(
    db: Session,
    account: User,
    institution_name: str,
    institution_id: str,
    document_url: Optional[str] = None,
) -> ValidatorRequest:
    """Stage a pending request for `account`; the caller commits."""
    request = ValidatorRequest(
        user_id=account.id,
        institution_name=institution_name.strip(),
        institution_id=institution_id.strip(),
        document_url=document_url,
        status=RequestStatus.PENDING.value,
    )
    db.add(request)
    db.flush()
    return request


def get_request(db: Session, request_id: int) -> Optional[ValidatorRequest]:
    return db.query(ValidatorRequest).filter(ValidatorRequest.id == request_id).first()


def get_request_for_user(db: Session, user_id: int) -> Optional[ValidatorRequest]:
    return (
        db.query(ValidatorRequest)
        .filter(ValidatorRequest.user_id == user_id)
        .order_by(ValidatorRequest.created_at.desc(), ValidatorRequest.id.desc())
        .first()
    )


def get_approved_request(db: Session, user_id: int) -> Optional[ValidatorRequest]:
    return (
        db.query(ValidatorRequest)
        .filter(
            ValidatorRequest.user_id == user_id,
            ValidatorRequest.status == RequestStatus.APPROVED.value,
        )
        .first()
    )


def list_requests_by_status(
    db: Session, status: RequestStatus = RequestStatus.PENDING
) -> List[Tuple[ValidatorRequest, User]]:
    return (
        db.query(ValidatorRequest, User)
        .join(User, User.id == ValidatorRequest.user_id)
        .filter(ValidatorRequest.status == status.value)
        .order_by(ValidatorRequest.created_at.asc(), ValidatorRequest.id.asc())
        .all()
    )


def decide_validator_request(
    db: Session,
    identity: Identity,
    request_id: int,
    approve: bool,
    rejection_reason: Optional[str] = None,
) -> ValidatorRequest:
    """
    Approve or reject a pending validator request.

    The status change is a single conditional UPDATE on the pending row, so
    two admins deciding at the same time cannot both win.

    Raises:
        BadRequest: wallet login, or the request was already decided
        Forbidden: caller is not an admin
        NotFound: no such request
    """
    request = get_request(db, request_id)
    guard_decide_validator_request(identity, request)

    new_status = RequestStatus.APPROVED if approve else RequestStatus.REJECTED
    result = db.execute(
        update(ValidatorRequest)
        .where(
            ValidatorRequest.id == request_id,
            ValidatorRequest.status == RequestStatus.PENDING.value,
        )
        .values(
            status=new_status.value,
            reviewed_by=identity.user_id,
            reviewed_at=datetime.now(timezone.utc),
            rejection_reason=None if approve else rejection_reason,
        )
    )
    if result.rowcount != 1:
        db.rollback()
        raise BadRequest("Validator request already processed")
    db.commit()
    db.refresh(request)

    logger.info(
        "validator request %s %s by admin %s", request_id, new_status.value, identity.subject
    )
    return request
