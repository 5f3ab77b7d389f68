from enum import Enum
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.dependencies import get_identity
from app.core.identity import Identity
from app.db.session import get_db
from app.models.validator_requests import RequestStatus
from app.schemas.user import (
    AdminStats,
    PendingRequestItem,
    UserPublic,
    ValidatorDecisionRequest,
    ValidatorDecisionResponse,
    ValidatorItem,
    ValidatorRequestOut,
)
from app.services import stats
from app.services.validator_requests import decide_validator_request, list_requests_by_status
from app.services.workflow import require_admin

router = APIRouter()
group_tags: List[str | Enum] = ["Admin"]


@router.get(
    "/validator-requests",
    tags=group_tags,
    response_model=List[PendingRequestItem],
)
def list_validator_requests(
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> List[PendingRequestItem]:
    """Pending validator requests, oldest first."""
    require_admin(identity)
    return [
        PendingRequestItem(
            request=ValidatorRequestOut.from_record(request),
            user=UserPublic.from_record(user),
        )
        for request, user in list_requests_by_status(db, RequestStatus.PENDING)
    ]


@router.post(
    "/validator-requests/{request_id}/decision",
    tags=group_tags,
    response_model=ValidatorDecisionResponse,
)
def decide_request(
    request_id: int,
    body: ValidatorDecisionRequest,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> ValidatorDecisionResponse:
    request = decide_validator_request(
        db, identity, request_id, body.approve, body.rejection_reason
    )
    return ValidatorDecisionResponse(
        message=f"Validator request {request.status}", status=request.status
    )


@router.get(
    "/validators",
    tags=group_tags,
    response_model=List[ValidatorItem],
)
def list_validators(
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> List[ValidatorItem]:
    require_admin(identity)
    return [
        ValidatorItem(
            user=UserPublic.from_record(user),
            institution_name=request.institution_name,
            institution_id=request.institution_id,
            approved_at=request.reviewed_at,
        )
        for request, user in list_requests_by_status(db, RequestStatus.APPROVED)
    ]


@router.get(
    "/stats",
    tags=group_tags,
    response_model=AdminStats,
)
def admin_stats(
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> AdminStats:
    require_admin(identity)
    return AdminStats(
        **stats.admin_stats(db),
        admin_wallets=sorted(settings.admin_wallets),
        pool_cost_eth=settings.POOL_COST_ETH,
    )
