from enum import Enum
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.dependencies import get_identity
from app.core.identity import Identity
from app.db.session import get_db
from app.schemas.pool import (
    CreatePoolRequest,
    MyPoolItem,
    MyPoolsResponse,
    PoolCreatedResponse,
    PoolDetails,
    PoolInfo,
    PoolOut,
    PoolToggleResponse,
)
from app.services import pools as pool_service

router = APIRouter()
group_tags: List[str | Enum] = ["Pools"]


@router.get("/info", tags=group_tags, response_model=PoolInfo)
def pool_info() -> PoolInfo:
    """Payment details a validator needs before creating a pool."""
    return PoolInfo(
        admin_wallets=sorted(settings.admin_wallets),
        pool_cost_eth=settings.POOL_COST_ETH,
    )


@router.post("", tags=group_tags, response_model=PoolCreatedResponse)
def create_pool(
    body: CreatePoolRequest,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> PoolCreatedResponse:
    pool, approved = pool_service.create_pool(
        db, identity, name=body.name, tx_hash=body.tx_hash, description=body.description
    )
    return PoolCreatedResponse(
        pool=PoolOut.from_record(pool),
        institution_name=approved.institution_name,
    )


@router.get("/my", tags=group_tags, response_model=MyPoolsResponse)
def my_pools(
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> MyPoolsResponse:
    items = pool_service.list_validator_pools(db, identity)
    return MyPoolsResponse(
        pools=[
            MyPoolItem(
                pool=PoolOut.from_record(item["pool"]),
                pending_certificates=item["pending_certificates"],
                minted_certificates=item["minted_certificates"],
            )
            for item in items
        ]
    )


@router.get("/{code}", tags=group_tags, response_model=PoolDetails)
def get_pool(code: str, db: Session = Depends(get_db)) -> PoolDetails:
    """Public lookup of an active pool by its share code (case-insensitive)."""
    pool, validator, approved = pool_service.get_pool_details(db, code)
    return PoolDetails(
        id=pool.id,
        code=pool.code,
        name=pool.name,
        description=pool.description,
        validator_name=validator.username,
        institution_name=approved.institution_name if approved else "",
        is_active=pool.is_active,
        created_at=pool.created_at,
    )


@router.post("/{pool_id}/toggle", tags=group_tags, response_model=PoolToggleResponse)
def toggle_pool(
    pool_id: int,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> PoolToggleResponse:
    pool = pool_service.toggle_pool(db, identity, pool_id)
    return PoolToggleResponse(
        message="Pool activated" if pool.is_active else "Pool deactivated",
        is_active=pool.is_active,
    )
