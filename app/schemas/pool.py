from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.schemas.my_base_model import CustomBaseModel


class CreatePoolRequest(BaseModel):
    """Request model for pool creation - input validation"""

    name: str = Field(..., min_length=1, description="Pool name")
    description: Optional[str] = Field(None, description="Pool description")
    tx_hash: str = Field(..., min_length=1, description="Pool payment transaction hash")


class PoolOut(CustomBaseModel):
    """Response model for a pool row"""

    id: int = 0
    code: str = ""
    validator_id: int = 0
    name: str = ""
    description: Optional[str] = None
    tx_hash: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


class PoolCreatedResponse(CustomBaseModel):
    message: str = "Pool created successfully"
    pool: PoolOut
    institution_name: str = ""


class PoolDetails(CustomBaseModel):
    """Public view of an active pool, shared by code"""

    id: int = 0
    code: str = ""
    name: str = ""
    description: Optional[str] = None
    validator_name: str = ""
    institution_name: str = ""
    is_active: bool = True
    created_at: Optional[datetime] = None


class MyPoolItem(CustomBaseModel):
    pool: PoolOut
    pending_certificates: int = 0
    minted_certificates: int = 0


class MyPoolsResponse(CustomBaseModel):
    pools: List[MyPoolItem] = []


class PoolToggleResponse(CustomBaseModel):
    message: str = ""
    is_active: bool = False


class PoolInfo(CustomBaseModel):
    """Where and how much to pay before creating a pool"""

    admin_wallets: List[str] = []
    pool_cost_eth: float = 0.0
