from fastapi import APIRouter

from app.core.config import settings
from app.schemas.my_base_model import CustomBaseModel

router = APIRouter()


class HealthCheck(CustomBaseModel):
    status: str = "ok"
    version: str = ""


@router.get("/health", tags=["Health"], response_model=HealthCheck)
def get_health() -> HealthCheck:
    return HealthCheck(status="ok", version=settings.VERSION)
