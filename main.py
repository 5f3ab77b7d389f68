import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from app.api.endpoints import (
    admin,
    auth,
    certificates,
    health,
    pools,
)
from app.core.config import settings
from app.core.errors import ApiError
from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.services.accounts import seed_admin

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # create tables and the admin account on startup
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_admin(db, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)
    finally:
        db.close()
    logger.info("%s %s ready, admin wallets: %s", settings.PROJECT_NAME, settings.VERSION, sorted(settings.admin_wallets))
    yield


# Define the FastAPI application instance
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Include your API routers
app.include_router(health.router)
app.include_router(auth.router, prefix="/auth")
app.include_router(admin.router, prefix="/admin")
app.include_router(pools.router, prefix="/pools")
app.include_router(certificates.router)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
