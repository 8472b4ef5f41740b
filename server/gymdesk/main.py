import logging
from contextlib import asynccontextmanager

import gymdesk.models  # noqa: F401
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gymdesk.core.config import settings
from gymdesk.core.db import Database
from gymdesk.core.errors import GymDeskError
from gymdesk.core.logging_config import setup_logging
from gymdesk.routers import auth as auth_router
from gymdesk.routers import dashboard as dashboard_router
from gymdesk.routers import members as members_router
from gymdesk.routers import memberships as memberships_router
from gymdesk.routers import payments as payments_router
from gymdesk.routers import plans as plans_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL)
    database = Database(settings.DATABASE_URL).init()
    app.state.database = database
    logger.info("database_ready", extra={"environment": settings.ENVIRONMENT})
    try:
        yield
    finally:
        database.teardown()
        logger.info("database_closed")


app = FastAPI(title="GymDesk API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GymDeskError)
async def handle_gymdesk_error(request: Request, exc: GymDeskError) -> JSONResponse:
    logger.info(
        "request_rejected",
        extra={"path": request.url.path, "code": exc.code, "status_code": exc.status_code},
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "code": exc.code})


for module in (
    auth_router,
    members_router,
    plans_router,
    memberships_router,
    payments_router,
    dashboard_router,
):
    app.include_router(module.router, prefix=settings.API_PREFIX)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
