"""
Traffic Offence Desk API
Main FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from trafficdesk.api.v1.routers.audit_logs import router as audit_logs_router
from trafficdesk.api.v1.routers.auth import router as auth_router
from trafficdesk.api.v1.routers.deletion_requests import router as deletion_requests_router
from trafficdesk.api.v1.routers.drivers import router as drivers_router
from trafficdesk.api.v1.routers.offenses import router as offenses_router
from trafficdesk.api.v1.routers.payments import router as payments_router
from trafficdesk.api.v1.routers.reports import router as reports_router
from trafficdesk.core.config import settings
from trafficdesk.core.database import close_db, init_db
from trafficdesk.core.exceptions import TrafficDeskError

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s (%s)", settings.APP_NAME, settings.ENVIRONMENT)
    await init_db()
    logger.info("Database initialized")

    yield

    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title=settings.APP_NAME,
    description="Traffic offence records, fines, payments and the offence deletion review workflow.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.exception_handler(TrafficDeskError)
async def domain_error_handler(request: Request, exc: TrafficDeskError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Invalid request",
            "details": {"errors": jsonable_encoder(exc.errors())},
        },
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"code": "INTERNAL_ERROR", "message": "Something went wrong", "details": {}},
    )


for router in (
    auth_router,
    offenses_router,
    deletion_requests_router,
    payments_router,
    drivers_router,
    reports_router,
    audit_logs_router,
):
    app.include_router(router, prefix=settings.API_V1_PREFIX)


@app.get("/health", tags=["system"])
async def health():
    return {"status": "ok"}
