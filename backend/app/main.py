# backend/app/main.py
"""
Application entry point.

Builds the FastAPI app, registers the problem+json error handlers, CORS
and mounts every versioned router under ``/api/v1``.
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute

from .core.config import settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION, BRAND_NAME
from .errors import register_error_handlers
from .routes.v1 import (
    auth as auth_v1,
    bookings as bookings_v1,
    categories as categories_v1,
    classes as classes_v1,
    credit_packages as credit_packages_v1,
    dashboard as dashboard_v1,
    health as health_v1,
    notifications as notifications_v1,
    organizations as organizations_v1,
    students as students_v1,
    users as users_v1,
)
from .schemas.main_responses import RootResponse

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(f"Environment: {settings.environment}")
    if settings.is_production_database() and not settings.is_testing:
        logger.warning("Connected to a production database")
    yield
    logger.info(f"{BRAND_NAME} API shutting down...")


def _unique_operation_id(route: APIRoute) -> str:
    methods = "_".join(sorted(m.lower() for m in route.methods or []))
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "").strip("_")
    name = (route.name or "operation").lower().replace(" ", "_")
    return f"{methods}__{path}__{name}".strip("_")


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
    generate_unique_id_function=_unique_operation_id,
)
register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["*"],
)
logger.info("CORS allow_origins=%s", settings.allowed_origins)

# Create API v1 router
api_v1 = APIRouter(prefix="/api/v1")

api_v1.include_router(health_v1.router, prefix="/health")
api_v1.include_router(auth_v1.router, prefix="/auth")
api_v1.include_router(users_v1.router, prefix="/users")
api_v1.include_router(organizations_v1.router, prefix="/organizations")
api_v1.include_router(categories_v1.router, prefix="/categories")
api_v1.include_router(classes_v1.router, prefix="/classes")
api_v1.include_router(bookings_v1.router, prefix="/bookings")
api_v1.include_router(credit_packages_v1.router, prefix="/credit-packages")
api_v1.include_router(students_v1.router, prefix="/students")
api_v1.include_router(dashboard_v1.router, prefix="/dashboard")
api_v1.include_router(notifications_v1.router, prefix="/notifications")

app.include_router(api_v1)


@app.get("/", response_model=RootResponse)
def read_root() -> RootResponse:
    """Root endpoint - API information"""
    return RootResponse(
        message=f"Welcome to the {BRAND_NAME} API!",
        version=API_VERSION,
        docs="/docs",
    )
