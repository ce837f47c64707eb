"""
Employee Masterdata Service
FastAPI Application Entry Point
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import Settings, settings
from app.database import Database
from app.helpers import register_exception_handlers
from app.routers import clearance as clearance_router
from app.routers import employees as employees_router
from app.services.clearance_form import ClearanceFormService


def configure_logging(log_level: str = settings.log_level):
    """Configure application logging."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


configure_logging()
logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    logger.info("Starting Employee Masterdata service...")
    database: Database = app.state.database
    await database.init()
    logger.info("Database tables created/verified")

    forms: ClearanceFormService = app.state.clearance_service
    if not forms.template_exists():
        logger.warning(f"Clearance template not found at {forms.template_path}")

    yield

    logger.info("Shutting down Employee Masterdata service...")
    await database.close()


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around explicitly constructed resources."""
    app_settings = app_settings or settings

    app = FastAPI(
        title="Employee Masterdata",
        description="Employee master data, Excel import/export and clearance forms",
        version=APP_VERSION,
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.database = Database(
        app_settings.database_url,
        pool_size=app_settings.db_pool_size,
        max_overflow=app_settings.db_max_overflow,
    )
    app.state.clearance_service = ClearanceFormService(app_settings.clearance_template_path)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )
    register_exception_handlers(app)

    # Include routers
    app.include_router(employees_router.router, prefix="/api/employees", tags=["employees"])
    app.include_router(clearance_router.router, prefix="/api/clearance", tags=["clearance"])

    @app.get("/")
    async def root():
        return {"success": True, "data": {"name": "Employee Masterdata", "version": APP_VERSION}}

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": APP_VERSION}

    return app


app = create_app()
