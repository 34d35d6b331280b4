"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import router
from .config import get_settings
from . import __version__

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - handles startup and shutdown."""
    settings = get_settings()
    if settings.debug:
        logging.getLogger("cola_verify").setLevel(logging.DEBUG)

    logger.info(f"COLA Verification API ready - Version {__version__} "
                f"(auto-approval {'on' if settings.auto_approval_enabled else 'off'})")

    yield

    logger.info("Shutting down COLA Verification API...")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="""
## Alcohol Label (COLA) Verification API

Decides whether the fields read off an alcohol label match the values on its
Certificate of Label Approval application.

### Features
- **Field Comparison**: Normalized, strictness-aware comparison per field
- **Status Resolution**: Approved, conditionally approved, needs correction or rejected
- **Specialist Review**: Re-evaluate a label after field overrides
- **Batch Processing**: Bulk CSV application import and multi-label verification

### Quick Start
1. Use `/health` to check API status
2. Use `/beverage-types` to see which fields each category requires
3. Use `/verify` to verify extracted fields against application data
        """,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api/v1")

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "message": "COLA Verification API",
            "version": __version__,
            "docs": "/docs"
        }

    return app


app = create_app()
