# Load environment variables from .env file
from pathlib import Path
from contextlib import asynccontextmanager
import logging

from dotenv import load_dotenv

# Look for .env in backend/ first, then in parent directory
env_path = Path(__file__).parent.parent / ".env"
if not env_path.exists():
    env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mailscan.routers import scan_router
from mailscan.core.config import settings, API_VERSION
from mailscan.core.security import mask_token

# Configure logging
logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Logs which evaluators are active. The service always starts, even
    without urlscan.io credentials; scans then run on rules only.
    """
    # Startup
    logger.info("Starting mailscan API...")

    if settings.is_urlscan_enabled:
        logger.info(
            f"urlscan.io enrichment: ENABLED (key={mask_token(settings.urlscan_api_key)}, "
            f"visibility={settings.urlscan_visibility}, "
            f"deadline={settings.enrichment_timeout_ms}ms, max_links={settings.urlscan_max_links})"
        )
    else:
        logger.info("urlscan.io enrichment: DISABLED (set URLSCAN_API_KEY to enable)")

    logger.info("mailscan API ready")

    yield

    # Shutdown
    logger.info("Shutting down mailscan API...")


app = FastAPI(
    title="mailscan API",
    description="Email risk scoring API",
    version=API_VERSION,
    lifespan=lifespan,
)

# The Gmail add-on calls from Google-hosted origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------- Routers ----------

app.include_router(scan_router)

# ---------- Root Endpoints ----------


@app.get("/")
def root():
    """Root endpoint with API info."""
    return {
        "message": "mailscan backend is running",
        "api_version": API_VERSION,
    }


@app.get("/health")
def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "ok"}


@app.get("/status")
def status():
    """Detailed status endpoint showing feature availability."""
    return {
        "status": "ok",
        "api_version": API_VERSION,
        "environment": settings.environment,
        "features": {
            "rule_based_analysis": True,
            "urlscan_enrichment": settings.is_urlscan_enabled,
        },
        "urlscan": {
            "configured": bool(settings.urlscan_api_key),
            "max_links": settings.urlscan_max_links,
            "deadline_ms": settings.enrichment_timeout_ms,
        },
    }
