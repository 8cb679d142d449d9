import sys
from pathlib import Path

# Make backend/ importable when launched as `uvicorn rivalscout.main:app` from anywhere
backend_dir = Path(__file__).resolve().parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

import logging
from dotenv import load_dotenv

# Load .env BEFORE settings are read so provider credentials are available
env_path = backend_dir / ".env"
load_dotenv(env_path)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from rivalscout.core.async_helpers import shutdown_executor
from rivalscout.core.cache_manager import cache_stats
from rivalscout.core.config import get_settings
from rivalscout.core.provider_factory import providers_status
from rivalscout.routes.competitors import router as competitors_router
from rivalscout.routes.keywords import router as keywords_router

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.rate_limit_per_minute}/minute"],
)

app = FastAPI(
    title="RivalScout - Backend",
    version=settings.app_version,
    description="Competitor and keyword discovery for SEO",
    debug=settings.debug,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# CORS middleware: restrict to known frontend origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(competitors_router, prefix="/api")
app.include_router(keywords_router, prefix="/api")


@app.on_event("shutdown")
async def shutdown_event():
    shutdown_executor()
    logger.info("Thread pool shut down")


@app.get("/api/health")
async def health():
    """Detailed health check endpoint."""
    return {
        "status": "ok",
        "version": settings.app_version,
        **providers_status(),
        "cache": cache_stats(),
    }
