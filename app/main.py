import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.config import settings
from app.database import dispose_engine
from app.logging_config import setup_logging
from app.middleware import TimingMiddleware
from app.routers import articles, metrics

VERSION = "1.0.0"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging()
    logger.info("News API starting (env=%s)", settings.APP_ENV)
    yield
    # Shutdown
    await dispose_engine()

app = FastAPI(
    title="News Portal API",
    description="Articles, categories, search and view counts for a news site",
    version=VERSION,
    lifespan=lifespan,
)

# Middleware
app.add_middleware(TimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(articles.router)
app.include_router(metrics.router)


@app.exception_handler(ValidationError)
async def service_validation_error(request: Request, exc: ValidationError):
    """Validation raised below the router (service-level limits) is a 422 too."""
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_encoder(exc.errors(include_url=False, include_context=False))},
    )


@app.get("/health")
async def health():
    return {
        "status": "healthy",
        "version": VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
