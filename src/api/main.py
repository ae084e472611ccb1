"""FastAPI application entry point."""

import os
import sys
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from dotenv import load_dotenv

# Must run before get_settings() reads the environment
load_dotenv()

# main.py is at <root>/src/api/main.py
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from api import csrf
from api.middleware.rate_limit import RateLimitMiddleware
from api.middleware.request_logging import log_requests
from api.routes import auth, health, upload
from adapter.mongodb.connection import get_mongodb_client
from adapter.mongodb.indexes import ensure_all_indexes
from domain.model.errors import PersistenceError
from utils.config import get_settings
from utils.logging import setup_structured_logging

setup_structured_logging()

logger = logging.getLogger(__name__)

# pyproject.toml is the single source of truth for the version
_project_root = _src_path.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "Larek API"

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown logic."""
    settings.temp_dir.mkdir(parents=True, exist_ok=True)
    settings.upload_dir.mkdir(parents=True, exist_ok=True)

    client = get_mongodb_client(settings.mongo_url)
    if client:
        if ensure_all_indexes(client[settings.database_name]):
            logger.info("MongoDB indexes verified/created successfully")
        else:
            logger.warning("Failed to create some MongoDB indexes")
    else:
        logger.warning("MongoDB unavailable, skipping index creation")

    yield


app = FastAPI(
    title=SERVICE_NAME,
    description="Shop backend: authentication, user accounts and file uploads",
    version=VERSION,
    lifespan=lifespan,
)

# Middleware added last runs first: rate limiting, then logging, then CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)
app.middleware("http")(log_requests)
app.add_middleware(
    RateLimitMiddleware,
    max_requests=settings.rate_limit_max,
    window_seconds=settings.rate_limit_window_seconds,
)
logger.info(f"CORS configured with origins: {list(settings.cors_origins)}")


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error("Database error", extra={"path": request.url.path, "error": str(exc)})
    return JSONResponse(status_code=503, content={"detail": "Database unavailable"})


app.include_router(auth.router)
app.include_router(upload.router)
app.include_router(csrf.router)
app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running"
    }


# Accepted uploads are served from the public upload directory
app.mount(
    f"/{settings.upload_path}" if settings.upload_path else "/",
    StaticFiles(directory=settings.upload_dir, check_dir=False),
    name="uploads",
)


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 3000))
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        access_log=False  # request logging middleware covers this
    )
