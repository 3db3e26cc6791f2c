"""Main FastAPI application for TrackLife."""

import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api import status
from .api.middleware import register_problem_handlers
from .api.schemas import ServiceHealth, ServiceReadiness
from .config import config_manager, get_config
from .storage.dependencies import get_storage
from .utils.logging_config import get_module_logger

logger = get_module_logger(__name__)

SERVICE_NAME = "tracklife"

config = get_config()

# Create FastAPI app
app = FastAPI(
    title=config.app.app_name,
    description=config.app.description,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

register_problem_handlers(app)

if config.app.enable_cors:
    allowed_origins = list(config.app.cors_origins)

    # In development mode, allow additional localhost ports
    if config.server.debug:
        allowed_origins.extend([
            "http://127.0.0.1:3000",
            "http://localhost:3000",
        ])

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With"],
    )

app.include_router(status.router)


@app.get("/health", response_model=ServiceHealth)
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": SERVICE_NAME, "version": __version__}


@app.get("/ready", response_model=ServiceReadiness, responses={503: {"model": ServiceReadiness}})
def readiness_check():
    """Readiness check endpoint that validates configuration and storage."""
    start_time = time.time()
    checks = {"config": False, "storage": False}
    errors = []

    try:
        issues = config_manager.validate_config()
        if issues:
            errors.extend(issues)
        else:
            checks["config"] = True
    except Exception as e:
        errors.append(f"Config check failed: {str(e)}")

    try:
        storage = get_storage()
        storage.keys()
        checks["storage"] = True
    except Exception as e:
        errors.append(f"Storage check failed: {str(e)}")

    response_time_ms = round((time.time() - start_time) * 1000, 2)
    all_ready = all(checks.values())

    response = {
        "status": "ready" if all_ready else "not_ready",
        "service": SERVICE_NAME,
        "version": __version__,
        "checks": checks,
        "response_time_ms": response_time_ms,
    }

    if errors:
        response["errors"] = errors
        logger.warning(f"Readiness check failed: {errors}")

    status_code = 200 if all_ready else 503
    return JSONResponse(content=response, status_code=status_code)
