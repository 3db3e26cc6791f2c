"""Error rendering for the HTTP API as RFC 9457 Problem Details."""

from typing import Callable, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ..utils.logging_config import get_module_logger, log_exception

logger = get_module_logger(__name__)

DEFAULT_TITLES = {
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


def problem_response(
    status_code: int,
    title: str,
    detail: Optional[str] = None,
    type_uri: Optional[str] = None,
    instance: Optional[str] = None,
    **extra_fields,
) -> JSONResponse:
    """Create a JSON response in RFC 9457 Problem Details format."""
    problem = {
        "type": type_uri or f"https://httpstatuses.com/{status_code}",
        "title": title,
        "status": status_code,
    }

    if detail:
        problem["detail"] = detail
    if instance:
        problem["instance"] = instance

    problem.update(extra_fields)

    return JSONResponse(
        status_code=status_code,
        content=problem,
        media_type="application/problem+json",
    )


def default_title(status_code: int) -> str:
    """Get default title for HTTP status codes."""
    return DEFAULT_TITLES.get(status_code, "HTTP Error")


class ProblemDetailsMiddleware(BaseHTTPMiddleware):
    """Turn exceptions that escape the route handlers into a 500 problem response."""

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            log_exception("api", exc, {"method": request.method, "path": request.url.path})
            return problem_response(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                title=default_title(status.HTTP_500_INTERNAL_SERVER_ERROR),
                detail="An unexpected error occurred",
                instance=str(request.url),
            )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors (unknown routes included) as problem details."""
    return problem_response(
        status_code=exc.status_code,
        title=default_title(exc.status_code),
        detail=exc.detail if isinstance(exc.detail, str) else None,
        instance=str(request.url),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation failures as problem details."""
    logger.info(f"Request validation failed for {request.method} {request.url.path}")
    return problem_response(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        title="Validation Error",
        detail="Request validation failed",
        instance=str(request.url),
        errors=jsonable_errors(exc),
    )


def jsonable_errors(exc: RequestValidationError):
    """Validation errors without the non-serializable ``ctx``/``input`` values."""
    return [
        {key: value for key, value in error.items() if key in ("loc", "msg", "type")}
        for error in exc.errors()
    ]


def register_problem_handlers(app: FastAPI) -> None:
    """Install the problem-details middleware and exception handlers on app."""
    app.add_middleware(ProblemDetailsMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
