"""FastAPI application for RTC token issuance."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .core.config import settings
from .core.errors import BadRequest, TokenIssuanceError
from .routers import rtc

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Call Token API", version="0.1.0")

if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )


def _error_response(exc: TokenIssuanceError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "type": exc.kind},
        headers=exc.headers(),
    )


@app.exception_handler(TokenIssuanceError)
async def handle_issuance_error(request: Request, exc: TokenIssuanceError) -> JSONResponse:
    return _error_response(exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render malformed bodies as 400s in the common error envelope."""

    errors = exc.errors()
    if any(error.get("type") == "json_invalid" or tuple(error.get("loc", ())) == ("body",) for error in errors):
        message = "Invalid JSON payload"
    elif any("callSessionId" in error.get("loc", ()) for error in errors):
        message = "Missing required parameter: callSessionId"
    else:
        message = "Invalid request"
    logger.warning("token_request_invalid message=%s", message)
    return _error_response(BadRequest(message))


app.include_router(rtc.router, prefix="/api/rtc", tags=["rtc"])


@app.get("/api/health", tags=["meta"])
async def health() -> dict[str, str]:
    """Simple liveness probe."""

    return {"status": "ok"}


@app.head("/api/health", tags=["meta"])
async def health_head() -> Response:
    """Allow HEAD for uptime monitors that only need the status code."""

    return Response(status_code=200)
