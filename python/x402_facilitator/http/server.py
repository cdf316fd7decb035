"""Starlette application exposing the facilitator over HTTP."""

import json
import logging
import time
from datetime import datetime, timezone

from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from ..config import SERVICE_NAME
from ..facilitator import x402Facilitator
from ..schemas import ErrorResponse, SettleRequest, VerifyRequest
from ..schemas.reasons import ERROR_TYPE_INTERNAL, ERROR_TYPE_INVALID_REQUEST

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration of every request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s -> %d (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response


def _error(status_code: int, error_type: str, message: str) -> JSONResponse:
    body = ErrorResponse(error_type=error_type, error_message=message)
    return JSONResponse(body.to_dict(), status_code=status_code)


async def _parse(request: Request, model: type[VerifyRequest]) -> VerifyRequest | JSONResponse:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _error(400, ERROR_TYPE_INVALID_REQUEST, "Request body must be JSON")

    try:
        return model.model_validate(body)
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) or "body" for err in e.errors()})
        return _error(
            400,
            ERROR_TYPE_INVALID_REQUEST,
            f"Missing or invalid fields: {', '.join(fields)}",
        )


def create_app(
    facilitator: x402Facilitator,
    cors_allow_origins: list[str] | None = None,
    service_name: str = SERVICE_NAME,
) -> Starlette:
    """Create the facilitator HTTP application.

    Routes:
        GET  /health     liveness probe
        GET  /supported  supported payment kinds
        POST /verify     verify a payment
        POST /settle     settle a payment

    Args:
        facilitator: Engine with schemes registered.
        cors_allow_origins: Origins allowed by CORS (default: any).
        service_name: Reported by ``/health``.

    Returns:
        Starlette application.
    """

    async def health(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "status": "ok",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "service": service_name,
            }
        )

    async def supported(request: Request) -> JSONResponse:
        return JSONResponse(facilitator.get_supported().to_dict())

    async def verify(request: Request) -> JSONResponse:
        parsed = await _parse(request, VerifyRequest)
        if isinstance(parsed, JSONResponse):
            return parsed
        try:
            result = await facilitator.verify(parsed)
        except Exception:
            logger.exception("Unexpected error during verification")
            return _error(500, ERROR_TYPE_INTERNAL, "Internal error during verification")
        return JSONResponse(result.to_dict())

    async def settle(request: Request) -> JSONResponse:
        parsed = await _parse(request, SettleRequest)
        if isinstance(parsed, JSONResponse):
            return parsed
        try:
            result = await facilitator.settle(parsed)
        except Exception:
            logger.exception("Unexpected error during settlement")
            return _error(500, ERROR_TYPE_INTERNAL, "Internal error during settlement")
        return JSONResponse(result.to_dict())

    return Starlette(
        routes=[
            Route("/health", health, methods=["GET"]),
            Route("/supported", supported, methods=["GET"]),
            Route("/verify", verify, methods=["POST"]),
            Route("/settle", settle, methods=["POST"]),
        ],
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=cors_allow_origins or ["*"],
                allow_methods=["GET", "POST", "OPTIONS"],
                allow_headers=["*"],
            ),
            Middleware(RequestLoggingMiddleware),
        ],
    )
