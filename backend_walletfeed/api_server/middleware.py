"""
HTTP middleware — permissive CORS and the last-resort error boundary.

- Every response carries CORS headers; the request Origin is echoed (or "*").
- OPTIONS preflight short-circuits with 204.
- Unhandled exceptions become 500 {"error": "Proxy error", "details": ...},
  still with CORS headers attached.
"""

from __future__ import annotations

import time
from typing import Awaitable, Callable

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from backend_walletfeed.walletfeed_logging import get_logger

logger = get_logger(__name__)

ALLOW_METHODS = "GET,POST,OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization, x-chain"
EXPOSE_HEADERS = "X-Source"


def apply_cors_headers(request: Request, response: Response) -> Response:
    response.headers["Access-Control-Allow-Origin"] = request.headers.get("origin") or "*"
    response.headers["Access-Control-Allow-Methods"] = ALLOW_METHODS
    response.headers["Access-Control-Allow-Headers"] = ALLOW_HEADERS
    response.headers["Access-Control-Expose-Headers"] = EXPOSE_HEADERS
    return response


async def cors_and_error_boundary(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    if request.method == "OPTIONS":
        return apply_cors_headers(request, Response(status_code=204))
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.exception("unhandled_error", path=request.url.path, error=str(e))
        response = JSONResponse(
            status_code=500,
            content={"error": "Proxy error", "details": str(e)},
        )
    logger.debug(
        "http_request",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
    )
    return apply_cors_headers(request, response)


def install_middleware(app: FastAPI) -> None:
    app.middleware("http")(cors_and_error_boundary)
