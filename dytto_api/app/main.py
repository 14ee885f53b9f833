"""FastAPI application — the main entrypoint for the Dytto site API."""

import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from dytto_api.app.api.blog import router as blog_router
from dytto_api.app.api.feedback import router as feedback_router
from dytto_api.app.api.waitlist import router as waitlist_router
from dytto_api.app.config import settings
from dytto_api.app.db import engine, init_db
from dytto_api.app.errors import ApiError

logger = logging.getLogger(__name__)

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(levelname)s:%(name)s: %(message)s",
)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": settings.cors_allow_origin,
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
}

# Payload-validation messages for routes that accept a body.
_INVALID_PAYLOAD_MESSAGES = {
    "/feedback": "Invalid feedback data",
    "/waitlist": "Invalid waitlist data",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    await init_db()
    yield
    await engine.dispose()


app = FastAPI(
    title="Dytto Site API",
    description="Feedback board, blog and waitlist backend for the Dytto website",
    version="0.1.0",
    lifespan=lifespan,
    redirect_slashes=False,
)


# --- CORS ---
# Preflight is answered for every path without consulting the router, and
# every response carries the open CORS headers.


@app.middleware("http")
async def _cors(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


# --- Exception handlers ---


@app.exception_handler(ApiError)
async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.debug("Rejected payload on %s: %s", request.url.path, exc.errors())
    message = _INVALID_PAYLOAD_MESSAGES.get(request.url.path, "Invalid request data")
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(StarletteHTTPException)
async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unknown paths and wrong methods on known paths are both "not found".
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content={"error": "Not found"})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch unhandled exceptions and return a clean JSON 500 instead of a stack trace."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
        headers=CORS_HEADERS,
    )


# Include routers
app.include_router(feedback_router)
app.include_router(blog_router)
app.include_router(waitlist_router)


# --- Health check ---


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check with DB connectivity verification."""
    db_ok = "ok"
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        db_ok = "error"
        logger.exception("Health check: database connectivity failed")

    return {
        "status": "ok" if db_ok == "ok" else "degraded",
        "database": db_ok,
    }
