"""FastAPI app entrypoint."""

import logging
import os
import time
import traceback
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from api.logging_config import setup_logging
from api.routers import crawl

load_dotenv()

logger = logging.getLogger("cardad.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 시작/종료 로깅."""
    setup_logging()
    logger.info("card-ad crawler API starting up")
    try:
        yield
    finally:
        logger.info("card-ad crawler API shutting down")


app = FastAPI(
    title="Card Ad Crawler API",
    description="네이버 검색 상단 카드형 광고 추출 서비스",
    version="0.1.0",
    lifespan=lifespan,
    redirect_slashes=False,
)

_cors_origins = os.getenv("ALLOWED_ORIGINS", "*")
CORS_ORIGINS = [o.strip() for o in _cors_origins.split(",") if o.strip()]


# ---------------------------------------------------------------------------
# Request logging middleware
# ---------------------------------------------------------------------------
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        duration = time.time() - start
        logger.info(
            "%s %s -> %d (%.2fs)",
            request.method,
            request.url.path,
            response.status_code,
            duration,
        )
        return response


app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Global exception handler
# ---------------------------------------------------------------------------
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    if isinstance(exc, HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})
    logger.error(
        "Unhandled exception on %s %s: %s (type=%s)",
        request.method,
        request.url.path,
        str(exc),
        type(exc).__name__,
    )
    logger.debug(traceback.format_exc())
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


app.include_router(crawl.router)
