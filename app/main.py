"""
Main FastAPI application
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import time
from prometheus_client import make_asgi_app, Counter, Histogram, REGISTRY
import uuid

from app.config import settings
from app.core.database import init_db, close_db
from app.core.redis import init_redis, close_redis
from app.core.logging import setup_logging
from app.core.exceptions import FastbreakException
from app.core.security import AuthService
from app.core.session_gate import session_gate
from app.api.v1.api import api_router
from app.schemas.response import ActionFailure
from app.services.actions import validation_message

setup_logging()
logger = logging.getLogger(__name__)


def _metric(factory, name: str, description: str, labels):
    # Re-importing the module (tests, reload) must not register twice
    existing = REGISTRY._names_to_collectors.get(name)
    return existing if existing is not None else factory(name, description, labels)


REQUEST_COUNT = _metric(
    Counter, "fastbreak_requests_total", "HTTP requests", ["method", "endpoint", "status"]
)
REQUEST_DURATION = _metric(
    Histogram, "fastbreak_request_duration_seconds", "HTTP request duration", ["method", "endpoint"]
)
GATE_REDIRECTS = _metric(
    Counter, "fastbreak_gate_redirects_total", "Session gate redirects", ["location"]
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.APP_ENV})")

    await init_db()
    await init_redis()

    yield

    logger.info("Shutting down application")
    await close_db()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    description="Sports event and venue management",
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
    lifespan=lifespan
)

app.state.auth_service = AuthService()

# Middleware added last runs first: request tracking wraps CORS wraps the gate
app.middleware("http")(session_gate)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)


@app.middleware("http")
async def track_requests(request: Request, call_next):
    """
    Record request metrics and tag the response with a request ID
    """
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.perf_counter()
    response = await call_next(request)
    duration = time.perf_counter() - start_time

    # Label by route template so ids do not explode label cardinality
    route = request.scope.get("route")
    endpoint = getattr(route, "path", request.url.path)

    REQUEST_COUNT.labels(method=request.method, endpoint=endpoint, status=response.status_code).inc()
    REQUEST_DURATION.labels(method=request.method, endpoint=endpoint).observe(duration)
    if response.status_code == 307 and "location" in response.headers:
        GATE_REDIRECTS.labels(location=response.headers["location"]).inc()

    response.headers["X-Request-ID"] = request_id
    response.headers["X-Process-Time"] = f"{duration:.6f}"
    return response


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ActionFailure(error=message).model_dump(mode="json")
    )


@app.exception_handler(FastbreakException)
async def fastbreak_exception_handler(request: Request, exc: FastbreakException):
    return _failure(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return _failure(422, validation_message(exc))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return _failure(404, "The requested resource was not found")
    return _failure(exc.status_code, str(exc.detail))


@app.exception_handler(500)
async def internal_error_handler(request: Request, exc):
    logger.error(f"Internal server error: {exc}", exc_info=True)
    return _failure(500, "An internal server error occurred")


app.include_router(api_router)

if settings.PROMETHEUS_ENABLED:
    app.mount("/metrics", make_asgi_app())


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
