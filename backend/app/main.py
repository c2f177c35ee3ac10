import logging
import sys
import time
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.responses import Response

from app.core.config import settings
from app.core.errors import AppError, RequestValidationFailed
from app.routers import executions, integrations, logs, tasks

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)

OPENAPI_TAGS = [
    {"name": "Integrations", "description": "Create, read, update, and delete integrations."},
    {"name": "Tasks", "description": "Manage the ordered tasks of an integration."},
    {"name": "Executions", "description": "Start, complete, and cancel integration runs."},
    {"name": "Logs", "description": "Record and query execution logs."},
]

LOCATION_PREFIXES = ("body", "query", "path", "header", "cookie")

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Operational registry for data-integration pipelines. "
        "Tracks integration definitions, their tasks, execution history, and logs."
    ),
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):  # type: ignore[no-untyped-def]
    started = time.perf_counter()
    response: Response = await call_next(request)
    logger.info(
        "%s %s -> %d (%d ms)",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - started) * 1000,
    )
    return response


def _error_body(message: str, errors: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"status": "error", "message": message}
    if errors:
        body["errors"] = errors
    return body


def _field_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if len(loc) > 1 and loc[0] in LOCATION_PREFIXES:
            loc = loc[1:]
        message = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
        errors.append({"field": ".".join(loc), "message": message})
    return errors


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    errors = exc.errors if isinstance(exc, RequestValidationFailed) else None
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, errors))


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=_error_body("Validation error", _field_errors(exc)),
    )


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(status_code=409, content=_error_body("Duplicate value"))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=_error_body("Internal server error"))


app.include_router(
    integrations.router,
    prefix=f"{settings.API_PREFIX}/integrations",
    tags=["Integrations"],
)
app.include_router(tasks.router, prefix=f"{settings.API_PREFIX}/tasks", tags=["Tasks"])
app.include_router(
    executions.router,
    prefix=f"{settings.API_PREFIX}/executions",
    tags=["Executions"],
)
app.include_router(logs.router, prefix=f"{settings.API_PREFIX}/logs", tags=["Logs"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "status": "success",
        "message": f"{settings.APP_NAME} is running",
        "version": settings.version,
    }
