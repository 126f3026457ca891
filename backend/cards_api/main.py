from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from .db import mysql
from .errors import CardsError, NotFoundError, StorageError, ValidationError
from .middleware.cors import (
    ALLOWED_HEADERS,
    ALLOWED_METHODS,
    build_allowed_origin_regex,
    build_allowed_origins,
)
from .middleware.request_log import RequestLogMiddleware
from .observability.logging import configure_logging, get_logger
from .problem_details import GENERIC_SERVER_ERROR, problem_response
from .routers.cards import router as cards_router
from .routers.health import router as health_router
from .settings import settings


def create_app() -> FastAPI:
    # Logging must be configured before the app starts handling requests.
    configure_logging(level=settings.log_level)
    log = get_logger("startup")

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        if settings.db_create_tables:
            mysql.create_tables()
        yield
        mysql.dispose_engine()

    app = FastAPI(
        title="Module Cards API",
        version="1.0.0",
        default_response_class=ORJSONResponse,
        redirect_slashes=False,
        lifespan=lifespan,
    )

    log.info("app_starting", settings=settings.to_log_safe_dict())

    # Middlewares (order matters; last added is outermost)
    # Requests without an Origin header pass straight through CORSMiddleware.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=build_allowed_origins(frontend_urls=settings.frontend_urls),
        allow_origin_regex=build_allowed_origin_regex(suffixes=settings.cors_allowed_origin_suffixes),
        allow_credentials=False,
        allow_methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
    )
    # Outermost: request id and access log wrap everything, CORS rejections included.
    app.add_middleware(RequestLogMiddleware, quiet_paths={"/"})

    # Error handlers
    app.add_exception_handler(CardsError, _cards_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_exception_handler)

    # Routes
    app.include_router(health_router)
    app.include_router(cards_router)

    return app


def _cards_error_handler(request: Request, exc: CardsError) -> Response:
    # Single place mapping the error taxonomy to HTTP status codes.
    status_code = 500
    title = "Storage Error"
    extensions: dict[str, object] | None = None

    if isinstance(exc, ValidationError):
        status_code = 400
        title = "Bad Request"
        if exc.missing_fields:
            extensions = {"missingFields": list(exc.missing_fields)}
    elif isinstance(exc, NotFoundError):
        status_code = 404
        title = "Not Found"
    elif isinstance(exc, StorageError):
        extensions = {"operation": exc.operation}

    return problem_response(
        request=request,
        status_code=status_code,
        title=title,
        message=exc.message,
        extensions=extensions,
    )


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    status_code = int(getattr(exc, "status_code", 500) or 500)
    detail = getattr(exc, "detail", None)
    safe_detail = str(detail) if detail is not None else None

    if status_code == 404:
        safe_detail = "Route not found"

    response = problem_response(
        request=request,
        status_code=status_code,
        detail=safe_detail,
    )
    headers = getattr(exc, "headers", None)
    if headers:
        response.headers.update(headers)
    return response


def _validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
    # Malformed JSON bodies land here; report them like any other bad input.
    errors: list[dict[str, object]] = []
    for e in exc.errors():
        loc = e.get("loc") or ()
        loc_path = ".".join([str(x) for x in loc if x != "body"])
        errors.append(
            {
                "location": list(loc) if isinstance(loc, (list, tuple)) else [],
                "path": loc_path,
                "message": e.get("msg", "Invalid value"),
                "type": e.get("type"),
            }
        )
    return problem_response(
        request=request,
        status_code=400,
        title="Validation Failed",
        detail="Request validation failed",
        errors=errors,
    )


def _unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    # Operators get the traceback; clients only get a generic message.
    try:
        log = get_logger("unhandled")
        log.exception(
            "unhandled_exception",
            http_method=str(getattr(request, "method", "") or "").upper() or None,
            path=str(getattr(getattr(request, "url", None), "path", "") or ""),
        )
    except Exception:
        # Never let logging crash the exception handler.
        pass

    return problem_response(
        request=request,
        status_code=500,
        title="Internal Server Error",
        detail=str(exc) if exc else None,
        message=GENERIC_SERVER_ERROR,
    )


app = create_app()
