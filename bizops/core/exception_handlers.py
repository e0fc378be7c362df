import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from bizops.core.exceptions import ServiceError

log = logging.getLogger("bizops.errors")


# Generate a clean request id for every response
def _rid():
    """Generates a unique request ID for tracing."""
    return uuid.uuid4().hex


# ----------- Exception Handlers (called by FastAPI) -----------

def service_exception_handler(request: Request, exc: ServiceError):
    """Handles business-rule and storage errors raised by the service layer."""
    if exc.status_code >= 500:
        log.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    else:
        log.info(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    body = {exc.body_key: exc.message, "request_id": _rid()}
    return JSONResponse(status_code=exc.status_code, content=body)


def http_exception_handler(request: Request, exc: HTTPException):
    """Handles exceptions raised by HTTPException (including 404 for unknown routes)."""
    body = {"error": exc.detail, "request_id": _rid()}
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handles Pydantic validation errors (422 Unprocessable Entity)."""
    body = {
        "error": "Invalid input data",
        "details": jsonable_encoder(exc.errors()),
        "request_id": _rid(),
    }
    return JSONResponse(status_code=422, content=body)


def generic_exception_handler(request: Request, exc: Exception):
    """Handles all unhandled exceptions (500 Internal Server Error)."""
    log.error(f"Unhandled exception on path: {request.url.path}", exc_info=exc)
    body = {"error": "Internal Server Error", "request_id": _rid()}
    return JSONResponse(status_code=500, content=body)


# ----------- Registration Function -----------

def setup_exception_handlers(app: FastAPI):
    """Registers all custom exception handlers with the FastAPI application."""
    app.add_exception_handler(ServiceError, service_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
    return app
