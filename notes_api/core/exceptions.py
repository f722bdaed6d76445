"""
Domain errors and global exception handlers for consistent API errors.

    NotesError (base)
    ├── ValidationError          → 400 (client fault, do not retry)
    ├── NotFoundError            → 404
    ├── StoreUnavailableError    → 503 (transient, retry after backoff)
    │   └── StoreTimeoutError    → 504
    └── StoreOperationError      → 500 (store rejected the operation)
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class NotesError(Exception):
    """Base de los errores de la app: `message` para el cliente, `detail` opcional."""

    status_code = 500

    def __init__(self, message: str = "Unexpected error", detail: Optional[str] = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class ValidationError(NotesError):
    status_code = 400

    def __init__(self, message: str = "Validation error", detail: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message, detail)
        self.field = field


class NotFoundError(NotesError):
    status_code = 404

    def __init__(self, note_id: Optional[str] = None):
        detail = f"No note with id '{note_id}'" if note_id else None
        super().__init__("Note not found", detail)
        self.note_id = note_id


class StoreUnavailableError(NotesError):
    status_code = 503

    def __init__(self, detail: Optional[str] = "MongoDB connection not available"):
        super().__init__("Database not connected. Please ensure MongoDB is running.", detail)


class StoreTimeoutError(StoreUnavailableError):
    status_code = 504

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail)
        self.message = "Database operation timed out"


class StoreOperationError(NotesError):
    status_code = 500

    def __init__(self, detail: Optional[str] = None):
        super().__init__("Database error", detail)


def _req_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", object()), "request_id", None)


def register_exception_handlers(app: FastAPI) -> None:
    log = logging.getLogger("notes.errors")

    @app.exception_handler(NotesError)
    async def _notes_exc_handler(request: Request, exc: NotesError):
        rid = _req_id(request)
        if exc.status_code >= 500:
            log.warning("%s request_id=%s detail=%s", type(exc).__name__, rid, exc.detail)
        body: Dict[str, Any] = {"message": exc.message}
        if exc.detail:
            body["error"] = exc.detail
        if rid:
            body["request_id"] = rid
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
        body: Dict[str, Any] = {"message": exc.detail or "HTTP error"}
        rid = _req_id(request)
        if rid:
            body["request_id"] = rid
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError):
        body: Dict[str, Any] = {"message": "Validation error", "errors": jsonable_encoder(exc.errors())}
        rid = _req_id(request)
        if rid:
            body["request_id"] = rid
        return JSONResponse(status_code=422, content=body)

    @app.exception_handler(Exception)
    async def _generic_handler(request: Request, exc: Exception):
        rid = _req_id(request)
        log.exception("Unhandled error request_id=%s", rid)
        body: Dict[str, Any] = {"message": "Internal server error"}
        if rid:
            body["request_id"] = rid
        return JSONResponse(status_code=500, content=body)
