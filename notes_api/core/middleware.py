"""
Middlewares de aplicación: request id, logging por petición y CORS.
"""
import logging
import re
import time
import uuid
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from notes_api.core.config import Settings, settings

# Orígenes locales (cualquier esquema/puerto) siempre permitidos
LOCAL_ORIGIN_REGEX = r"https?://(localhost|127\.0\.0\.1)(:\d+)?"

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization", "X-Requested-With"]


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get("X-Request-Id") or uuid.uuid4().hex
        request.state.request_id = rid
        response = await call_next(request)
        response.headers["X-Request-Id"] = rid
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: FastAPI) -> None:
        super().__init__(app)
        self.log = logging.getLogger("notes.request")

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            dt_ms = int((time.perf_counter() - start) * 1000)
            rid = getattr(request.state, "request_id", None)
            self.log.info(
                "method=%s path=%s status=%s latency_ms=%s request_id=%s",
                request.method, request.url.path, status, dt_ms, rid,
            )


def cors_options(cfg: Settings) -> Dict[str, Any]:
    """Argumentos para `CORSMiddleware` según el entorno.

    - development: cualquier origen (regex que refleja el Origin, compatible con credentials).
    - production: localhost/127.0.0.1 más la lista `cors_origins`.
    """
    opts: Dict[str, Any] = dict(
        allow_origins=list(cfg.cors_origins),
        allow_origin_regex=LOCAL_ORIGIN_REGEX,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
        allow_credentials=True,
    )
    if cfg.is_development:
        opts["allow_origin_regex"] = ".*"
    return opts


def origin_allowed(origin: str, cfg: Settings) -> bool:
    """Misma decisión que toma `CORSMiddleware` con `cors_options(cfg)`."""
    opts = cors_options(cfg)
    if origin in opts["allow_origins"]:
        return True
    return re.fullmatch(opts["allow_origin_regex"], origin) is not None


def add_middlewares(app: FastAPI) -> None:
    app.add_middleware(CORSMiddleware, **cors_options(settings))
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(LoggingMiddleware)
