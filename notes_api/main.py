"""Entrada principal de la app FastAPI (configura middlewares, excepciones y routers)."""
import logging
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from notes_api.api.router import api_router
from notes_api.core.config import settings
from notes_api.core.exceptions import register_exception_handlers
from notes_api.core.logging import setup_logging
from notes_api.core.middleware import add_middlewares
from notes_api.infrastructure.db.mongo import MongoConnection

_log = logging.getLogger("notes.startup")

setup_logging(settings.log_level)
app = FastAPI(title=settings.app_name)
# Conexión explícita (aún sin conectar); el startup la abre
app.state.mongo = MongoConnection(settings)

add_middlewares(app)
register_exception_handlers(app)


@app.on_event("startup")
async def on_startup():
    mongo: MongoConnection = app.state.mongo
    # Si conecta aplica colección/índices/validador; si no, se reintenta en el próximo ping
    if not await mongo.connect():
        _log.warning("Mongo no listo; el bootstrap se aplicará al recuperar la conexión")


@app.on_event("shutdown")
async def on_shutdown():
    app.state.mongo.close()


# Monta routers bajo el prefijo configurado
app.include_router(api_router, prefix=settings.api_prefix_normalized)

# Frontend estático opcional (index.html en "/"); va al final para no tapar la API
_static = Path(settings.static_dir)
if _static.is_dir():
    app.mount("/", StaticFiles(directory=str(_static), html=True), name="static")


def run() -> None:
    _log.info("Notes API escuchando en el puerto %s", settings.port)
    _log.info("API disponible en http://localhost:%s%s/notes", settings.port, settings.api_prefix_normalized)
    uvicorn.run("notes_api.main:app", host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
