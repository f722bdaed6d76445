"""
Logging de la API de notas: un formato único para `notes.*`, uvicorn y el
driver de Mongo.
"""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Loggers de terceros que siguen el nivel de la app
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")
# PyMongo/Motor son muy verbosos en DEBUG (heartbeats, pool); sólo avisos
DRIVER_LOGGERS = ("pymongo", "motor")


def resolve_level(level: str | int | None) -> int:
    """Nivel numérico a partir de "info"/"DEBUG"/20; INFO si no se reconoce."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName((level or "").strip().upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(level: str = "INFO") -> int:
    lvl = resolve_level(level)
    logging.basicConfig(level=lvl, format=LOG_FORMAT)
    logging.getLogger("notes").setLevel(lvl)
    for name in SERVER_LOGGERS:
        logging.getLogger(name).setLevel(lvl)
    for name in DRIVER_LOGGERS:
        logging.getLogger(name).setLevel(max(lvl, logging.WARNING))
    return lvl
