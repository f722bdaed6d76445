"""Cliente MongoDB asíncrono (Motor) y estado de conexión.

Una sola instancia vive en `app.state.mongo`; repositorios y health la reciben
explícitamente en vez de leer un global. La primera vez que la conexión queda
arriba (en el startup o en un ping posterior) se aplica el bootstrap de la
colección.
"""
from __future__ import annotations

import logging
from typing import Optional

import certifi
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import ConfigurationError, PyMongoError

from notes_api.core.config import Settings
from notes_api.infrastructure.db.bootstrap import ensure_collections

_log = logging.getLogger("notes.mongo")


class MongoConnection:
    def __init__(self, cfg: Settings) -> None:
        self._cfg = cfg
        self._client: Optional[AsyncIOMotorClient] = None
        self._db: Optional[AsyncIOMotorDatabase] = None
        self._bootstrapped = False
        self.connected = False

    def _build_client(self, uri: str) -> AsyncIOMotorClient:
        timeout_ms = self._cfg.mongo_timeout_ms
        # Selección, conexión y lectura de socket acotadas: un servidor colgado
        # termina en timeout en vez de bloquear la petición
        kwargs = dict(
            serverSelectionTimeoutMS=timeout_ms,
            connectTimeoutMS=timeout_ms,
            socketTimeoutMS=timeout_ms,
            tz_aware=True,
        )
        # SRV (Atlas) ya implica TLS; proveemos CA bundle para robustez
        if uri.startswith("mongodb+srv://"):
            kwargs["tlsCAFile"] = certifi.where()
        if self._cfg.mongo_tls_insecure:
            kwargs["tlsAllowInvalidCertificates"] = True
        return AsyncIOMotorClient(uri, **kwargs)

    @property
    def db(self) -> AsyncIOMotorDatabase:
        """Base de datos; falla si nunca se pudo crear el cliente."""
        if self._db is None:
            raise RuntimeError("Mongo no inicializado")
        return self._db

    async def _on_connected(self) -> None:
        self.connected = True
        if not self._bootstrapped:
            await ensure_collections(self.db)
            self._bootstrapped = True

    async def connect(self) -> bool:
        """Crea el cliente y valida la conexión (ping).

        No tumba la app: si falla, queda desconectada y se loggea el motivo.
        """
        uri = self._cfg.mongodb_uri
        try:
            if not uri:
                raise ConfigurationError("MONGODB_URI environment variable is not set")
            self._client = self._build_client(uri)
            self._db = self._client.get_default_database(default=self._cfg.mongo_db)
            await self._client.admin.command("ping")
            _log.info("Conectado a MongoDB (db=%s)", self._db.name)
            await self._on_connected()
        except PyMongoError as e:
            self.connected = False
            self._log_connect_failure(e)
        return self.connected

    def _log_connect_failure(self, err: Exception) -> None:
        _log.error("MongoDB connection error: %s", err)
        _log.error("MONGODB_URI exists: %s, environment: %s", bool(self._cfg.mongodb_uri), self._cfg.environment)
        if self._cfg.is_development:
            _log.warning("Asegura que MongoDB esté corriendo en local (mongod) o revisa MONGODB_URI")
        else:
            _log.error("Revisa MONGODB_URI en las variables de entorno del despliegue")
        _log.warning("La API sigue arriba en modo degradado (sin persistencia)")

    async def ping(self) -> bool:
        """Revalida la conexión y actualiza `connected`."""
        if self._client is None:
            self.connected = False
            return False
        try:
            await self._client.admin.command("ping")
        except PyMongoError as e:
            if self.connected:
                _log.warning("MongoDB dejó de responder: %s", e)
            self.connected = False
            return False
        if not self.connected:
            _log.info("Conexión a MongoDB recuperada")
        await self._on_connected()
        return True

    def mark_disconnected(self) -> None:
        self.connected = False

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            _log.info("Cliente MongoDB cerrado")
        self._client = None
        self._db = None
        self.connected = False
