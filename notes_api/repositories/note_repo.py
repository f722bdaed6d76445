"""Repo de la colección `notes`.

- Documentos con los nombres de campo de la API (camelCase) más `_id`.
- Las lecturas exponen `id` (str) en lugar de `_id`.
- Traduce errores de PyMongo a los errores de almacenamiento de la app.
"""
from __future__ import annotations

import re
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import (
    ConnectionFailure,
    ExecutionTimeout,
    NetworkTimeout,
    PyMongoError,
    ServerSelectionTimeoutError,
    WTimeoutError,
)

from notes_api.core.exceptions import StoreOperationError, StoreTimeoutError, StoreUnavailableError
from notes_api.infrastructure.db.bootstrap import NOTES_COLLECTION
from notes_api.infrastructure.db.mongo import MongoConnection

NEWEST_FIRST = [("createdAt", DESCENDING), ("_id", DESCENDING)]


def _oid(note_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(note_id)
    except (InvalidId, TypeError):
        return None


def _out(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if doc is None:
        return None
    d = dict(doc)
    d["id"] = str(d.pop("_id", ""))
    d.pop("__v", None)  # documentos viejos creados por mongoose
    return d


class NoteRepository:
    def __init__(self, mongo: MongoConnection) -> None:
        self._mongo = mongo

    @property
    def _coll(self):
        return self._mongo.db[NOTES_COLLECTION]

    @asynccontextmanager
    async def _guard(self) -> AsyncIterator[None]:
        try:
            yield
        except ServerSelectionTimeoutError as e:
            self._mongo.mark_disconnected()
            raise StoreUnavailableError(str(e)) from e
        except (NetworkTimeout, ExecutionTimeout, WTimeoutError) as e:
            raise StoreTimeoutError(str(e)) from e
        except ConnectionFailure as e:
            self._mongo.mark_disconnected()
            raise StoreUnavailableError(str(e)) from e
        except PyMongoError as e:
            raise StoreOperationError(str(e)) from e

    async def is_available(self) -> bool:
        """True si hay conexión; si estaba caída intenta un ping."""
        return self._mongo.connected or await self._mongo.ping()

    async def insert(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        """Inserta la nota y devuelve el documento guardado (con `id`)."""
        data = dict(doc)
        async with self._guard():
            res = await self._coll.insert_one(data)
        data["_id"] = res.inserted_id
        return _out(data)

    async def get(self, note_id: str) -> Optional[Dict[str, Any]]:
        oid = _oid(note_id)
        if oid is None:
            return None
        async with self._guard():
            doc = await self._coll.find_one({"_id": oid})
        return _out(doc)

    async def find(
        self,
        category: Optional[str] = None,
        priority: Optional[str] = None,
        text: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Lista notas por filtros (igualdad exacta / substring sin mayúsculas), más nuevas primero."""
        filtro: Dict[str, Any] = {}
        if category is not None:
            filtro["category"] = category
        if priority is not None:
            filtro["priority"] = priority
        if text:
            pattern = {"$regex": re.escape(text), "$options": "i"}
            filtro["$or"] = [{"title": pattern}, {"content": pattern}]
        async with self._guard():
            docs = await self._coll.find(filtro).sort(NEWEST_FIRST).to_list(length=None)
        return [_out(d) for d in docs]

    async def update(self, note_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Aplica `$set` con los campos dados y devuelve el documento actualizado."""
        oid = _oid(note_id)
        if oid is None:
            return None
        async with self._guard():
            doc = await self._coll.find_one_and_update(
                {"_id": oid},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        return _out(doc)

    async def toggle_completed(self, note_id: str, now: datetime) -> Optional[Dict[str, Any]]:
        """Invierte `isCompleted` en una sola operación atómica (pipeline update)."""
        oid = _oid(note_id)
        if oid is None:
            return None
        async with self._guard():
            doc = await self._coll.find_one_and_update(
                {"_id": oid},
                [{"$set": {"isCompleted": {"$not": ["$isCompleted"]}, "updatedAt": now}}],
                return_document=ReturnDocument.AFTER,
            )
        return _out(doc)

    async def delete(self, note_id: str) -> Optional[Dict[str, Any]]:
        oid = _oid(note_id)
        if oid is None:
            return None
        async with self._guard():
            doc = await self._coll.find_one_and_delete({"_id": oid})
        return _out(doc)
