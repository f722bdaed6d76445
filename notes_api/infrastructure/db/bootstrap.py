"""
Bootstrap de la base Mongo: define y aplica el validador (JSON Schema) e índices
de la colección `notes`. Se ejecuta al inicio de la app si hay conexión.
No tumba la app si algo falla; deja warnings en casos no críticos.
"""
from __future__ import annotations

from typing import Any, Dict, List
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from notes_api.domain.notes import Category, Priority

_log = logging.getLogger("notes.mongo.bootstrap")

NOTES_COLLECTION = "notes"

NOTE_VALIDATOR: Dict[str, Any] = {
    "bsonType": "object",
    "required": ["title", "content", "category", "priority", "isCompleted", "createdAt", "updatedAt"],
    "properties": {
        "title": {"bsonType": "string", "minLength": 1},
        "content": {"bsonType": "string", "minLength": 1},
        "category": {"bsonType": "string", "enum": [c.value for c in Category]},
        "priority": {"bsonType": "string", "enum": [p.value for p in Priority]},
        "isCompleted": {"bsonType": "bool"},
        "createdAt": {"bsonType": "date"},
        "updatedAt": {"bsonType": "date"},
    },
    "additionalProperties": True,
}

NOTE_INDEXES: List[Dict[str, Any]] = [
    {"keys": [("createdAt", DESCENDING)], "name": "ix_created_desc"},
    {"keys": [("category", ASCENDING), ("createdAt", DESCENDING)], "name": "ix_category_created"},
    {"keys": [("priority", ASCENDING), ("createdAt", DESCENDING)], "name": "ix_priority_created"},
]


async def _collmod_or_create(db: AsyncIOMotorDatabase, name: str, validator: Dict[str, Any]) -> None:
    try:
        if name in await db.list_collection_names():
            await db.command({
                "collMod": name,
                "validator": {"$jsonSchema": validator},
                "validationLevel": "moderate",
            })
        else:
            await db.create_collection(name, validator={"$jsonSchema": validator}, validationLevel="moderate")
    except PyMongoError as e:
        # Algunos planes (p.ej. Atlas compartido) no permiten collMod; seguimos sin validator
        _log.warning("No se pudo aplicar validator en '%s': %s", name, e)


async def _ensure_indexes(db: AsyncIOMotorDatabase, name: str, indexes: List[Dict[str, Any]]) -> None:
    coll = db[name]
    for ix in indexes:
        opts = dict(ix)
        keys = opts.pop("keys")
        try:
            await coll.create_index(keys, **opts)
        except PyMongoError as e:
            _log.warning("No se pudo crear índice en '%s' (%s): %s", name, keys, e)


async def ensure_collections(db: AsyncIOMotorDatabase) -> None:
    """Garantiza la colección de notas, su validador e índices."""
    await _collmod_or_create(db, NOTES_COLLECTION, NOTE_VALIDATOR)
    await _ensure_indexes(db, NOTES_COLLECTION, NOTE_INDEXES)
    _log.info("Colección '%s' lista", NOTES_COLLECTION)
