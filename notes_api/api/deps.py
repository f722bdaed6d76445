"""
Dependencias reutilizables para routers (FastAPI Depends).

- La conexión Mongo vive en `app.state.mongo` (creada en el startup).
- Mantener esta capa delgada: sin lógica de negocio.
"""
from fastapi import Depends, Request

from notes_api.infrastructure.db.mongo import MongoConnection
from notes_api.repositories.note_repo import NoteRepository
from notes_api.services.note_service import NoteService


def get_mongo(request: Request) -> MongoConnection:
    return request.app.state.mongo


def get_note_repository(mongo: MongoConnection = Depends(get_mongo)) -> NoteRepository:
    return NoteRepository(mongo)


def get_note_service(store: NoteRepository = Depends(get_note_repository)) -> NoteService:
    return NoteService(store)
