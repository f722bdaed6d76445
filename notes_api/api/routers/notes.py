"""
Endpoints para `notes`: CRUD, toggle de completado, filtros y búsqueda.

La API es delgada: valida la forma del body y delega en `NoteService`; los
errores del dominio se traducen a status en `core/exceptions.py`.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, status

from notes_api.api.deps import get_note_service
from notes_api.api.schemas.note import NoteDeletedOut
from notes_api.domain.notes import Note, NoteCreate, NoteUpdate
from notes_api.services.note_service import NoteService


router = APIRouter(prefix="/notes", tags=["Notes"])


@router.get("", response_model=List[Note], summary="Listar notas")
async def list_notes(service: NoteService = Depends(get_note_service)):
    return await service.get_all()


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=Note,
    summary="Crear nota",
    description="Crea una nota; `category` y `priority` toman General/Medium si se omiten.",
)
async def create_note(
    payload: Optional[NoteCreate] = None,
    service: NoteService = Depends(get_note_service),
):
    return await service.create(payload or NoteCreate())


@router.get("/category/{category}", response_model=List[Note], summary="Notas por categoría")
async def notes_by_category(category: str, service: NoteService = Depends(get_note_service)):
    return await service.filter_by_category(category)


@router.get("/priority/{priority}", response_model=List[Note], summary="Notas por prioridad")
async def notes_by_priority(priority: str, service: NoteService = Depends(get_note_service)):
    return await service.filter_by_priority(priority)


@router.get("/search/{query:path}", response_model=List[Note], summary="Buscar notas")
async def search_notes(query: str, service: NoteService = Depends(get_note_service)):
    return await service.search(query)


@router.get("/{note_id}", response_model=Note, summary="Obtener nota")
async def get_note(note_id: str, service: NoteService = Depends(get_note_service)):
    return await service.get_by_id(note_id)


@router.put("/{note_id}", response_model=Note, summary="Actualizar nota (parcial)")
async def update_note(
    note_id: str,
    payload: Optional[NoteUpdate] = None,
    service: NoteService = Depends(get_note_service),
):
    return await service.update(note_id, payload or NoteUpdate())


@router.delete("/{note_id}", response_model=NoteDeletedOut, summary="Eliminar nota")
async def delete_note(note_id: str, service: NoteService = Depends(get_note_service)):
    deleted = await service.delete(note_id)
    return NoteDeletedOut(message="Note deleted successfully", deleted_note=deleted)


@router.patch("/{note_id}/toggle", response_model=Note, summary="Alternar completado")
async def toggle_note(note_id: str, service: NoteService = Depends(get_note_service)):
    return await service.toggle_completion(note_id)
