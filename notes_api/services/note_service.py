"""
Service layer for notes: validation, defaults, timestamps and error mapping
over the note repository.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type, TypeVar

from notes_api.core.exceptions import NotFoundError, StoreUnavailableError, ValidationError
from notes_api.domain.notes import (
    DEFAULT_CATEGORY,
    DEFAULT_PRIORITY,
    Category,
    Note,
    NoteCreate,
    NoteUpdate,
    Priority,
)
from notes_api.repositories.note_repo import NoteRepository

_log = logging.getLogger("notes.service")

E = TypeVar("E", Category, Priority)


def _now() -> datetime:
    # BSON dates guardan milisegundos; truncamos para que lo devuelto = lo leído
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def _required_text(value: Optional[str], field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError("Title and content are required", detail=f"'{field}' must not be empty", field=field)
    return text


def _enum_value(enum_cls: Type[E], value: str, field: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(
            "Validation error",
            detail=f"'{value}' is not a valid {field} (allowed: {allowed})",
            field=field,
        ) from None


def _enum_or_none(enum_cls: Type[E], value: str) -> Optional[E]:
    try:
        return enum_cls(value)
    except ValueError:
        return None


class NoteService:
    """Operaciones sobre notas; sin estado propio entre llamadas."""

    def __init__(self, store: NoteRepository) -> None:
        self._store = store

    async def _require_store(self) -> None:
        if not await self._store.is_available():
            raise StoreUnavailableError()

    async def create(self, payload: NoteCreate) -> Note:
        title = _required_text(payload.title, "title")
        content = _required_text(payload.content, "content")
        category = _enum_value(Category, payload.category, "category") if payload.category else DEFAULT_CATEGORY
        priority = _enum_value(Priority, payload.priority, "priority") if payload.priority else DEFAULT_PRIORITY
        await self._require_store()

        now = _now()
        doc = await self._store.insert({
            "title": title,
            "content": content,
            "category": category.value,
            "priority": priority.value,
            "isCompleted": False,
            "createdAt": now,
            "updatedAt": now,
        })
        _log.info("Note created id=%s", doc["id"])
        return Note.model_validate(doc)

    async def get_all(self) -> List[Note]:
        await self._require_store()
        return [Note.model_validate(d) for d in await self._store.find()]

    async def get_by_id(self, note_id: str) -> Note:
        await self._require_store()
        doc = await self._store.get(note_id)
        if doc is None:
            raise NotFoundError(note_id)
        return Note.model_validate(doc)

    async def update(self, note_id: str, changes: NoteUpdate) -> Note:
        """Sobrescribe sólo los campos enviados; `updatedAt` se refresca siempre."""
        set_ops: Dict[str, Any] = {}
        if changes.title is not None:
            set_ops["title"] = _required_text(changes.title, "title")
        if changes.content is not None:
            set_ops["content"] = _required_text(changes.content, "content")
        if changes.category is not None:
            set_ops["category"] = _enum_value(Category, changes.category, "category").value
        if changes.priority is not None:
            set_ops["priority"] = _enum_value(Priority, changes.priority, "priority").value
        if changes.is_completed is not None:
            set_ops["isCompleted"] = changes.is_completed
        await self._require_store()

        set_ops["updatedAt"] = _now()
        doc = await self._store.update(note_id, set_ops)
        if doc is None:
            raise NotFoundError(note_id)
        return Note.model_validate(doc)

    async def delete(self, note_id: str) -> Note:
        await self._require_store()
        doc = await self._store.delete(note_id)
        if doc is None:
            raise NotFoundError(note_id)
        _log.info("Note deleted id=%s", note_id)
        return Note.model_validate(doc)

    async def toggle_completion(self, note_id: str) -> Note:
        await self._require_store()
        doc = await self._store.toggle_completed(note_id, _now())
        if doc is None:
            raise NotFoundError(note_id)
        return Note.model_validate(doc)

    async def filter_by_category(self, category: str) -> List[Note]:
        await self._require_store()
        # Un valor fuera del conjunto no coincide con ninguna nota
        if _enum_or_none(Category, category) is None:
            return []
        return [Note.model_validate(d) for d in await self._store.find(category=category)]

    async def filter_by_priority(self, priority: str) -> List[Note]:
        await self._require_store()
        if _enum_or_none(Priority, priority) is None:
            return []
        return [Note.model_validate(d) for d in await self._store.find(priority=priority)]

    async def search(self, query: str) -> List[Note]:
        """Substring sin distinguir mayúsculas en título o contenido; "" devuelve todas."""
        await self._require_store()
        return [Note.model_validate(d) for d in await self._store.find(text=query)]
