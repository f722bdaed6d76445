"""
Shared pytest fixtures.

- `store`: in-memory stand-in for `NoteRepository` (same async interface).
- `service`: `NoteService` bound to that store.
- `test_client`: HTTPX AsyncClient over the FastAPI app with the service and
  the Mongo connection overridden (no real MongoDB needed).
"""
import os
from datetime import datetime
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient

os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from notes_api.services.note_service import NoteService  # noqa: E402


class InMemoryNoteStore:
    """Mirrors NoteRepository semantics over a dict."""

    def __init__(self) -> None:
        self.docs: Dict[str, Dict[str, Any]] = {}
        self.available = True

    async def is_available(self) -> bool:
        return self.available

    def _sorted(self, docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return sorted(docs, key=lambda d: (d["createdAt"], ObjectId(d["id"])), reverse=True)

    async def insert(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        data = dict(doc, id=str(ObjectId()))
        self.docs[data["id"]] = data
        return dict(data)

    async def get(self, note_id: str) -> Optional[Dict[str, Any]]:
        doc = self.docs.get(note_id)
        return dict(doc) if doc else None

    async def find(self, category=None, priority=None, text=None) -> List[Dict[str, Any]]:
        out = []
        for d in self.docs.values():
            if category is not None and d["category"] != category:
                continue
            if priority is not None and d["priority"] != priority:
                continue
            if text and text.lower() not in d["title"].lower() and text.lower() not in d["content"].lower():
                continue
            out.append(dict(d))
        return self._sorted(out)

    async def update(self, note_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if note_id not in self.docs:
            return None
        self.docs[note_id].update(changes)
        return dict(self.docs[note_id])

    async def toggle_completed(self, note_id: str, now: datetime) -> Optional[Dict[str, Any]]:
        if note_id not in self.docs:
            return None
        doc = self.docs[note_id]
        doc["isCompleted"] = not doc["isCompleted"]
        doc["updatedAt"] = now
        return dict(doc)

    async def delete(self, note_id: str) -> Optional[Dict[str, Any]]:
        return self.docs.pop(note_id, None)


class FakeMongo:
    def __init__(self, connected: bool = True) -> None:
        self.connected = connected

    async def ping(self) -> bool:
        return self.connected


@pytest.fixture
def store():
    return InMemoryNoteStore()


@pytest.fixture
def service(store):
    return NoteService(store)


@pytest.fixture
def fake_mongo():
    return FakeMongo()


@pytest_asyncio.fixture
async def test_client(service, fake_mongo):
    from notes_api.api.deps import get_mongo, get_note_service
    from notes_api.main import app

    app.dependency_overrides[get_note_service] = lambda: service
    app.dependency_overrides[get_mongo] = lambda: fake_mongo
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
