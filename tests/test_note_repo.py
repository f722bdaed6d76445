"""
NoteRepository tests against mocked Motor collections: query shape, id
handling and PyMongo error translation.
"""
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import AutoReconnect, ExecutionTimeout, ServerSelectionTimeoutError, WriteError

from notes_api.core.exceptions import StoreOperationError, StoreTimeoutError, StoreUnavailableError
from notes_api.repositories.note_repo import NEWEST_FIRST, NoteRepository

OID = ObjectId("64b7f0c2a1b2c3d4e5f60718")
NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


class StubMongo:
    def __init__(self, coll, connected=True):
        self.db = {"notes": coll}
        self.connected = connected
        self.ping = AsyncMock(return_value=False)

    def mark_disconnected(self):
        self.connected = False


@pytest.fixture
def coll():
    return MagicMock()


@pytest.fixture
def mongo(coll):
    return StubMongo(coll)


@pytest.fixture
def repo(mongo):
    return NoteRepository(mongo)


def _cursor(docs):
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=docs)
    return cursor


class TestReads:
    @pytest.mark.asyncio
    async def test_insert_exposes_string_id(self, repo, coll):
        coll.insert_one = AsyncMock(return_value=MagicMock(inserted_id=OID))
        doc = {"title": "t", "content": "c"}
        out = await repo.insert(doc)
        assert out == {"title": "t", "content": "c", "id": str(OID)}
        assert "_id" not in doc

    @pytest.mark.asyncio
    async def test_get_with_malformed_id_skips_query(self, repo, coll):
        coll.find_one = AsyncMock()
        assert await repo.get("not-an-object-id") is None
        coll.find_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_drops_mongoose_version_key(self, repo, coll):
        coll.find_one = AsyncMock(return_value={"_id": OID, "title": "t", "__v": 0})
        assert await repo.get(str(OID)) == {"id": str(OID), "title": "t"}
        coll.find_one.assert_awaited_once_with({"_id": OID})

    @pytest.mark.asyncio
    async def test_find_all_sorted_newest_first(self, repo, coll):
        coll.find.return_value = cursor = _cursor([{"_id": OID, "title": "t"}])
        out = await repo.find()
        coll.find.assert_called_once_with({})
        cursor.sort.assert_called_once_with(NEWEST_FIRST)
        assert out == [{"id": str(OID), "title": "t"}]

    @pytest.mark.asyncio
    async def test_find_text_is_escaped_and_case_insensitive(self, repo, coll):
        coll.find.return_value = _cursor([])
        await repo.find(text="a+b (c)")
        pattern = {"$regex": r"a\+b\ \(c\)", "$options": "i"}
        coll.find.assert_called_once_with({"$or": [{"title": pattern}, {"content": pattern}]})

    @pytest.mark.asyncio
    async def test_find_by_category_and_priority(self, repo, coll):
        coll.find.return_value = _cursor([])
        await repo.find(category="Work", priority="High")
        coll.find.assert_called_once_with({"category": "Work", "priority": "High"})


class TestWrites:
    @pytest.mark.asyncio
    async def test_update_sets_fields_and_returns_new_doc(self, repo, coll):
        coll.find_one_and_update = AsyncMock(return_value={"_id": OID, "title": "new"})
        out = await repo.update(str(OID), {"title": "new", "updatedAt": NOW})
        coll.find_one_and_update.assert_awaited_once_with(
            {"_id": OID},
            {"$set": {"title": "new", "updatedAt": NOW}},
            return_document=ReturnDocument.AFTER,
        )
        assert out["id"] == str(OID)

    @pytest.mark.asyncio
    async def test_update_missing_returns_none(self, repo, coll):
        coll.find_one_and_update = AsyncMock(return_value=None)
        assert await repo.update(str(OID), {"updatedAt": NOW}) is None

    @pytest.mark.asyncio
    async def test_toggle_uses_pipeline_update(self, repo, coll):
        coll.find_one_and_update = AsyncMock(return_value={"_id": OID, "isCompleted": True})
        await repo.toggle_completed(str(OID), NOW)
        args, kwargs = coll.find_one_and_update.call_args
        assert args[1] == [{"$set": {"isCompleted": {"$not": ["$isCompleted"]}, "updatedAt": NOW}}]
        assert kwargs["return_document"] is ReturnDocument.AFTER

    @pytest.mark.asyncio
    async def test_delete(self, repo, coll):
        coll.find_one_and_delete = AsyncMock(return_value={"_id": OID, "title": "t"})
        assert await repo.delete(str(OID)) == {"id": str(OID), "title": "t"}
        assert await repo.delete("bogus") is None


class TestErrors:
    @pytest.mark.asyncio
    async def test_server_selection_timeout_marks_disconnected(self, repo, coll, mongo):
        coll.find_one = AsyncMock(side_effect=ServerSelectionTimeoutError("no servers"))
        with pytest.raises(StoreUnavailableError):
            await repo.get(str(OID))
        assert mongo.connected is False

    @pytest.mark.asyncio
    async def test_connection_failure_is_unavailable(self, repo, coll, mongo):
        coll.insert_one = AsyncMock(side_effect=AutoReconnect("reset"))
        with pytest.raises(StoreUnavailableError):
            await repo.insert({"title": "t"})
        assert mongo.connected is False

    @pytest.mark.asyncio
    async def test_execution_timeout(self, repo, coll):
        coll.find_one_and_delete = AsyncMock(side_effect=ExecutionTimeout("too slow"))
        with pytest.raises(StoreTimeoutError):
            await repo.delete(str(OID))

    @pytest.mark.asyncio
    async def test_write_error_is_operation_error(self, repo, coll):
        coll.insert_one = AsyncMock(side_effect=WriteError("Document failed validation", code=121))
        with pytest.raises(StoreOperationError):
            await repo.insert({"title": "t"})


class TestAvailability:
    @pytest.mark.asyncio
    async def test_connected_skips_ping(self, repo, mongo):
        assert await repo.is_available() is True
        mongo.ping.assert_not_called()

    @pytest.mark.asyncio
    async def test_disconnected_retries_ping(self, repo, mongo):
        mongo.connected = False
        assert await repo.is_available() is False
        mongo.ping.assert_awaited_once()
