"""
Notebook API - Resource Service Unit Tests
==========================================

What:  Tests for ResourceService business logic.
How:   Uses the mock_store fixture; no database is touched.

What we test:
    ✅ create strips reserved fields and stamps the subject as owner
    ✅ get / update / delete scope every filter by owner
    ✅ Malformed ids never reach the store
    ✅ No match → NotFoundError with an id-free message
    ✅ Store exceptions → StoreError naming only the failed operation
"""

import uuid

import pytest

from notebook_api.exceptions import InvalidIdentifierError, NotFoundError, StoreError
from notebook_api.services.resource_service import ResourceService, folder_service, note_service


class TestCreateAndList:

    def setup_method(self):
        self.service = ResourceService(collection="notes", resource="note")

    @pytest.mark.asyncio
    async def test_create_stamps_owner_and_strips_reserved_fields(self, mock_store):
        new_id = uuid.uuid4()
        mock_store.insert_one.return_value = new_id

        result = await self.service.create(
            mock_store, "u1", {"title": "A", "owner": "u2", "userId": "u2", "id": "x"}
        )

        assert result == new_id
        mock_store.insert_one.assert_awaited_once_with("notes", {"title": "A", "owner": "u1"})

    @pytest.mark.asyncio
    async def test_create_store_failure(self, mock_store):
        mock_store.insert_one.side_effect = ConnectionResetError("reset by peer")

        with pytest.raises(StoreError) as exc_info:
            await self.service.create(mock_store, "u1", {"title": "A"})

        assert exc_info.value.message == "Failed to create note"
        assert exc_info.value.context["error_type"] == "ConnectionResetError"

    @pytest.mark.asyncio
    async def test_list_is_scoped(self, mock_store):
        mock_store.find.return_value = [{"id": "1", "owner": "u1"}]

        result = await self.service.list(mock_store, "u1")

        assert result == [{"id": "1", "owner": "u1"}]
        mock_store.find.assert_awaited_once_with("notes", {"owner": "u1"})

    @pytest.mark.asyncio
    async def test_list_store_failure(self, mock_store):
        mock_store.find.side_effect = RuntimeError("pool exhausted")

        with pytest.raises(StoreError) as exc_info:
            await self.service.list(mock_store, "u1")

        assert exc_info.value.message == "Failed to fetch notes"
        assert "pool exhausted" not in exc_info.value.message


class TestSingleDocument:

    def setup_method(self):
        self.service = ResourceService(collection="notes", resource="note")
        self.document_id = uuid.uuid4()

    @pytest.mark.asyncio
    async def test_get_found(self, mock_store):
        document = {"id": str(self.document_id), "title": "A", "owner": "u1"}
        mock_store.find_one.return_value = document

        assert await self.service.get(mock_store, "u1", str(self.document_id)) == document
        mock_store.find_one.assert_awaited_once_with(
            "notes", {"id": self.document_id, "owner": "u1"}
        )

    @pytest.mark.asyncio
    async def test_get_not_found(self, mock_store):
        mock_store.find_one.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.get(mock_store, "u1", str(self.document_id))

        assert exc_info.value.message == "Note not found"
        assert str(self.document_id) not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_get_store_failure(self, mock_store):
        mock_store.find_one.side_effect = OSError("connection refused")

        with pytest.raises(StoreError, match="Failed to fetch note"):
            await self.service.get(mock_store, "u1", str(self.document_id))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", ["get", "delete"])
    async def test_invalid_id_never_reaches_store(self, mock_store, operation):
        with pytest.raises(InvalidIdentifierError, match="Invalid note ID"):
            await getattr(self.service, operation)(mock_store, "u1", "not-an-id")

        mock_store.find_one.assert_not_awaited()
        mock_store.delete_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_invalid_id_never_reaches_store(self, mock_store):
        with pytest.raises(InvalidIdentifierError):
            await self.service.update(mock_store, "u1", "not-an-id", {"title": "B"})

        mock_store.update_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_merges_stripped_fields(self, mock_store):
        mock_store.update_one.return_value = 1

        await self.service.update(
            mock_store, "u1", str(self.document_id), {"title": "B", "owner": "u2"}
        )

        mock_store.update_one.assert_awaited_once_with(
            "notes", {"id": self.document_id, "owner": "u1"}, {"title": "B"}
        )

    @pytest.mark.asyncio
    async def test_update_not_found(self, mock_store):
        mock_store.update_one.return_value = 0

        with pytest.raises(NotFoundError, match="Note not found"):
            await self.service.update(mock_store, "u1", str(self.document_id), {"title": "B"})

    @pytest.mark.asyncio
    async def test_update_store_failure(self, mock_store):
        mock_store.update_one.side_effect = RuntimeError("deadlock detected")

        with pytest.raises(StoreError, match="Failed to update note"):
            await self.service.update(mock_store, "u1", str(self.document_id), {"title": "B"})

    @pytest.mark.asyncio
    async def test_delete_found(self, mock_store):
        mock_store.delete_one.return_value = 1

        await self.service.delete(mock_store, "u1", str(self.document_id))

        mock_store.delete_one.assert_awaited_once_with(
            "notes", {"id": self.document_id, "owner": "u1"}
        )

    @pytest.mark.asyncio
    async def test_delete_not_found(self, mock_store):
        mock_store.delete_one.return_value = 0

        with pytest.raises(NotFoundError, match="Note not found"):
            await self.service.delete(mock_store, "u1", str(self.document_id))

    @pytest.mark.asyncio
    async def test_delete_store_failure(self, mock_store):
        mock_store.delete_one.side_effect = RuntimeError("gone")

        with pytest.raises(StoreError, match="Failed to delete note"):
            await self.service.delete(mock_store, "u1", str(self.document_id))


class TestServiceInstances:

    def test_note_and_folder_services(self):
        assert (note_service.collection, note_service.resource) == ("notes", "note")
        assert (folder_service.collection, folder_service.resource) == ("folders", "folder")
        assert folder_service.label == "Folder"

    @pytest.mark.asyncio
    async def test_folder_messages(self, mock_store):
        mock_store.find.side_effect = RuntimeError("down")

        with pytest.raises(StoreError, match="Failed to fetch folders"):
            await folder_service.list(mock_store, "u1")

        with pytest.raises(InvalidIdentifierError, match="Invalid folder ID"):
            await folder_service.get(mock_store, "u1", "bad")
