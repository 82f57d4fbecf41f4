# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for driver error translation in MotorDocumentCollection."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import DocumentTooLarge, DuplicateKeyError, ServerSelectionTimeoutError

from docsession.data.adapters.mongodb.collection import MotorDocumentCollection
from docsession.kernel.exceptions import DocumentStoreException, DuplicateDocumentException
from docsession.session.repository import SessionRepository
from docsession.session.store import DocumentSessionStore


def _motor_collection(**methods: AsyncMock) -> MagicMock:
    collection = MagicMock()
    collection.name = "sessions"
    for name, mock in methods.items():
        setattr(collection, name, mock)
    return collection


class TestErrorTranslation:
    async def test_driver_error_becomes_document_store_exception(self):
        raw = _motor_collection(find_one=AsyncMock(side_effect=ServerSelectionTimeoutError("no servers")))
        collection = MotorDocumentCollection(raw)

        with pytest.raises(DocumentStoreException) as exc_info:
            await collection.find_one({"_id": "a"})

        assert exc_info.value.context == {"operation": "find_one"}
        assert isinstance(exc_info.value.__cause__, ServerSelectionTimeoutError)

    async def test_duplicate_key_becomes_duplicate_document_exception(self):
        raw = _motor_collection(insert_one=AsyncMock(side_effect=DuplicateKeyError("E11000 duplicate key")))
        collection = MotorDocumentCollection(raw)

        with pytest.raises(DuplicateDocumentException):
            await collection.insert_one({"_id": "a"})

    async def test_store_write_reports_false_on_driver_error(self):
        raw = _motor_collection(
            find_one_and_update=AsyncMock(side_effect=ServerSelectionTimeoutError("no servers"))
        )
        store = DocumentSessionStore(SessionRepository(MotorDocumentCollection(raw)), session_id="abc")

        assert await store.write("k", "v") is False

    async def test_document_too_large_becomes_document_store_exception(self):
        raw = _motor_collection(update_one=AsyncMock(side_effect=DocumentTooLarge("BSON document too large")))
        collection = MotorDocumentCollection(raw)

        with pytest.raises(DocumentStoreException) as exc_info:
            await collection.update_one({"_id": "a"}, {"$set": {"sessionData.k": "x"}})

        assert isinstance(exc_info.value.__cause__, DocumentTooLarge)

    async def test_store_write_reports_false_on_oversized_document(self):
        raw = _motor_collection(
            find_one_and_update=AsyncMock(return_value={"_id": "abc", "sessionData": {}, "expires": 1}),
            update_one=AsyncMock(side_effect=DocumentTooLarge("BSON document too large")),
        )
        store = DocumentSessionStore(SessionRepository(MotorDocumentCollection(raw)), session_id="abc")

        assert await store.write("blob", "x") is False

    async def test_store_write_reports_false_on_integer_overflow(self):
        raw = _motor_collection(
            find_one_and_update=AsyncMock(return_value={"_id": "abc", "sessionData": {}, "expires": 1}),
            update_one=AsyncMock(side_effect=OverflowError("MongoDB can only handle up to 8-byte ints")),
        )
        store = DocumentSessionStore(SessionRepository(MotorDocumentCollection(raw)), session_id="abc")

        assert await store.write("big", 2**70) is False

    async def test_non_driver_errors_propagate_unchanged(self):
        raw = _motor_collection(delete_many=AsyncMock(side_effect=RuntimeError("bug")))
        collection = MotorDocumentCollection(raw)

        with pytest.raises(RuntimeError):
            await collection.delete_many({})

    async def test_dispose_closes_client(self):
        raw = _motor_collection()
        await MotorDocumentCollection(raw).dispose()
        raw.database.client.close.assert_called_once_with()
