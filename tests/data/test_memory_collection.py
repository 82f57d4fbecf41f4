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
"""Tests for InMemoryDocumentCollection."""

from __future__ import annotations

import pytest

from docsession.data.adapters.memory import InMemoryDocumentCollection
from docsession.data.ports.outbound import DocumentCollection
from docsession.kernel.exceptions import DocumentStoreException, DuplicateDocumentException


@pytest.fixture
async def collection() -> InMemoryDocumentCollection:
    documents = InMemoryDocumentCollection()
    await documents.insert_one({"_id": "a", "expires": 100, "sessionData": {"k": 1}})
    await documents.insert_one({"_id": "b", "expires": 200, "sessionData": {}})
    await documents.insert_one({"_id": "c", "expires": 300})
    return documents


class TestConformance:
    def test_implements_document_collection(self):
        assert isinstance(InMemoryDocumentCollection(), DocumentCollection)


class TestFind:
    async def test_find_by_id(self, collection: InMemoryDocumentCollection):
        assert await collection.find_one({"_id": "a"}) == {"_id": "a", "expires": 100, "sessionData": {"k": 1}}

    async def test_find_missing(self, collection: InMemoryDocumentCollection):
        assert await collection.find_one({"_id": "zzz"}) is None

    async def test_id_and_extra_condition_must_both_match(self, collection: InMemoryDocumentCollection):
        assert await collection.find_one({"_id": "a", "expires": 999}) is None

    @pytest.mark.parametrize(
        ("filter", "expected"),
        [
            ({"expires": {"$lt": 200}}, 1),
            ({"expires": {"$lte": 200}}, 2),
            ({"expires": {"$gt": 200}}, 1),
            ({"expires": {"$gte": 100, "$lt": 300}}, 2),
            ({"expires": {"$ne": 100}}, 2),
            ({"_id": {"$in": ["a", "c", "x"]}}, 2),
            ({"sessionData.k": 1}, 1),
            ({"sessionData": None}, 1),
            ({}, 3),
        ],
    )
    async def test_filter_operators(self, collection: InMemoryDocumentCollection, filter, expected):
        assert await collection.count_documents(filter) == expected

    async def test_ordering_against_incomparable_type_does_not_match(self, collection: InMemoryDocumentCollection):
        assert await collection.count_documents({"expires": {"$lt": "soon"}}) == 0

    async def test_unsupported_operator_raises(self, collection: InMemoryDocumentCollection):
        with pytest.raises(DocumentStoreException, match=r"\$regex"):
            await collection.find_one({"expires": {"$regex": "1"}})

    async def test_returned_documents_are_copies(self, collection: InMemoryDocumentCollection):
        found = await collection.find_one({"_id": "a"})
        found["sessionData"]["k"] = "mutated"
        assert (await collection.find_one({"_id": "a"}))["sessionData"] == {"k": 1}


class TestInsert:
    async def test_duplicate_id_raises(self, collection: InMemoryDocumentCollection):
        with pytest.raises(DuplicateDocumentException):
            await collection.insert_one({"_id": "a"})

    async def test_generates_id_when_absent(self):
        documents = InMemoryDocumentCollection()
        await documents.insert_one({"expires": 1})
        found = await documents.find_one({"expires": 1})
        assert isinstance(found["_id"], str)

    async def test_inserted_document_is_copied(self):
        documents = InMemoryDocumentCollection()
        source = {"_id": "x", "sessionData": {"k": 1}}
        await documents.insert_one(source)
        source["sessionData"]["k"] = 2
        assert (await documents.find_one({"_id": "x"}))["sessionData"] == {"k": 1}


class TestUpdate:
    async def test_set_dotted_path(self, collection: InMemoryDocumentCollection):
        assert await collection.update_one({"_id": "b"}, {"$set": {"sessionData.user": {"id": 7}}}) == 1
        assert (await collection.find_one({"_id": "b"}))["sessionData"] == {"user": {"id": 7}}

    async def test_set_creates_missing_parents(self, collection: InMemoryDocumentCollection):
        await collection.update_one({"_id": "c"}, {"$set": {"sessionData.k": "v"}})
        assert (await collection.find_one({"_id": "c"}))["sessionData"] == {"k": "v"}

    async def test_unset_dotted_path(self, collection: InMemoryDocumentCollection):
        assert await collection.update_one({"_id": "a"}, {"$unset": {"sessionData.k": ""}}) == 1
        assert (await collection.find_one({"_id": "a"}))["sessionData"] == {}

    async def test_unset_missing_path_still_matches(self, collection: InMemoryDocumentCollection):
        assert await collection.update_one({"_id": "c"}, {"$unset": {"sessionData.k": ""}}) == 1

    async def test_set_through_scalar_raises(self, collection: InMemoryDocumentCollection):
        with pytest.raises(DocumentStoreException):
            await collection.update_one({"_id": "a"}, {"$set": {"expires.inner": 1}})

    async def test_set_on_insert_ignored_for_existing(self, collection: InMemoryDocumentCollection):
        await collection.update_one({"_id": "a"}, {"$setOnInsert": {"expires": 1}})
        assert (await collection.find_one({"_id": "a"}))["expires"] == 100

    async def test_update_missing_without_upsert(self, collection: InMemoryDocumentCollection):
        assert await collection.update_one({"_id": "zzz"}, {"$set": {"x": 1}}) == 0
        assert await collection.find_one({"_id": "zzz"}) is None

    async def test_update_one_upsert_inserts(self, collection: InMemoryDocumentCollection):
        matched = await collection.update_one(
            {"_id": "new"}, {"$set": {"sessionData.k": 1}, "$setOnInsert": {"expires": 5}}, upsert=True
        )
        assert matched == 0
        assert await collection.find_one({"_id": "new"}) == {"_id": "new", "sessionData": {"k": 1}, "expires": 5}

    async def test_find_one_and_update_returns_updated(self, collection: InMemoryDocumentCollection):
        doc = await collection.find_one_and_update({"_id": "a"}, {"$set": {"expires": 111}})
        assert doc["expires"] == 111

    async def test_find_one_and_update_upsert(self, collection: InMemoryDocumentCollection):
        doc = await collection.find_one_and_update(
            {"_id": "new"},
            {"$setOnInsert": {"sessionData": {}, "expires": 42}},
            upsert=True,
        )
        assert doc == {"_id": "new", "sessionData": {}, "expires": 42}
        assert await collection.count_documents({"_id": "new"}) == 1

    async def test_find_one_and_update_missing_without_upsert(self, collection: InMemoryDocumentCollection):
        assert await collection.find_one_and_update({"_id": "zzz"}, {"$set": {"x": 1}}) is None

    async def test_unsupported_update_operator_raises(self, collection: InMemoryDocumentCollection):
        with pytest.raises(DocumentStoreException, match=r"\$inc"):
            await collection.update_one({"_id": "a"}, {"$inc": {"expires": 1}})

    async def test_replace_keeps_id(self, collection: InMemoryDocumentCollection):
        assert await collection.replace_one({"_id": "a"}, {"expires": 1, "sessionData": {}}) == 1
        assert await collection.find_one({"_id": "a"}) == {"_id": "a", "expires": 1, "sessionData": {}}

    async def test_replace_missing(self, collection: InMemoryDocumentCollection):
        assert await collection.replace_one({"_id": "zzz"}, {"expires": 1}) == 0


class TestDelete:
    async def test_delete_one(self, collection: InMemoryDocumentCollection):
        assert await collection.delete_one({"_id": "a"}) == 1
        assert await collection.delete_one({"_id": "a"}) == 0

    async def test_delete_many(self, collection: InMemoryDocumentCollection):
        assert await collection.delete_many({"expires": {"$lt": 250}}) == 2
        assert await collection.count_documents({}) == 1

    async def test_dispose_drops_documents(self, collection: InMemoryDocumentCollection):
        await collection.dispose()
        assert await collection.count_documents({}) == 0
