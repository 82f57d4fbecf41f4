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
"""Typed repository for session documents over a DocumentCollection."""

from __future__ import annotations

from typing import Any

from docsession.data.ports.outbound import DocumentCollection
from docsession.session.document import DATA_FIELD, EXPIRES_FIELD, ID_FIELD, SessionDocument


def _by_id(session_id: str) -> dict[str, Any]:
    return {ID_FIELD: session_id}


def _data_path(key: str) -> str:
    return f"{DATA_FIELD}.{key}"


class SessionRepository:
    """CRUD and expiry operations on :class:`SessionDocument`.

    Holds no business logic: key validation and expiry policy belong to the
    session store. Field-level methods return ``False`` when no document
    with the given id exists.
    """

    def __init__(self, collection: DocumentCollection) -> None:
        self._collection = collection

    @property
    def collection(self) -> DocumentCollection:
        return self._collection

    async def find_by_id(self, session_id: str) -> SessionDocument | None:
        """Find a session document by its identifier."""
        document = await self._collection.find_one(_by_id(session_id))
        return SessionDocument.from_document(document) if document is not None else None

    async def create(self, session_id: str, expires: int) -> SessionDocument:
        """Insert a new, empty session document.

        Raises:
            DuplicateDocumentException: A document with this id already exists.
        """
        entity = SessionDocument(id=session_id, expires=expires)
        await self._collection.insert_one(entity.to_document())
        return entity

    async def find_or_create(self, session_id: str, expires: int) -> SessionDocument:
        """Return the document for *session_id*, creating it atomically if absent.

        An existing document is returned untouched; *expires* only applies
        to a newly created one.
        """
        document = await self._collection.find_one_and_update(
            _by_id(session_id),
            {"$setOnInsert": {DATA_FIELD: {}, EXPIRES_FIELD: expires}},
            upsert=True,
        )
        if document is None:
            # Some drivers return nothing for an upsert that inserted.
            return SessionDocument(id=session_id, expires=expires)
        return SessionDocument.from_document(document)

    async def save(self, entity: SessionDocument) -> bool:
        """Replace the stored document with *entity*."""
        matched = await self._collection.replace_one(_by_id(entity.id), entity.to_document())
        return matched > 0

    async def set_field(self, session_id: str, key: str, value: Any) -> bool:
        """Set one key of ``sessionData`` without touching the others."""
        matched = await self._collection.update_one(
            _by_id(session_id), {"$set": {_data_path(key): value}}
        )
        return matched > 0

    async def unset_field(self, session_id: str, key: str) -> bool:
        """Remove one key of ``sessionData``; succeeds when the key is absent."""
        matched = await self._collection.update_one(
            _by_id(session_id), {"$unset": {_data_path(key): ""}}
        )
        return matched > 0

    async def replace_data(self, session_id: str, data: dict[str, Any]) -> bool:
        """Replace the whole ``sessionData`` mapping."""
        matched = await self._collection.update_one(_by_id(session_id), {"$set": {DATA_FIELD: data}})
        return matched > 0

    async def delete(self, entity: SessionDocument) -> None:
        """Delete *entity*'s document if it still exists."""
        await self.delete_by_id(entity.id)

    async def delete_by_id(self, session_id: str) -> bool:
        """Delete a session document. Returns ``True`` if one was removed."""
        return await self._collection.delete_one(_by_id(session_id)) > 0

    async def remove_where(self, expires_less_than: int) -> int:
        """Delete every document whose ``expires`` is strictly below the cutoff."""
        return await self._collection.delete_many({EXPIRES_FIELD: {"$lt": expires_less_than}})

    async def count_expired(self, cutoff: int) -> int:
        """Count documents that :meth:`remove_where` would delete."""
        return await self._collection.count_documents({EXPIRES_FIELD: {"$lt": cutoff}})

    async def dispose(self) -> None:
        await self._collection.dispose()
