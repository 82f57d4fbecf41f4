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
"""Outbound port: the document collection a session repository is built on."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

Document = dict[str, Any]
Filter = dict[str, Any]
Update = dict[str, Any]


@runtime_checkable
class DocumentCollection(Protocol):
    """Narrow, Mongo-shaped document collection interface.

    Filters support field equality and ``$eq``, ``$ne``, ``$lt``, ``$lte``,
    ``$gt``, ``$gte``, ``$in``. Updates support ``$set``, ``$unset`` and
    ``$setOnInsert`` with dotted field paths. Every document carries its
    primary key in ``_id``.
    """

    async def find_one(self, filter: Filter) -> Document | None: ...

    async def insert_one(self, document: Document) -> None: ...

    async def find_one_and_update(
        self, filter: Filter, update: Update, *, upsert: bool = False
    ) -> Document | None: ...

    async def update_one(self, filter: Filter, update: Update, *, upsert: bool = False) -> int: ...

    async def replace_one(self, filter: Filter, document: Document) -> int: ...

    async def delete_one(self, filter: Filter) -> int: ...

    async def delete_many(self, filter: Filter) -> int: ...

    async def count_documents(self, filter: Filter) -> int: ...

    async def dispose(self) -> None: ...
