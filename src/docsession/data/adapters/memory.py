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
"""In-memory document collection."""

from __future__ import annotations

import asyncio
import copy
import operator
import uuid
from collections.abc import Callable
from typing import Any

from docsession.data.ports.outbound import Document, Filter, Update
from docsession.kernel.exceptions import DocumentStoreException, DuplicateDocumentException

_MISSING = object()

_COMPARISONS: dict[str, Callable[[Any, Any], bool]] = {
    "$lt": operator.lt,
    "$lte": operator.le,
    "$gt": operator.gt,
    "$gte": operator.ge,
}


def _get_path(document: Document, path: str) -> Any:
    current: Any = document
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return _MISSING
        current = current[part]
    return current


def _set_path(document: Document, path: str, value: Any) -> None:
    *parents, leaf = path.split(".")
    current = document
    for part in parents:
        child = current.setdefault(part, {})
        if not isinstance(child, dict):
            raise DocumentStoreException(
                f"Cannot create field '{leaf}' in element {{{part}: {child!r}}}",
                code="DOCUMENT_PATH",
                context={"path": path},
            )
        current = child
    current[leaf] = copy.deepcopy(value)


def _unset_path(document: Document, path: str) -> None:
    *parents, leaf = path.split(".")
    current: Any = document
    for part in parents:
        current = current.get(part) if isinstance(current, dict) else None
        if current is None:
            return
    if isinstance(current, dict):
        current.pop(leaf, None)


def _is_operator_dict(condition: Any) -> bool:
    return isinstance(condition, dict) and bool(condition) and all(k.startswith("$") for k in condition)


def _evaluate(op: str, value: Any, operand: Any) -> bool:
    # Missing fields compare as null for equality, never for ordering.
    if op == "$eq":
        return (None if value is _MISSING else value) == operand
    if op == "$ne":
        return (None if value is _MISSING else value) != operand
    if op == "$in":
        return (None if value is _MISSING else value) in operand
    compare = _COMPARISONS.get(op)
    if compare is None:
        raise DocumentStoreException(f"Unsupported filter operator '{op}'", code="DOCUMENT_FILTER")
    if value is _MISSING:
        return False
    try:
        return bool(compare(value, operand))
    except TypeError:
        return False


def _matches(document: Document, filter: Filter) -> bool:
    for path, condition in filter.items():
        value = _get_path(document, path)
        if _is_operator_dict(condition):
            if not all(_evaluate(op, value, operand) for op, operand in condition.items()):
                return False
        elif not _evaluate("$eq", value, condition):
            return False
    return True


def _apply_update(document: Document, update: Update, *, inserting: bool) -> None:
    for op, fields in update.items():
        if op == "$set":
            for path, value in fields.items():
                _set_path(document, path, value)
        elif op == "$unset":
            for path in fields:
                _unset_path(document, path)
        elif op == "$setOnInsert":
            if inserting:
                for path, value in fields.items():
                    _set_path(document, path, value)
        else:
            raise DocumentStoreException(f"Unsupported update operator '{op}'", code="DOCUMENT_UPDATE")


def _seed_from_filter(filter: Filter) -> Document:
    """Build the base of an upserted document from the filter's equality fields."""
    seed: Document = {}
    for path, condition in filter.items():
        if _is_operator_dict(condition):
            if "$eq" in condition:
                _set_path(seed, path, condition["$eq"])
        else:
            _set_path(seed, path, condition)
    return seed


class InMemoryDocumentCollection:
    """In-memory document collection guarded by an asyncio.Lock.

    Documents are deep-copied on the way in and out, so callers never share
    state with the stored copy. Suitable for development, testing, and
    single-process applications.
    """

    def __init__(self, name: str = "sessions") -> None:
        self._name = name
        self._documents: dict[Any, Document] = {}
        self._lock = asyncio.Lock()

    @property
    def name(self) -> str:
        return self._name

    def _find(self, filter: Filter) -> Document | None:
        key = filter.get("_id", _MISSING)
        if key is not _MISSING and not _is_operator_dict(key):
            document = self._documents.get(key)
            return document if document is not None and _matches(document, filter) else None
        for document in self._documents.values():
            if _matches(document, filter):
                return document
        return None

    def _insert(self, document: Document) -> Document:
        document.setdefault("_id", uuid.uuid4().hex)
        if document["_id"] in self._documents:
            raise DuplicateDocumentException(
                f"Duplicate key in collection '{self._name}': _id={document['_id']!r}",
                code="DOCUMENT_DUPLICATE",
                context={"_id": document["_id"]},
            )
        self._documents[document["_id"]] = document
        return document

    async def find_one(self, filter: Filter) -> Document | None:
        """Return a copy of the first matching document, or ``None``."""
        async with self._lock:
            document = self._find(filter)
            return copy.deepcopy(document) if document is not None else None

    async def insert_one(self, document: Document) -> None:
        """Insert a document; raises DuplicateDocumentException on a taken ``_id``."""
        async with self._lock:
            self._insert(copy.deepcopy(document))

    async def find_one_and_update(
        self, filter: Filter, update: Update, *, upsert: bool = False
    ) -> Document | None:
        """Apply *update* to the first match and return it as modified."""
        async with self._lock:
            document = self._find(filter)
            if document is not None:
                _apply_update(document, update, inserting=False)
            elif upsert:
                document = _seed_from_filter(filter)
                _apply_update(document, update, inserting=True)
                self._insert(document)
            else:
                return None
            return copy.deepcopy(document)

    async def update_one(self, filter: Filter, update: Update, *, upsert: bool = False) -> int:
        """Apply *update* to the first match. Returns the matched count."""
        async with self._lock:
            document = self._find(filter)
            if document is not None:
                _apply_update(document, update, inserting=False)
                return 1
            if upsert:
                document = _seed_from_filter(filter)
                _apply_update(document, update, inserting=True)
                self._insert(document)
            return 0

    async def replace_one(self, filter: Filter, document: Document) -> int:
        """Replace the first match, keeping its ``_id``. Returns the matched count."""
        async with self._lock:
            current = self._find(filter)
            if current is None:
                return 0
            replacement = copy.deepcopy(document)
            replacement["_id"] = current["_id"]
            self._documents[current["_id"]] = replacement
            return 1

    async def delete_one(self, filter: Filter) -> int:
        """Delete the first match. Returns the deleted count."""
        async with self._lock:
            document = self._find(filter)
            if document is None:
                return 0
            del self._documents[document["_id"]]
            return 1

    async def delete_many(self, filter: Filter) -> int:
        """Delete every match. Returns the deleted count."""
        async with self._lock:
            doomed = [key for key, document in self._documents.items() if _matches(document, filter)]
            for key in doomed:
                del self._documents[key]
            return len(doomed)

    async def count_documents(self, filter: Filter) -> int:
        """Count matching documents."""
        async with self._lock:
            return sum(1 for document in self._documents.values() if _matches(document, filter))

    async def dispose(self) -> None:
        """Drop all documents."""
        async with self._lock:
            self._documents.clear()
