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
"""MongoDB document collection backed by Motor."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar, cast

import pymongo
from bson.errors import BSONError
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from docsession.data.ports.outbound import Document, Filter, Update
from docsession.kernel.exceptions import DocumentStoreException, DuplicateDocumentException

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorCollection

_logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def translate_errors(func: F) -> F:
    """Re-raise driver errors from an async collection method as DocumentStoreException."""

    @functools.wraps(func)
    async def wrapper(self: MotorDocumentCollection, *args: Any, **kwargs: Any) -> Any:
        try:
            return await func(self, *args, **kwargs)
        except DuplicateKeyError as exc:
            raise DuplicateDocumentException(
                f"Duplicate key in collection '{self.name}': {exc}",
                code="DOCUMENT_DUPLICATE",
            ) from exc
        except (PyMongoError, BSONError, OverflowError) as exc:
            # BSON encoding errors (DocumentTooLarge, ints over 64 bits) are not PyMongoErrors
            _logger.warning("MongoDB %s on '%s' failed: %s", func.__name__, self.name, exc)
            raise DocumentStoreException(
                f"MongoDB {func.__name__} on '{self.name}' failed: {exc}",
                code="DOCUMENT_STORE",
                context={"operation": func.__name__},
            ) from exc

    return wrapper  # type: ignore[return-value]


class MotorDocumentCollection:
    """DocumentCollection adapter over a Motor ``AsyncIOMotorCollection``.

    Driver errors surface as :class:`DocumentStoreException`; duplicate
    primary keys as :class:`DuplicateDocumentException`.
    """

    def __init__(self, collection: AsyncIOMotorCollection) -> None:  # type: ignore[type-arg]
        self._collection = collection

    @property
    def name(self) -> str:
        return cast(str, self._collection.name)

    @translate_errors
    async def ensure_indexes(self) -> None:
        """Create the ascending ``expires`` index used by garbage collection."""
        await self._collection.create_index([("expires", pymongo.ASCENDING)])

    @translate_errors
    async def find_one(self, filter: Filter) -> Document | None:
        return cast("Document | None", await self._collection.find_one(filter))

    @translate_errors
    async def insert_one(self, document: Document) -> None:
        # insert_one adds _id to the dict it is given
        await self._collection.insert_one(dict(document))

    @translate_errors
    async def find_one_and_update(
        self, filter: Filter, update: Update, *, upsert: bool = False
    ) -> Document | None:
        return cast(
            "Document | None",
            await self._collection.find_one_and_update(
                filter,
                update,
                upsert=upsert,
                return_document=ReturnDocument.AFTER,
            ),
        )

    @translate_errors
    async def update_one(self, filter: Filter, update: Update, *, upsert: bool = False) -> int:
        result = await self._collection.update_one(filter, update, upsert=upsert)
        return cast(int, result.matched_count)

    @translate_errors
    async def replace_one(self, filter: Filter, document: Document) -> int:
        result = await self._collection.replace_one(filter, document)
        return cast(int, result.matched_count)

    @translate_errors
    async def delete_one(self, filter: Filter) -> int:
        result = await self._collection.delete_one(filter)
        return cast(int, result.deleted_count)

    @translate_errors
    async def delete_many(self, filter: Filter) -> int:
        result = await self._collection.delete_many(filter)
        return cast(int, result.deleted_count)

    @translate_errors
    async def count_documents(self, filter: Filter) -> int:
        return cast(int, await self._collection.count_documents(filter))

    async def dispose(self) -> None:
        """Close the Motor client that owns this collection."""
        self._collection.database.client.close()
