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
"""Motor collection initializer helper."""

from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorClient

from docsession.data.adapters.mongodb.collection import MotorDocumentCollection


async def initialize_collection(
    uri: str,
    database: str,
    collection: str,
    client: AsyncIOMotorClient | None = None,  # type: ignore[type-arg]
) -> MotorDocumentCollection:
    """Connect to a MongoDB collection and prepare it for session storage.

    Creates a Motor client (unless *client* is supplied), wraps the named
    collection and ensures its indexes.

    Args:
        uri: MongoDB connection URI (e.g. ``mongodb://localhost:27017``).
        database: Database name.
        collection: Collection name.
        client: Optional pre-built Motor-compatible client.

    Returns:
        The ready collection adapter; ``dispose()`` closes the client.
    """
    if client is None:
        client = AsyncIOMotorClient(uri)
    documents = MotorDocumentCollection(client[database][collection])
    await documents.ensure_indexes()
    return documents
