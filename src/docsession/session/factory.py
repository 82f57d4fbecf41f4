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
"""Session store construction from configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog

from docsession.config.properties.mongodb import CONNECTIONS_PREFIX, DocumentProperties
from docsession.config.properties.session import SessionProperties
from docsession.core.config import Config
from docsession.data.ports.outbound import DocumentCollection
from docsession.kernel.exceptions import ConfigurationException
from docsession.session.repository import SessionRepository
from docsession.session.store import DocumentSessionStore

logger = structlog.get_logger("docsession.session.factory")

_INIT_FAILED = "Could not initialize the session."

_SUPPORTED_SAVE_HANDLERS = ("user",)
_SUPPORTED_STORE_TYPES = ("memory", "mongodb")


def _fail(reason: str, **context: Any) -> ConfigurationException:
    return ConfigurationException(f"{_INIT_FAILED} {reason}", code="SESSION_CONFIG", context=context)


def _as_flag(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise _fail(f"'{name}' must be a boolean, got {value!r}", setting=name)


def load_session_properties(config: Config) -> SessionProperties:
    """Bind and validate ``docsession.session.*``.

    Fills in ``name`` from ``docsession.app.name`` or, failing that, the
    working directory's name.

    Raises:
        ConfigurationException: A setting is missing or cannot be applied.
    """
    try:
        properties = config.bind(SessionProperties)
    except (TypeError, ValueError) as exc:
        raise _fail(str(exc)) from exc

    if isinstance(properties.timeout, bool) or not isinstance(properties.timeout, int) or properties.timeout <= 0:
        raise _fail(f"'timeout' must be a positive integer, got {properties.timeout!r}", setting="timeout")
    if properties.save_handler not in _SUPPORTED_SAVE_HANDLERS:
        raise _fail(
            f"'save_handler' must be one of {_SUPPORTED_SAVE_HANDLERS}, got {properties.save_handler!r}",
            setting="save_handler",
        )
    properties.use_trans_sid = _as_flag("use_trans_sid", properties.use_trans_sid)
    properties.use_cookies = _as_flag("use_cookies", properties.use_cookies)
    if not properties.connection:
        raise _fail("'connection' must name a configured document store", setting="connection")

    if not properties.name:
        properties.name = str(config.get("docsession.app.name") or Path.cwd().name)

    return properties


def load_document_properties(config: Config, connection: str) -> DocumentProperties:
    """Bind ``docsession.data.connections.<connection>.*``."""
    prefix = f"{CONNECTIONS_PREFIX}.{connection}"
    if not config.get_section(prefix):
        raise _fail(f"Unknown document store connection '{connection}'", connection=connection)
    try:
        properties = config.bind(DocumentProperties, prefix=prefix)
    except (TypeError, ValueError) as exc:
        raise _fail(str(exc), connection=connection) from exc
    if properties.type not in _SUPPORTED_STORE_TYPES:
        raise _fail(
            f"Connection '{connection}' has unsupported type {properties.type!r}",
            connection=connection,
        )
    return properties


async def create_collection(properties: DocumentProperties) -> DocumentCollection:
    """Build the document collection described by *properties*."""
    if properties.type == "mongodb":
        from docsession.data.adapters.mongodb.initializer import initialize_collection

        return await initialize_collection(
            uri=properties.uri,
            database=properties.database,
            collection=properties.collection,
        )

    from docsession.data.adapters.memory import InMemoryDocumentCollection

    return InMemoryDocumentCollection(name=properties.collection)


async def create_session_store(
    config: Config,
    *,
    collection: DocumentCollection | None = None,
) -> DocumentSessionStore:
    """Validate session settings and build a store (not yet bound to a session id).

    Args:
        config: Loaded configuration.
        collection: Use this collection instead of the configured connection.

    Raises:
        ConfigurationException: A required setting could not be applied.
    """
    properties = load_session_properties(config)
    if collection is None:
        document_properties = load_document_properties(config, properties.connection)
        collection = await create_collection(document_properties)

    logger.info(
        "session_store_configured",
        connection=properties.connection,
        name=properties.name,
        timeout=properties.timeout,
    )
    return DocumentSessionStore(
        SessionRepository(collection),
        timeout=properties.timeout,
        name=properties.name,
    )
