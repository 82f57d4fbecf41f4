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
"""DocumentSessionStore — session handler over a document repository."""

from __future__ import annotations

import time
from typing import Any

import structlog

from docsession.kernel.exceptions import (
    DocumentStoreException,
    InvalidSessionKeyException,
    SessionNotStartedException,
)
from docsession.session.document import SessionDocument
from docsession.session.repository import SessionRepository

logger = structlog.get_logger("docsession.session.store")

DEFAULT_TIMEOUT = 1200  # 20 minutes


def _validate_key(key: Any) -> str:
    """Reject keys that cannot be stored as a single ``sessionData`` field."""
    if not isinstance(key, str) or not key:
        raise InvalidSessionKeyException(
            f"Session key must be a non-empty string, got {key!r}",
            code="SESSION_KEY",
        )
    if "." in key or key.startswith("$") or "\x00" in key:
        raise InvalidSessionKeyException(
            f"Session key {key!r} must not contain '.' or NUL, or start with '$'",
            code="SESSION_KEY",
            context={"key": key},
        )
    return key


class DocumentSessionStore:
    """Reads and writes one session's keys in a document store.

    A store instance is the session context for one request: it carries the
    active session identifier and the shared repository. Use
    :meth:`for_session` to derive a handle for another identifier.

    The backing document is materialized lazily, on the first data
    operation, with ``expires = now + timeout``. Expiry is absolute and is
    not extended by later access.

    ``write``/``delete``/``clear`` report document store failures as
    ``False`` rather than raising; ``read``/``check`` propagate them.

    Example::

        store = DocumentSessionStore(SessionRepository(collection), session_id="abc")
        await store.write("user_id", 42)
        await store.read("user_id")   # 42
        await store.read("missing")   # None
    """

    def __init__(
        self,
        repository: SessionRepository,
        *,
        timeout: int = DEFAULT_TIMEOUT,
        name: str | None = None,
        session_id: str | None = None,
    ) -> None:
        self._repository = repository
        self._timeout = timeout
        self._name = name
        self._session_id = session_id or None

    @property
    def repository(self) -> SessionRepository:
        return self._repository

    @property
    def timeout(self) -> int:
        return self._timeout

    @property
    def name(self) -> str | None:
        """Session name used by the host's session-id transport (e.g. cookie name)."""
        return self._name

    def for_session(self, session_id: str) -> DocumentSessionStore:
        """Return a store bound to *session_id*, sharing repository and settings."""
        return DocumentSessionStore(
            self._repository,
            timeout=self._timeout,
            name=self._name,
            session_id=session_id,
        )

    # ------------------------------------------------------------------
    # Session handler lifecycle
    # ------------------------------------------------------------------

    async def open(self, path: str, name: str) -> bool:
        return True

    async def close(self) -> bool:
        return True

    def is_started(self) -> bool:
        """Return ``True`` if a session identifier is assigned."""
        return self._session_id is not None

    def key(self, session_id: str | None = None) -> str | None:
        """Get the active session identifier, or assign a new one and return it.

        Returns ``None`` when no identifier is assigned.
        """
        if session_id:
            self._session_id = session_id
        return self._session_id

    def _require_key(self) -> str:
        if self._session_id is None:
            raise SessionNotStartedException(
                "No session identifier is assigned; call key(session_id) first",
                code="SESSION_NOT_STARTED",
            )
        return self._session_id

    async def _resolve(self) -> SessionDocument:
        """Find the current session's document, creating an empty one if absent."""
        session_id = self._require_key()
        expires = int(time.time()) + self._timeout
        entity = await self._repository.find_or_create(session_id, expires)
        logger.debug("session_document_resolved", session_id=session_id, expires=entity.expires)
        return entity

    # ------------------------------------------------------------------
    # Data operations
    # ------------------------------------------------------------------

    async def check(self, key: str) -> bool:
        """Return whether *key* is set in the session."""
        _validate_key(key)
        entity = await self._resolve()
        return key in entity.session_data

    async def read(self, key: str | None = None) -> Any:
        """Read one value, or the whole session mapping when *key* is omitted.

        A missing key reads as ``None``, the same as a stored ``None``. Only
        ``None`` selects the whole mapping; an empty string is an invalid key
        and raises :class:`InvalidSessionKeyException`.
        """
        if key is not None:
            _validate_key(key)
        entity = await self._resolve()
        if key is None:
            return dict(entity.session_data)
        return entity.session_data.get(key)

    async def write(self, key: str, value: Any) -> bool:
        """Store *value* under *key*. Returns ``False`` if persistence failed."""
        _validate_key(key)
        try:
            entity = await self._resolve()
            return await self._repository.set_field(entity.id, key, value)
        except DocumentStoreException as exc:
            logger.warning("session_write_failed", session_id=self._session_id, key=key, error=str(exc))
            return False

    async def delete(self, key: str) -> bool:
        """Remove *key* from the session. Returns ``False`` if persistence failed."""
        _validate_key(key)
        try:
            entity = await self._resolve()
            return await self._repository.unset_field(entity.id, key)
        except DocumentStoreException as exc:
            logger.warning("session_delete_failed", session_id=self._session_id, key=key, error=str(exc))
            return False

    async def clear(self) -> bool:
        """Remove every key from the session. Returns ``False`` if persistence failed."""
        try:
            entity = await self._resolve()
            return await self._repository.replace_data(entity.id, {})
        except DocumentStoreException as exc:
            logger.warning("session_clear_failed", session_id=self._session_id, error=str(exc))
            return False

    async def destroy(self) -> None:
        """Delete the current session's document; a no-op when there is none."""
        session_id = self._require_key()
        removed = await self._repository.delete_by_id(session_id)
        logger.debug("session_destroyed", session_id=session_id, removed=removed)

    async def gc(self, max_lifetime: int | None = None) -> int:
        """Remove every session whose ``expires`` is below the cutoff.

        Args:
            max_lifetime: Absolute unix timestamp cutoff; defaults to now.

        Returns:
            The number of documents removed.
        """
        cutoff = int(time.time()) if max_lifetime is None else max_lifetime
        removed = await self._repository.remove_where(cutoff)
        logger.info("session_gc_completed", cutoff=cutoff, removed=removed)
        return removed
