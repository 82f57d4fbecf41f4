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
"""SessionDocument — persisted shape of one session."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

ID_FIELD = "_id"
DATA_FIELD = "sessionData"
EXPIRES_FIELD = "expires"


class SessionDocument(BaseModel):
    """One session's data blob and absolute expiry.

    Stored as ``{_id, sessionData, expires}``. ``id`` equals the session
    identifier and cannot be reassigned; ``session_data`` is never ``None``.

    Example::

        doc = SessionDocument(id="abc", expires=1_700_000_000)
        stored = doc.to_document()  # {"_id": "abc", "sessionData": {}, "expires": ...}
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias=ID_FIELD, frozen=True)
    session_data: dict[str, Any] = Field(default_factory=dict, alias=DATA_FIELD)
    expires: int = Field(alias=EXPIRES_FIELD)

    @field_validator("session_data", mode="before")
    @classmethod
    def _coerce_missing_data(cls, value: Any) -> Any:
        return {} if value is None else value

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> SessionDocument:
        """Build from a raw stored document."""
        return cls.model_validate(document)

    def to_document(self) -> dict[str, Any]:
        """Return the raw stored form."""
        return self.model_dump(by_alias=True)
