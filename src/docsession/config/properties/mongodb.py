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
"""Document store connection properties."""

from __future__ import annotations

from dataclasses import dataclass

from docsession.core.config import config_properties

CONNECTIONS_PREFIX = "docsession.data.connections"


@config_properties(prefix=f"{CONNECTIONS_PREFIX}.default")
@dataclass
class DocumentProperties:
    """One named document store connection (docsession.data.connections.<name>.*).

    Bind a connection other than ``default`` with
    ``config.bind(DocumentProperties, prefix=f"{CONNECTIONS_PREFIX}.{name}")``.
    """

    type: str = "memory"
    uri: str = "mongodb://localhost:27017"
    database: str = "docsession"
    collection: str = "sessions"
