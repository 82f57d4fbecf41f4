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
"""Session subsystem configuration properties."""

from __future__ import annotations

from dataclasses import dataclass

from docsession.core.config import config_properties


@config_properties(prefix="docsession.session")
@dataclass
class SessionProperties:
    """Configuration for the session store (docsession.session.*).

    ``use_trans_sid``, ``use_cookies`` and ``name`` are consumed by the host's
    session-id transport; the store only validates and exposes them.
    """

    connection: str = "default"
    timeout: int = 1200
    name: str | None = None
    use_trans_sid: bool = False
    use_cookies: bool = True
    save_handler: str = "user"
