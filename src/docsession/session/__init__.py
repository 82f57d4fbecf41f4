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
"""docsession Session — document-backed session store.

Build a store from configuration, then bind it to a request's session id::

    store = await create_session_store(Config.from_file("docsession.yaml"))
    session = store.for_session(session_id)
    await session.write("user_id", 42)
"""

from docsession.session.document import SessionDocument
from docsession.session.factory import create_session_store
from docsession.session.repository import SessionRepository
from docsession.session.store import DocumentSessionStore

__all__ = [
    "DocumentSessionStore",
    "SessionDocument",
    "SessionRepository",
    "create_session_store",
]
