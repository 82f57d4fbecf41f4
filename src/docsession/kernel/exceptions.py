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
"""Unified exception hierarchy for docsession.

All library exceptions inherit from DocSessionException, enabling unified
error handling across modules.

Categories:
- ConfigurationException: A required runtime setting could not be applied
- BusinessException: Invalid keys, operations on a session without an id
- InfrastructureException: Document store failures
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class DocSessionException(Exception):
    """Base exception for all docsession errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "SESSION_CONFIG").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(DocSessionException):
    """A required runtime setting is missing or could not be applied.

    Raised while building a session store; aborts startup.
    """


# =============================================================================
# Business Exceptions
# =============================================================================


class BusinessException(DocSessionException):
    """Caller errors in the use of the session API."""


class ValidationException(BusinessException):
    """Input validation failures."""


class InvalidSessionKeyException(ValidationException):
    """A session key cannot be used as a document field path."""


class InvalidRequestException(BusinessException):
    """Request is syntactically valid but semantically incorrect."""


class SessionNotStartedException(InvalidRequestException):
    """A data operation was attempted before a session identifier was assigned."""


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(DocSessionException):
    """Infrastructure failures: database, network."""


class DocumentStoreException(InfrastructureException):
    """The document store rejected or failed an operation."""


class DuplicateDocumentException(DocumentStoreException):
    """A document with the same primary key already exists."""
