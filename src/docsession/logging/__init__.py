"""docsession Logging — hexagonal logging port and adapters."""

from docsession.logging.port import LoggingPort
from docsession.logging.structlog_adapter import StructlogAdapter

__all__ = ["LoggingPort", "StructlogAdapter"]
