"""MongoDB (Motor) document collection adapter."""

from docsession.data.adapters.mongodb.collection import MotorDocumentCollection
from docsession.data.adapters.mongodb.initializer import initialize_collection

__all__ = ["MotorDocumentCollection", "initialize_collection"]
