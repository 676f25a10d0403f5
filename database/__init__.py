# Database package for document storage and ticket/feedback read adapters

from .adapter import (
    DatabaseAdapter,
    DatabaseError,
    ConnectionError
)
from .document_store import DocumentStore

__all__ = [
    'DatabaseAdapter',
    'DatabaseError',
    'ConnectionError',
    'DocumentStore'
]
