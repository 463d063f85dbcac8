"""Retrieval core module - shared models and configuration.

The pipeline lives in ``src.rag.pipeline``; it is not re-exported here
because the store backends import these models.
"""

from src.rag.config import RAGConfig, MockConfig
from src.rag.document import Document, SearchOptions, SearchResult

__all__ = [
    "RAGConfig",
    "MockConfig",
    "Document",
    "SearchOptions",
    "SearchResult",
]
