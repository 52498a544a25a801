"""
Service layer initialization.
Provides the operations behind the HTTP endpoints, on top of the core utilities.
"""
from .embedding_service import EmbeddingService, EmbeddingRecord
from .document_service import DocumentService
from .search_service import SearchService

__all__ = [
    'EmbeddingService',
    'EmbeddingRecord',
    'DocumentService',
    'SearchService',
]
