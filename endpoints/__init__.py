"""
API endpoints module.
"""
from .embedding_endpoints import router as embedding_router
from .document_endpoints import router as document_router
from .search_endpoints import router as search_router

__all__ = ['embedding_router', 'document_router', 'search_router']
