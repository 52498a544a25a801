"""
Shared application state module.

Holds the service instances used by the endpoints so that routers do not
import each other or main.py. Tests replace them with set_services().
"""
from typing import Optional

from ai.embedding_client import EmbeddingServiceClient
from db.kv_store import SqliteKeyValueStore
from services import EmbeddingService, DocumentService, SearchService
from utils.config import CFG

_client: Optional[EmbeddingServiceClient] = None
_embedding_service: Optional[EmbeddingService] = None
_document_service: Optional[DocumentService] = None
_search_service: Optional[SearchService] = None


def set_services(client, store):
    """
    Build the services around a client and a key-value store.

    Args:
        client: EmbeddingServiceClient (or a stand-in with the same methods)
        store: Key-value store with save/load/delete
    """
    global _client, _embedding_service, _document_service, _search_service
    _client = client
    _embedding_service = EmbeddingService(client, store)
    _document_service = DocumentService(client)
    _search_service = SearchService(client)


def _ensure_services():
    if _client is None:
        set_services(EmbeddingServiceClient(), SqliteKeyValueStore(CFG["database_path"]))


def get_client() -> EmbeddingServiceClient:
    _ensure_services()
    return _client


def get_embedding_service() -> EmbeddingService:
    _ensure_services()
    return _embedding_service


def get_document_service() -> DocumentService:
    _ensure_services()
    return _document_service


def get_search_service() -> SearchService:
    _ensure_services()
    return _search_service
