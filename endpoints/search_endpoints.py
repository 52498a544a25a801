"""
Search, health and status endpoints.
"""
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from models import SearchRequest
from utils import app_state
from utils.config import CFG
from utils.logger import get_logger
from .errors import error_response

logger = get_logger(__name__)
router = APIRouter(prefix="/api")

VERSION = "0.1.0"


@router.get("/health", tags=["health"], summary="Health check")
def api_health():
    """
    Health check endpoint for monitoring and status verification.

    Returns:
    - **status**: "ok" if service is running
    - **version**: API version
    - **features**: List of enabled features
    """
    return JSONResponse({
        "status": "ok",
        "version": VERSION,
        "features": ["embeddings", "similarity", "chunking", "indexing", "search"]
    })


@router.get("/status", tags=["health"], summary="Remote embedding service status")
def api_status():
    online = app_state.get_client().status(timeout=CFG["status_timeout"])
    return JSONResponse({
        "online": online,
        "api_base_url": CFG["api_base_url"],
    })


@router.post("/search", tags=["search"], summary="Semantic search in a collection")
def api_search(request: SearchRequest):
    """
    Search a collection by text or by vector.

    - **collection_name**: Collection to search (required)
    - **query_text** / **query_vector**: Exactly one must be provided
    - **limit**: Maximum number of results
    - **use_native_search**: Use the service's native ANN search (sends ef_param)
    - **score_all_documents**: Score every document in the collection
    """
    try:
        result = app_state.get_search_service().search(
            request.collection_name,
            query_text=request.query_text,
            query_vector=request.query_vector,
            limit=request.limit,
            use_native_search=request.use_native_search,
            score_all_documents=request.score_all_documents,
            ef_param=request.ef_param,
        )
        return JSONResponse(result)
    except Exception as e:
        return error_response(e, "searching collection")
