"""
Embedding creation, history and comparison endpoints.
"""
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from models import CreateEmbeddingsRequest, CompareEmbeddingsRequest, CompareVectorsRequest
from services import EmbeddingService
from utils import app_state
from utils.logger import get_logger
from .errors import error_response

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["embeddings"])


@router.post("/embeddings", summary="Create embeddings")
def api_create_embeddings(request: CreateEmbeddingsRequest):
    """
    Embed text through the remote service and add the results to the history.

    - **text**: Text to embed (required)
    - **mode**: "single" embeds the whole text, "lines" embeds each non-blank line
    """
    try:
        result = app_state.get_embedding_service().create_embeddings(request.text, request.mode)
        return JSONResponse(result)
    except Exception as e:
        return error_response(e, "creating embeddings")


@router.get("/embeddings", summary="List embedding history")
def api_list_embeddings():
    """
    Return the stored embeddings (newest first) and the running total.
    """
    try:
        service = app_state.get_embedding_service()
        history = service.history()
        return JSONResponse({
            "embeddings": [r.to_dict() for r in history],
            "count": len(history),
            "total": service.total(),
        })
    except Exception as e:
        return error_response(e, "listing embeddings")


@router.get("/embeddings/search", summary="Filter embedding history by text")
def api_search_embeddings(q: str = ""):
    try:
        results = app_state.get_embedding_service().search_history(q)
        return JSONResponse({"results": [r.to_dict() for r in results], "count": len(results)})
    except Exception as e:
        return error_response(e, "searching embeddings")


@router.get("/embeddings/export", summary="Export the embedding history")
def api_export_embeddings():
    try:
        return JSONResponse(app_state.get_embedding_service().export())
    except Exception as e:
        return error_response(e, "exporting embeddings")


@router.delete("/embeddings/{index}", summary="Delete an embedding from the history")
def api_delete_embedding(index: int):
    try:
        removed = app_state.get_embedding_service().delete(index)
        return JSONResponse({"success": True, "deleted": removed.text})
    except Exception as e:
        return error_response(e, "deleting embedding")


@router.post("/embeddings/compare", summary="Compare two stored embeddings")
def api_compare_embeddings(request: CompareEmbeddingsRequest):
    """
    Cosine similarity between two history entries.

    Returns:
    - **similarity**: Score in [-1, 1]
    - **classification**: Similarity band label
    - **description**: Sentence describing the band
    - **dimensions**: Side by side values for a sample of dimensions
    """
    try:
        result = app_state.get_embedding_service().compare(
            request.index_a, request.index_b, seed=request.seed
        )
        return JSONResponse(result)
    except Exception as e:
        return error_response(e, "comparing embeddings")


@router.post("/vectors/compare", summary="Compare two raw vectors")
def api_compare_vectors(request: CompareVectorsRequest):
    try:
        return JSONResponse(EmbeddingService.compare_vectors(request.a, request.b, seed=request.seed))
    except Exception as e:
        return error_response(e, "comparing vectors")
