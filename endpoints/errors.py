"""
Translate service exceptions into JSON error responses.
"""
from fastapi.responses import JSONResponse

from ai.embedding_client import EmbeddingServiceError
from utils.logger import get_logger

logger = get_logger(__name__)


def error_response(e: Exception, action: str) -> JSONResponse:
    """
    Map an exception raised while performing `action` to a JSONResponse.

    ValueError (including DimensionMismatch and InvalidConfig) -> 400,
    IndexError -> 404, EmbeddingServiceError -> 502, anything else -> 500.
    """
    if isinstance(e, ValueError):
        logger.warning(f"Validation error {action}: {e}")
        return JSONResponse({"error": str(e)}, status_code=400)
    if isinstance(e, IndexError):
        logger.warning(f"Not found {action}: {e}")
        return JSONResponse({"error": str(e)}, status_code=404)
    if isinstance(e, EmbeddingServiceError):
        logger.error(f"Embedding service error {action}: {e}")
        return JSONResponse({"error": str(e)}, status_code=502)
    logger.exception(f"Unexpected error {action}: {e}")
    return JSONResponse({"error": "Internal server error"}, status_code=500)
