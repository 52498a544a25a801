"""
Service layer for search operations.
Builds search requests for the remote service and normalises its results.
"""
import json
from typing import Dict, Any, List, Optional, Union

from ai.embedding_client import EmbeddingServiceClient
from services.document_service import validate_collection_name
from utils.logger import get_logger
from utils.vector_math import score_band, format_score

logger = get_logger(__name__)

NO_CONTENT = "No content available"


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_vector(raw: str) -> List[float]:
    """
    Parse a query vector typed as a JSON array of numbers.

    Raises:
        ValueError: If the input is not a non-empty JSON array of numbers
    """
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        raise ValueError("Invalid JSON format for vector")
    if not isinstance(parsed, list) or not parsed or not all(_is_number(x) for x in parsed):
        raise ValueError("Invalid vector format")
    return [float(x) for x in parsed]


class SearchService:
    """
    Semantic search against a remote collection.
    """

    def __init__(self, client: EmbeddingServiceClient):
        self.client = client

    @staticmethod
    def build_params(
        collection_name: str,
        query_text: Optional[str] = None,
        query_vector: Union[List[float], str, None] = None,
        limit: int = 10,
        use_native_search: bool = True,
        score_all_documents: bool = False,
        ef_param: int = 128
    ) -> Dict[str, Any]:
        """
        Build the request body for the search API.

        Exactly one of query_text and query_vector must be given; a vector
        may also be passed as a JSON array string. ef_param is only sent
        when native search is enabled.
        """
        validate_collection_name(collection_name)
        if isinstance(query_vector, str):
            query_vector = parse_vector(query_vector)
        has_text = bool(query_text and query_text.strip())
        has_vector = query_vector is not None
        if has_text == has_vector:
            raise ValueError("Provide either query_text or query_vector")
        if has_vector and (not query_vector or not all(_is_number(x) for x in query_vector)):
            raise ValueError("Invalid vector format")
        if not _is_int(limit) or limit <= 0:
            raise ValueError(f"limit must be a positive integer, got {limit!r}")
        if use_native_search and (not _is_int(ef_param) or ef_param <= 0):
            raise ValueError(f"ef_param must be a positive integer, got {ef_param!r}")

        params: Dict[str, Any] = {
            "collection_name": collection_name,
            "limit": limit,
            "use_native_search": use_native_search,
            "score_all_documents": score_all_documents,
        }
        if has_text:
            params["query_text"] = query_text
        else:
            params["query_vector"] = list(query_vector)
        if use_native_search:
            params["ef_param"] = ef_param
        return params

    @staticmethod
    def process_results(response: Dict[str, Any]) -> List[Dict[str, Any]]:
        results = response.get("results")
        if not isinstance(results, list):
            return []

        processed = []
        for result in results:
            payload = result.get("payload") or {}
            score = result.get("score") or 0
            processed.append({
                "id": result.get("id"),
                "text": payload.get("text") or NO_CONTENT,
                "score": score,
                "band": score_band(score),
                "display_score": format_score(score),
                "metadata": {
                    **payload,
                    "metric_used": response.get("metric_used"),
                    "search_time_ms": response.get("search_time_ms"),
                    "embedding_time_ms": response.get("embedding_time_ms"),
                },
            })
        return processed

    def search(self, collection_name: str, **kwargs) -> Dict[str, Any]:
        """
        Run a search and return processed results with timing information.

        Raises:
            ValueError: If the query is invalid
            EmbeddingServiceError: If the remote call fails
        """
        params = self.build_params(collection_name, **kwargs)
        response = self.client.search(params)
        results = self.process_results(response)
        logger.info(f"Search completed: {len(results)} results in '{collection_name}'")
        return {
            "results": results,
            "count": len(results),
            "collection": collection_name,
            "query_time_ms": response.get("search_time_ms"),
            "metric_used": response.get("metric_used"),
            "total_found": response.get("total_found"),
            "embedding_time_ms": response.get("embedding_time_ms"),
        }
