# ai/embedding_client.py
import json
import logging
import time
import uuid
from typing import List, Optional, Dict, Any

import requests

from utils.config import CFG

logger = logging.getLogger("ai.embedding_client")


class EmbeddingServiceError(RuntimeError):
    pass


class EmbeddingServiceClient:
    """
    HTTP client for the remote embedding, indexing and search service.

    Endpoints (relative to api_url):
      POST /embed                       list of texts -> {"embeddings": [[...]], ...}
      POST /index/{collection_name}     {"documents": [{id, text, metadata}], ...}
      POST /search                      {"collection_name", "query_text" | "query_vector", ...}
      GET  /status                      {"status": "ok"}
    """

    def __init__(self,
                 api_url: str = CFG["api_base_url"],
                 api_key: str = CFG["api_key"],
                 timeout: float = CFG["request_timeout"],
                 max_retries: int = CFG["request_retries"],
                 backoff: float = CFG["request_backoff"],
                 session: Optional[requests.Session] = None):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff = backoff
        self.session = session or requests.Session()
        if api_key:
            self.session.headers.update({"Authorization": f"Bearer {api_key}"})
        self.session.headers.update({"Content-Type": "application/json"})

    def _url(self, path: str) -> str:
        return f"{self.api_url}/{path.lstrip('/')}"

    def _post(self, path: str, payload: Any) -> Any:
        """
        POST a JSON payload and return the decoded JSON body.
        Timeouts, connection errors and 5xx responses are retried with
        exponential backoff; 4xx responses fail immediately.
        Raises EmbeddingServiceError on failure.
        """
        url = self._url(path)
        request_id = str(uuid.uuid4())
        logger.debug("Request START", extra={"request_id": request_id, "url": url})

        attempt = 0
        while True:
            attempt += 1
            start = time.perf_counter()
            try:
                resp = self.session.post(url, data=json.dumps(payload), timeout=self.timeout)
                elapsed = time.perf_counter() - start
                preview = (resp.text or "")[:1000]
                logger.debug(
                    "Request END",
                    extra={"request_id": request_id, "elapsed_s": elapsed, "status": resp.status_code},
                )

                if 200 <= resp.status_code < 300:
                    try:
                        return resp.json()
                    except ValueError:
                        raise EmbeddingServiceError(
                            f"Invalid JSON from {url} (status={resp.status_code}): {preview}"
                        )

                err_msg = self._error_message(resp, preview)
                if resp.status_code < 500:
                    logger.warning(
                        "Embedding service rejected request",
                        extra={"request_id": request_id, "status_code": resp.status_code},
                    )
                    raise EmbeddingServiceError(err_msg)
                logger.warning(
                    "Embedding service returned server error",
                    extra={"request_id": request_id, "status_code": resp.status_code, "attempt": attempt},
                )

            except requests.Timeout as e:
                elapsed = time.perf_counter() - start
                err_msg = f"Timeout after {elapsed:.2f}s: {e}"
                logger.error("Embedding service timeout", extra={"request_id": request_id, "error": str(e)})
            except requests.RequestException as e:
                elapsed = time.perf_counter() - start
                err_msg = f"RequestException after {elapsed:.2f}s: {e}"
                logger.error("Embedding service request exception", extra={"request_id": request_id, "error": err_msg})

            # Retry logic
            if attempt > self.max_retries:
                logger.error(
                    "Max retries exceeded",
                    extra={"request_id": request_id, "url": url, "attempts": attempt},
                )
                raise EmbeddingServiceError(f"Request to {url} failed after {attempt} attempts. Last error: {err_msg}")

            sleep_for = self.backoff * (2 ** (attempt - 1))
            logger.info(
                "Retrying request",
                extra={"request_id": request_id, "url": url, "attempt": attempt, "sleep_s": sleep_for},
            )
            time.sleep(sleep_for)

    @staticmethod
    def _error_message(resp: requests.Response, preview: str) -> str:
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            return f"Status {resp.status_code}: {body['error']}"
        return f"Status {resp.status_code}: {preview}"

    def embed(self, texts: List[str]) -> Dict[str, Any]:
        """
        Embed a list of texts in one call.
        Returns the service response; "embeddings" holds one vector per text.
        """
        body = self._post("embed", list(texts))
        embeddings = body.get("embeddings") if isinstance(body, dict) else None
        if not isinstance(embeddings, list) or not all(isinstance(e, list) for e in embeddings):
            raise EmbeddingServiceError("Invalid response format from embedding API")
        if len(embeddings) != len(texts):
            raise EmbeddingServiceError(
                f"Embedding API returned {len(embeddings)} embeddings for {len(texts)} texts"
            )
        logger.info("Embedding succeeded", extra={"count": len(embeddings)})
        return body

    def index_documents(self,
                        collection_name: str,
                        documents: List[Dict[str, Any]],
                        m: Optional[int] = None,
                        ef_construction: Optional[int] = None,
                        tune_parameters: bool = False) -> Dict[str, Any]:
        """
        Send documents ({id, text, metadata}) to a collection.
        HNSW tuning parameters are only included when set.
        """
        payload: Dict[str, Any] = {
            "documents": [
                {"id": doc["id"], "text": doc["text"], "metadata": doc.get("metadata", {})}
                for doc in documents
            ]
        }
        if m:
            payload["m"] = m
        if ef_construction:
            payload["ef_construction"] = ef_construction
        if tune_parameters:
            payload["tune_parameters"] = True

        body = self._post(f"index/{collection_name}", payload)
        if not body:
            raise EmbeddingServiceError("No response data received from API")
        if isinstance(body, dict) and body.get("error"):
            raise EmbeddingServiceError(str(body["error"]))
        return body

    def search(self, params: Dict[str, Any]) -> Dict[str, Any]:
        body = self._post("search", params)
        if not isinstance(body, dict):
            raise EmbeddingServiceError("Invalid response format from search API")
        return body

    def status(self, timeout: Optional[float] = None) -> bool:
        """
        Return True when the service reports {"status": "ok"}. Never raises.
        timeout overrides the client timeout for this check only.
        """
        try:
            resp = self.session.get(self._url("status"), timeout=timeout or self.timeout)
            return resp.ok and resp.json().get("status") == "ok"
        except (requests.RequestException, ValueError, AttributeError) as e:
            logger.warning(f"API status check failed: {e}")
            return False
