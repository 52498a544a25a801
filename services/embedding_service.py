"""
Service layer for embedding creation, history and comparison.
"""
import threading
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ai.embedding_client import EmbeddingServiceClient
from utils.config import CFG
from utils.logger import get_logger
from utils.vector_math import (
    norm, cosine_similarity, classify_similarity, describe_similarity,
    format_score, sample_dimensions, compare_dimensions,
)

logger = get_logger(__name__)

HISTORY_KEY = "embeddingsHistory"
TOTAL_KEY = "totalEmbeddings"
INPUT_MODES = ("single", "lines")


@dataclass
class EmbeddingRecord:
    text: str
    embedding: List[float]
    created: str
    dimensions: int
    norm: float

    @classmethod
    def from_embedding(cls, text: str, embedding: List[float]) -> "EmbeddingRecord":
        return cls(
            text=text,
            embedding=embedding,
            created=datetime.now(timezone.utc).isoformat(),
            dimensions=len(embedding),
            norm=norm(embedding),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class EmbeddingService:
    """
    Creates embeddings through the remote service and keeps a bounded,
    newest-first history of them in a key-value store.
    """

    def __init__(self, client: EmbeddingServiceClient, store, history_limit: int = CFG["history_limit"]):
        self.client = client
        self.store = store
        self.history_limit = history_limit
        # serialises read-modify-write of the stored history and total
        self._lock = threading.Lock()

    def history(self) -> List[EmbeddingRecord]:
        return [EmbeddingRecord(**item) for item in self.store.load(HISTORY_KEY, [])]

    def total(self) -> int:
        return int(self.store.load(TOTAL_KEY, 0))

    def _save_history(self, records: List[EmbeddingRecord]):
        self.store.save(HISTORY_KEY, [r.to_dict() for r in records])

    def create_embeddings(self, text: str, mode: str = "single") -> Dict[str, Any]:
        """
        Embed text and record the results.

        Args:
            text: Input text
            mode: "single" embeds the whole text, "lines" embeds every non-blank line

        Returns:
            Dictionary with the new records, model, total count and timing

        Raises:
            ValueError: If the text is blank or the mode is unknown
            EmbeddingServiceError: If the remote call fails
        """
        if not text or not text.strip():
            raise ValueError("Text to embed must not be empty")
        if mode == "single":
            texts = [text.strip()]
        elif mode == "lines":
            texts = [line for line in text.split("\n") if line.strip()]
        else:
            raise ValueError(f"Unknown input mode '{mode}', expected one of {', '.join(INPUT_MODES)}")

        response = self.client.embed(texts)
        new_records = [
            EmbeddingRecord.from_embedding(t, e)
            for t, e in zip(texts, response["embeddings"])
        ]

        with self._lock:
            history = (new_records + self.history())[:self.history_limit]
            self._save_history(history)
            new_total = self.total() + len(new_records)
            self.store.save(TOTAL_KEY, new_total)

        logger.info(f"Created {len(new_records)} embedding(s), total {new_total}")
        return {
            "embeddings": [r.to_dict() for r in new_records],
            "count": len(new_records),
            "total": new_total,
            "model_used": response.get("model_used"),
            "processing_time_ms": response.get("processing_time_ms"),
        }

    def _get(self, history: List[EmbeddingRecord], index: int) -> EmbeddingRecord:
        if index < 0 or index >= len(history):
            raise IndexError(f"No embedding at position {index}")
        return history[index]

    def compare(self, index_a: int, index_b: int, seed: Optional[int] = None) -> Dict[str, Any]:
        """
        Compare two history entries by cosine similarity.

        Raises:
            IndexError: If either position is outside the history
            DimensionMismatch: If the embeddings differ in length
        """
        history = self.history()
        a = self._get(history, index_a)
        b = self._get(history, index_b)
        result = self.compare_vectors(a.embedding, b.embedding, seed=seed)
        result["texts"] = [a.text, b.text]
        return result

    @staticmethod
    def compare_vectors(a: List[float], b: List[float], seed: Optional[int] = None,
                        sample_size: int = 10) -> Dict[str, Any]:
        score = cosine_similarity(a, b)
        dims = sample_dimensions(a, b, count=sample_size, seed=seed)
        return {
            "similarity": score,
            "display_score": format_score(score, digits=2),
            "classification": classify_similarity(score),
            "description": describe_similarity(score),
            "dimensions": compare_dimensions(a, b, dims),
        }

    def search_history(self, query: str) -> List[EmbeddingRecord]:
        """Case-insensitive substring search over the stored texts."""
        if not query or not query.strip():
            return []
        needle = query.lower()
        return [r for r in self.history() if needle in r.text.lower()]

    def delete(self, index: int) -> EmbeddingRecord:
        with self._lock:
            history = self.history()
            removed = self._get(history, index)
            del history[index]
            self._save_history(history)
        logger.info(f"Deleted embedding at position {index}")
        return removed

    def export(self, model: str = CFG["embedding_model"]) -> Dict[str, Any]:
        history = self.history()
        if not history:
            raise ValueError("No embeddings to export")
        return {
            "embeddings": [r.to_dict() for r in history],
            "total_count": len(history),
            "export_date": datetime.now(timezone.utc).isoformat(),
            "model": model,
        }
