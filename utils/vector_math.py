"""
Vector operations for comparing embeddings.

All functions are pure: they never mutate their inputs and keep no state,
so they are safe to call from any thread.
"""
import math
import random
from typing import Dict, List, Optional, Sequence

# (lower bound, label, description); checked high to low with strict ">"
SIMILARITY_BANDS = [
    (0.9, "near-duplicate",
     "These items are extremely similar and likely contain the same core information."),
    (0.75, "closely related",
     "These items are very closely related and cover similar topics."),
    (0.5, "some common themes",
     "These items share some common themes but have distinct differences."),
    (0.3, "loosely related",
     "These items are somewhat related but mostly different."),
]
UNRELATED_LABEL = "unrelated"
UNRELATED_DESCRIPTION = "These items have little in common and appear to be unrelated."

# Search result banding
SCORE_THRESHOLDS = {
    "high": 0.8,
    "medium": 0.6,
}


class DimensionMismatch(ValueError):
    """Raised when two vectors of different length are compared."""

    def __init__(self, left: int, right: int):
        self.left = left
        self.right = right
        super().__init__(
            f"Embeddings must have the same dimensions (got {left} and {right})"
        )


def _check_dimensions(a: Sequence[float], b: Sequence[float]):
    if len(a) != len(b):
        raise DimensionMismatch(len(a), len(b))


def dot(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Compute dot product of two vectors.
    """
    _check_dimensions(a, b)
    return sum(x * y for x, y in zip(a, b))


def norm(vector: Sequence[float]) -> float:
    """
    Compute L2 norm (magnitude) of a vector. Empty vectors have norm 0.
    """
    return math.sqrt(sum(x * x for x in vector))


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Compute cosine similarity between two embeddings.

    A zero vector has similarity 0 to everything, itself included. The
    result is not clamped, so rounding may land marginally outside [-1, 1].

    Raises:
        DimensionMismatch: If the vectors differ in length
    """
    _check_dimensions(a, b)
    na = norm(a)
    nb = norm(b)
    if na == 0 or nb == 0:
        return 0.0
    return dot(a, b) / (na * nb)


def classify_similarity(score: float) -> str:
    """Map a similarity score to its band label."""
    for threshold, label, _ in SIMILARITY_BANDS:
        if score > threshold:
            return label
    return UNRELATED_LABEL


def describe_similarity(score: float) -> str:
    """Map a similarity score to a human readable sentence."""
    for threshold, _, description in SIMILARITY_BANDS:
        if score > threshold:
            return description
    return UNRELATED_DESCRIPTION


def score_band(score: float) -> str:
    """Band a search result score as high, medium or low."""
    if score > SCORE_THRESHOLDS["high"]:
        return "high"
    if score > SCORE_THRESHOLDS["medium"]:
        return "medium"
    return "low"


def format_score(score: float, digits: int = 1) -> str:
    return f"{score * 100:.{digits}f}%"


def sample_dimensions(
    a: Sequence[float],
    b: Sequence[float],
    count: int = 10,
    seed: Optional[int] = None
) -> List[int]:
    """
    Pick up to `count` distinct dimension indexes shared by both vectors.

    Args:
        a, b: Vectors being compared
        count: Number of dimensions wanted
        seed: Seed for the sampler; the same seed always gives the same indexes

    Returns:
        Sorted list of dimension indexes
    """
    max_dim = min(len(a), len(b))
    if max_dim == 0 or count <= 0:
        return []
    rng = random.Random(seed)
    return sorted(rng.sample(range(max_dim), min(count, max_dim)))


def compare_dimensions(
    a: Sequence[float],
    b: Sequence[float],
    dimensions: Sequence[int]
) -> List[Dict[str, float]]:
    """
    Build per-dimension rows for a side by side comparison chart.
    """
    rows = []
    for i in dimensions:
        rows.append({
            "dimension": i,
            "a": a[i],
            "b": b[i],
            "delta": a[i] - b[i],
        })
    return rows
