"""
Utility modules for configuration, logging and vector operations.
"""
from .vector_math import (
    DimensionMismatch, dot, norm, cosine_similarity, classify_similarity,
    describe_similarity, score_band, format_score, sample_dimensions,
    compare_dimensions,
)

__all__ = [
    'DimensionMismatch',
    'dot',
    'norm',
    'cosine_similarity',
    'classify_similarity',
    'describe_similarity',
    'score_band',
    'format_score',
    'sample_dimensions',
    'compare_dimensions',
]
