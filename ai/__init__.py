"""
Text chunking and the client for the remote embedding service.
"""
from .text_chunker import (
    InvalidConfig,
    ChunkingConfig,
    Fragment,
    TextChunker,
    chunk,
    chunk_fragments,
    split_by_pages,
    whole_document,
    split_text,
    config_for_template,
)
from .embedding_client import EmbeddingServiceClient, EmbeddingServiceError

__all__ = [
    'InvalidConfig',
    'ChunkingConfig',
    'Fragment',
    'TextChunker',
    'chunk',
    'chunk_fragments',
    'split_by_pages',
    'whole_document',
    'split_text',
    'config_for_template',
    'EmbeddingServiceClient',
    'EmbeddingServiceError',
]
