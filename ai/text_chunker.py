"""
Text chunking for document indexing.
Splits a document into fragments using one of three processing methods:
fixed-size overlapping chunks, blank-line separated pages, or the whole text.
"""
import re
from dataclasses import dataclass
from typing import Dict, List

from utils.config import CFG

PROCESSING_METHODS = ("chunks", "pages", "whole")

# Runs of whitespace holding at least two newlines mark a page break
_PAGE_BREAK = re.compile(r"\n\s*\n")


class InvalidConfig(ValueError):
    """Raised when chunking parameters cannot make forward progress."""
    pass


@dataclass(frozen=True)
class ChunkingConfig:
    size: int = CFG.get("chunk_size", 1000)
    overlap: int = CFG.get("chunk_overlap", 100)

    def validate(self) -> "ChunkingConfig":
        for name in ("size", "overlap"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidConfig(f"Chunk {name} must be an integer, got {value!r}")
        if self.size <= 0:
            raise InvalidConfig(f"Chunk size must be positive, got {self.size}")
        if self.overlap < 0:
            raise InvalidConfig(f"Chunk overlap must not be negative, got {self.overlap}")
        if self.overlap >= self.size:
            raise InvalidConfig(
                f"Chunk overlap ({self.overlap}) must be smaller than chunk size ({self.size})"
            )
        return self

    @property
    def step(self) -> int:
        return self.size - self.overlap


# Chunk presets per kind of content
CHUNK_PRESETS: Dict[str, ChunkingConfig] = {
    "paragraphs": ChunkingConfig(size=1500, overlap=150),
    "sections": ChunkingConfig(size=3000, overlap=300),
    "products": ChunkingConfig(size=1000, overlap=50),
}

COLLECTION_TEMPLATES = [
    {
        "id": "knowledge_base",
        "name": "Knowledge Base",
        "description": "Support documentation, FAQs, and help articles",
        "default_chunk": "paragraphs",
    },
    {
        "id": "product_catalog",
        "name": "Product Catalog",
        "description": "Product descriptions, specifications, and features",
        "default_chunk": "products",
    },
    {
        "id": "legal_documents",
        "name": "Legal Documents",
        "description": "Contracts, policies, and regulatory content",
        "default_chunk": "sections",
    },
    {
        "id": "employee_handbook",
        "name": "Employee Resources",
        "description": "HR policies, procedures, and guidelines",
        "default_chunk": "paragraphs",
    },
    {
        "id": "research",
        "name": "Research & Reports",
        "description": "Market research, white papers, and analysis",
        "default_chunk": "sections",
    },
    {
        "id": "custom",
        "name": "Custom Collection",
        "description": "Create a custom database for your specific needs",
        "default_chunk": "paragraphs",
    },
]


def config_for_template(template_id: str) -> ChunkingConfig:
    """Return the chunking preset used by a collection template."""
    for template in COLLECTION_TEMPLATES:
        if template["id"] == template_id:
            return CHUNK_PRESETS[template["default_chunk"]]
    raise InvalidConfig(f"Unknown collection template: {template_id}")


def chunk(text: str, size: int, overlap: int) -> List[str]:
    """
    Split text into fixed-size chunks that overlap their neighbours.

    Args:
        text: Text to chunk
        size: Maximum size of each chunk in characters
        overlap: Characters shared by consecutive chunks, 0 <= overlap < size

    Returns:
        Chunks in source order; the last one may be shorter than size

    Raises:
        InvalidConfig: If size or overlap are out of range
    """
    config = ChunkingConfig(size=size, overlap=overlap).validate()
    chunks: List[str] = []
    start = 0
    L = len(text)
    while start < L:
        chunks.append(text[start:start + config.size])
        start += config.step
    return chunks


@dataclass(frozen=True)
class Fragment:
    """A chunk of a source text together with its position."""
    index: int
    offset: int
    text: str
    overlap_with_previous: int = 0

    def to_dict(self) -> Dict[str, object]:
        return {
            "index": self.index,
            "offset": self.offset,
            "length": len(self.text),
            "overlap_with_previous": self.overlap_with_previous,
            "text": self.text,
        }


def chunk_fragments(text: str, size: int, overlap: int) -> List[Fragment]:
    """
    Same walk as chunk(), keeping the offset of every fragment.
    """
    config = ChunkingConfig(size=size, overlap=overlap).validate()
    fragments: List[Fragment] = []
    start = 0
    while start < len(text):
        fragments.append(Fragment(
            index=len(fragments),
            offset=start,
            text=text[start:start + config.size],
            overlap_with_previous=min(config.overlap, len(text) - start) if fragments else 0,
        ))
        start += config.step
    return fragments


def split_by_pages(text: str) -> List[str]:
    """
    Split text on blank lines, dropping blocks that are only whitespace.
    """
    return [page for page in _PAGE_BREAK.split(text) if page.strip()]


def whole_document(text: str) -> List[str]:
    return [text] if text else []


class TextChunker:
    """
    Splits documents according to a processing method and a chunking config.
    """

    def __init__(self, config: ChunkingConfig = None):
        self.config = config or ChunkingConfig()

    def split(self, text: str, method: str = "chunks") -> List[str]:
        """
        Split text with the given processing method.

        Args:
            text: Document text
            method: One of "chunks", "pages" or "whole"

        Returns:
            List of text fragments
        """
        if method == "chunks":
            return chunk(text, self.config.size, self.config.overlap)
        elif method == "pages":
            return split_by_pages(text)
        elif method == "whole":
            return whole_document(text)
        raise InvalidConfig(
            f"Unknown processing method '{method}', expected one of {', '.join(PROCESSING_METHODS)}"
        )


def split_text(text: str, method: str = "chunks", size: int = None, overlap: int = None) -> List[str]:
    """
    Convenience function for splitting a document.

    Args:
        text: Text to split
        method: Processing method
        size: Chunk size in characters (defaults to CFG)
        overlap: Overlap between chunks in characters (defaults to CFG)

    Returns:
        List of text fragments
    """
    config = ChunkingConfig(
        size=CFG.get("chunk_size", 1000) if size is None else size,
        overlap=CFG.get("chunk_overlap", 100) if overlap is None else overlap,
    )
    return TextChunker(config).split(text, method)
