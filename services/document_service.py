"""
Service layer for preparing documents and indexing them into a collection.
"""
import json
import os
import re
import time
import uuid
from typing import Any, Dict, List, Optional, Union

from ai.embedding_client import EmbeddingServiceClient
from ai.text_chunker import ChunkingConfig, TextChunker
from utils.config import CFG
from utils.logger import get_logger

logger = get_logger(__name__)

_COLLECTION_NAME = re.compile(r"^[A-Za-z0-9_-]+$")
DEFAULT_CATEGORY = "uploaded_document"


def parse_metadata(custom_metadata: Union[str, Dict[str, Any], None]) -> Dict[str, Any]:
    """
    Accept extra metadata as a dict or a JSON object string.

    Raises:
        ValueError: If the string is not a JSON object
    """
    if not custom_metadata:
        return {}
    if isinstance(custom_metadata, dict):
        return dict(custom_metadata)
    try:
        parsed = json.loads(custom_metadata)
    except ValueError:
        raise ValueError("Invalid format for additional properties")
    if not isinstance(parsed, dict):
        raise ValueError("Additional properties must be a JSON object")
    return parsed


def validate_collection_name(name: str) -> str:
    if not name or not _COLLECTION_NAME.match(name):
        raise ValueError(
            f"Invalid collection name '{name}': use letters, digits, '_' or '-'"
        )
    return name


class DocumentService:
    """
    Turns raw text into {id, text, metadata} documents and sends them to
    the remote indexing API.
    """

    def __init__(self, client: EmbeddingServiceClient, max_upload_bytes: int = CFG["max_upload_bytes"]):
        self.client = client
        self.max_upload_bytes = max_upload_bytes

    @staticmethod
    def make_document(
        text: str,
        doc_id: Optional[str] = None,
        source: str = "",
        category: str = "",
        custom_metadata: Union[str, Dict[str, Any], None] = None
    ) -> Dict[str, Any]:
        """Build a single manually entered document."""
        if not text or not text.strip():
            raise ValueError("Document text must not be empty")
        metadata = parse_metadata(custom_metadata)
        # explicit source/category win, otherwise keep what the metadata carries
        if source or "source" not in metadata:
            metadata["source"] = source
        if category or "category" not in metadata:
            metadata["category"] = category
        return {
            "id": doc_id or f"doc_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}",
            "text": text,
            "metadata": metadata,
        }

    def documents_from_text(
        self,
        filename: str,
        text: str,
        method: str = "chunks",
        size: int = CFG["chunk_size"],
        overlap: int = CFG["chunk_overlap"],
        category: str = "",
        file_type: str = "text/plain"
    ) -> List[Dict[str, Any]]:
        """
        Split an uploaded file's text and wrap each fragment as a document.

        Args:
            filename: Name of the uploaded file, used for ids and metadata
            text: Extracted text content
            method: Processing method ("chunks", "pages" or "whole")
            size: Chunk size in characters
            overlap: Overlap between chunks
            category: Category stored in metadata
            file_type: MIME type stored in metadata

        Returns:
            One document per fragment, ids "<stem>_<index>"

        Raises:
            ValueError: If the file is too large
            InvalidConfig: If the chunking parameters or method are invalid
        """
        file_size = len(text.encode("utf-8"))
        if file_size > self.max_upload_bytes:
            raise ValueError(
                f"File size exceeds the {self.max_upload_bytes // (1024 * 1024)}MB limit. Please upload a smaller file."
            )

        fragments = TextChunker(ChunkingConfig(size=size, overlap=overlap)).split(text, method)
        stem = os.path.splitext(filename)[0]
        category = category or DEFAULT_CATEGORY

        documents = []
        for index, fragment in enumerate(fragments):
            documents.append({
                "id": f"{stem}_{index}",
                "text": fragment,
                "metadata": {
                    "source": filename,
                    "category": category,
                    "chunk_index": index,
                    "total_chunks": len(fragments),
                    "file_size": file_size,
                    "file_type": file_type,
                    "processing_method": method,
                },
            })
        logger.info(f"Split {filename} into {len(documents)} document(s) using '{method}'")
        return documents

    def index(
        self,
        collection_name: str,
        documents: List[Dict[str, Any]],
        m: Optional[int] = None,
        ef_construction: Optional[int] = None,
        tune_parameters: bool = False
    ) -> Dict[str, Any]:
        """
        Index documents into a collection.

        Raises:
            ValueError: If there are no documents, ids repeat or the collection name is invalid
            EmbeddingServiceError: If the remote call fails
        """
        validate_collection_name(collection_name)
        if not documents:
            raise ValueError("No documents to index")
        ids = [doc["id"] for doc in documents]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate document ids: {', '.join(duplicates)}")
        response = self.client.index_documents(
            collection_name, documents,
            m=m, ef_construction=ef_construction, tune_parameters=tune_parameters,
        )
        logger.info(f"Indexed {len(documents)} document(s) into '{collection_name}'")
        return {
            "collection": collection_name,
            "count": len(documents),
            "response": response,
        }
