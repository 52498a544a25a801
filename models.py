"""
Pydantic models for API request/response validation.
"""
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel

from utils.config import CFG


class CreateEmbeddingsRequest(BaseModel):
    text: str
    mode: str = "single"  # "single" or "lines"


class CompareEmbeddingsRequest(BaseModel):
    index_a: int
    index_b: int
    seed: Optional[int] = None


class CompareVectorsRequest(BaseModel):
    a: List[float]
    b: List[float]
    seed: Optional[int] = None


class ChunkPreviewRequest(BaseModel):
    text: str
    method: str = "chunks"
    size: int = CFG["chunk_size"]
    overlap: int = CFG["chunk_overlap"]
    template: Optional[str] = None  # overrides size/overlap with the template preset


class BuildDocumentsRequest(BaseModel):
    filename: str
    text: str
    method: str = "chunks"
    size: int = CFG["chunk_size"]
    overlap: int = CFG["chunk_overlap"]
    category: str = ""
    file_type: str = "text/plain"


class DocumentModel(BaseModel):
    id: Optional[str] = None
    text: str
    source: str = ""
    category: str = ""
    metadata: Optional[Dict[str, Any]] = None


class IndexDocumentsRequest(BaseModel):
    documents: List[DocumentModel]
    m: Optional[int] = None
    ef_construction: Optional[int] = None
    tune_parameters: bool = False


class SearchRequest(BaseModel):
    collection_name: str
    query_text: Optional[str] = None
    # a list of numbers, or the same typed as a JSON array string
    query_vector: Optional[Union[List[float], str]] = None
    limit: int = 10
    use_native_search: bool = True
    score_all_documents: bool = False
    ef_param: int = 128
