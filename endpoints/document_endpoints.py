"""
Document chunking and indexing endpoints.
"""
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ai.text_chunker import (
    COLLECTION_TEMPLATES, CHUNK_PRESETS, ChunkingConfig, TextChunker,
    chunk_fragments, config_for_template,
)
from models import ChunkPreviewRequest, BuildDocumentsRequest, IndexDocumentsRequest
from utils import app_state
from utils.logger import get_logger
from .errors import error_response

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["documents"])


@router.get("/templates", summary="List collection templates")
def api_list_templates():
    templates = []
    for template in COLLECTION_TEMPLATES:
        preset = CHUNK_PRESETS[template["default_chunk"]]
        templates.append({**template, "chunk_size": preset.size, "chunk_overlap": preset.overlap})
    return JSONResponse(templates)


@router.post("/documents/chunk", summary="Preview how a text will be split")
def api_chunk_preview(request: ChunkPreviewRequest):
    """
    Split text without indexing it.

    - **method**: "chunks", "pages" or "whole"
    - **size** / **overlap**: Chunk parameters (chunks method only)
    - **template**: Optional collection template whose preset replaces size/overlap

    Chunked fragments carry their offset and overlap with the previous fragment.
    """
    try:
        if request.template:
            config = config_for_template(request.template)
        else:
            config = ChunkingConfig(size=request.size, overlap=request.overlap)

        if request.method == "chunks":
            fragments = [f.to_dict() for f in chunk_fragments(request.text, config.size, config.overlap)]
        else:
            fragments = [
                {"index": i, "length": len(text), "text": text}
                for i, text in enumerate(TextChunker(config).split(request.text, request.method))
            ]
        return JSONResponse({
            "method": request.method,
            "size": config.size,
            "overlap": config.overlap,
            "count": len(fragments),
            "fragments": fragments,
        })
    except Exception as e:
        return error_response(e, "chunking text")


@router.post("/documents", summary="Build documents from an uploaded text")
def api_build_documents(request: BuildDocumentsRequest):
    try:
        documents = app_state.get_document_service().documents_from_text(
            request.filename, request.text,
            method=request.method, size=request.size, overlap=request.overlap,
            category=request.category, file_type=request.file_type,
        )
        return JSONResponse({"documents": documents, "count": len(documents)})
    except Exception as e:
        return error_response(e, "building documents")


@router.post("/collections/{collection_name}/index", summary="Index documents into a collection")
def api_index_documents(collection_name: str, request: IndexDocumentsRequest):
    """
    Send documents to the remote indexing API.

    Documents without metadata get one built from source/category and an
    optional id is generated when missing.
    """
    try:
        service = app_state.get_document_service()
        documents = [
            service.make_document(
                doc.text, doc_id=doc.id, source=doc.source, category=doc.category,
                custom_metadata=doc.metadata,
            )
            for doc in request.documents
        ]
        result = service.index(
            collection_name, documents,
            m=request.m, ef_construction=request.ef_construction,
            tune_parameters=request.tune_parameters,
        )
        return JSONResponse(result)
    except Exception as e:
        return error_response(e, "indexing documents")
