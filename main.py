"""
VectorDash - backend for the vector embeddings dashboard.
Main application entry point.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
import uvicorn

from utils import app_state
from utils.config import CFG
from utils.logger import get_logger
from endpoints import embedding_router, document_router, search_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Using embedding service at {CFG['api_base_url']}")
    # The dashboard stays usable offline (chunking, comparisons), so only warn
    if app_state.get_client().status(timeout=CFG["status_timeout"]):
        logger.info("Embedding service is online")
    else:
        logger.warning("Embedding service is not reachable; embed, index and search calls will fail")

    yield

    logger.info("Shutting down")


app = FastAPI(
    lifespan=lifespan,
    title="VectorDash API",
    description="Create text embeddings, compare them, split documents into fragments, "
                "index them into collections and run semantic search.",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "embeddings", "description": "Embedding creation, history and comparison"},
        {"name": "documents", "description": "Document chunking and indexing"},
        {"name": "search", "description": "Semantic search in collections"},
        {"name": "health", "description": "Health and status checks"},
    ]
)

# Include routers
app.include_router(embedding_router)
app.include_router(document_router)
app.include_router(search_router)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=CFG.get("uvicorn_host", "127.0.0.1"),
        port=int(CFG.get("uvicorn_port", 8000)),
        reload=True,
        access_log=False  # Hide access logs
    )
