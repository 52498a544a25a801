from dotenv import load_dotenv
import os

# Load .env from project root (if present). This populates os.environ.
load_dotenv(".env")


def _int_env(name, default):
    v = os.getenv(name)
    try:
        return int(v) if v is not None else default
    except ValueError:
        return default


def _float_env(name, default):
    v = os.getenv(name)
    try:
        return float(v) if v is not None else default
    except ValueError:
        return default


# Expose a CFG dictionary for the rest of the app
CFG = {
    # remote embedding / indexing / search service
    "api_base_url": os.getenv("API_BASE_URL", "https://embeddings100.cloud-stacks.com").rstrip("/"),
    "api_key": os.getenv("API_KEY", ""),
    "request_timeout": _float_env("REQUEST_TIMEOUT", 30.0),
    "request_retries": _int_env("REQUEST_RETRIES", 2),
    "request_backoff": _float_env("REQUEST_BACKOFF", 1.5),
    "status_timeout": _float_env("STATUS_TIMEOUT", 3.0),

    # label reported in exports, the remote service picks the real model
    "embedding_model": os.getenv("EMBEDDING_MODEL", "sentence-transformer-384"),

    # chunking parameters configurable via env
    "chunk_size": _int_env("CHUNK_SIZE", 1000),
    "chunk_overlap": _int_env("CHUNK_OVERLAP", 100),
    "max_upload_bytes": _int_env("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),

    # embedding history kept in the local key-value store
    "database_path": os.getenv("DATABASE_PATH", "vectordash.db"),
    "history_limit": _int_env("HISTORY_LIMIT", 20),

    # uvicorn host/port (from .env)
    "uvicorn_host": os.getenv("UVICORN_HOST", "127.0.0.1"),
    "uvicorn_port": _int_env("UVICORN_PORT", 8000),
}
