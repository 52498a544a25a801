"""
Centralized logging configuration for VectorDash.
"""
import logging
import sys

# Configure root logger once for the whole application
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Module name (usually __name__)

    Returns:
        Logger attached to the shared stdout handler
    """
    return logging.getLogger(name)
