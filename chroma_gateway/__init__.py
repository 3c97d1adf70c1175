"""
ChromaDB REST Gateway.

A FastAPI service that exposes ChromaDB collections, documents and semantic
queries over HTTP, guarded by a shared API key.

Main components:
- main: FastAPI application factory, middleware and error handlers
- config: Immutable settings read from the environment
- errors: Error taxonomy and translation of ChromaDB failures
- models: Pydantic request data models
- routes: API endpoint handlers
- services: ChromaDB access, metadata sanitizing, upsert reconciliation, auth
"""

__version__ = "1.0.0"

from .config import Settings, load_settings
from .main import create_app

__all__ = [
    "__version__",
    "Settings",
    "load_settings",
    "create_app",
]
