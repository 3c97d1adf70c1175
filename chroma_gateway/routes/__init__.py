"""
API Routes module.

This module contains all FastAPI route handlers organized by resource:
- health: Store heartbeat (no API key required)
- collections: Create, list, describe and delete collections
- documents: Upsert, list, fetch, update and delete documents
- query: Semantic similarity search within a collection
"""

from .health import router as health_router
from .collections import router as collections_router
from .documents import router as documents_router
from .query import router as query_router

__all__ = [
    "health_router",
    "collections_router",
    "documents_router",
    "query_router",
]
