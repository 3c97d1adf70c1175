"""
Services module for the ChromaDB gateway.

- chroma: Connection to the ChromaDB server and the embedding function
- collections: Collection lookup with not-found translation
- metadata: Metadata sanitizing and merging
- documents: Batch upsert reconciliation and single-document operations
- query: Semantic search and response shaping
- auth: API key gate
"""

from .chroma import ChromaStore, get_store
from .collections import get_collection_or_error
from .metadata import sanitize_metadata, merge_metadata
from .documents import upsert_documents, update_document, delete_document
from .query import query_collection
from .auth import APIKeyMiddleware, is_authorized

__all__ = [
    "ChromaStore",
    "get_store",
    "get_collection_or_error",
    "sanitize_metadata",
    "merge_metadata",
    "upsert_documents",
    "update_document",
    "delete_document",
    "query_collection",
    "APIKeyMiddleware",
    "is_authorized",
]
