import logging

from chromadb.api.models.Collection import Collection

from ..errors import (
    STORE_NOT_FOUND,
    STORE_UNKNOWN_EMBEDDING_FUNCTION,
    InternalError,
    NotFound,
    classify_store_error,
)
from .chroma import ChromaStore


def get_collection_or_error(store: ChromaStore, name: str) -> Collection:
    """
    Fetch a collection bound to the configured embedding function.

    Raises NotFound when the store reports the collection missing and
    InternalError for anything else. When the store cannot rebuild the
    embedding function it has on record for the collection, the collection is
    opened with get_or_create_collection and the local embedding function.
    """
    embedding_function = store.embedding_function()

    try:
        return store.client.get_collection(name=name, embedding_function=embedding_function)
    except Exception as e:
        kind = classify_store_error(e)

        if kind == STORE_UNKNOWN_EMBEDDING_FUNCTION:
            logging.warning(f"[Collections] '{name}' has an unknown embedding function, reopening with local one: {e}")
            try:
                return store.client.get_or_create_collection(
                    name=name,
                    embedding_function=embedding_function,
                )
            except Exception as retry_error:
                raise InternalError(
                    "Failed to get collection", details=str(retry_error)
                ) from retry_error

        if kind == STORE_NOT_FOUND:
            raise NotFound(f"Collection '{name}' not found") from e

        raise InternalError("Failed to get collection", details=str(e)) from e
