from typing import Any, List, Optional

from chromadb.api.models.Collection import Collection

from ..errors import InvalidRequest, store_errors

DEFAULT_INCLUDE = ["documents", "metadatas", "distances"]
ALLOWED_INCLUDE = {"documents", "metadatas", "distances", "embeddings", "uris", "data"}


def _plain(value: Any) -> Any:
    # Embeddings come back as numpy arrays
    if hasattr(value, "tolist"):
        return value.tolist()
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def query_collection(
    collection: Collection,
    query_texts: Optional[List[str]],
    n_results: int = 10,
    where: Optional[dict] = None,
    include: Optional[List[str]] = None,
) -> dict:
    """Run a similarity query and shape the response envelope."""
    if not query_texts or not isinstance(query_texts, list):
        raise InvalidRequest("queryTexts array is required")

    include = list(include) if include else list(DEFAULT_INCLUDE)
    unknown = [field for field in include if field not in ALLOWED_INCLUDE]
    if unknown:
        raise InvalidRequest(f"Unsupported include values: {', '.join(unknown)}")

    options = {"query_texts": query_texts, "n_results": n_results, "include": include}
    if where:
        options["where"] = where

    with store_errors("Failed to query collection"):
        results = collection.query(**options)

    ids = results.get("ids") or []
    response = {
        "results": results.get("documents") or [],
        "ids": ids,
        "metadatas": results.get("metadatas") or [],
        "distances": _plain(results.get("distances") or []),
        "queryTexts": query_texts,
        "count": sum(len(row) for row in ids),
    }
    if "embeddings" in include:
        embeddings = results.get("embeddings")
        response["embeddings"] = _plain(embeddings) if embeddings is not None else []
    return response
