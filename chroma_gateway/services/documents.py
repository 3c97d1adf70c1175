import logging
import uuid
from typing import Any, Dict, List, Optional, Sequence

from chromadb.api.models.Collection import Collection

from ..errors import InvalidRequest, NotFound, store_errors
from .metadata import merge_metadata, sanitize_metadata

INSERTED = "inserted"
UPDATED = "updated"


# -------------------------
# VALIDATION
# -------------------------

def validate_upsert(
    documents: Optional[Sequence[Any]],
    ids: Optional[Sequence[Any]] = None,
    metadatas: Optional[Sequence[Any]] = None,
) -> None:
    if not documents or not isinstance(documents, (list, tuple)):
        raise InvalidRequest("Documents array is required")
    if not all(isinstance(d, str) for d in documents):
        raise InvalidRequest("Every document must be a string")

    if ids is not None:
        if len(ids) > len(documents):
            raise InvalidRequest("ids array cannot be longer than documents array")
        if not all(i is None or isinstance(i, str) for i in ids):
            raise InvalidRequest("ids must be strings or null")
        supplied = [i for i in ids if i]
        if len(supplied) != len(set(supplied)):
            raise InvalidRequest("ids must be unique within a request")

    if metadatas is not None and len(metadatas) != len(documents):
        raise InvalidRequest("metadatas array must have the same length as documents array")


# -------------------------
# EXISTENCE CHECK
# -------------------------

def _existing_metadata(collection: Collection, ids: List[str]) -> Dict[str, Any]:
    """
    Map each already-stored id to its metadata.

    A failed lookup counts as "nothing exists", so the batch goes ahead as
    inserts. This can turn an intended update into a blind overwrite.
    """
    if not ids:
        return {}

    try:
        found = collection.get(ids=ids, include=["metadatas"])
    except Exception as e:
        logging.warning(f"[Documents] Existence check failed, treating {len(ids)} id(s) as new: {e}")
        return {}

    found_ids = found.get("ids") or []
    found_metadatas = found.get("metadatas") or [None] * len(found_ids)
    return dict(zip(found_ids, found_metadatas))


# -------------------------
# BATCH UPSERT
# -------------------------

def upsert_documents(
    collection: Collection,
    documents: List[str],
    ids: Optional[List[Optional[str]]] = None,
    metadatas: Optional[List[Any]] = None,
) -> List[Dict[str, str]]:
    """
    Insert or update a batch of documents with a single upsert call.

    Returns one {"id", "status"} entry per document, in input order.
    """
    validate_upsert(documents, ids, metadatas)

    ids = list(ids or [])
    supplied = [i for i in ids if i]
    existing = _existing_metadata(collection, supplied)

    final_ids: List[str] = []
    final_metadatas: List[Optional[dict]] = []
    results: List[Dict[str, str]] = []

    for i in range(len(documents)):
        doc_id = ids[i] if i < len(ids) and ids[i] else str(uuid.uuid4())
        new_metadata = metadatas[i] if metadatas is not None else None

        if doc_id in existing:
            status = UPDATED
            if new_metadata is not None:
                metadata = merge_metadata(existing[doc_id], new_metadata)
            else:
                metadata = sanitize_metadata(existing[doc_id])
        else:
            status = INSERTED
            metadata = sanitize_metadata(new_metadata)

        final_ids.append(doc_id)
        final_metadatas.append(metadata)
        results.append({"id": doc_id, "status": status})

    payload: Dict[str, Any] = {"ids": final_ids, "documents": list(documents)}
    if any(m is not None for m in final_metadatas):
        payload["metadatas"] = final_metadatas

    with store_errors("Failed to add documents"):
        collection.upsert(**payload)

    updated = sum(1 for r in results if r["status"] == UPDATED)
    logging.info(f"[Documents] Upserted {len(results)} into '{collection.name}' ({len(results) - updated} inserted, {updated} updated)")
    return results


# -------------------------
# READS
# -------------------------

def list_documents(
    collection: Collection,
    ids: Optional[List[str]] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    where: Optional[dict] = None,
) -> dict:
    with store_errors("Failed to get documents"):
        result = collection.get(ids=ids, limit=limit, offset=offset, where=where)

    found_ids = result.get("ids") or []
    return {
        "documents": result.get("documents") or [],
        "ids": found_ids,
        "metadatas": result.get("metadatas") or [],
        "count": len(found_ids),
    }


def get_document(collection: Collection, doc_id: str) -> dict:
    with store_errors("Failed to get document"):
        result = collection.get(ids=[doc_id])

    found_ids = result.get("ids") or []
    if not found_ids:
        raise NotFound("Document not found")

    documents = result.get("documents") or [None]
    metadatas = result.get("metadatas") or [None]
    return {"id": found_ids[0], "document": documents[0], "metadata": metadatas[0]}


def count_documents(collection: Collection) -> int:
    with store_errors("Failed to get collection"):
        result = collection.get(include=[])
    return len(result.get("ids") or [])


# -------------------------
# WRITES
# -------------------------

def update_document(
    collection: Collection,
    doc_id: str,
    document: Optional[str] = None,
    metadata: Any = None,
    metadata_supplied: bool = False,
) -> None:
    """
    Update one record, keeping whatever the caller did not send.

    Read-then-write: a concurrent writer between the two calls is overwritten.
    """
    current = get_document(collection, doc_id)

    new_document = document if document is not None else current["document"]
    if metadata_supplied:
        new_metadata = merge_metadata(current["metadata"], metadata)
    else:
        new_metadata = sanitize_metadata(current["metadata"])

    payload: Dict[str, Any] = {"ids": [doc_id]}
    if new_document is not None:
        payload["documents"] = [new_document]
    if new_metadata is not None:
        payload["metadatas"] = [new_metadata]

    with store_errors("Failed to update document"):
        collection.update(**payload)
    logging.info(f"[Documents] Updated '{doc_id}' in '{collection.name}'")


def delete_document(collection: Collection, doc_id: str) -> None:
    # ChromaDB ignores unknown ids on delete, so check first
    get_document(collection, doc_id)

    with store_errors("Failed to delete document"):
        collection.delete(ids=[doc_id])
    logging.info(f"[Documents] Deleted '{doc_id}' from '{collection.name}'")
