import json
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.concurrency import run_in_threadpool

from ..errors import InvalidRequest
from ..models import DocumentsUpsertRequest, DocumentUpdateRequest
from ..services.chroma import ChromaStore, get_store
from ..services.collections import get_collection_or_error
from ..services import documents as docs

router = APIRouter(prefix="/collections", tags=["documents"])


def _parse_where(raw: Optional[str]) -> Optional[dict]:
    if not raw:
        return None
    try:
        where = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidRequest("where must be valid JSON", details=str(e)) from e
    if not isinstance(where, dict):
        raise InvalidRequest("where must be a JSON object")
    # ChromaDB rejects an empty filter
    return where or None


def _parse_ids(raw: Optional[str]) -> Optional[list]:
    if raw is None:
        return None
    return raw.split(",")


# -------------------------
# ADD / UPSERT DOCUMENTS
# -------------------------
@router.post("/{name}/documents")
async def add_documents(name: str, req: DocumentsUpsertRequest, store: ChromaStore = Depends(get_store)):
    """Insert new records and update existing ones, reporting which happened per id."""
    docs.validate_upsert(req.documents, req.ids, req.metadatas)

    collection = await run_in_threadpool(get_collection_or_error, store, name)
    results = await run_in_threadpool(
        docs.upsert_documents, collection, req.documents, req.ids, req.metadatas
    )
    return {"message": "Documents upserted successfully", "results": results}


# -------------------------
# LIST DOCUMENTS
# -------------------------
@router.get("/{name}/documents")
async def list_documents(
    name: str,
    ids: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=0),
    offset: Optional[int] = Query(default=None, ge=0),
    where: Optional[str] = None,
    store: ChromaStore = Depends(get_store),
):
    where_filter = _parse_where(where)

    collection = await run_in_threadpool(get_collection_or_error, store, name)
    return await run_in_threadpool(
        docs.list_documents, collection, _parse_ids(ids), limit, offset, where_filter
    )


# -------------------------
# SINGLE DOCUMENT
# -------------------------
@router.get("/{name}/documents/{doc_id}")
async def get_document(name: str, doc_id: str, store: ChromaStore = Depends(get_store)):
    collection = await run_in_threadpool(get_collection_or_error, store, name)
    return await run_in_threadpool(docs.get_document, collection, doc_id)


@router.patch("/{name}/documents/{doc_id}")
async def update_document(
    name: str,
    doc_id: str,
    req: DocumentUpdateRequest,
    store: ChromaStore = Depends(get_store),
):
    collection = await run_in_threadpool(get_collection_or_error, store, name)
    await run_in_threadpool(
        docs.update_document,
        collection,
        doc_id,
        req.document,
        req.metadata,
        "metadata" in req.model_fields_set,
    )
    return {"message": "Document updated successfully", "id": doc_id}


@router.delete("/{name}/documents/{doc_id}")
async def delete_document(name: str, doc_id: str, store: ChromaStore = Depends(get_store)):
    collection = await run_in_threadpool(get_collection_or_error, store, name)
    await run_in_threadpool(docs.delete_document, collection, doc_id)
    return {"message": f"Document {doc_id} deleted successfully"}
