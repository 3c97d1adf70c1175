import logging

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from ..errors import InvalidRequest, store_errors
from ..models import CollectionCreateRequest
from ..services.chroma import ChromaStore, get_store
from ..services.collections import get_collection_or_error
from ..services.documents import count_documents

router = APIRouter(prefix="/collections", tags=["collections"])


def _create(store: ChromaStore, name: str) -> str:
    with store_errors("Failed to create collection"):
        collection = store.create_collection(name)
    return collection.name


def _list(store: ChromaStore):
    with store_errors("Failed to list collections"):
        return store.list_collection_names()


def _describe(store: ChromaStore, name: str) -> dict:
    collection = get_collection_or_error(store, name)
    return {"name": collection.name, "count": count_documents(collection)}


def _delete(store: ChromaStore, name: str) -> None:
    with store_errors("Failed to delete collection", not_found_message="Collection not found"):
        store.delete_collection(name)


# -------------------------
# CREATE COLLECTION
# -------------------------
@router.post("", status_code=201)
async def create_collection(req: CollectionCreateRequest, store: ChromaStore = Depends(get_store)):
    if not req.name:
        raise InvalidRequest("Collection name is required")

    name = await run_in_threadpool(_create, store, req.name)
    logging.info(f"[Collections] Created '{name}'")
    return {"name": name, "message": "Collection created"}


# -------------------------
# LIST COLLECTIONS
# -------------------------
@router.get("")
async def list_collections(store: ChromaStore = Depends(get_store)):
    names = await run_in_threadpool(_list, store)
    return {"collections": [{"name": name} for name in names]}


# -------------------------
# COLLECTION DETAILS
# -------------------------
@router.get("/{name}")
async def get_collection(name: str, store: ChromaStore = Depends(get_store)):
    return await run_in_threadpool(_describe, store, name)


# -------------------------
# DELETE COLLECTION
# -------------------------
@router.delete("/{name}")
async def delete_collection(name: str, store: ChromaStore = Depends(get_store)):
    await run_in_threadpool(_delete, store, name)
    logging.info(f"[Collections] Deleted '{name}'")
    return {"message": f"Collection {name} deleted"}
