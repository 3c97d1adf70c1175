from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from ..errors import InvalidRequest
from ..models import QueryRequest
from ..services.chroma import ChromaStore, get_store
from ..services.collections import get_collection_or_error
from ..services.query import query_collection

router = APIRouter(prefix="/collections", tags=["query"])


# -------------------------
# QUERY TEXT (EMBED + SEARCH)
# -------------------------
@router.post("/{name}/query")
async def query(name: str, req: QueryRequest, store: ChromaStore = Depends(get_store)):
    """Semantic search; embedding and ranking happen inside ChromaDB."""
    if not req.query_texts:
        raise InvalidRequest("queryTexts array is required")

    collection = await run_in_threadpool(get_collection_or_error, store, name)
    return await run_in_threadpool(
        query_collection,
        collection,
        req.query_texts,
        req.n_results,
        req.where,
        req.include,
    )
