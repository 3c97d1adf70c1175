import logging

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from ..services.chroma import ChromaStore, get_store

router = APIRouter()


@router.get("/health")
async def health(store: ChromaStore = Depends(get_store)):
    """Store heartbeat; reachable without an API key."""
    try:
        heartbeat = await run_in_threadpool(store.heartbeat)
        return {"status": "ok", "heartbeat": heartbeat}
    except Exception as e:
        logging.error(f"[Health] Heartbeat failed: {e}")
        return JSONResponse(status_code=500, content={"status": "error", "error": str(e)})
