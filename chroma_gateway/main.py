import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import Settings, load_settings
from .errors import GatewayError
from .routes import collections_router, documents_router, health_router, query_router
from .services.auth import APIKeyMiddleware
from .services.chroma import ChromaStore


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logging.error(f"[Gateway] Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "details": str(exc)},
        )


def create_app(settings: Optional[Settings] = None, store: Optional[ChromaStore] = None) -> FastAPI:
    """
    Build the gateway app.

    Called without arguments it reads the environment, so uvicorn can serve it
    directly: uvicorn chroma_gateway.main:create_app --factory
    """
    settings = settings or load_settings()

    app = FastAPI(
        title="ChromaDB API Server",
        version=__version__,
        description="REST gateway for collections, documents and semantic queries in ChromaDB",
    )
    app.state.settings = settings
    app.state.store = store or ChromaStore(settings)

    _register_error_handlers(app)

    # Auth sits inside CORS so preflight requests are answered without a key
    app.add_middleware(APIKeyMiddleware, api_key=settings.api_key)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(health_router)
    app.include_router(collections_router)
    app.include_router(documents_router)
    app.include_router(query_router)

    @app.get("/")
    def root():
        return {"message": "ChromaDB API Server", "version": __version__}

    return app


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def run() -> None:
    """Console entry point: serve the gateway with uvicorn."""
    settings = load_settings()
    setup_logging(settings.log_level)

    app = create_app(settings)
    logging.info(f"[Gateway] Server is running on {settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
