import logging
from threading import Lock
from typing import List, Optional

import chromadb
from chromadb.api import ClientAPI
from chromadb.config import Settings as ChromaSettings
from chromadb.utils.embedding_functions import OpenAIEmbeddingFunction
from fastapi import Request

from ..config import Settings


# -------------------------
# CHROMA STORE
# -------------------------

class ChromaStore:
    """
    Owns the connection to the ChromaDB server.

    The HTTP client is created on first use, because creating it already talks
    to the server, and is then reused for the life of the process.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._client: Optional[ClientAPI] = None
        self._lock = Lock()

    # -------------------------
    # CLIENT (LAZY)
    # -------------------------
    @property
    def client(self) -> ClientAPI:
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._client = self._connect()
        return self._client

    def _connect(self) -> ClientAPI:
        host, port, ssl = self.settings.chroma_endpoint()
        overrides = {"allow_reset": self.settings.allow_reset, "anonymized_telemetry": False}
        if self.settings.disable_ssl_verification:
            overrides["chroma_server_ssl_verify"] = False
            logging.warning("[Chroma] TLS certificate verification is DISABLED for the store connection")
        chroma_settings = ChromaSettings(**overrides)

        client = chromadb.HttpClient(host=host, port=port, ssl=ssl, settings=chroma_settings)
        logging.info(f"[Chroma] Connected to {'https' if ssl else 'http'}://{host}:{port}")
        return client

    # -------------------------
    # EMBEDDING FUNCTION
    # -------------------------
    def embedding_function(self) -> OpenAIEmbeddingFunction:
        return OpenAIEmbeddingFunction(
            api_key=self.settings.openai_api_key,
            model_name=self.settings.embedding_model,
        )

    # -------------------------
    # SERVER-LEVEL OPERATIONS
    # -------------------------
    def heartbeat(self) -> int:
        return self.client.heartbeat()

    def create_collection(self, name: str):
        return self.client.create_collection(
            name=name,
            embedding_function=self.embedding_function(),
        )

    def list_collection_names(self) -> List[str]:
        # Older clients return names, newer ones return Collection objects
        return [getattr(c, "name", c) for c in self.client.list_collections()]

    def delete_collection(self, name: str) -> None:
        self.client.delete_collection(name=name)

    def reset(self) -> bool:
        return self.client.reset()


def get_store(request: Request) -> ChromaStore:
    """FastAPI dependency returning the store created by create_app."""
    return request.app.state.store
