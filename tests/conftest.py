import copy
from typing import Dict, List, Optional

import pytest
from chromadb.errors import NotFoundError
from fastapi.testclient import TestClient

from chroma_gateway.config import Settings
from chroma_gateway.main import create_app

API_KEY = "test-api-key"


# ==========================================
# IN-MEMORY CHROMA STAND-INS
# ==========================================


class FakeCollection:
    """Just enough of chromadb's Collection for the gateway to run against."""

    def __init__(self, name: str):
        self.name = name
        self.records: Dict[str, dict] = {}
        self.upsert_calls: List[dict] = []

    def _matches(self, metadata: Optional[dict], where: Optional[dict]) -> bool:
        if not where:
            return True
        metadata = metadata or {}
        return all(metadata.get(key) == value for key, value in where.items())

    def get(self, ids=None, where=None, limit=None, offset=None, include=None):
        selected = [i for i in (ids if ids is not None else self.records) if i in self.records]
        selected = [i for i in selected if self._matches(self.records[i]["metadata"], where)]
        start = offset or 0
        selected = selected[start:start + limit] if limit is not None else selected[start:]
        return {
            "ids": selected,
            "documents": [self.records[i]["document"] for i in selected],
            "metadatas": [copy.deepcopy(self.records[i]["metadata"]) for i in selected],
        }

    def upsert(self, ids, documents, metadatas=None):
        self.upsert_calls.append({"ids": ids, "documents": documents, "metadatas": metadatas})
        for index, doc_id in enumerate(ids):
            metadata = metadatas[index] if metadatas is not None else None
            self.records[doc_id] = {"document": documents[index], "metadata": metadata}

    def update(self, ids, documents=None, metadatas=None):
        for index, doc_id in enumerate(ids):
            if documents is not None:
                self.records[doc_id]["document"] = documents[index]
            if metadatas is not None:
                self.records[doc_id]["metadata"] = metadatas[index]

    def delete(self, ids=None):
        for doc_id in ids or []:
            self.records.pop(doc_id, None)

    def query(self, query_texts, n_results=10, where=None, include=None):
        hits = [i for i in self.records if self._matches(self.records[i]["metadata"], where)][:n_results]
        return {
            "ids": [list(hits) for _ in query_texts],
            "documents": [[self.records[i]["document"] for i in hits] for _ in query_texts],
            "metadatas": [[self.records[i]["metadata"] for i in hits] for _ in query_texts],
            "distances": [[0.1 * n for n in range(len(hits))] for _ in query_texts],
        }


class FakeStore:
    """Stands in for ChromaStore; its own client is itself."""

    def __init__(self):
        self.collections: Dict[str, FakeCollection] = {}
        self.calls: List[str] = []

    @property
    def client(self):
        return self

    def embedding_function(self):
        return None

    def heartbeat(self):
        self.calls.append("heartbeat")
        return 1700000000000000000

    def create_collection(self, name):
        self.calls.append("create_collection")
        if name in self.collections:
            raise ValueError(f"Collection {name} already exists")
        self.collections[name] = FakeCollection(name)
        return self.collections[name]

    def get_collection(self, name, embedding_function=None):
        self.calls.append("get_collection")
        if name not in self.collections:
            raise NotFoundError(f"Collection [{name}] does not exist")
        return self.collections[name]

    def get_or_create_collection(self, name, embedding_function=None):
        self.calls.append("get_or_create_collection")
        return self.collections.setdefault(name, FakeCollection(name))

    def list_collection_names(self):
        self.calls.append("list_collections")
        return list(self.collections)

    def delete_collection(self, name):
        self.calls.append("delete_collection")
        if name not in self.collections:
            raise NotFoundError(f"Collection [{name}] does not exist")
        del self.collections[name]


# ==========================================
# FIXTURES
# ==========================================


@pytest.fixture
def settings():
    return Settings(openai_api_key="sk-test", api_key=API_KEY)


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def app(settings, store):
    return create_app(settings, store=store)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def auth_headers():
    return {"X-API-Key": API_KEY}


@pytest.fixture
def collection(store):
    """A collection named 'notes' that already exists in the store."""
    return store.create_collection("notes")
