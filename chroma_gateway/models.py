from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional


class CollectionCreateRequest(BaseModel):
    name: Optional[str] = None


class DocumentsUpsertRequest(BaseModel):
    documents: Optional[List[str]] = None
    ids: Optional[List[Optional[str]]] = None
    # Entries are sanitized later, so anything JSON is accepted here
    metadatas: Optional[List[Any]] = None


class DocumentUpdateRequest(BaseModel):
    document: Optional[str] = None
    metadata: Optional[Any] = None


class QueryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query_texts: Optional[List[str]] = Field(default=None, alias="queryTexts")
    n_results: int = Field(default=10, alias="nResults", gt=0)
    where: Optional[Dict[str, Any]] = None
    include: Optional[List[str]] = None
