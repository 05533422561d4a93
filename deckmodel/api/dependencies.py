"""FastAPI dependencies."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from deckmodel.api.store import DocumentStore
from deckmodel.config import Settings, get_settings


@lru_cache()
def get_document_store() -> DocumentStore:
    """Process-wide document store sized from settings."""
    return DocumentStore(capacity=get_settings().document_store_size)


# Type aliases for cleaner dependency injection
AppSettings = Annotated[Settings, Depends(get_settings)]
Store = Annotated[DocumentStore, Depends(get_document_store)]
