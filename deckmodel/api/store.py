"""In-memory store of parsed documents."""

import logging
from collections import OrderedDict
from typing import Optional

from deckmodel.dsl.schema import PresentationDocument, Slide

logger = logging.getLogger(__name__)


class DocumentStore:
    """Least-recently-used cache of parsed documents, keyed by document ID."""

    def __init__(self, capacity: int = 32) -> None:
        """Initialize the store.

        Args:
            capacity: Maximum number of documents kept; at least one.
        """
        self.capacity = max(1, capacity)
        self._documents: "OrderedDict[str, PresentationDocument]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, document_id: str) -> bool:
        return document_id in self._documents

    def put(self, document: PresentationDocument) -> None:
        """Store a document, evicting the least recently used one when full."""
        self._documents[document.id] = document
        self._documents.move_to_end(document.id)
        while len(self._documents) > self.capacity:
            evicted, _ = self._documents.popitem(last=False)
            logger.debug(f"Evicted document {evicted}")

    def get(self, document_id: str) -> Optional[PresentationDocument]:
        """Look up a document and mark it as recently used."""
        document = self._documents.get(document_id)
        if document is not None:
            self._documents.move_to_end(document_id)
        return document

    def find_slide(self, slide_id: str) -> Optional[Slide]:
        """Find a slide in any stored document."""
        for document_id, document in self._documents.items():
            slide = document.get_slide_by_id(slide_id)
            if slide is not None:
                self._documents.move_to_end(document_id)
                return slide
        return None

    def clear(self) -> None:
        """Drop every stored document."""
        self._documents.clear()
