"""Tests for the in-memory document store."""

from deckmodel.api.store import DocumentStore
from deckmodel.parser import PPTXReader


def test_evicts_least_recently_used(reader: PPTXReader, sample_pptx: bytes) -> None:
    """Reading a document protects it from eviction."""
    store = DocumentStore(capacity=2)
    first, second, third = (reader.read(sample_pptx) for _ in range(3))

    store.put(first)
    store.put(second)
    assert store.get(first.id) is first
    store.put(third)

    assert len(store) == 2
    assert first.id in store
    assert second.id not in store


def test_find_slide(reader: PPTXReader, sample_pptx: bytes) -> None:
    """Slides are found across stored documents."""
    store = DocumentStore()
    document = reader.read(sample_pptx)
    store.put(document)

    assert store.find_slide(document.slides[1].id) == document.slides[1]
    assert store.find_slide("missing") is None

    store.clear()
    assert store.find_slide(document.slides[1].id) is None
