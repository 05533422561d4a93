"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from deckmodel.api.dependencies import get_document_store
from deckmodel.api.main import app
from deckmodel.parser import PPTXReader, sequential_ids
from deckmodel.tests.builders import (
    PackageBuilder,
    paragraph,
    run,
    slide_xml,
    sp,
    xfrm,
)


@pytest.fixture
def reader() -> PPTXReader:
    """A reader with deterministic IDs."""
    return PPTXReader(id_factory=sequential_ids())


@pytest.fixture
def builder() -> PackageBuilder:
    """An empty 4:3 package builder."""
    return PackageBuilder()


@pytest.fixture
def sample_pptx() -> bytes:
    """Two slides: a titled text box and a filled rectangle."""
    return (
        PackageBuilder()
        .add_slide(
            slide_xml(
                [
                    sp(
                        2,
                        "Title 1",
                        xfrm(952500, 476250, 7620000, 952500),
                        paragraphs=[paragraph(run("Quarterly Review", bold=True, size=3200))],
                        placeholder='<p:ph type="title"/>',
                    )
                ]
            ),
            notes="Welcome everyone",
        )
        .add_slide(
            slide_xml([sp(2, "Box", xfrm(0, 0, 914400, 914400), fill="1F497D")], name="Details")
        )
        .with_core(title="Quarterly Review", creator="Jane Doe")
        .with_theme()
        .build()
    )


@pytest.fixture
def client() -> TestClient:
    """Create a test client for the FastAPI app with an empty document store."""
    get_document_store().clear()
    return TestClient(app)
