"""Parse, slide lookup and export routes."""

import logging
import re

from fastapi import APIRouter, File, HTTPException, UploadFile, status
from fastapi.responses import Response

from deckmodel.api.dependencies import AppSettings, Store
from deckmodel.dsl.schema import PresentationDocument, Slide
from deckmodel.parser.errors import PackageError
from deckmodel.parser.pptx_reader import PPTXReader
from deckmodel.renderer.pptx_writer import PPTXWriter

logger = logging.getLogger(__name__)

router = APIRouter()

PPTX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"


def export_filename(name: str) -> str:
    """Attachment filename derived from a document name."""
    stem = re.sub(r"[^A-Za-z0-9._-]+", "_", name).strip("._")
    return f"{stem or 'presentation'}.pptx"


@router.post("/parse", response_model=PresentationDocument)
async def parse_presentation(
    settings: AppSettings,
    store: Store,
    file: UploadFile = File(...),
    name: str | None = None,
):
    """Parse an uploaded PPTX file and keep the result for slide lookups."""
    if file.filename and not file.filename.lower().endswith(".pptx"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File must be a .pptx file",
        )

    content = await file.read()
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds the {settings.max_upload_mb} MB upload limit",
        )

    default_name = file.filename[: -len(".pptx")] if file.filename else None
    try:
        document = PPTXReader().read(content, name=name or default_name)
    except PackageError as e:
        logger.warning(f"Rejected upload {file.filename!r}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    store.put(document)
    return document


@router.get("/documents/{document_id}", response_model=PresentationDocument)
async def get_document(document_id: str, store: Store):
    """Return a previously parsed document."""
    document = store.get(document_id)
    if document is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found",
        )
    return document


@router.get("/slides/{slide_id}", response_model=Slide)
async def get_slide(slide_id: str, store: Store):
    """Return a slide of any previously parsed document."""
    slide = store.find_slide(slide_id)
    if slide is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Slide not found",
        )
    return slide


@router.post("/export")
async def export_presentation(document: PresentationDocument):
    """Serialize a document back into a PPTX file."""
    content = PPTXWriter().write(document)
    return Response(
        content=content,
        media_type=PPTX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{export_filename(document.name)}"'},
    )
