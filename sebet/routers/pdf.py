"""PDF upload parsing for the article editor's AI context."""

import asyncio
import base64
import binascii
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from sebet.models.pdf_request import ParsePdfRequest
from sebet.models.pdf_response import ParsePdfResponse
from sebet.routers.dependencies import require_editor
from sebet.services.pdf_text import extract_text

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter()

# Same ceiling the editor enforces before uploading.
MAX_PDF_SIZE = 5 * 1024 * 1024  # 5 MB


@router.post(
    "/parse-pdf",
    response_model=ParsePdfResponse,
    summary="Extract plain text from an uploaded PDF",
)
@limiter.limit("10/minute")
async def parse_pdf(
    request: Request,
    body: ParsePdfRequest,
    user_id: str = Depends(require_editor),
) -> ParsePdfResponse:
    """Decode the base64 PDF and return the text recovered from it.

    The text is best effort: documents without readable text operators get a
    short bracketed placeholder instead of an error.
    """
    if not body.pdf_base64:
        raise HTTPException(status_code=400, detail="PDF sadržaj nije prosleđen")

    try:
        pdf_bytes = base64.b64decode("".join(body.pdf_base64.split()), validate=True)
    except binascii.Error as exc:
        logger.warning("Invalid base64 payload for %s: %s", body.file_name, exc)
        raise HTTPException(status_code=400, detail="Neispravan base64 sadržaj")

    if len(pdf_bytes) > MAX_PDF_SIZE:
        raise HTTPException(status_code=413, detail="PDF je veći od 5MB")

    logger.info("Parsing PDF: %s", body.file_name, extra={"user_id": user_id})
    content = await asyncio.to_thread(extract_text, pdf_bytes, body.file_name)
    logger.info("Extracted %d characters from PDF", len(content))

    return ParsePdfResponse(content=content, file_name=body.file_name)
