"""Ingestion Stage - Classify an uploaded file and prepare it for notes.

DOCX files are converted to text locally with python-docx. PDF and TXT files
are not read locally at all; they are encoded as a data URI blob and handed
to the notes stage, which extracts them through the generative service.
"""

import io
import logging
import mimetypes
from pathlib import Path
from typing import Optional

import docx

from notewise.errors import ExtractionError, UnsupportedInputError
from notewise.models import MEDIA_TYPES, Document, DocumentBlob, DocumentKind

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = MEDIA_TYPES[DocumentKind.DOCX]


def classify_document(filename: str, media_type: Optional[str] = None) -> DocumentKind:
    """Classify a file by declared type and extension.

    Args:
        filename: Original filename.
        media_type: Declared MIME type, if any. When missing, the type guessed
            from the extension is used instead.

    Returns:
        The document kind.

    Raises:
        UnsupportedInputError: For anything other than PDF, TXT or DOCX.
    """
    declared = (media_type or "").split(";", 1)[0].strip().lower()
    if not declared:
        declared = (mimetypes.guess_type(filename)[0] or "").lower()

    if declared == DOCX_MEDIA_TYPE or filename.lower().endswith(".docx"):
        return DocumentKind.DOCX
    if declared == MEDIA_TYPES[DocumentKind.PDF]:
        return DocumentKind.PDF
    if declared == MEDIA_TYPES[DocumentKind.TXT]:
        return DocumentKind.TXT

    raise UnsupportedInputError(
        f"Unsupported file type: {filename}. Please upload PDF, TXT, or DOCX."
    )


def load_document(
    filename: str,
    data: bytes,
    media_type: Optional[str] = None,
) -> Document:
    """Build a classified Document from uploaded bytes."""
    kind = classify_document(filename, media_type)
    return Document.from_bytes(filename, data, kind, media_type=media_type or None)


def read_document(path: Path, media_type: Optional[str] = None) -> Document:
    """Build a classified Document from a file on disk."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return load_document(path.name, path.read_bytes(), media_type)


def extract_docx_text(data: bytes) -> str:
    """Extract raw text from DOCX bytes.

    Paragraphs are separated by a blank line so each one renders as its own
    notes segment.

    Raises:
        ExtractionError: If the bytes are not a readable DOCX package.
    """
    try:
        word_doc = docx.Document(io.BytesIO(data))
    except Exception as e:
        detail = str(e) or e.__class__.__name__
        raise ExtractionError(f"Failed to extract text from DOCX: {detail}") from e

    paragraphs = [p.text.strip() for p in word_doc.paragraphs]
    return "\n\n".join(p for p in paragraphs if p)


def encode_document(document: Document) -> DocumentBlob:
    """Encode a PDF or TXT document as a data URI blob for the notes stage."""
    if document.kind == DocumentKind.DOCX:
        raise ValueError("DOCX documents are extracted locally, not encoded")
    logger.debug(
        "Encoding %s (%s, %d bytes)",
        document.filename,
        document.effective_media_type,
        document.size_bytes,
    )
    return DocumentBlob.encode(document.effective_media_type, document.data)
