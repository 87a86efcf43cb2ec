"""Input document models."""

import base64
import hashlib
from typing import Optional

from pydantic import BaseModel, Field

from .base import BaseNoteModel, DocumentKind

MEDIA_TYPES = {
    DocumentKind.DOCX: "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    DocumentKind.PDF: "application/pdf",
    DocumentKind.TXT: "text/plain",
}


def compute_content_hash(data: bytes) -> str:
    """Compute SHA-256 hash of raw document bytes."""
    return hashlib.sha256(data).hexdigest()


class Document(BaseNoteModel):
    """
    A user-selected file.

    Ephemeral: it lives only until NotesText has been derived from it. The
    bytes are consumed exactly once, either by local DOCX extraction or by
    encoding into a ``DocumentBlob`` for the notes stage.
    """

    filename: str = Field(..., description="Original filename")
    media_type: Optional[str] = Field(None, description="Declared MIME type")
    kind: DocumentKind
    data: bytes = Field(..., repr=False)
    content_hash: str = Field(..., description="SHA-256 of the raw bytes")

    @classmethod
    def from_bytes(
        cls,
        filename: str,
        data: bytes,
        kind: DocumentKind,
        media_type: Optional[str] = None,
    ) -> "Document":
        return cls(
            filename=filename,
            media_type=media_type,
            kind=kind,
            data=data,
            content_hash=compute_content_hash(data),
        )

    @property
    def effective_media_type(self) -> str:
        """Declared media type, or the canonical one for the kind."""
        return self.media_type or MEDIA_TYPES[self.kind]

    @property
    def size_bytes(self) -> int:
        return len(self.data)


class DocumentBlob(BaseModel):
    """Self-describing ``data:<mime>;base64,<payload>`` encoding of a document."""

    data_uri: str = Field(..., repr=False)

    @classmethod
    def encode(cls, media_type: str, data: bytes) -> "DocumentBlob":
        payload = base64.b64encode(data).decode("ascii")
        return cls(data_uri=f"data:{media_type};base64,{payload}")

    @property
    def media_type(self) -> str:
        header = self.data_uri.split(",", 1)[0]
        return header[len("data:"):].split(";", 1)[0]

    def decode(self) -> bytes:
        """Return the raw document bytes."""
        _, payload = self.data_uri.split(",", 1)
        return base64.b64decode(payload)
