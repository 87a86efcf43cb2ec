"""Base models and common types for NoteWise."""

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class DocumentKind(str, Enum):
    """Supported upload types."""

    DOCX = "docx"
    PDF = "pdf"
    TXT = "txt"


class InputMode(str, Enum):
    """Where the notes source comes from."""

    FILE = "file"
    TEXT = "text"


class SummaryLength(str, Enum):
    """Requested summary length."""

    SHORT = "short"
    MEDIUM = "medium"
    COMPREHENSIVE = "comprehensive"


class SummaryStyle(str, Enum):
    """Requested summary layout."""

    PARAGRAPH = "paragraph"
    BULLET_POINTS = "bullet_points"


class StageName(str, Enum):
    """Operations that report their own in-progress status."""

    NOTES = "notes"
    SUMMARY = "summary"
    FLASHCARDS = "flashcards"
    KEY_CONCEPTS = "key_concepts"
    QUESTION = "question"
    EXPLANATION = "explanation"


class RunStatus(str, Enum):
    """Outcome of one processing run."""

    COMPLETE = "complete"
    FAILED = "failed"
    SUPERSEDED = "superseded"  # input changed while the run was in flight


class ErrorKind(str, Enum):
    """Classification of a captured failure."""

    UNSUPPORTED_INPUT = "unsupported_input"
    EXTRACTION = "extraction"
    GENERATION = "generation"
    TIMEOUT = "timeout"
    VALIDATION = "validation"
    PRECONDITION = "precondition"


class BaseNoteModel(BaseModel):
    """Base class for session models with identity and creation time."""

    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        from_attributes = True
