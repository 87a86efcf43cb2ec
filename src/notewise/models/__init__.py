"""Models for NoteWise.

Pydantic models for the data flowing through a study session: the input
document, the derived artifacts and the tagged per-stage results.

Ownership:
- ``StudySession`` owns NotesText and every derived artifact
- ``AnnotationLayer`` owns highlights and annotations
"""

from .artifacts import (
    Answer,
    Explanation,
    Flashcard,
    FlashcardReview,
    FlashcardSet,
    KeyConcept,
    KeyConceptSet,
    Summary,
    SummaryOptions,
)
from .base import (
    BaseNoteModel,
    DocumentKind,
    ErrorKind,
    InputMode,
    RunStatus,
    StageName,
    SummaryLength,
    SummaryStyle,
)
from .document import (
    MEDIA_TYPES,
    Document,
    DocumentBlob,
    compute_content_hash,
)
from .results import (
    ExplanationDialog,
    Notice,
    OperationStatus,
    RunResult,
    StageError,
    StageResult,
)

__all__ = [
    # Base types
    "BaseNoteModel",
    "DocumentKind",
    "ErrorKind",
    "InputMode",
    "RunStatus",
    "StageName",
    "SummaryLength",
    "SummaryStyle",
    # Document
    "MEDIA_TYPES",
    "Document",
    "DocumentBlob",
    "compute_content_hash",
    # Artifacts
    "Answer",
    "Explanation",
    "Flashcard",
    "FlashcardReview",
    "FlashcardSet",
    "KeyConcept",
    "KeyConceptSet",
    "Summary",
    "SummaryOptions",
    # Results
    "ExplanationDialog",
    "Notice",
    "OperationStatus",
    "RunResult",
    "StageError",
    "StageResult",
]
