"""Pipeline stages for NoteWise processing.

Stages:
1. stage_ingest - classify the upload; DOCX to text, PDF/TXT to a data URI blob
2. stage_notes - NotesText from the blob (generative) or from text (passthrough)
3. stage_derive - summary, flashcards and key concepts from NotesText

The orchestrator runs them in order and owns the resulting session state.
Stage 3 generators are independent and isolated from each other's failures.
"""

from .orchestrator import EMPTY_NOTES_MESSAGE, StudySession
from .stage_derive import DerivedArtifactGenerator
from .stage_ingest import (
    classify_document,
    encode_document,
    extract_docx_text,
    load_document,
    read_document,
)
from .stage_notes import NotesStage

__all__ = [
    # Ingestion
    "classify_document",
    "encode_document",
    "extract_docx_text",
    "load_document",
    "read_document",
    # Notes
    "NotesStage",
    # Derived artifacts
    "DerivedArtifactGenerator",
    # Orchestration
    "EMPTY_NOTES_MESSAGE",
    "StudySession",
]
