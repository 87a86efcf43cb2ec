"""Error taxonomy for NoteWise.

Every error carries a human-readable message suitable for showing to the user.
Only ``GenerationError`` raised by the notes stage aborts a processing run;
the same error raised by a derived-artifact generator, a question or an
explanation is captured into a ``StageResult`` instead.
"""

from .models.base import ErrorKind


class NoteWiseError(Exception):
    """Base class for all NoteWise errors."""

    kind: ErrorKind = ErrorKind.GENERATION

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnsupportedInputError(NoteWiseError):
    """File type is not PDF, TXT or DOCX. Leaves existing state untouched."""

    kind = ErrorKind.UNSUPPORTED_INPUT


class ExtractionError(NoteWiseError):
    """Local DOCX text extraction failed. The session input is reset."""

    kind = ErrorKind.EXTRACTION


class GenerationError(NoteWiseError):
    """An external generation call failed or returned malformed output."""

    kind = ErrorKind.GENERATION


class GenerationTimeoutError(GenerationError, TimeoutError):
    """An external generation call exceeded its time budget."""

    kind = ErrorKind.TIMEOUT


class ValidationError(NoteWiseError):
    """Empty question or fragment, rejected before any external call."""

    kind = ErrorKind.VALIDATION


class PreconditionError(NoteWiseError):
    """Operation requires state that does not exist yet (e.g. notes)."""

    kind = ErrorKind.PRECONDITION
