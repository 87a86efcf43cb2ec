"""Result wrappers for best-effort stage execution.

Each stage produces a tagged ``StageResult``: either a value or a captured
error. A processing run collects its stage results into one ``RunResult``
instead of raising from the independent generators.
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

from .artifacts import Explanation
from .base import ErrorKind, RunStatus, StageName

T = TypeVar("T")


class StageError(BaseModel):
    """A captured, user-presentable failure."""

    kind: ErrorKind
    message: str

    @classmethod
    def from_exception(cls, exc: Exception) -> "StageError":
        kind = getattr(exc, "kind", ErrorKind.GENERATION)
        message = getattr(exc, "message", None) or str(exc) or exc.__class__.__name__
        return cls(kind=kind, message=message)


class StageResult(BaseModel, Generic[T]):
    """Success or failure of a single stage."""

    stage: StageName
    value: Optional[T] = None
    error: Optional[StageError] = None

    @classmethod
    def success(cls, stage: StageName, value: T) -> "StageResult[T]":
        return cls(stage=stage, value=value)

    @classmethod
    def failure(cls, stage: StageName, exc: Exception) -> "StageResult[T]":
        return cls(stage=stage, error=StageError.from_exception(exc))

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def failed(self) -> bool:
        return self.error is not None


class Notice(BaseModel):
    """Non-fatal message produced by a failed derived-artifact generator."""

    stage: StageName
    message: str


class RunResult(BaseModel):
    """Everything one processing run produced."""

    status: RunStatus
    notes: Optional[str] = None
    summary: Optional[StageResult] = None
    flashcards: Optional[StageResult] = None
    key_concepts: Optional[StageResult] = None
    notices: list[Notice] = Field(default_factory=list)
    error: Optional[str] = Field(None, description="Run-level failure message")

    @property
    def succeeded(self) -> bool:
        """A run succeeds once NotesText exists, whatever the generators did."""
        return self.status == RunStatus.COMPLETE

    @property
    def derived(self) -> list[StageResult]:
        return [
            result
            for result in (self.summary, self.flashcards, self.key_concepts)
            if result is not None
        ]


class OperationStatus(BaseModel):
    """Independent in-progress flags, one per operation."""

    processing: bool = False
    summary: bool = False
    flashcards: bool = False
    key_concepts: bool = False
    question: bool = False
    explanation: bool = False

    def set(self, stage: StageName, active: bool) -> None:
        field_name = "processing" if stage == StageName.NOTES else stage.value
        setattr(self, field_name, active)

    @property
    def busy(self) -> bool:
        return any(self.model_dump().values())


class ExplanationDialog(BaseModel):
    """State of the explain-segment dialog."""

    is_open: bool = False
    original_text: Optional[str] = None
    explanation: Optional[Explanation] = None
    error: Optional[str] = None
    in_progress: bool = False
