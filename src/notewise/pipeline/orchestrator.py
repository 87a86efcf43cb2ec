"""Study session orchestration.

``StudySession`` owns NotesText and the derived artifacts of the current
input, and drives the staged run:

    ingestion -> notes -> {summary, flashcards, key concepts}

Only a notes-stage failure aborts a run. Generator failures become notices
on an otherwise complete run. Selecting new input resets everything and
bumps the input version; any run, question or explanation still in flight
for an older version has its results discarded on return.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from notewise.annotations import AnnotationLayer
from notewise.config import settings
from notewise.errors import (
    ExtractionError,
    NoteWiseError,
    PreconditionError,
    UnsupportedInputError,
    ValidationError,
)
from notewise.generation import GenerativeClient, answer_question, explain_text
from notewise.models import (
    Answer,
    Document,
    DocumentKind,
    Explanation,
    ExplanationDialog,
    FlashcardReview,
    FlashcardSet,
    InputMode,
    KeyConceptSet,
    Notice,
    OperationStatus,
    RunResult,
    RunStatus,
    StageName,
    StageResult,
    Summary,
    SummaryOptions,
)
from notewise.speech import SpeechCapabilities
from notewise.storage import MemorySessionStore, SessionStore

from .stage_derive import DerivedArtifactGenerator
from .stage_ingest import encode_document, extract_docx_text, load_document, read_document
from .stage_notes import NotesStage

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, str], None]

# Progress milestones per stage; the text path skips the slow notes call
FILE_PROGRESS = {
    StageName.NOTES: 10,
    StageName.SUMMARY: 30,
    StageName.FLASHCARDS: 60,
    StageName.KEY_CONCEPTS: 80,
}
TEXT_PROGRESS = {
    StageName.NOTES: 10,
    StageName.SUMMARY: 15,
    StageName.FLASHCARDS: 40,
    StageName.KEY_CONCEPTS: 70,
}
STAGE_MESSAGES = {
    StageName.SUMMARY: "Generating summary...",
    StageName.FLASHCARDS: "Generating flashcards...",
    StageName.KEY_CONCEPTS: "Extracting key concepts...",
}
NOTICE_TITLES = {
    StageName.SUMMARY: "Summary generation issue",
    StageName.FLASHCARDS: "Flashcard generation issue",
    StageName.KEY_CONCEPTS: "Key concept extraction issue",
}

EMPTY_NOTES_MESSAGE = "Failed to obtain notes content for processing."


class StudySession:
    """Single-user study session over one input at a time.

    Example:
        >>> with StudySession(GeminiClient()) as session:
        ...     session.set_text("Paris is the capital of France.")
        ...     result = asyncio.run(session.process())
        ...     answer = asyncio.run(session.ask("What is the capital of France?"))
    """

    def __init__(
        self,
        client: GenerativeClient,
        store: Optional[SessionStore] = None,
        speech: Optional[SpeechCapabilities] = None,
        timeout: Optional[float] = None,
        parallel: Optional[bool] = None,
        on_progress: Optional[ProgressCallback] = None,
    ):
        """Initialize session.

        Args:
            client: Generative client for every external call.
            store: Session key-value store for highlights/annotations
                (default: in memory).
            speech: Speech capabilities (default: probed now).
            timeout: Per-call timeout in seconds (default from settings).
            parallel: Run the three generators concurrently (default from settings).
            on_progress: Called with (percent, message) during ``process``.
        """
        self.client = client
        self.timeout = timeout
        self.parallel = settings.parallel_generators if parallel is None else parallel
        self.on_progress = on_progress

        self.status = OperationStatus()
        self.notes_stage = NotesStage(client, timeout=timeout)
        self.generator = DerivedArtifactGenerator(client, status=self.status, timeout=timeout)
        self.annotations = AnnotationLayer(store if store is not None else MemorySessionStore())
        self.speech = speech if speech is not None else SpeechCapabilities.detect()
        self.recognition = self.speech.recognition_session()

        # Input
        self.input_mode = InputMode.FILE
        self.document: Optional[Document] = None
        self.input_text: Optional[str] = None

        # Summary customization
        self.enable_summary_customization = False
        self.summary_options = SummaryOptions()

        # Results
        self.notes: Optional[str] = None
        self.summary: Optional[Summary] = None
        self.flashcards: Optional[FlashcardSet] = None
        self.key_concepts: Optional[KeyConceptSet] = None
        self.review: Optional[FlashcardReview] = None
        self.qa: Optional[StageResult] = None
        self.explanation = ExplanationDialog()
        self.notices: list[Notice] = []
        self.error: Optional[str] = None

        self._input_version = 0

    # Lifecycle

    def open(self) -> "StudySession":
        self.recognition.open()
        return self

    def close(self) -> None:
        self.recognition.close()
        self.speech.cancel()

    def __enter__(self) -> "StudySession":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # Input selection

    def reset_results(self) -> None:
        """Clear NotesText, every derived artifact and all annotation state."""
        self._input_version += 1
        self.notes = None
        self.summary = None
        self.flashcards = None
        self.key_concepts = None
        self.review = None
        self.qa = None
        self.explanation = ExplanationDialog()
        self.notices = []
        self.error = None
        self.annotations.clear()

    def select_file(
        self,
        filename: str,
        data: bytes,
        media_type: Optional[str] = None,
    ) -> Document:
        """Select an uploaded file as the new input.

        Raises:
            UnsupportedInputError: Not PDF/TXT/DOCX; existing results are kept.
            ExtractionError: DOCX could not be read; input is reset to empty.
        """
        try:
            document = load_document(filename, data, media_type)
        except UnsupportedInputError as e:
            self.error = e.message
            raise
        return self._accept_document(document)

    def select_path(self, path: Path, media_type: Optional[str] = None) -> Document:
        """Select a file on disk as the new input."""
        try:
            document = read_document(path, media_type)
        except UnsupportedInputError as e:
            self.error = e.message
            raise
        return self._accept_document(document)

    def _accept_document(self, document: Document) -> Document:
        self.reset_results()
        if document.kind == DocumentKind.DOCX:
            try:
                text = extract_docx_text(document.data)
            except ExtractionError as e:
                logger.error("DOCX extraction failed for %s: %s", document.filename, e.message)
                self.error = e.message
                self.document = None
                self.input_text = None
                self.input_mode = InputMode.FILE
                raise
            logger.info("Extracted %d characters from %s", len(text), document.filename)
            # Extracted text is the notes source; the document is kept for display only
            self.document = document
            self.input_text = text
            self.input_mode = InputMode.TEXT
            return document

        self.document = document
        self.input_text = None
        self.input_mode = InputMode.FILE
        return document

    def set_text(self, text: str) -> None:
        """Use pasted text as the new input."""
        self.reset_results()
        self.input_text = text
        self.document = None
        self.input_mode = InputMode.TEXT

    def set_input_mode(self, mode: InputMode) -> None:
        """Switch between file and text input, discarding the other one."""
        self.reset_results()
        self.input_mode = mode
        if mode == InputMode.FILE:
            self.input_text = None
            # A DOCX was only ever a source of text, never a file to send
            if self.document is not None and self.document.kind == DocumentKind.DOCX:
                self.document = None
        else:
            self.document = None

    def configure_summary(
        self,
        enabled: bool,
        options: Optional[SummaryOptions] = None,
    ) -> None:
        self.enable_summary_customization = enabled
        if options is not None:
            self.summary_options = options

    @property
    def effective_summary_options(self) -> SummaryOptions:
        if self.enable_summary_customization:
            return self.summary_options
        return SummaryOptions()

    # Processing run

    def _progress(self, percent: int, message: str) -> None:
        logger.info("[%3d%%] %s", percent, message)
        if self.on_progress is not None:
            self.on_progress(percent, message)

    def _is_stale(self, version: int) -> bool:
        return version != self._input_version

    def _superseded(self) -> RunResult:
        logger.info("Input changed during processing; discarding results")
        return RunResult(status=RunStatus.SUPERSEDED)

    def _fail(self, message: str, notes: Optional[str] = None) -> RunResult:
        logger.error(message)
        self.error = message
        self.annotations.clear()
        self._progress(0, "Processing failed.")
        return RunResult(status=RunStatus.FAILED, notes=notes, error=message)

    async def process(self, derive: bool = True) -> RunResult:
        """Run notes generation and the derived-artifact fan-out.

        Args:
            derive: Also generate summary, flashcards and key concepts.
            With False the run stops once NotesText is set.

        Returns:
            RunResult: ``complete`` once NotesText exists (whatever the
            generators did), ``failed`` when no NotesText could be obtained,
            ``superseded`` when the input changed mid-run.

        Raises:
            PreconditionError: No file selected / no text provided.
        """
        if self.input_mode == InputMode.FILE and self.document is None:
            raise PreconditionError("Please select a file first.")
        if self.input_mode == InputMode.TEXT and self.input_text is None:
            raise PreconditionError("Please paste some text first.")

        version = self._input_version
        self.error = None
        self.status.processing = True
        try:
            self._progress(0, "Starting process...")

            if self.input_mode == InputMode.FILE:
                blob = encode_document(self.document)
                self._progress(FILE_PROGRESS[StageName.NOTES], "Generating notes from file...")
                try:
                    notes = await self.notes_stage.from_document(blob)
                except NoteWiseError as e:
                    if self._is_stale(version):
                        return self._superseded()
                    self.notes = None
                    return self._fail(f"Failed to generate notes: {e.message}")
                milestones = FILE_PROGRESS
            else:
                self._progress(TEXT_PROGRESS[StageName.NOTES], "Using provided text as notes...")
                notes = self.notes_stage.from_text(self.input_text)
                milestones = TEXT_PROGRESS

            if self._is_stale(version):
                return self._superseded()

            if self.notes is not None and notes != self.notes:
                # Segment keys of the previous NotesText do not carry over
                self.annotations.clear()
            self.notes = notes
            if not notes.strip():
                return self._fail(EMPTY_NOTES_MESSAGE, notes=notes)
            self.annotations.attach(notes)
            if not derive:
                self._progress(100, "Notes ready.")
                return RunResult(status=RunStatus.COMPLETE, notes=notes)

            summary, flashcards, concepts = await self.generator.run_all(
                notes,
                self.effective_summary_options,
                parallel=self.parallel,
                on_stage=lambda stage: self._progress(milestones[stage], STAGE_MESSAGES[stage]),
            )
        except Exception:
            if not self._is_stale(version):
                self.notes = None
                self.annotations.clear()
            raise
        finally:
            self.status.processing = False

        if self._is_stale(version):
            return self._superseded()

        self.summary = summary.value
        self.flashcards = flashcards.value
        self.key_concepts = concepts.value
        self.review = FlashcardReview(self.flashcards) if self.flashcards is not None else None
        self.notices = [
            Notice(stage=result.stage, message=f"{NOTICE_TITLES[result.stage]}: {result.error.message}")
            for result in (summary, flashcards, concepts)
            if result.failed
        ]

        self._progress(100, "Process complete!")
        return RunResult(
            status=RunStatus.COMPLETE,
            notes=notes,
            summary=summary,
            flashcards=flashcards,
            key_concepts=concepts,
            notices=self.notices,
        )

    # On-demand queries

    async def ask(self, question: str) -> StageResult:
        """Answer a question from NotesText only.

        Generation failures are returned as a failed result; nothing else in
        the session changes.

        Raises:
            PreconditionError: No NotesText yet.
            ValidationError: Blank question.
        """
        if not self.notes:
            raise PreconditionError(
                "Notes are not available to answer questions. "
                "Please process a document or paste text first."
            )
        if not question.strip():
            raise ValidationError("Please enter a question.")

        version = self._input_version
        self.qa = None
        self.status.question = True
        try:
            output = await answer_question(self.client, self.notes, question, timeout=self.timeout)
        except NoteWiseError as e:
            logger.warning("Question answering failed: %s", e.message)
            result = StageResult.failure(StageName.QUESTION, e)
        else:
            result = StageResult.success(
                StageName.QUESTION,
                Answer(question=question, text=output.answer, found=output.answer_found),
            )
        finally:
            self.status.question = False

        if not self._is_stale(version):
            self.qa = result
        return result

    async def explain(self, fragment: str) -> ExplanationDialog:
        """Explain a text fragment in simple terms (single attempt).

        Works on any non-blank fragment, with or without notes. Failures are
        reported in the returned dialog state.

        Raises:
            ValidationError: Blank fragment.
        """
        if not fragment.strip():
            raise ValidationError("No text selected or provided to explain.")

        dialog = ExplanationDialog(is_open=True, original_text=fragment, in_progress=True)
        self.explanation = dialog
        self.status.explanation = True
        try:
            output = await explain_text(self.client, fragment, timeout=self.timeout)
        except NoteWiseError as e:
            logger.warning("Explanation failed: %s", e.message)
            dialog.error = e.message
        else:
            dialog.explanation = Explanation(fragment=fragment, text=output.explanation)
        finally:
            dialog.in_progress = False
            self.status.explanation = False
        return dialog

    async def explain_segment(self, key: str) -> ExplanationDialog:
        """Explain the text of one rendered notes segment."""
        return await self.explain(self.annotations.segment_text(key))

    def close_explanation(self) -> None:
        self.explanation = ExplanationDialog()

    # Speech

    def read_aloud(self, text: str, lang: str = "en-US") -> bool:
        """Speak text if speech output is available; a no-op otherwise."""
        return self.speech.speak(text, lang)
