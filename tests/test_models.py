"""Tests for session models."""

import pytest

from notewise.errors import GenerationTimeoutError, ValidationError
from notewise.models import (
    DocumentBlob,
    ErrorKind,
    Flashcard,
    FlashcardReview,
    FlashcardSet,
    OperationStatus,
    RunResult,
    RunStatus,
    StageName,
    StageResult,
)


class TestFlashcardReview:
    """Tests for sequential flashcard navigation."""

    @pytest.fixture
    def review(self):
        cards = [Flashcard(question=f"Q{i}", answer=f"A{i}") for i in range(3)]
        return FlashcardReview(FlashcardSet(cards=cards))

    def test_starts_at_first_card(self, review):
        assert review.current.question == "Q0"
        assert review.position == "1/3"

    def test_next_wraps_to_first(self, review):
        review.next()
        review.next()
        assert review.current.question == "Q2"
        assert review.next().question == "Q0"

    def test_previous_wraps_to_last(self, review):
        assert review.previous().question == "Q2"
        assert review.position == "3/3"

    def test_reset(self, review):
        review.next()
        review.reset()
        assert review.index == 0

    def test_empty_set_has_no_current(self):
        review = FlashcardReview(FlashcardSet())
        with pytest.raises(IndexError):
            review.current

    def test_empty_set_navigation(self):
        """Navigating an empty set raises without moving the cursor."""
        review = FlashcardReview(FlashcardSet())
        assert review.position == "0/0"
        with pytest.raises(IndexError):
            review.next()
        with pytest.raises(IndexError):
            review.previous()
        assert review.index == 0


class TestDocumentBlob:
    """Tests for data URI encoding."""

    def test_encode_is_self_describing(self):
        blob = DocumentBlob.encode("application/pdf", b"%PDF-1.4")
        assert blob.data_uri.startswith("data:application/pdf;base64,")
        assert blob.media_type == "application/pdf"
        assert blob.decode() == b"%PDF-1.4"


class TestStageResult:
    """Tests for tagged stage results."""

    def test_success(self):
        result = StageResult.success(StageName.SUMMARY, "text")
        assert result.ok
        assert not result.failed
        assert result.value == "text"

    def test_failure_keeps_kind_and_message(self):
        result = StageResult.failure(StageName.FLASHCARDS, GenerationTimeoutError("took too long"))
        assert result.failed
        assert result.value is None
        assert result.error.kind == ErrorKind.TIMEOUT
        assert result.error.message == "took too long"

    def test_failure_from_validation_error(self):
        result = StageResult.failure(StageName.QUESTION, ValidationError("Please enter a question."))
        assert result.error.kind == ErrorKind.VALIDATION

    def test_run_result_success_is_independent_of_generators(self):
        failed = StageResult.failure(StageName.SUMMARY, GenerationTimeoutError("slow"))
        run = RunResult(status=RunStatus.COMPLETE, notes="n", summary=failed)
        assert run.succeeded
        assert run.derived == [failed]


class TestOperationStatus:
    """Tests for per-operation progress flags."""

    def test_flags_are_independent(self):
        status = OperationStatus()
        status.set(StageName.QUESTION, True)
        assert status.question
        assert not status.processing
        assert status.busy

    def test_notes_stage_maps_to_processing(self):
        status = OperationStatus()
        status.set(StageName.NOTES, True)
        assert status.processing
        status.set(StageName.NOTES, False)
        assert not status.busy
