"""Derived artifacts generated from NotesText."""

from pydantic import BaseModel, Field

from .base import BaseNoteModel, SummaryLength, SummaryStyle


class SummaryOptions(BaseModel):
    """Length and style of a summary; defaults apply when customization is off."""

    length: SummaryLength = SummaryLength.MEDIUM
    style: SummaryStyle = SummaryStyle.PARAGRAPH


class Summary(BaseNoteModel):
    """Plain-text summary. Never contains structural Markdown markup."""

    text: str
    length: SummaryLength
    style: SummaryStyle


class Flashcard(BaseModel):
    """A single question/answer pair."""

    question: str = Field(..., description="Exam-style question")
    answer: str = Field(..., description="Concise answer")


class FlashcardSet(BaseNoteModel):
    """Flashcards in generation order."""

    cards: list[Flashcard] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.cards)


class FlashcardReview:
    """Sequential review cursor over a FlashcardSet.

    Navigation wraps around at both ends.
    """

    def __init__(self, flashcards: FlashcardSet):
        self.flashcards = flashcards
        self.index = 0

    @property
    def current(self) -> Flashcard:
        if not self.flashcards.cards:
            raise IndexError("No flashcards to review")
        return self.flashcards.cards[self.index]

    @property
    def position(self) -> str:
        """1-based position label, e.g. ``3/10``."""
        if not self.flashcards.cards:
            return "0/0"
        return f"{self.index + 1}/{len(self.flashcards)}"

    def next(self) -> Flashcard:
        count = len(self.flashcards)
        if not count:
            raise IndexError("No flashcards to review")
        self.index = self.index + 1 if self.index < count - 1 else 0
        return self.current

    def previous(self) -> Flashcard:
        count = len(self.flashcards)
        if not count:
            raise IndexError("No flashcards to review")
        self.index = self.index - 1 if self.index > 0 else count - 1
        return self.current

    def reset(self) -> None:
        self.index = 0


class KeyConcept(BaseModel):
    """A term and its definition, derived only from NotesText."""

    term: str
    definition: str


class KeyConceptSet(BaseNoteModel):
    """Key concepts in generation order."""

    concepts: list[KeyConcept] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.concepts)


class Answer(BaseNoteModel):
    """Answer to a user question, grounded in NotesText."""

    question: str
    text: str
    found: bool = Field(
        ..., description="False when the sentinel answer was returned"
    )


class Explanation(BaseNoteModel):
    """Simplified (ELI5) explanation of a text fragment."""

    fragment: str
    text: str
