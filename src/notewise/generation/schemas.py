"""Structured output schemas for the generation calls.

The JSON schema of each model is embedded in its prompt, and the model's
reply is validated against it before anything downstream sees it.
"""

from pydantic import BaseModel, Field

from notewise.models import Flashcard, KeyConcept


class NotesOutput(BaseModel):
    """Output of the notes-from-document call."""

    notes: str = Field(
        ...,
        description=(
            "Comprehensive, well-structured study notes in Markdown, covering key "
            "concepts, definitions and exam-relevant information."
        ),
    )


class SummaryOutput(BaseModel):
    """Output of the summarize call."""

    summary: str = Field(
        ...,
        description=(
            "Plain-text summary at the requested length and style. "
            "Must not contain Markdown headings or formatting."
        ),
    )


class FlashcardsOutput(BaseModel):
    """Output of the flashcards call."""

    flashcards: list[Flashcard] = Field(
        default_factory=list,
        description="Question/answer pairs, each verifiable from the document.",
    )


class KeyConceptsOutput(BaseModel):
    """Output of the key-concepts call."""

    concepts: list[KeyConcept] = Field(
        default_factory=list,
        description="Terms with definitions taken only from the document.",
    )


class AnswerOutput(BaseModel):
    """Output of the answer call."""

    answer: str = Field(
        ...,
        description="Answer derived exclusively from the document content.",
    )
    answer_found: bool = Field(
        True,
        description="False when the document does not contain the answer.",
    )


class ExplanationOutput(BaseModel):
    """Output of the explain call."""

    explanation: str = Field(
        ...,
        description="Simple, jargon-free explanation that stays factually accurate.",
    )
