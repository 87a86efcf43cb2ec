"""Generation layer: the hosted model client and the six call shapes."""

from .client import SAFETY_SETTINGS, GeminiClient, GenerativeClient
from .flows import (
    SENTINEL_ANSWER,
    SUMMARY_TOKEN_BUDGET,
    answer_question,
    call_structured,
    explain_text,
    extract_key_concepts,
    generate_flashcards,
    generate_notes,
    parse_structured,
    summarize,
)
from .markup import has_structural_markup, strip_structural_markup

__all__ = [
    # Client
    "GenerativeClient",
    "GeminiClient",
    "SAFETY_SETTINGS",
    # Flows
    "SENTINEL_ANSWER",
    "SUMMARY_TOKEN_BUDGET",
    "call_structured",
    "parse_structured",
    "generate_notes",
    "summarize",
    "generate_flashcards",
    "extract_key_concepts",
    "answer_question",
    "explain_text",
    # Markup
    "has_structural_markup",
    "strip_structural_markup",
]
