"""The six generation call shapes.

Each flow renders its prompt, calls the client under a timeout and validates
the reply against its output schema. Flows raise ``GenerationError`` (or
``GenerationTimeoutError``) on any failure; deciding whether a failure is
fatal is left to the caller.
"""

import asyncio
import logging
from typing import Optional, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from notewise.config import settings
from notewise.errors import GenerationError, GenerationTimeoutError
from notewise.models import DocumentBlob, SummaryLength, SummaryStyle

from .client import GenerativeClient
from .markup import matches_sentinel, strip_code_fences, strip_structural_markup
from .prompts import (
    ANSWER_PROMPT,
    EXPLAIN_PROMPT,
    FLASHCARDS_PROMPT,
    KEY_CONCEPTS_PROMPT,
    NOTES_PROMPT,
    render_summary_prompt,
    with_schema,
)
from .schemas import (
    AnswerOutput,
    ExplanationOutput,
    FlashcardsOutput,
    KeyConceptsOutput,
    NotesOutput,
    SummaryOutput,
)

logger = logging.getLogger(__name__)

OutputT = TypeVar("OutputT", bound=BaseModel)

SENTINEL_ANSWER = "I could not find an answer to that question in the provided document."

# Output token budget per summary length; short < medium < comprehensive
SUMMARY_TOKEN_BUDGET = {
    SummaryLength.SHORT: 256,
    SummaryLength.MEDIUM: 768,
    SummaryLength.COMPREHENSIVE: 2048,
}


def parse_structured(raw: str, schema: type[OutputT], name: str) -> OutputT:
    """Validate a raw JSON reply against ``schema``."""
    try:
        return schema.model_validate_json(strip_code_fences(raw))
    except PydanticValidationError as e:
        raise GenerationError(
            f"{name} returned output that does not match its schema: {e.error_count()} error(s)"
        ) from e


async def call_structured(
    client: GenerativeClient,
    name: str,
    prompt: str,
    schema: type[OutputT],
    *,
    media: Optional[DocumentBlob] = None,
    max_output_tokens: Optional[int] = None,
    timeout: Optional[float] = None,
) -> OutputT:
    """Run one external call with a bounded timeout and schema validation.

    Args:
        client: Generative client to call
        name: Call name used in logs and error messages
        prompt: Rendered prompt, without the schema instruction
        schema: Pydantic model the reply must validate against
        media: Optional document blob sent alongside the prompt
        max_output_tokens: Optional output cap for this call
        timeout: Seconds before ``GenerationTimeoutError`` (default from settings)

    Returns:
        The validated output model.
    """
    timeout = settings.generation_timeout_seconds if timeout is None else timeout
    try:
        raw = await asyncio.wait_for(
            client.generate(
                name,
                with_schema(prompt, schema),
                media=media,
                max_output_tokens=max_output_tokens,
            ),
            timeout=timeout,
        )
    except GenerationError:
        raise
    except asyncio.TimeoutError as e:
        raise GenerationTimeoutError(f"{name} timed out after {timeout:g} seconds.") from e
    except Exception as e:
        raise GenerationError(f"{name} failed: {e}") from e

    return parse_structured(raw, schema, name)


async def generate_notes(
    client: GenerativeClient, blob: DocumentBlob, *, timeout: Optional[float] = None
) -> NotesOutput:
    """notes-from-document(dataBlob) -> {notes}"""
    return await call_structured(
        client, "generate_notes", NOTES_PROMPT, NotesOutput, media=blob, timeout=timeout
    )


async def summarize(
    client: GenerativeClient,
    content: str,
    length: SummaryLength = SummaryLength.MEDIUM,
    style: SummaryStyle = SummaryStyle.PARAGRAPH,
    *,
    timeout: Optional[float] = None,
) -> SummaryOutput:
    """summarize(content, length, style) -> {summary}

    The returned summary has had all structural markup stripped.
    """
    output = await call_structured(
        client,
        "summarize",
        render_summary_prompt(content, length, style),
        SummaryOutput,
        max_output_tokens=SUMMARY_TOKEN_BUDGET[length],
        timeout=timeout,
    )
    output.summary = strip_structural_markup(output.summary)
    return output


async def generate_flashcards(
    client: GenerativeClient, content: str, *, timeout: Optional[float] = None
) -> FlashcardsOutput:
    """flashcards(content) -> {list of {question, answer}}"""
    return await call_structured(
        client,
        "generate_flashcards",
        FLASHCARDS_PROMPT.format(content=content),
        FlashcardsOutput,
        timeout=timeout,
    )


async def extract_key_concepts(
    client: GenerativeClient, content: str, *, timeout: Optional[float] = None
) -> KeyConceptsOutput:
    """key-concepts(content) -> {list of {term, definition}}"""
    return await call_structured(
        client,
        "extract_key_concepts",
        KEY_CONCEPTS_PROMPT.format(content=content),
        KeyConceptsOutput,
        timeout=timeout,
    )


async def answer_question(
    client: GenerativeClient,
    content: str,
    question: str,
    *,
    timeout: Optional[float] = None,
) -> AnswerOutput:
    """answer(content, question) -> {answer}

    Answers the model could not ground in ``content`` are replaced with the
    exact ``SENTINEL_ANSWER``.
    """
    output = await call_structured(
        client,
        "answer_question",
        ANSWER_PROMPT.format(content=content, question=question, sentinel=SENTINEL_ANSWER),
        AnswerOutput,
        timeout=timeout,
    )
    answer = output.answer.strip()
    if not output.answer_found or not answer or matches_sentinel(answer, SENTINEL_ANSWER):
        return AnswerOutput(answer=SENTINEL_ANSWER, answer_found=False)
    return AnswerOutput(answer=answer, answer_found=True)


async def explain_text(
    client: GenerativeClient, fragment: str, *, timeout: Optional[float] = None
) -> ExplanationOutput:
    """explain(fragment) -> {explanation}"""
    return await call_structured(
        client,
        "explain_text",
        EXPLAIN_PROMPT.format(fragment=fragment),
        ExplanationOutput,
        timeout=timeout,
    )
