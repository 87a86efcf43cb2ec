"""Prompt templates for the generation calls.

Templates are rendered with ``str.format``; user content is only ever passed
as a format argument, so braces inside documents are left alone.
"""

import json

from pydantic import BaseModel

from notewise.models import SummaryLength, SummaryStyle

NOTES_PROMPT = """You are an expert academic assistant who writes high-quality study notes for exam preparation.

Generate detailed, well-structured study notes from the attached document. The notes MUST be Markdown.

Requirements:
1. Comprehensiveness: cover all major topics, key concepts, definitions, figures, dates, formulas and arguments.
2. Accuracy: represent every piece of information exactly as the document states it.
3. Structure: organise the notes with Markdown headings (#, ##, ###), bullet points and numbered lists.
4. Clarity: be concise, and explain jargon where it cannot be avoided.
5. Exam focus: prioritise core principles, methods, results and significant details.
6. Length: for very long documents, summarise each key section while keeping the vital details.
"""

SUMMARY_LENGTH_GUIDANCE = {
    SummaryLength.SHORT: "a short, very brief summary of two or three sentences with only the main takeaways",
    SummaryLength.MEDIUM: "a medium-length, balanced summary of roughly one to two paragraphs",
    SummaryLength.COMPREHENSIVE: (
        "a comprehensive, detailed summary covering every major section, "
        "argument and supporting detail"
    ),
}

SUMMARY_STYLE_GUIDANCE = {
    SummaryStyle.PARAGRAPH: "Write well-structured plain-text paragraphs.",
    SummaryStyle.BULLET_POINTS: (
        "Write a plain-text list with one point per line, each line starting with '- '."
    ),
}

SUMMARY_PROMPT = """You write plain-text summaries for exam preparation.

Summarize the document content below as {length_guidance}.
{style_guidance}

The summary MUST be plain text. Do NOT use Markdown: no '#' headings, no '*' or '_' emphasis, no code blocks.
Emphasise the information most likely to be tested, and keep every statement accurate to the content.

Document Content:
{content}
"""

FLASHCARDS_PROMPT = """You design accurate flashcards for exam preparation.

Generate question and answer pairs from the document content below.
1. Accuracy: every question and answer must be directly verifiable from the document.
2. Relevance: focus on concepts, definitions, facts, formulas and dates likely to be examined.
3. Clarity: each question targets one specific piece of knowledge.
4. Conciseness: answers are brief but complete.
5. Coverage: spread the cards across the important topics.

Document Content:
{content}
"""

KEY_CONCEPTS_PROMPT = """You identify and define key terminology in study material.

Extract the most important terms and concepts from the document content below. For each one give a concise
definition derived solely from the document. Do not use external knowledge.

Document Content:
{content}
"""

ANSWER_PROMPT = """You answer questions using only the document content below.

1. Use no external knowledge or assumptions; the whole answer must be derivable from the document.
2. If the information is present, answer the question directly and accurately.
3. If the answer cannot be found in the document, set "answer_found" to false and set "answer" to exactly:
   "{sentinel}"
   Do not guess or provide related information.

Document Content:
{content}

User's Question:
{question}
"""

EXPLAIN_PROMPT = """You explain complex topics as if talking to a five-year-old (ELI5).
Stay factually accurate, but use the simplest possible language and analogies, and avoid jargon.

Text to explain:
\"\"\"
{fragment}
\"\"\"
"""

SCHEMA_INSTRUCTION = """
Respond with a single JSON object that matches this JSON schema:
{schema}
"""


def with_schema(prompt: str, schema: type[BaseModel]) -> str:
    """Append the output schema instruction to a rendered prompt."""
    rendered_schema = json.dumps(schema.model_json_schema(), indent=2)
    return prompt + SCHEMA_INSTRUCTION.format(schema=rendered_schema)


def render_summary_prompt(content: str, length: SummaryLength, style: SummaryStyle) -> str:
    return SUMMARY_PROMPT.format(
        length_guidance=SUMMARY_LENGTH_GUIDANCE[length],
        style_guidance=SUMMARY_STYLE_GUIDANCE[style],
        content=content,
    )
