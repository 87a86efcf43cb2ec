"""Pytest configuration and fixtures."""

import io
import json
import re

import docx
import pytest

from notewise.generation import SENTINEL_ANSWER
from notewise.pipeline import StudySession
from notewise.speech import SpeechCapabilities
from notewise.storage import MemorySessionStore

BIOLOGY_NOTES = """# Biology

Cells are the basic unit of life.

- Mitochondria produce energy.
- The nucleus stores DNA.
"""


def grounded_answer(prompt: str) -> str:
    """Answer like a well-behaved model: only from the document content."""
    content = prompt.split("Document Content:\n", 1)[1].split("\n\nUser's Question:", 1)[0]
    question = prompt.split("User's Question:\n", 1)[1].split("\n\nRespond with", 1)[0]
    subjects = re.findall(r"\b[A-Z][a-z]+\b", question)[1:]
    for sentence in re.split(r"(?<=\.)\s+", content):
        if subjects and all(subject in sentence for subject in subjects):
            return json.dumps({"answer": sentence.strip(), "answer_found": True})
    return json.dumps({"answer": SENTINEL_ANSWER, "answer_found": False})


class FakeGenerativeClient:
    """In-memory generative client keyed by call name.

    A response may be a JSON string, an exception to raise, or a callable
    that receives the prompt and returns a JSON string.
    """

    def __init__(self, **responses):
        self.responses = {
            "generate_notes": json.dumps({"notes": BIOLOGY_NOTES}),
            "summarize": json.dumps({"summary": "Cells are the basic unit of life."}),
            "generate_flashcards": json.dumps(
                {
                    "flashcards": [
                        {"question": "What is the basic unit of life?", "answer": "The cell."},
                        {"question": "What do mitochondria do?", "answer": "Produce energy."},
                        {"question": "Where is DNA stored?", "answer": "In the nucleus."},
                    ]
                }
            ),
            "extract_key_concepts": json.dumps(
                {"concepts": [{"term": "Cell", "definition": "The basic unit of life."}]}
            ),
            "answer_question": grounded_answer,
            "explain_text": json.dumps({"explanation": "Cells are like tiny building blocks."}),
        }
        self.responses.update(responses)
        self.calls: list[dict] = []

    async def generate(self, name, prompt, *, media=None, max_output_tokens=None):
        self.calls.append(
            {"name": name, "prompt": prompt, "media": media, "max_output_tokens": max_output_tokens}
        )
        response = self.responses[name]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(prompt)
        return response

    def call_names(self) -> list[str]:
        return [call["name"] for call in self.calls]

    def calls_to(self, name: str) -> list[dict]:
        return [call for call in self.calls if call["name"] == name]


@pytest.fixture
def fake_client():
    """Generative client with a successful default reply for every call."""
    return FakeGenerativeClient()


@pytest.fixture
def store():
    return MemorySessionStore()


@pytest.fixture
def session(fake_client, store):
    """Study session without speech capabilities."""
    return StudySession(fake_client, store=store, speech=SpeechCapabilities(), timeout=5)


@pytest.fixture
def docx_bytes():
    """A small DOCX document with two paragraphs."""
    word_doc = docx.Document()
    word_doc.add_paragraph("Photosynthesis converts light into chemical energy.")
    word_doc.add_paragraph("Chlorophyll absorbs light.")
    buffer = io.BytesIO()
    word_doc.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def make_client():
    """Factory for fake clients with some replies overridden."""
    return FakeGenerativeClient
