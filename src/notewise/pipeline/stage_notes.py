"""Notes Stage - Produce NotesText from a document blob or from text.

Two entry paths:
- file path (PDF/TXT): one notes-generation call; failure is fatal to the run
- text path (pasted or DOCX-extracted): the text is used as-is, no call
"""

import logging
from typing import Optional

from notewise.generation import GenerativeClient, generate_notes
from notewise.models import DocumentBlob

logger = logging.getLogger(__name__)


class NotesStage:
    """Converts raw input into the NotesText every artifact derives from."""

    def __init__(self, client: GenerativeClient, timeout: Optional[float] = None):
        """Initialize notes stage.

        Args:
            client: Generative client used for the file path.
            timeout: Per-call timeout in seconds (default from settings).
        """
        self.client = client
        self.timeout = timeout

    async def from_document(self, blob: DocumentBlob) -> str:
        """Generate study notes from an encoded PDF/TXT document.

        Raises:
            GenerationError: If the call fails; no NotesText is produced.
        """
        logger.info("Generating notes from %s document", blob.media_type)
        output = await generate_notes(self.client, blob, timeout=self.timeout)
        logger.info("Generated %d characters of notes", len(output.notes))
        return output.notes

    def from_text(self, text: str) -> str:
        """Use provided text directly as NotesText. Always succeeds."""
        return text
