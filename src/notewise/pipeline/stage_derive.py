"""Derived-Artifact Stage - Summary, flashcards and key concepts.

The three generators read only NotesText and share no mutable state, so they
may run in any order or concurrently. Each one is wrapped so that its failure
becomes a failed ``StageResult`` rather than an exception: a broken generator
never prevents the others from running or the run from completing.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from notewise.errors import NoteWiseError
from notewise.generation import (
    GenerativeClient,
    extract_key_concepts,
    generate_flashcards,
    summarize,
)
from notewise.models import (
    FlashcardSet,
    KeyConceptSet,
    OperationStatus,
    StageName,
    StageResult,
    Summary,
    SummaryOptions,
)

logger = logging.getLogger(__name__)

StageCallback = Callable[[StageName], None]


class DerivedArtifactGenerator:
    """Runs the best-effort fan-out over NotesText."""

    def __init__(
        self,
        client: GenerativeClient,
        status: Optional[OperationStatus] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize generator.

        Args:
            client: Generative client for the three calls.
            status: Shared in-progress flags to update (optional).
            timeout: Per-call timeout in seconds (default from settings).
        """
        self.client = client
        self.status = status or OperationStatus()
        self.timeout = timeout

    async def _guarded(self, stage: StageName, call: Callable[[], Awaitable]) -> StageResult:
        """Run one generator and capture its failure."""
        self.status.set(stage, True)
        try:
            value = await call()
        except NoteWiseError as e:
            logger.warning("%s generation failed: %s", stage.value, e.message)
            return StageResult.failure(stage, e)
        finally:
            self.status.set(stage, False)
        logger.info("%s generated", stage.value)
        return StageResult.success(stage, value)

    async def summary(self, notes: str, options: Optional[SummaryOptions] = None) -> StageResult:
        options = options or SummaryOptions()

        async def call() -> Summary:
            output = await summarize(
                self.client, notes, options.length, options.style, timeout=self.timeout
            )
            return Summary(text=output.summary, length=options.length, style=options.style)

        return await self._guarded(StageName.SUMMARY, call)

    async def flashcards(self, notes: str) -> StageResult:
        async def call() -> FlashcardSet:
            output = await generate_flashcards(self.client, notes, timeout=self.timeout)
            return FlashcardSet(cards=output.flashcards)

        return await self._guarded(StageName.FLASHCARDS, call)

    async def key_concepts(self, notes: str) -> StageResult:
        async def call() -> KeyConceptSet:
            output = await extract_key_concepts(self.client, notes, timeout=self.timeout)
            return KeyConceptSet(concepts=output.concepts)

        return await self._guarded(StageName.KEY_CONCEPTS, call)

    async def run_all(
        self,
        notes: str,
        options: Optional[SummaryOptions] = None,
        parallel: bool = False,
        on_stage: Optional[StageCallback] = None,
    ) -> tuple[StageResult, StageResult, StageResult]:
        """Generate all three artifacts from one NotesText snapshot.

        Args:
            notes: NotesText snapshot.
            options: Summary length/style.
            parallel: Run the generators concurrently.
            on_stage: Called with each stage name as it starts (sequential
                mode only), for progress reporting.

        Returns:
            (summary, flashcards, key_concepts) results, each ok or failed.
        """
        if parallel:
            summary, flashcards, concepts = await asyncio.gather(
                self.summary(notes, options),
                self.flashcards(notes),
                self.key_concepts(notes),
            )
            return summary, flashcards, concepts

        results = []
        for stage, run in (
            (StageName.SUMMARY, lambda: self.summary(notes, options)),
            (StageName.FLASHCARDS, lambda: self.flashcards(notes)),
            (StageName.KEY_CONCEPTS, lambda: self.key_concepts(notes)),
        ):
            if on_stage is not None:
                on_stage(stage)
            results.append(await run())
        return results[0], results[1], results[2]
