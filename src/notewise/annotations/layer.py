"""Interactive annotation layer over rendered notes.

Per segment key the highlight state is a two-state toggle (unmarked ↔
highlighted). Independently, a segment may carry one annotation. The two are
decoupled: removing an annotation keeps the highlight and un-highlighting
keeps the annotation. Everything here lives exactly as long as the current
NotesText and is mirrored to the session store under two fixed keys.
"""

import json
import logging
from typing import Optional

from notewise.config import settings
from notewise.errors import PreconditionError, ValidationError
from notewise.storage import SessionStore

from .segments import Segment, SegmentIndex

logger = logging.getLogger(__name__)


class AnnotationLayer:
    """Owns the HighlightSet and AnnotationStore for the current NotesText.

    Never mutates NotesText; it only reads it to compute segment keys.
    """

    def __init__(
        self,
        store: SessionStore,
        highlights_key: Optional[str] = None,
        annotations_key: Optional[str] = None,
    ):
        """Initialize annotation layer.

        Args:
            store: Session-scoped key-value store used for persistence.
            highlights_key: Store key for highlights (default from settings).
            annotations_key: Store key for annotations (default from settings).
        """
        self.store = store
        self.highlights_key = highlights_key or settings.highlights_key
        self.annotations_key = annotations_key or settings.annotations_key
        self.index: Optional[SegmentIndex] = None
        self._highlights: list[str] = []
        self._annotations: dict[str, str] = {}

    @property
    def highlights(self) -> list[str]:
        """Highlighted segment keys in the order they were marked."""
        return list(self._highlights)

    @property
    def annotations(self) -> dict[str, str]:
        return dict(self._annotations)

    @property
    def is_attached(self) -> bool:
        return self.index is not None

    def attach(self, notes: str) -> SegmentIndex:
        """Bind the layer to a NotesText and restore persisted session state."""
        self.index = SegmentIndex(notes)
        highlights = self._load(self.highlights_key, list)
        annotations = self._load(self.annotations_key, dict)

        # Keys saved for some other NotesText have no segment here
        self._highlights = [key for key in highlights if isinstance(key, str) and key in self.index]
        self._annotations = {
            key: text
            for key, text in annotations.items()
            if key in self.index and isinstance(text, str)
        }
        if len(self._highlights) != len(highlights):
            logger.info("Dropped %d stale highlights", len(highlights) - len(self._highlights))
            self._save(self.highlights_key, self._highlights)
        if len(self._annotations) != len(annotations):
            logger.info("Dropped %d stale annotations", len(annotations) - len(self._annotations))
            self._save(self.annotations_key, self._annotations)
        logger.debug(
            "Attached to notes %s: %d segments, %d highlights, %d annotations",
            self.index.version[:12],
            len(self.index),
            len(self._highlights),
            len(self._annotations),
        )
        return self.index

    def clear(self) -> None:
        """Drop all highlights and annotations, including the persisted copies."""
        self.index = None
        self._highlights = []
        self._annotations = {}
        self.store.remove(self.highlights_key)
        self.store.remove(self.annotations_key)

    def segment(self, key: str) -> Segment:
        """Look up a segment of the current NotesText."""
        if self.index is None:
            raise PreconditionError("No notes are loaded. Process a document or paste text first.")
        segment = self.index.get(key)
        if segment is None:
            raise ValidationError(f"Unknown note segment: {key}")
        return segment

    def segment_text(self, key: str) -> str:
        """Plain text of a segment, e.g. as a fragment to explain."""
        return self.segment(key).text

    def is_highlighted(self, key: str) -> bool:
        return key in self._highlights

    def toggle_highlight(self, key: str) -> bool:
        """Flip the highlight state of a segment.

        Returns:
            True if the segment is highlighted afterwards.
        """
        self.segment(key)
        if key in self._highlights:
            self._highlights.remove(key)
            highlighted = False
        else:
            self._highlights.append(key)
            highlighted = True
        self._save(self.highlights_key, self._highlights)
        return highlighted

    def annotation(self, key: str) -> Optional[str]:
        return self._annotations.get(key)

    def set_annotation(self, key: str, text: str) -> None:
        """Add or replace the annotation of a highlighted segment.

        Blank text removes the annotation.
        """
        self.segment(key)
        if key not in self._highlights:
            raise PreconditionError("Highlight the segment before adding a note to it.")
        if not text.strip():
            self.remove_annotation(key)
            return
        self._annotations[key] = text
        self._save(self.annotations_key, self._annotations)

    def remove_annotation(self, key: str) -> None:
        """Delete a segment's annotation. The highlight is left as it is."""
        if self._annotations.pop(key, None) is not None:
            self._save(self.annotations_key, self._annotations)

    def _save(self, store_key: str, value) -> None:
        if value:
            self.store.set(store_key, json.dumps(value))
        else:
            self.store.remove(store_key)

    def _load(self, store_key: str, expected: type):
        raw = self.store.get(store_key)
        if raw is None:
            return expected()
        try:
            value = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("Discarding unreadable %s: %s", store_key, e)
            self.store.remove(store_key)
            return expected()
        if not isinstance(value, expected):
            logger.error("Discarding %s: expected %s", store_key, expected.__name__)
            self.store.remove(store_key)
            return expected()
        return value
