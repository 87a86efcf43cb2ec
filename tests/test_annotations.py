"""Tests for segment keys and the annotation layer."""

import json

import pytest

from notewise.annotations import AnnotationLayer, SegmentIndex, plain_text, scan_segments
from notewise.errors import PreconditionError, ValidationError

from conftest import BIOLOGY_NOTES

HIGHLIGHTS_KEY = "noteWiseCurrentHighlights"
ANNOTATIONS_KEY = "noteWiseAnnotations"


@pytest.fixture
def layer(store):
    layer = AnnotationLayer(store, HIGHLIGHTS_KEY, ANNOTATIONS_KEY)
    layer.attach(BIOLOGY_NOTES)
    return layer


class TestSegments:
    """Tests for segment key computation."""

    def test_keys(self):
        assert SegmentIndex(BIOLOGY_NOTES).keys == ["h1-1-1", "p-3-1", "li-5-1", "li-6-1"]

    def test_segment_text(self):
        index = SegmentIndex(BIOLOGY_NOTES)
        assert index.get("li-5-1").text == "Mitochondria produce energy."

    def test_keys_are_stable(self):
        assert SegmentIndex(BIOLOGY_NOTES).keys == SegmentIndex(BIOLOGY_NOTES).keys

    def test_setext_heading_and_quote(self):
        notes = "Overview\n========\n\n> Quoted line\n> continues\n\n1. First step"
        segments = scan_segments(notes)
        assert [s.key for s in segments] == ["h1-1-1", "blockquote-4-1", "li-7-1"]
        assert segments[1].text == "Quoted line continues"

    def test_fences_and_breaks_are_skipped(self):
        notes = "Intro\n\n```\n# not a heading\n```\n\n---\n\nOutro"
        assert SegmentIndex(notes).keys == ["p-1-1", "p-9-1"]

    def test_multiline_paragraph(self):
        segments = scan_segments("First line\nsecond line")
        assert len(segments) == 1
        assert segments[0].text == "First line second line"

    def test_plain_text_strips_inline_markup(self):
        assert plain_text("**Bold** and [link](http://x) `code`") == "Bold and link code"


class TestHighlights:
    """Tests for the highlight toggle."""

    def test_toggle_twice_restores_state(self, layer, store):
        assert layer.toggle_highlight("p-3-1") is True
        assert layer.is_highlighted("p-3-1")
        assert json.loads(store.get(HIGHLIGHTS_KEY)) == ["p-3-1"]

        assert layer.toggle_highlight("p-3-1") is False
        assert layer.highlights == []
        assert store.get(HIGHLIGHTS_KEY) is None

    def test_order_is_kept(self, layer):
        layer.toggle_highlight("li-6-1")
        layer.toggle_highlight("h1-1-1")
        assert layer.highlights == ["li-6-1", "h1-1-1"]

    def test_unknown_key(self, layer):
        with pytest.raises(ValidationError):
            layer.toggle_highlight("p-99-1")

    def test_requires_notes(self, store):
        layer = AnnotationLayer(store)
        with pytest.raises(PreconditionError):
            layer.toggle_highlight("p-3-1")


class TestAnnotations:
    """Tests for per-segment annotations."""

    def test_requires_highlight(self, layer):
        with pytest.raises(PreconditionError):
            layer.set_annotation("p-3-1", "Important")

    def test_set_and_replace(self, layer, store):
        layer.toggle_highlight("p-3-1")
        layer.set_annotation("p-3-1", "Important")
        layer.set_annotation("p-3-1", "Very important")
        assert layer.annotation("p-3-1") == "Very important"
        assert json.loads(store.get(ANNOTATIONS_KEY)) == {"p-3-1": "Very important"}

    def test_remove_keeps_highlight(self, layer, store):
        layer.toggle_highlight("p-3-1")
        layer.set_annotation("p-3-1", "Important")
        layer.remove_annotation("p-3-1")
        assert layer.annotation("p-3-1") is None
        assert layer.is_highlighted("p-3-1")
        assert store.get(ANNOTATIONS_KEY) is None

    def test_blank_text_removes(self, layer):
        layer.toggle_highlight("p-3-1")
        layer.set_annotation("p-3-1", "Important")
        layer.set_annotation("p-3-1", "   ")
        assert layer.annotations == {}

    def test_unhighlight_keeps_annotation(self, layer):
        layer.toggle_highlight("p-3-1")
        layer.set_annotation("p-3-1", "Important")
        layer.toggle_highlight("p-3-1")
        assert not layer.is_highlighted("p-3-1")
        assert layer.annotation("p-3-1") == "Important"


class TestPersistence:
    """Tests for session store mirroring."""

    def test_restored_on_attach(self, layer, store):
        layer.toggle_highlight("li-5-1")
        layer.set_annotation("li-5-1", "Powerhouse")

        restored = AnnotationLayer(store, HIGHLIGHTS_KEY, ANNOTATIONS_KEY)
        restored.attach(BIOLOGY_NOTES)
        assert restored.highlights == ["li-5-1"]
        assert restored.annotation("li-5-1") == "Powerhouse"

    def test_corrupt_values_are_discarded(self, store):
        store.set(HIGHLIGHTS_KEY, "{not json")
        store.set(ANNOTATIONS_KEY, json.dumps(["wrong", "type"]))

        layer = AnnotationLayer(store, HIGHLIGHTS_KEY, ANNOTATIONS_KEY)
        layer.attach(BIOLOGY_NOTES)
        assert layer.highlights == []
        assert layer.annotations == {}
        assert store.keys() == []

    def test_keys_from_other_notes_are_dropped(self, store):
        """Persisted keys with no segment in the attached notes are discarded."""
        store.set(HIGHLIGHTS_KEY, json.dumps(["p-3-1", "p-9-1"]))
        store.set(ANNOTATIONS_KEY, json.dumps({"p-9-1": "gone", "p-3-1": "kept"}))

        layer = AnnotationLayer(store, HIGHLIGHTS_KEY, ANNOTATIONS_KEY)
        layer.attach(BIOLOGY_NOTES)

        assert layer.highlights == ["p-3-1"]
        assert layer.annotations == {"p-3-1": "kept"}
        assert json.loads(store.get(HIGHLIGHTS_KEY)) == ["p-3-1"]
        assert json.loads(store.get(ANNOTATIONS_KEY)) == {"p-3-1": "kept"}

    def test_clear(self, layer, store):
        layer.toggle_highlight("p-3-1")
        layer.set_annotation("p-3-1", "Important")
        layer.clear()
        assert not layer.is_attached
        assert layer.highlights == []
        assert store.keys() == []
