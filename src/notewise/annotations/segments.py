"""Segment keys for rendered notes.

NotesText is Markdown. Each interactive unit of the rendered notes (a
paragraph, heading, list item or blockquote) is identified by a key of the
form ``<element>-<line>-<column>``, where line and column (both 1-based) are
where the block starts in NotesText. For example ``p-3-1`` is a paragraph
starting on line 3.

Keys are computed once per NotesText by a deterministic line scanner, so they
are stable across re-renders of the same text. They are not stable across
different NotesText values: a regenerated text reuses positions for
unrelated content.

The scanner covers the block forms the notes prompt asks for (ATX and setext
headings, bullet and ordered list items, blockquotes, paragraphs). Fenced
code and thematic breaks are not segmented. Indented content after a blank
line inside a list starts a new paragraph rather than nesting in the item.
"""

import hashlib
import re
from dataclasses import dataclass, field
from typing import Iterator, Optional

ATX_HEADING = re.compile(r"^( {0,3})(#{1,6})(?:[ \t]+(.*?))?(?:[ \t]+#+)?[ \t]*$")
SETEXT_UNDERLINE = re.compile(r"^ {0,3}(=+|-+)[ \t]*$")
THEMATIC_BREAK = re.compile(r"^ {0,3}([-*_])(?:[ \t]*\1){2,}[ \t]*$")
CODE_FENCE = re.compile(r"^ {0,3}(```|~~~)")
BLOCKQUOTE = re.compile(r"^( {0,3})>[ \t]?(.*)$")
LIST_ITEM = re.compile(r"^([ \t]*)(?:[-*+]|\d{1,9}[.)])[ \t]+(.*)$")

INLINE_LINK = re.compile(r"!?\[([^\]]*)\]\([^)]*\)")
INLINE_MARKERS = re.compile(r"(\*\*|__|\*|`)")

INTERACTIVE_ELEMENTS = ("p", "h1", "h2", "h3", "h4", "h5", "h6", "li", "blockquote")


def plain_text(markdown: str) -> str:
    """Strip inline Markdown (links, emphasis, code ticks) from a fragment."""
    text = INLINE_LINK.sub(r"\1", markdown)
    text = INLINE_MARKERS.sub("", text)
    return " ".join(text.split())


@dataclass(frozen=True)
class Segment:
    """One interactive block of rendered notes."""

    element: str
    line: int
    column: int
    text: str

    @property
    def key(self) -> str:
        return f"{self.element}-{self.line}-{self.column}"


@dataclass
class _OpenBlock:
    element: str
    line: int
    column: int
    lines: list[str] = field(default_factory=list)

    def close(self) -> Segment:
        return Segment(self.element, self.line, self.column, plain_text(" ".join(self.lines)))


def scan_segments(notes: str) -> list[Segment]:
    """Scan NotesText into segments in render order."""
    segments: list[Segment] = []
    open_block: Optional[_OpenBlock] = None
    in_fence = False

    def flush() -> None:
        nonlocal open_block
        if open_block is not None:
            segments.append(open_block.close())
            open_block = None

    for line_number, line in enumerate(notes.splitlines(), start=1):
        if CODE_FENCE.match(line):
            flush()
            in_fence = not in_fence
            continue
        if in_fence:
            continue

        if not line.strip():
            flush()
            continue

        # Setext underline turns the open paragraph into a heading
        setext = SETEXT_UNDERLINE.match(line)
        if setext and open_block is not None and open_block.element == "p":
            open_block.element = "h1" if setext.group(1).startswith("=") else "h2"
            flush()
            continue

        if THEMATIC_BREAK.match(line):
            flush()
            continue

        heading = ATX_HEADING.match(line)
        if heading:
            flush()
            level = len(heading.group(2))
            segments.append(
                Segment(
                    f"h{level}",
                    line_number,
                    len(heading.group(1)) + 1,
                    plain_text(heading.group(3) or ""),
                )
            )
            continue

        quote = BLOCKQUOTE.match(line)
        if quote:
            if open_block is None or open_block.element != "blockquote":
                flush()
                open_block = _OpenBlock("blockquote", line_number, len(quote.group(1)) + 1)
            open_block.lines.append(quote.group(2))
            continue

        item = LIST_ITEM.match(line)
        if item:
            flush()
            open_block = _OpenBlock("li", line_number, len(item.group(1)) + 1)
            open_block.lines.append(item.group(2))
            continue

        if open_block is not None:
            # Lazy continuation of the open paragraph, item or quote
            open_block.lines.append(line.strip())
            continue

        indent = len(line) - len(line.lstrip())
        open_block = _OpenBlock("p", line_number, indent + 1, [line.strip()])

    flush()
    return segments


class SegmentIndex:
    """Segments of one NotesText version, addressable by key.

    When two segments would share a key, the first one in render order wins
    for lookups; both remain in iteration order.
    """

    def __init__(self, notes: str):
        self.version = hashlib.sha256(notes.encode("utf-8")).hexdigest()
        self.segments = scan_segments(notes)
        self._by_key: dict[str, Segment] = {}
        for segment in self.segments:
            self._by_key.setdefault(segment.key, segment)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def keys(self) -> list[str]:
        return [segment.key for segment in self.segments]

    def get(self, key: str) -> Optional[Segment]:
        return self._by_key.get(key)
