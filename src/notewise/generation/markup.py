"""Post-processing of generated text."""

import re

ATX_HEADING = re.compile(r"^\s{0,3}#{1,6}(?:\s+|$)")
CLOSING_HASHES = re.compile(r"\s+#+\s*$")
SETEXT_UNDERLINE = re.compile(r"^\s{0,3}(?:=+|-{2,})\s*$")
CODE_FENCE = re.compile(r"^\s*(?:```|~~~)")
BLOCKQUOTE = re.compile(r"^\s{0,3}>\s?")
STAR_BULLET = re.compile(r"^(\s*)[*+]\s+")
STRONG = re.compile(r"(\*\*|__)(.+?)\1")
EMPHASIS = re.compile(r"(?<![\w*])\*(?!\s)(.+?)(?<!\s)\*(?![\w*])")


def strip_structural_markup(text: str) -> str:
    """Remove Markdown sectioning and formatting from a plain-text summary.

    Heading markers, setext underlines, code fences, blockquote markers and
    emphasis markers are dropped; ``*``/``+`` bullets become ``-`` bullets.
    The words themselves are kept.
    """
    lines: list[str] = []
    for line in text.strip().splitlines():
        if CODE_FENCE.match(line):
            continue
        if SETEXT_UNDERLINE.match(line) and lines and lines[-1].strip():
            continue
        if ATX_HEADING.match(line):
            line = CLOSING_HASHES.sub("", ATX_HEADING.sub("", line))
        line = BLOCKQUOTE.sub("", line)
        line = STAR_BULLET.sub(r"\1- ", line)
        line = STRONG.sub(r"\2", line)
        line = EMPHASIS.sub(r"\1", line)
        lines.append(line.rstrip())
    return "\n".join(lines).strip()


def has_structural_markup(text: str) -> bool:
    """True when any line of ``text`` is a Markdown heading or fence."""
    for line in text.splitlines():
        if ATX_HEADING.match(line) or CODE_FENCE.match(line):
            return True
    return False


def _normalize(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", " ", text.lower()).strip()


def matches_sentinel(answer: str, sentinel: str) -> bool:
    """Compare an answer to the sentinel ignoring case, spacing and punctuation."""
    return _normalize(answer) == _normalize(sentinel)


def strip_code_fences(raw: str) -> str:
    """Unwrap a JSON payload the model wrapped in a fenced code block."""
    text = raw.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()
