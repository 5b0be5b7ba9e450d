"""mdisolate.validators
=====================

Diagnostic helpers that look at a markdown document independently of the
extractors.  Functions are *pure* so they can be unit-tested without I/O.

* Fence bookkeeping with the same line rule the extractor uses
  (:func:`fence_parity_ok`, :func:`unterminated_fence`).
* A CommonMark cross-check via **markdown-it-py**, which counts fenced code
  and GFM tables the way a real parser sees them.  Disagreement with the
  line-based extractor is reported, never corrected.
* Placeholder hygiene and a cheap "is this markdown at all" heuristic.
"""
from __future__ import annotations

import re

from markdown_it import MarkdownIt

from .extractor import is_fence, is_table_candidate
from .placeholders import PLACEHOLDER_RE

__all__ = [
    "fence_parity_ok",
    "unterminated_fence",
    "count_table_runs",
    "commonmark_fence_count",
    "commonmark_table_count",
    "placeholders_on_own_lines",
    "looks_like_markdown",
]

_MARKDOWN_HINT_RE = re.compile(
    r"^#{1,6}\s|```|^\s*[-*+]\s|^\s*\d+\.\s|^\s*>\s|\*\*.*\*\*|\[.*\]\(.*\)|!\[.*\]\(.*\)|\|.*\|",
    re.MULTILINE,
)


# ---------------------------------------------------------------------------
# Line-based fence checks
# ---------------------------------------------------------------------------

def fence_parity_ok(markdown_text: str) -> bool:
    """Return *True* if the document has an even number of fence lines."""
    return sum(1 for line in markdown_text.split("\n") if is_fence(line)) % 2 == 0


def unterminated_fence(markdown_text: str) -> bool:
    """Return *True* if the last opened fence is never closed.

    Mirrors the extractor's pairing: every fence line toggles between
    "inside" and "outside" a block.
    """
    inside = False
    for line in markdown_text.split("\n"):
        if is_fence(line):
            inside = not inside
    return inside


def count_table_runs(markdown_text: str, min_lines: int = 1) -> int:
    """Number of runs of at least *min_lines* consecutive table-candidate lines."""
    runs = 0
    length = 0
    for line in markdown_text.split("\n") + [""]:
        if is_table_candidate(line):
            length += 1
            continue
        if length >= min_lines and length:
            runs += 1
        length = 0
    return runs


# ---------------------------------------------------------------------------
# CommonMark cross-check
# ---------------------------------------------------------------------------

def commonmark_fence_count(markdown_text: str) -> int:
    """Count fenced code blocks as parsed by **markdown-it-py**."""
    tokens = MarkdownIt("commonmark").parse(markdown_text)
    return sum(1 for tok in tokens if tok.type == "fence")


def commonmark_table_count(markdown_text: str) -> int:
    """Count GFM tables as parsed by **markdown-it-py** (``table`` rule on)."""
    tokens = MarkdownIt("commonmark").enable("table").parse(markdown_text)
    return sum(1 for tok in tokens if tok.type == "table_open")


# ---------------------------------------------------------------------------
# Generic helpers
# ---------------------------------------------------------------------------

def placeholders_on_own_lines(text: str) -> bool:
    """Return *True* if every placeholder in *text* fills its whole line."""
    for line in text.split("\n"):
        matches = list(PLACEHOLDER_RE.finditer(line))
        if matches and not (len(matches) == 1 and matches[0].group(0) == line):
            return False
    return True


def looks_like_markdown(text: str) -> bool:
    """Heuristic: does *text* contain any common markdown construct?

    Headings, fences, list items, blockquotes, bold, links, images and pipe
    rows all count.  Used to flag input where isolation is pointless.
    """
    return _MARKDOWN_HINT_RE.search(text) is not None
