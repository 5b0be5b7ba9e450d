"""mdisolate.formatter
=====================

The inverse of :mod:`mdisolate.extractor`: render isolated records back to
markdown and swap placeholder lines for them.

Tables are rendered in a canonical ``| a | b |`` layout, so reconstruction is
exact for code blocks and exact modulo cell padding for tables.
"""
from __future__ import annotations

from typing import Callable, List, Mapping, Optional

from .extractor import FENCE_MARKER, CodeBlock, TableData

__all__ = ["render_code_block", "render_table", "reconstruct_markdown"]


def render_code_block(block: CodeBlock) -> str:
    """Return *block* as a fenced code block (always closed)."""
    return f"{FENCE_MARKER}{block.language}\n{block.code}\n{FENCE_MARKER}"


def _render_row(cells: List[str]) -> str:
    return "| " + " | ".join(cells) + " |"


def render_table(table: TableData) -> str:
    """Return *table* as a pipe table with a ``---`` separator row."""
    lines = [_render_row(table.headers), _render_row(["---"] * len(table.headers))]
    lines.extend(_render_row(row) for row in table.rows)
    return "\n".join(lines)


def _swap_lines(text: str, records: Mapping, render: Callable) -> str:
    if not records:
        return text
    return "\n".join(
        render(records[line]) if line in records else line for line in text.split("\n")
    )


def reconstruct_markdown(
    text: str,
    blocks: Optional[Mapping[str, CodeBlock]] = None,
    tables: Optional[Mapping[str, TableData]] = None,
) -> str:
    """Swap placeholder lines in *text* back to markdown.

    Only lines consisting of exactly one known placeholder are replaced;
    unknown or inline placeholder text is kept literally.  Code blocks are
    restored before tables so a table placeholder that ended up inside a code
    body (tables isolated first) is restored as well.
    """
    text = _swap_lines(text, blocks or {}, render_code_block)
    return _swap_lines(text, tables or {}, render_table)
