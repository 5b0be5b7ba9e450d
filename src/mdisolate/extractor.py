"""mdisolate.extractor
=====================

Line-oriented isolation of fenced code blocks and pipe tables.

:func:`extract_code_blocks` and :func:`extract_tables` each consume a whole
markdown string and return the rewritten text plus an ordered mapping from
placeholder to the record it replaced.  Neither function raises on messy
markdown: an unterminated fence runs to the end of the input and a pipe run
without a separator row is passed through untouched.

Lines are split on ``"\n"`` only: with CRLF input, retained lines keep their
trailing ``"\r"`` while placeholder lines carry none.
"""
from __future__ import annotations

import logging
import re
from collections import namedtuple
from typing import Dict, List, Optional, Set

from .placeholders import CODEBLOCK_PREFIX, TABLE_PREFIX, IdFactory, new_placeholder

__all__ = [
    "CodeBlock",
    "TableData",
    "CodeBlockResult",
    "TableResult",
    "FENCE_MARKER",
    "is_fence",
    "is_table_candidate",
    "is_separator_row",
    "split_row",
    "parse_table_lines",
    "extract_code_blocks",
    "extract_tables",
]

logger = logging.getLogger(__name__)

CodeBlock = namedtuple("CodeBlock", ["language", "code"])
TableData = namedtuple("TableData", ["headers", "rows"])
CodeBlockResult = namedtuple("CodeBlockResult", ["text", "blocks"])
TableResult = namedtuple("TableResult", ["text", "tables"])

FENCE_MARKER = "```"

_SEPARATOR_CELL_RE = re.compile(r"[-:\s]+")


def _require_str(markdown: object) -> None:
    if not isinstance(markdown, str):
        raise TypeError(f"markdown must be str, not {type(markdown).__name__}")


# ---------------------------------------------------------------------------
# Line predicates
# ---------------------------------------------------------------------------

def is_fence(line: str) -> bool:
    """Return *True* if *line*, once stripped, opens or closes a fence."""
    return line.strip().startswith(FENCE_MARKER)


def is_table_candidate(line: str) -> bool:
    """Cheap per-line heuristic: at least two pipes on the line."""
    return line.strip().count("|") >= 2


def is_separator_row(line: str) -> bool:
    """Return *True* if every ``|``-cell of *line* is empty or dashes/colons."""
    for cell in line.strip().split("|"):
        cell = cell.strip()
        if cell and not _SEPARATOR_CELL_RE.fullmatch(cell):
            return False
    return True


# ---------------------------------------------------------------------------
# Table parsing
# ---------------------------------------------------------------------------

def split_row(line: str) -> List[str]:
    """Split a table row into stripped cells.

    A leading and trailing pipe (``| a | b |``) are dropped; rows without
    outer pipes (``a | b``) keep every part.
    """
    parts = line.strip().split("|")
    if len(parts) >= 2 and parts[0] == "" and parts[-1] == "":
        parts = parts[1:-1]
    return [cell.strip() for cell in parts]


def parse_table_lines(lines: List[str]) -> Optional[TableData]:
    """Parse a run of candidate lines, or return *None* if it is no table.

    The separator is the *first* line after the header that looks like one;
    anything between the header and it is dropped.
    """
    if len(lines) < 2:
        return None

    separator_index = next(
        (i for i in range(1, len(lines)) if is_separator_row(lines[i])), None
    )
    if separator_index is None:
        return None

    headers = split_row(lines[0])
    rows = [split_row(line) for line in lines[separator_index + 1:]]
    return TableData(headers, rows)


# ---------------------------------------------------------------------------
# Extractors
# ---------------------------------------------------------------------------

def extract_code_blocks(
    markdown: str, id_factory: Optional[IdFactory] = None, avoid: str = ""
) -> CodeBlockResult:
    """Replace every fenced code block in *markdown* with a placeholder line.

    Parameters
    ----------
    markdown:
        Raw markdown text.
    id_factory:
        Optional identifier source for placeholders; defaults to UUID4.
    avoid:
        Extra text no placeholder may occur in (e.g. the unmodified document
        when *markdown* has already been rewritten by another pass).

    Returns
    -------
    CodeBlockResult
        ``text`` with one placeholder line per block and ``blocks`` mapping
        each placeholder to its :class:`CodeBlock`, in document order.
    """
    _require_str(markdown)
    lines = markdown.split("\n")
    blocks: Dict[str, CodeBlock] = {}
    taken: Set[str] = set()
    out: List[str] = []

    i = 0
    while i < len(lines):
        line = lines[i]
        if not is_fence(line):
            out.append(line)
            i += 1
            continue

        language = line.strip()[len(FENCE_MARKER):].strip()
        j = i + 1
        while j < len(lines) and not is_fence(lines[j]):
            j += 1

        placeholder = new_placeholder(CODEBLOCK_PREFIX, markdown, taken, id_factory, avoid)
        blocks[placeholder] = CodeBlock(language, "\n".join(lines[i + 1:j]))
        out.append(placeholder)
        logger.debug(
            "Extracted code block %s (language=%r, %d lines%s)",
            placeholder,
            language,
            j - i - 1,
            "" if j < len(lines) else ", unterminated",
        )
        # Skip the closing fence; j == len(lines) when it is missing.
        i = j + 1

    return CodeBlockResult("\n".join(out), blocks)


def extract_tables(
    markdown: str, id_factory: Optional[IdFactory] = None, avoid: str = ""
) -> TableResult:
    """Replace every valid pipe table in *markdown* with a placeholder line.

    Runs of consecutive candidate lines that do not validate as a table are
    re-emitted exactly as they appeared.  *avoid* is as for
    :func:`extract_code_blocks`.
    """
    _require_str(markdown)
    lines = markdown.split("\n")
    tables: Dict[str, TableData] = {}
    taken: Set[str] = set()
    out: List[str] = []

    i = 0
    while i < len(lines):
        if not is_table_candidate(lines[i]):
            out.append(lines[i])
            i += 1
            continue

        j = i + 1
        while j < len(lines) and is_table_candidate(lines[j]):
            j += 1
        run = lines[i:j]

        table = parse_table_lines(run)
        if table is None:
            logger.debug("Pipe run at line %d is not a table (%d lines)", i + 1, len(run))
            out.extend(run)
        else:
            placeholder = new_placeholder(TABLE_PREFIX, markdown, taken, id_factory, avoid)
            tables[placeholder] = table
            out.append(placeholder)
            logger.debug(
                "Extracted table %s (%d columns, %d rows)",
                placeholder,
                len(table.headers),
                len(table.rows),
            )
        i = j

    return TableResult("\n".join(out), tables)
