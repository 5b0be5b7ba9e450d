"""mdisolate.report
==================

Data-objects produced by :func:`mdisolate.core.isolate_blocks`.

:class:`IsolationReport` captures metrics and diagnostics collected while
isolating a single markdown document.  Nothing in it affects the extraction
result; it exists so malformed input that was silently passed through can
still be noticed.
"""
from __future__ import annotations

import datetime
import uuid
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class IsolationReport:
    """Report detailing the outcome of one isolation run."""

    # ---------------------------------------------------------------------
    # Meta / accounting
    # ---------------------------------------------------------------------
    run_id: str = field(
        default_factory=lambda: f"{datetime.datetime.now(datetime.timezone.utc).strftime('%Y%m%d-%H%M%S-%f')}-{uuid.uuid4().hex[:8]}"
    )
    elapsed_ms: float = 0.0

    # ---------------------------------------------------------------------
    # Size metrics
    # ---------------------------------------------------------------------
    input_char_length: int = 0
    output_char_length: int = 0
    input_line_count: int = 0
    output_line_count: int = 0

    # ---------------------------------------------------------------------
    # Extraction counters
    # ---------------------------------------------------------------------
    code_blocks_extracted: int = 0
    tables_extracted: int = 0
    fence_parity_ok: Optional[bool] = None  # None when code blocks are skipped
    unterminated_fence: bool = False
    table_runs_rejected: int = 0  # pipe runs passed through as plain text

    # ---------------------------------------------------------------------
    # CommonMark cross-check (None when disabled)
    # ---------------------------------------------------------------------
    commonmark_fence_count: Optional[int] = None
    commonmark_table_count: Optional[int] = None

    looks_like_markdown: Optional[bool] = None

    # ---------------------------------------------------------------------
    # Outcome
    # ---------------------------------------------------------------------
    warnings: List[str] = field(default_factory=list)
    final_status_message: str = "Processing not yet complete."


__all__ = ["IsolationReport"]
