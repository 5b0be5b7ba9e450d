"""mdisolate.core
==============

High-level orchestration of block isolation.

The entry-point is :func:`isolate_blocks` which consumes raw markdown, runs
the code-block and table extractors from :mod:`mdisolate.extractor`, gathers
diagnostics from :mod:`mdisolate.validators` and returns the
``(text, blocks, tables)`` triple as an :class:`IsolatedDocument` together
with an :class:`~mdisolate.report.IsolationReport`.

When ``config.save_report`` is set each run writes its report to
**<log_dir>/<run_id>.json**.
"""
from __future__ import annotations

import json
import logging
import sys
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple

from . import validators
from .config import IsolateConfig
from .extractor import CodeBlock, TableData, extract_code_blocks, extract_tables
from .placeholders import IdFactory
from .report import IsolationReport

__all__ = ["IsolatedDocument", "isolate_blocks"]

logger = logging.getLogger(__name__)


@dataclass
class IsolatedDocument:
    """Placeholder-bearing text plus the records its placeholders stand for."""

    text: str
    blocks: Dict[str, CodeBlock] = field(default_factory=dict)
    tables: Dict[str, TableData] = field(default_factory=dict)

    def entities_as_dict(self) -> dict:
        """JSON-ready view of the extracted records, keyed by placeholder."""
        return {
            "blocks": {k: v._asdict() for k, v in self.blocks.items()},
            "tables": {k: v._asdict() for k, v in self.tables.items()},
        }


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _run_code_blocks(
    doc: IsolatedDocument, source: str, id_factory, report: IsolationReport
) -> None:
    report.fence_parity_ok = validators.fence_parity_ok(doc.text)
    report.unterminated_fence = validators.unterminated_fence(doc.text)
    if report.unterminated_fence:
        report.warnings.append("Unterminated code fence; block runs to end of input.")
    doc.text, doc.blocks = extract_code_blocks(doc.text, id_factory, avoid=source)
    report.code_blocks_extracted = len(doc.blocks)


def _run_tables(
    doc: IsolatedDocument, source: str, id_factory, report: IsolationReport
) -> None:
    runs = validators.count_table_runs(doc.text, min_lines=2)
    doc.text, doc.tables = extract_tables(doc.text, id_factory, avoid=source)
    report.tables_extracted = len(doc.tables)
    report.table_runs_rejected = runs - len(doc.tables)
    if report.table_runs_rejected:
        report.warnings.append(
            f"{report.table_runs_rejected} pipe run(s) without a separator row left as text."
        )


def _cross_check(markdown: str, config: IsolateConfig, report: IsolationReport) -> None:
    report.commonmark_fence_count = validators.commonmark_fence_count(markdown)
    report.commonmark_table_count = validators.commonmark_table_count(markdown)
    if config.extract_code_blocks and report.code_blocks_extracted != report.commonmark_fence_count:
        report.warnings.append(
            f"CommonMark sees {report.commonmark_fence_count} fenced block(s), "
            f"extracted {report.code_blocks_extracted}."
        )
    if config.extract_tables and report.tables_extracted != report.commonmark_table_count:
        report.warnings.append(
            f"CommonMark sees {report.commonmark_table_count} table(s), "
            f"extracted {report.tables_extracted}."
        )


def _save_report_to_json(report: IsolationReport, log_dir: str = "logs") -> None:
    """Serialise *report* to a pretty JSON file under *log_dir*."""
    filename = f"{report.run_id}.json"
    try:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        path = Path(log_dir) / filename
        path.write_text(json.dumps(asdict(report), indent=2), encoding="utf-8")
    except OSError as exc:
        print(
            f"Warning: failed to save JSON report {filename}: {exc}",
            file=sys.stderr,
        )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def isolate_blocks(
    markdown: str,
    config: Optional[IsolateConfig] = None,
    id_factory: Optional[IdFactory] = None,
) -> Tuple[IsolatedDocument, IsolationReport]:
    """Isolate code blocks and tables of *markdown* behind placeholders.

    Raises :class:`TypeError` when *markdown* is not a string; malformed
    markdown never raises.
    """
    if not isinstance(markdown, str):
        raise TypeError(f"markdown must be str, not {type(markdown).__name__}")
    config = config or IsolateConfig()

    report = IsolationReport(
        input_char_length=len(markdown),
        input_line_count=markdown.count("\n") + 1,
    )
    start_ts = time.perf_counter()
    doc = IsolatedDocument(markdown)

    stages = []
    if config.extract_code_blocks:
        stages.append(_run_code_blocks)
    if config.extract_tables:
        stages.append(_run_tables)
    if not config.code_blocks_first:
        stages.reverse()
    for stage in stages:
        # Placeholders must also be absent from the unmodified input.
        stage(doc, markdown, id_factory, report)
    if not validators.placeholders_on_own_lines(doc.text):
        report.warnings.append("Input contains placeholder-like text inside a line.")

    report.looks_like_markdown = validators.looks_like_markdown(markdown)
    if config.cross_check_commonmark:
        _cross_check(markdown, config, report)

    report.output_char_length = len(doc.text)
    report.output_line_count = doc.text.count("\n") + 1
    report.elapsed_ms = (time.perf_counter() - start_ts) * 1000
    report.final_status_message = (
        "Success with warnings." if report.warnings else "Success."
    )
    logger.debug(
        "Isolated %d code block(s) and %d table(s) in %.2f ms",
        report.code_blocks_extracted,
        report.tables_extracted,
        report.elapsed_ms,
    )

    if config.save_report:
        _save_report_to_json(report, config.log_dir)

    return doc, report
