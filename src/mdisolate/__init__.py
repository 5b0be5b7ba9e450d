"""Markdown block isolation (mdisolate) package."""

from .config import IsolateConfig
from .report import IsolationReport
from .extractor import CodeBlock, TableData, extract_code_blocks, extract_tables
from .formatter import reconstruct_markdown
from .core import IsolatedDocument, isolate_blocks

__all__ = [
    "IsolateConfig",
    "IsolationReport",
    "CodeBlock",
    "TableData",
    "extract_code_blocks",
    "extract_tables",
    "reconstruct_markdown",
    "IsolatedDocument",
    "isolate_blocks",
]
