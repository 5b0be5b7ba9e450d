"""mdisolate.cli
=============

Command-line interface for markdown block isolation.

Example::

    $ python -m mdisolate article.md -o article.txt --entities blocks.json --json

If *article.md* is omitted the markdown is read from **STDIN** and the
placeholder text is written to **STDOUT**.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, Dict

import tomlkit
from tomlkit.exceptions import TOMLKitError

from .config import IsolateConfig
from .core import isolate_blocks

__all__ = ["main"]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_config_from_toml(path: Path) -> IsolateConfig:
    """Return a :class:`IsolateConfig` initialised from *path* (TOML)."""
    cfg = IsolateConfig()
    toml_data = tomlkit.parse(path.read_text(encoding="utf-8")).unwrap()

    # Only apply keys that actually exist on IsolateConfig, and only with the
    # type of the field default.
    valid_fields = {f.name for f in fields(cfg)}
    for key, val in toml_data.items():
        if key not in valid_fields:
            continue
        expected = type(getattr(cfg, key))
        if type(val) is not expected:
            raise TypeError(
                f"{key} must be {expected.__name__}, not {type(val).__name__}"
            )
        setattr(cfg, key, val)
    return cfg


def _fail(message: str) -> None:
    print(f"mdisolate: {message}", file=sys.stderr)
    sys.exit(1)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> None:
    """Parse *argv* and isolate the blocks of one markdown document.

    When *argv* is **None** ``sys.argv[1:]`` is used.
    """
    parser = argparse.ArgumentParser(
        prog="mdisolate",
        description="Replace fenced code blocks and pipe tables with placeholders",
    )

    parser.add_argument(
        "input",
        nargs="?",
        help="Path to input markdown file. Reads from STDIN when omitted.",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Path for the placeholder text. Writes to STDOUT when omitted.",
    )
    parser.add_argument(
        "--entities",
        metavar="JSON",
        help="Write the extracted code blocks and tables to this JSON file.",
    )
    parser.add_argument(
        "--config",
        metavar="TOML",
        help="Path to configuration TOML. Uses built-in defaults when omitted.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit the IsolationReport as JSON to STDERR.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every extracted block to STDERR.",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # ------------------------------------------------------------------
    # Read input markdown ------------------------------------------------
    # ------------------------------------------------------------------
    try:
        if args.input:
            raw_md = Path(args.input).read_text(encoding="utf-8")
        else:
            raw_md = sys.stdin.read()
    except FileNotFoundError:
        _fail(f"input file not found: {args.input}")
    except (OSError, UnicodeDecodeError) as exc:
        _fail(f"error reading input – {exc}")

    # ------------------------------------------------------------------
    # Load configuration -------------------------------------------------
    # ------------------------------------------------------------------
    try:
        if args.config:
            cfg = _load_config_from_toml(Path(args.config))
        else:
            cfg = IsolateConfig()
    except (OSError, TOMLKitError, TypeError) as exc:
        _fail(f"failed to load config – {exc}")

    doc, report = isolate_blocks(raw_md, cfg)

    # ------------------------------------------------------------------
    # Write outputs ------------------------------------------------------
    # ------------------------------------------------------------------
    try:
        if args.output:
            Path(args.output).write_text(doc.text, encoding="utf-8")
        else:
            print(doc.text, end="")
        if args.entities:
            Path(args.entities).write_text(
                json.dumps(doc.entities_as_dict(), indent=2), encoding="utf-8"
            )
    except OSError as exc:
        _fail(f"cannot write output – {exc}")

    # ------------------------------------------------------------------
    # Optional JSON report ----------------------------------------------
    # ------------------------------------------------------------------
    if args.json:
        json_report: Dict[str, Any] = asdict(report)
        print(json.dumps(json_report, indent=2), file=sys.stderr)


if __name__ == "__main__":  # pragma: no cover – manual invocation only
    main()
