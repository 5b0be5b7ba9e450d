"""mdisolate.placeholders
========================

Placeholder tokens substituted for isolated code blocks and tables.

A placeholder is ``<prefix><id>__`` where *prefix* is ``__CODEBLOCK_`` or
``__TABLE_``.  The ``<id>`` part comes from an *identifier factory*: any
zero-argument callable returning a string.  Production code uses
:func:`uuid_hex`; tests pass :func:`sequential_ids` for reproducible output.
"""
from __future__ import annotations

import itertools
import re
import uuid
from typing import Callable, Optional, Set

__all__ = [
    "CODEBLOCK_PREFIX",
    "TABLE_PREFIX",
    "PLACEHOLDER_SUFFIX",
    "PLACEHOLDER_RE",
    "IdFactory",
    "uuid_hex",
    "sequential_ids",
    "new_placeholder",
    "is_placeholder",
]

CODEBLOCK_PREFIX = "__CODEBLOCK_"
TABLE_PREFIX = "__TABLE_"
PLACEHOLDER_SUFFIX = "__"

# Matches a whole placeholder; group 1 is the kind, group 2 the identifier.
PLACEHOLDER_RE = re.compile(r"__(CODEBLOCK|TABLE)_([^\s|`]+?)__")

IdFactory = Callable[[], str]

_MAX_ATTEMPTS = 8
_FORBIDDEN_ID_RE = re.compile(r"[\s|`]")


def uuid_hex() -> str:
    """Return a random 32-character hex identifier (UUID4)."""
    return uuid.uuid4().hex


def sequential_ids(prefix: str = "id") -> IdFactory:
    """Return a deterministic factory yielding ``id0``, ``id1``, ..."""
    counter = itertools.count()
    return lambda: f"{prefix}{next(counter)}"


def _check_identifier(ident: str) -> None:
    if not isinstance(ident, str) or not ident:
        raise ValueError(f"placeholder identifier must be a non-empty string, got {ident!r}")
    if _FORBIDDEN_ID_RE.search(ident):
        raise ValueError(
            f"placeholder identifier may not contain whitespace, '|' or '`': {ident!r}"
        )


def new_placeholder(
    prefix: str,
    source: str,
    taken: Set[str],
    id_factory: Optional[IdFactory] = None,
    avoid: str = "",
) -> str:
    """Draw a placeholder that is absent from *source*, *avoid* and *taken*.

    *avoid* is extra text the placeholder must not occur in, such as the
    original document when *source* is an intermediate rewrite of it.

    The chosen placeholder is added to *taken*.  A factory that keeps
    producing colliding identifiers raises :class:`ValueError` after a few
    attempts.
    """
    factory = id_factory or uuid_hex
    for _ in range(_MAX_ATTEMPTS):
        ident = factory()
        _check_identifier(ident)
        placeholder = f"{prefix}{ident}{PLACEHOLDER_SUFFIX}"
        if placeholder not in taken and placeholder not in source and placeholder not in avoid:
            taken.add(placeholder)
            return placeholder
    raise ValueError(
        f"identifier factory produced no unique {prefix!r} placeholder "
        f"after {_MAX_ATTEMPTS} attempts"
    )


def is_placeholder(text: str) -> bool:
    """Return *True* if *text* is exactly one placeholder token."""
    return PLACEHOLDER_RE.fullmatch(text) is not None
