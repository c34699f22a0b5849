"""Path resolution against the nested JSON data graph of a report document."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

T = TypeVar("T")

SECTION_DATA_PREFIX = "sectionData."
QUESTION_PREFIX = "question."

_BRACKET_INDEX_RE = re.compile(r"\[(\d+)\]")
_ARRAY_INDEX_RE = re.compile(r"[0-9]+")

# Marks an absent key; an explicitly stored None is a real value.
_MISSING: Any = object()


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def split_path(path: str) -> list[str]:
    """Normalize ``foo[3].bar`` into ``["foo", "3", "bar"]``, dropping empty segments."""
    normalized = _BRACKET_INDEX_RE.sub(r".\1", path)
    return [segment for segment in normalized.split(".") if segment]


def _walk(root: Any, path: str) -> Any:
    """Walk ``path`` from ``root``; return ``_MISSING`` as soon as a segment is absent."""
    current = root
    for segment in split_path(path):
        if _is_sequence(current) and _ARRAY_INDEX_RE.fullmatch(segment):
            index = int(segment)
            if index >= len(current):
                return _MISSING
            current = current[index]
        elif isinstance(current, Mapping) and segment in current:
            current = current[segment]
        else:
            return _MISSING
    return current


def _resolve_section_data(root: Mapping, relative_path: str) -> Any:
    section_data = root.get("sectionData")
    if isinstance(section_data, Mapping):
        value = _walk(section_data, relative_path)
        if value is not _MISSING:
            return value

    # Bridge for components that address the selected subsection's own data
    # as sectionData.<subsectionKey>.<field> without the caller passing it.
    active = root.get("_activeSubsection")
    active_data = active.get("data") if isinstance(active, Mapping) else None
    if isinstance(active_data, Mapping) and relative_path:
        segments = split_path(relative_path)
        if len(segments) == 1:
            return active_data
        return _walk(active_data, ".".join(segments[1:]))

    return _MISSING


def resolve_path(root: Any, path: str | None, fallback: T | None = None) -> Any | T | None:
    """Resolve a dotted/bracketed path against a JSON value tree.

    Supports ``sectionData.`` (resolved inside ``root["sectionData"]``, then the
    active subsection's data) and ``question.`` (resolved inside
    ``root["question"]``) prefixes. Any other path is walked segment by segment
    from ``root``; ``foo[3]`` and ``foo.3`` are equivalent.

    A missing path is an expected outcome and returns ``fallback``. Values that
    are present but falsy (``0``, ``False``, ``""``, ``None``) are returned as-is.

    Args:
        root: Root of the data graph (usually the document or a render context)
        path: Path expression
        fallback: Value returned when the path does not resolve

    Returns:
        The resolved value, or ``fallback``
    """
    if not path or root is None:
        return fallback

    if path.startswith(SECTION_DATA_PREFIX):
        if not isinstance(root, Mapping):
            return fallback
        value = _resolve_section_data(root, path[len(SECTION_DATA_PREFIX):])
        return fallback if value is _MISSING else value

    if path.startswith(QUESTION_PREFIX):
        question = root.get("question") if isinstance(root, Mapping) else None
        if not isinstance(question, Mapping):
            return fallback
        value = _walk(question, path[len(QUESTION_PREFIX):])
        return fallback if value is _MISSING else value

    value = _walk(root, path)
    return fallback if value is _MISSING else value


def has_path(root: Any, path: str | None) -> bool:
    """True if ``path`` resolves to a present value (``None`` included)."""
    return resolve_path(root, path, _MISSING) is not _MISSING
