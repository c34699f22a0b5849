"""Localized text lookup and ``{{path}}`` template expansion."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from typing import Any

from surveyreport.resolver.paths import resolve_path

UI_TEXTS_PREFIX = "uiTexts."

_PLACEHOLDER_RE = re.compile(r"\{\{([^}]+)\}\}")
_PURE_TEMPLATE_RE = re.compile(r"^\{\{[^}]+\}\}$")
_SENTENCE_BREAK_RE = re.compile(r"\.\s+")


def stringify(value: Any) -> str:
    """Render a resolved value the way the dashboard displays it."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
    return str(value)


def resolve_text(
    path: str | None,
    document: Mapping[str, Any] | None,
    logger: logging.Logger | None = None,
) -> str:
    """Look up a localized string in ``document["uiTexts"]``.

    The leading ``uiTexts.`` is optional. When the texts block is missing or
    the entry is not found, the original path is returned unchanged so the
    gap stays visible in the rendered report.

    Args:
        path: Text path, e.g. ``uiTexts.sections.executive.name``
        document: Report document (or render context) holding ``uiTexts``
        logger: Optional logger receiving a warning for every failed lookup

    Returns:
        The localized string, or ``path`` when it cannot be resolved
    """
    if not path or not isinstance(document, Mapping):
        if logger is not None:
            logger.warning("resolve_text: missing path or document (path=%r)", path)
        return path if isinstance(path, str) else ""

    ui_texts = document.get("uiTexts")
    if not isinstance(ui_texts, Mapping):
        if logger is not None:
            logger.warning(
                "resolve_text: uiTexts not found (path=%r, keys=%s)", path, sorted(document)
            )
        return path

    clean_path = path[len(UI_TEXTS_PREFIX):] if path.startswith(UI_TEXTS_PREFIX) else path
    value = resolve_path(ui_texts, clean_path)
    if not value:
        if logger is not None:
            logger.warning(
                "resolve_text: path not found in uiTexts (path=%r, uiTexts keys=%s)",
                path, sorted(ui_texts),
            )
        return path
    return stringify(value)


def is_pure_template(template: str) -> bool:
    """True if the whole (trimmed) string is exactly one ``{{...}}`` placeholder."""
    return _PURE_TEMPLATE_RE.match(template.strip()) is not None


def resolve_template(
    template: Any,
    document: Mapping[str, Any] | None,
    logger: logging.Logger | None = None,
) -> Any:
    """Expand every ``{{path}}`` placeholder in ``template``.

    ``uiTexts.`` paths go through :func:`resolve_text`; anything else is
    resolved with :func:`resolve_path` against ``document``. A placeholder that
    resolves to nothing is left in place, except that a template consisting of
    a single placeholder collapses to ``""`` when it stays unresolved.

    Non-string and empty input is returned unchanged.
    """
    if not isinstance(template, str) or not template:
        return template

    pure = is_pure_template(template)

    def _substitute(match: re.Match[str]) -> str:
        path = match.group(1).strip()
        if path.startswith(UI_TEXTS_PREFIX):
            text = resolve_text(path, document, logger)
            if text == path and logger is not None:
                logger.warning("resolve_template: template not resolved (template=%r)", template)
            return text
        value = resolve_path(document, path)
        return match.group(0) if value is None else stringify(value)

    resolved = _PLACEHOLDER_RE.sub(_substitute, template)

    if pure and "{{" in resolved:
        return ""
    return resolved


def break_lines_after_period(text: Any) -> Any:
    """Put each sentence on its own line (``". "`` becomes ``".\\n"``)."""
    if not isinstance(text, str):
        return text
    return _SENTENCE_BREAK_RE.sub(".\n", text)
