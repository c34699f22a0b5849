"""Data-path and template resolution."""

from surveyreport.resolver.paths import has_path, resolve_path, split_path
from surveyreport.resolver.templates import (
    break_lines_after_period,
    resolve_template,
    resolve_text,
    stringify,
)

__all__ = [
    "resolve_path",
    "has_path",
    "split_path",
    "resolve_text",
    "resolve_template",
    "break_lines_after_period",
    "stringify",
]
