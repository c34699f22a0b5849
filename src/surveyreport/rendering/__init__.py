"""Schema-driven rendering: style variants, render routines and the section engine."""

from surveyreport.rendering.engine import SectionRenderer, resolve_view
from surveyreport.rendering.registry import ComponentRegistry, default_registry
from surveyreport.rendering.styles import StyleVariantRegistry

__all__ = [
    "SectionRenderer",
    "resolve_view",
    "ComponentRegistry",
    "default_registry",
    "StyleVariantRegistry",
]
