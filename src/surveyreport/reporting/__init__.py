"""Output formats for resolved views."""

from surveyreport.reporting.renderer import ViewRenderer

__all__ = ["ViewRenderer"]
