"""Command-line interface for surveyreport."""
