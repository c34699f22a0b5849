"""Utility functions for surveyreport."""

from surveyreport.utils.hashing import hash_document, hash_file
from surveyreport.utils.loading import DocumentLoadError, load_document
from surveyreport.utils.timestamps import utc_now

__all__ = [
    "utc_now",
    "hash_document",
    "hash_file",
    "load_document",
    "DocumentLoadError",
]
