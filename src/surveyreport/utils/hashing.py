"""Document fingerprinting utilities for surveyreport."""

import hashlib
import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


def _stable_hash(data: Any) -> str:
    """Generate stable SHA256 hash from a JSON-serializable value.

    Args:
        data: Value to hash (must be JSON-serializable)

    Returns:
        str: First 16 characters of hex digest
    """
    json_str = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(json_str.encode("utf-8")).hexdigest()[:16]


def hash_document(document: Any) -> str:
    """Hash a report document for staleness detection.

    Two documents with the same content produce the same hash regardless of
    key order, so a host can discard a resolved view whose hash no longer
    matches the document it currently displays.

    Args:
        document: Raw report document

    Returns:
        str: Deterministic hash string, or "" when there is no document or it
        is nested too deeply to serialize
    """
    if document is None:
        return ""
    try:
        return _stable_hash(document)
    except RecursionError:
        logger.warning("Report document nested too deeply to fingerprint")
        return ""


def hash_file(path: str) -> str:
    """Compute SHA-256 hash of a file's contents.

    Args:
        path: Path to the file

    Returns:
        str: First 16 characters of hex digest
    """
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
    return h.hexdigest()[:16]
