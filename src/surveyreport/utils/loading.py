"""Report document loading."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class DocumentLoadError(ValueError):
    """Raised when a report document cannot be read or is not a JSON object."""


def load_document(path: Path | str) -> dict[str, Any]:
    """Load a report document from a JSON file.

    Only the outer shape is checked here (the root must be an object); the
    resolution engine tolerates anything inside it.

    Raises:
        DocumentLoadError: If the file is missing, unreadable, nested too deeply
            or not a JSON object
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise DocumentLoadError(f"Cannot read report document {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise DocumentLoadError(f"Invalid JSON in {path}: {e}") from e
    except RecursionError as e:
        raise DocumentLoadError(f"Report document {path} is nested too deeply") from e

    if not isinstance(data, dict):
        raise DocumentLoadError(
            f"Report document {path} must be a JSON object, got {type(data).__name__}"
        )

    sections = data.get("sections")
    logger.debug(
        "Loaded report document %s (%d sections)",
        path, len(sections) if isinstance(sections, list) else 0,
    )
    return data
