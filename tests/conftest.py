"""Shared test fixtures."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import pytest

from surveyreport.rendering.engine import SectionRenderer
from surveyreport.utils.loading import load_document

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SAMPLE_REPORT = FIXTURES_DIR / "sample_report.json"


@pytest.fixture(scope="session")
def _sample_report() -> dict[str, Any]:
    return load_document(SAMPLE_REPORT)


@pytest.fixture
def report(_sample_report) -> dict[str, Any]:
    """A fresh copy of the sample report document."""
    return copy.deepcopy(_sample_report)


@pytest.fixture
def renderer() -> SectionRenderer:
    return SectionRenderer()


@pytest.fixture
def attributes_only_report() -> dict[str, Any]:
    return {
        "metadata": {"version": "1"},
        "sections": [
            {
                "id": "attributes",
                "subsections": [],
                "dynamicSubsections": True,
                "data": {
                    "attributes": [
                        {"id": "x", "icon": "Map", "index": 2},
                        {"id": "y", "icon": "Book", "index": 1},
                    ]
                },
            }
        ],
    }


@pytest.fixture
def legacy_report() -> dict[str, Any]:
    """Document whose only section keeps its subsections under data.renderSchema."""
    return {
        "metadata": {"version": "1"},
        "sections": [
            {
                "id": "support",
                "data": {
                    "renderSchema": {
                        "subsections": [
                            {"id": "support-intent", "index": 2, "components": []},
                            {"id": "support-sentiment", "index": 1, "components": []},
                        ]
                    }
                },
            }
        ],
    }
