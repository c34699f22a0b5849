"""Tests for report document loading."""

from pathlib import Path

import pytest

from surveyreport.utils.loading import DocumentLoadError, load_document

SAMPLE_REPORT = Path(__file__).parent.parent / "fixtures" / "sample_report.json"


def test_load_sample_document():
    document = load_document(SAMPLE_REPORT)
    assert document["metadata"]["surveyId"] == "csat-2024-q3"
    assert len(document["sections"]) == 7


def test_missing_file(tmp_path):
    with pytest.raises(DocumentLoadError, match="Cannot read"):
        load_document(tmp_path / "missing.json")


def test_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(DocumentLoadError, match="Invalid JSON"):
        load_document(path)


def test_root_must_be_object(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2, 3]")
    with pytest.raises(DocumentLoadError, match="must be a JSON object"):
        load_document(str(path))


def test_load_error_is_value_error():
    assert issubclass(DocumentLoadError, ValueError)


def test_deeply_nested_document(tmp_path):
    path = tmp_path / "deep.json"
    path.write_text('{"sections": ' + "[" * 100_000 + "]" * 100_000 + "}")
    with pytest.raises(DocumentLoadError, match="nested too deeply"):
        load_document(path)
