"""Tests for uiTexts lookup and template expansion."""

from unittest.mock import MagicMock

from surveyreport.resolver.templates import (
    break_lines_after_period,
    is_pure_template,
    resolve_template,
    resolve_text,
    stringify,
)

DOC = {
    "uiTexts": {"common": {"title": "Survey"}, "empty": ""},
    "a": {"b": "hi"},
    "n": 5,
    "ratio": 2.0,
    "flag": True,
}


def test_resolve_text_with_and_without_prefix():
    assert resolve_text("uiTexts.common.title", DOC) == "Survey"
    assert resolve_text("common.title", DOC) == "Survey"


def test_resolve_text_missing_returns_path():
    assert resolve_text("uiTexts.common.missing", DOC) == "uiTexts.common.missing"
    assert resolve_text("uiTexts.empty", DOC) == "uiTexts.empty"
    assert resolve_text("uiTexts.common.title", {}) == "uiTexts.common.title"


def test_resolve_text_warns_on_injected_logger():
    logger = MagicMock()
    resolve_text("uiTexts.nope", DOC, logger)
    assert logger.warning.call_count == 1

    logger.reset_mock()
    resolve_text("uiTexts.common.title", {"sections": []}, logger)
    assert logger.warning.call_count == 1


def test_resolve_text_is_silent_without_logger():
    assert resolve_text("uiTexts.nope", DOC, None) == "uiTexts.nope"


def test_pure_template():
    assert resolve_template("{{a.b}}", {"a": {"b": "hi"}}) == "hi"


def test_pure_unresolved_template_collapses_to_empty():
    assert resolve_template("{{missing}}", {}) == ""
    assert resolve_template("  {{ missing }}  ", {}) == ""


def test_composite_unresolved_placeholder_is_kept():
    assert resolve_template("x={{missing}} end", {}) == "x={{missing}} end"


def test_composite_template_mixes_sources():
    result = resolve_template("{{uiTexts.common.title}}: {{n}} answers", DOC)
    assert result == "Survey: 5 answers"


def test_values_are_stringified():
    assert resolve_template("{{flag}}", DOC) == "true"
    assert resolve_template("{{ratio}}x", DOC) == "2x"
    assert stringify({"k": [1, 2]}) == '{"k":[1,2]}'
    assert stringify(1.5) == "1.5"


def test_unresolved_ui_text_keeps_path_and_warns():
    logger = MagicMock()
    assert resolve_template("{{uiTexts.missing}}", DOC, logger) == "uiTexts.missing"
    assert logger.warning.called


def test_non_string_and_empty_input_unchanged():
    assert resolve_template(None, DOC) is None
    assert resolve_template(42, DOC) == 42
    assert resolve_template("", DOC) == ""


def test_plain_string_passes_through():
    assert resolve_template("no placeholders", DOC) == "no placeholders"


def test_is_pure_template():
    assert is_pure_template("{{a}}")
    assert is_pure_template(" {{a.b}} ")
    assert not is_pure_template("{{a}} and {{b}}")
    assert not is_pure_template("x {{a}}")


def test_break_lines_after_period():
    assert break_lines_after_period("One. Two.  Three.") == "One.\nTwo.\nThree."
    assert break_lines_after_period("v1.2 stays") == "v1.2 stays"
    assert break_lines_after_period(None) is None
