"""Tests for the generic section renderer."""

import copy
import logging
import sys
from unittest.mock import MagicMock

from surveyreport.models.enums import BlockKind, NotFoundReason
from surveyreport.models.resolution import NotFoundResult, ResolvedView
from surveyreport.rendering.engine import (
    DEFAULT_MAX_DEPTH,
    SectionRenderer,
    resolve_view,
    should_show_component,
    with_filter_pills,
)
from surveyreport.rendering.registry import ComponentRegistry, default_registry
from surveyreport.locator.sections import find_section
from surveyreport.utils.hashing import hash_document


def _strip_timestamp(view):
    return view.model_dump(exclude={"generated_at"})


def test_bare_section_key_renders_first_subsection(report, renderer):
    view = renderer.resolve_view(report, "executive")
    assert isinstance(view, ResolvedView)
    assert view.section_id == "executive"
    assert view.active_key == "executive-highlights"
    assert view.section_name == "Executive Summary"
    assert view.subsection_name == "Highlights"
    assert view.available_subsections == ["executive-highlights", "executive-summary"]

    [chart] = view.components
    assert chart.type == "barChart"
    assert chart.data == [{"label": "Promoters", "value": 55}, {"label": "Detractors", "value": 13}]
    assert view.blocks[0]["kind"] == BlockKind.CHART
    assert view.blocks[0]["points"] == 2


def test_subsection_components_resolved(report, renderer):
    view = renderer.resolve_view(report, "executive-summary")
    assert [c.type for c in view.components] == ["card", "recommendationsTable"]
    assert view.subsection_summary == "Satisfaction rose.\nSupport remains the main complaint."

    card = view.components[0]
    assert card.title == "Respondents"
    assert card.text == "1200 people answered. Response rate was high."
    assert card.data == {"nps": 42, "csat": 0}
    assert card.class_name == "card-elevated border-l-4 bg-muted/10"
    assert card.title_class_name == "text-lg font-bold text-foreground mb-3"
    assert card.text_class_name is None

    text, kpi = card.components
    assert text.text == "NPS is 42.\nUp from last quarter."
    assert kpi.type == "kpiCard"
    assert kpi.data == 0

    table_block = view.blocks[1]
    assert table_block["kind"] == BlockKind.TABLE
    assert table_block["columns"] == ["Action", "Priority"]
    assert table_block["rows"][0] == ["Shorten support queues", "high"]


def test_section_data_from_prefixed_subsections(report, renderer):
    section_data = renderer.build_section_data(report, find_section(report, "executive"))
    assert set(section_data) == {"summary", "highlights"}


def test_legacy_render_schema_section(report, renderer):
    view = renderer.resolve_view(report, "support")
    assert view.active_key == "support-sentiment"
    assert view.available_subsections == ["support-sentiment", "support-intent"]
    assert view.components[0].data == {"positive": 40, "negative": 35, "neutral": 25}
    assert view.blocks[0]["chart_type"] == "sentimentThreeColorChart"


def test_question_subsection(report, renderer):
    view = renderer.resolve_view(report, "responses-1")
    assert view.subsection_id == "responses-1"
    assert view.subsection_name == "How satisfied are you?"
    assert view.available_subsections == ["responses-2", "responses-1"]
    assert [c.type for c in view.components] == ["filterPills", "questionsList"]

    questions_list = view.components[1]
    assert [q["id"] for q in questions_list.data["questions"]] == [1, 2, 3]
    assert questions_list.data["config"] == {"questions": {"hiddenIds": [3]}}


def test_hidden_question_is_not_a_subsection(report, renderer):
    result = renderer.resolve_view(report, "responses-3")
    assert isinstance(result, NotFoundResult)
    assert result.reason == NotFoundReason.SUBSECTION_NOT_FOUND
    assert result.section_id == "responses"
    assert result.available_subsections == ["responses-2", "responses-1"]


def test_unknown_question_key(report, renderer):
    result = renderer.resolve_view(report, "responses-17")
    assert isinstance(result, NotFoundResult)
    assert "responses-17" in result.message


def test_attribute_subsections_are_synthesized(report, renderer):
    view = renderer.resolve_view(report, "attributes")
    assert view.active_key == "attributes-education"
    assert view.subsection_icon == "Book"
    assert view.available_subsections == ["attributes-education", "attributes-region"]

    heading, table = view.components
    assert heading.title == "Education"
    assert table.data == [{"value": "Degree", "share": 0.7}]
    assert view.blocks[0] == {"kind": BlockKind.HEADING, "type": "h3", "level": 3, "text": "Education"}
    assert view.blocks[1]["rows"] == [["Degree", "0.7"]]


def test_components_only_section(report, renderer):
    view = renderer.resolve_view(report, "methodology")
    assert view.subsection_id is None
    assert view.available_subsections == []
    assert view.components[0].text == "Sample of 1200 respondents.\nMargin of error 3%."
    # The unknown widget resolves but produces no block.
    assert [c.type for c in view.components] == ["text", "mysteryWidget"]
    assert [b["kind"] for b in view.blocks] == [BlockKind.PARAGRAPH]


def test_flat_top_level_render_schema(report, renderer):
    view = renderer.resolve_view(report, "archive")
    assert view.blocks[0]["text"] == "Archived results."


def test_not_found_results(report, renderer):
    assert renderer.resolve_view(report, "nothing").reason == NotFoundReason.UNKNOWN_KEY
    assert renderer.resolve_view(report, "about").reason == NotFoundReason.NO_SCHEMA
    assert renderer.resolve_view(None, "executive").reason == NotFoundReason.NO_DOCUMENT


def test_resolution_is_idempotent_and_pure(report, renderer):
    before = copy.deepcopy(report)
    keys = ["executive-summary", "support", "responses-2", "attributes-region", "methodology"]

    first = [_strip_timestamp(renderer.resolve_view(report, k)) for k in keys]
    second = [_strip_timestamp(renderer.resolve_view(report, k)) for k in keys]

    assert first == second
    assert report == before


def test_resolved_data_is_detached_from_document(report, renderer):
    view = renderer.resolve_view(report, "executive-highlights")
    view.components[0].data.append({"label": "Passives", "value": 32})
    assert len(report["sections"][0]["subsections"][1]["data"]["chart"]) == 2


def test_document_hash_recorded(report, renderer):
    view = renderer.resolve_view(report, "executive")
    assert view.document_hash == hash_document(report)
    assert len(view.document_hash) == 16


def test_depth_guard_truncates(caplog):
    node = {"type": "text", "text": "leaf"}
    for _ in range(40):
        node = {"type": "container", "components": [node]}
    document = {"sections": [{"id": "deep", "components": [node]}]}

    with caplog.at_level(logging.WARNING):
        view = SectionRenderer(max_depth=5).resolve_view(document, "deep")

    depth = 1
    current = view.components[0]
    while current.components:
        current = current.components[0]
        depth += 1
    assert depth == 5
    assert current.truncated is True
    assert "deeper than 5 levels" in caplog.text


def test_inline_data_used_when_path_missing(renderer):
    document = {
        "sections": [
            {
                "id": "inline",
                "components": [
                    {"type": "npsTable", "dataPath": "not.there", "data": [{"k": "v"}]},
                    {"type": "text", "data": "Inline text."},
                ],
            }
        ]
    }
    view = renderer.resolve_view(document, "inline")
    assert view.components[0].data == [{"k": "v"}]
    assert view.blocks[1]["text"] == "Inline text."


def test_section_data_path(renderer):
    document = {
        "analytics": {"scores": {"nps": 31}},
        "sections": [
            {
                "id": "nps",
                "dataPath": "analytics.scores",
                "components": [{"type": "kpiCard", "dataPath": "sectionData.nps"}],
            }
        ],
    }
    view = renderer.resolve_view(document, "nps")
    assert view.components[0].data == 31


def test_extra_node_fields_pass_through(renderer):
    document = {
        "sections": [
            {"id": "s", "components": [{"type": "wordCloud", "layout": "wide", "maxWords": 50}]}
        ]
    }
    view = renderer.resolve_view(document, "s")
    assert view.components[0].props == {"layout": "wide", "maxWords": 50}


def test_custom_registry_and_logger(report):
    registry = ComponentRegistry()
    registry.register("chart", lambda c: {"kind": "chart", "type": c.type, "custom": True})
    logger = MagicMock()

    document = copy.deepcopy(report)
    document["sections"][0]["subsections"][1]["components"][0]["title"] = "{{uiTexts.common.nope}}"
    view = SectionRenderer(registry=registry, logger=logger).resolve_view(document, "executive")

    assert view.blocks == [{"kind": "chart", "type": "barChart", "custom": True}]
    assert view.components[0].title == "uiTexts.common.nope"
    assert logger.warning.called


def test_should_show_component_in_question_context():
    bar = {"type": "barChart"}
    stacked = {"type": "sentimentStackedChart"}

    assert should_show_component(bar, {})
    assert not should_show_component(bar, {"question": {"id": 1}})
    assert should_show_component(bar, {"question": {"data": [1]}})

    assert not should_show_component(stacked, {"question": {"data": {}}})
    assert should_show_component(stacked, {"question": {"data": {"sentimentData": {"p": 1}}}})
    assert should_show_component(stacked, {"question": {"sentimentData": {"p": 1}}})
    assert should_show_component({"type": "text"}, {"question": {}})


def test_question_context_hides_empty_charts():
    renderer = SectionRenderer(registry=default_registry())
    context = {"question": {"id": 5}}
    resolved = renderer.resolve_components(
        [{"type": "barChart"}, {"type": "text", "text": "kept"}], context
    )
    assert [c.type for c in resolved] == ["text"]


def test_with_filter_pills():
    components = [
        {"type": "filterPills", "index": 9},
        {"type": "h3", "index": 0},
        {"type": "questionsList", "index": 2},
    ]
    result = with_filter_pills(components)
    assert [c["type"] for c in result] == ["h3", "filterPills", "questionsList"]
    assert result[1]["index"] == 2

    assert [c["type"] for c in with_filter_pills([{"type": "text"}])] == ["filterPills", "text"]


def test_module_level_resolve_view(report):
    assert isinstance(resolve_view(report, "methodology"), ResolvedView)


def test_tree_deeper_than_recursion_limit_is_truncated():
    node = {"type": "text", "text": "leaf"}
    for _ in range(max(3000, sys.getrecursionlimit() * 3)):
        node = {"type": "container", "components": [node]}
    document = {"sections": [{"id": "deep", "components": [node]}]}

    view = SectionRenderer().resolve_view(document, "deep")

    assert isinstance(view, ResolvedView)
    depth = 1
    current = view.components[0]
    while current.components:
        current = current.components[0]
        depth += 1
    assert depth == DEFAULT_MAX_DEPTH
    assert current.truncated is True
    assert view.blocks[0]["kind"] == BlockKind.GROUP


def test_nested_card_is_enriched_when_resolved(renderer):
    node = {"type": "card", "cardStyleVariant": "border-left", "titleStyleVariant": "h3-style"}
    for _ in range(10):
        node = {"type": "container", "components": [node]}
    document = {"sections": [{"id": "s", "components": [node]}]}
    before = copy.deepcopy(document)

    view = renderer.resolve_view(document, "s")

    current = view.components[0]
    while current.components:
        current = current.components[0]
    assert current.type == "card"
    assert current.class_name == "card-elevated border-l-4 bg-muted/10"
    assert current.title_class_name == "text-lg font-bold text-foreground mb-3"
    assert document == before
