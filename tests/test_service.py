"""
TokenService 測試：群組組成、省略空群組、strict 模式與驗證報告。
FigmaAPIClient 以 MagicMock 取代，get_file 直接回傳解析後的 DesignFile。
"""
from unittest.mock import MagicMock

import pytest

from figma_tokens.errors import FetchError, TokenNameCollisionError
from figma_tokens.generator import render
from figma_tokens.schema import parse_file
from figma_tokens.service import (
    TokenService,
    analyze_file,
    tokens_from_file,
    validate_design_file,
)
from tests.helpers import button_file_payload, make_file_payload, make_node, solid


def make_service(payload=None, error=None):
    client = MagicMock()
    if error is not None:
        client.get_file.side_effect = error
    else:
        client.get_file.return_value = parse_file(payload)
    return TokenService(client)


# ─── extract_design_tokens ──────────────────────────────────────────────────

class TestExtractDesignTokens:
    def test_button_scenario(self):
        service = make_service(button_file_payload())
        groups = service.extract_design_tokens("ABC")
        assert [g.name for g in groups] == ["colors", "spacing"]

        colors, spacing = groups
        assert colors.category == "color"
        assert [(t.name, t.value) for t in colors.tokens] == [("Button_fill_0", "#ff0000")]
        assert spacing.category == "spacing"
        assert [(t.name, t.value) for t in spacing.tokens] == [("Button_radius", 12)]
        service.client.get_file.assert_called_once_with("ABC")

    def test_group_order_and_descriptions(self):
        doc = make_node("Document", "DOCUMENT", children=[
            make_node("Title", "TEXT", fills=[solid(0, 0, 0)], styles={"text": "S:1"},
                      absoluteBoundingBox={"x": 0, "y": 0, "width": 100, "height": 20}),
        ])
        payload = make_file_payload(document=doc, components={"1:1": {"name": "Button"}})
        groups = make_service(payload).extract_design_tokens("ABC")
        assert [g.name for g in groups] == ["colors", "spacing", "typography", "components"]
        assert [g.category for g in groups] == ["color", "spacing", "typography", "component"]
        assert groups[0].description == "Color tokens extracted from Figma"
        assert groups[3].description == "Component tokens extracted from Figma"
        for group in groups:
            assert all(t.type == group.category for t in group.tokens)

    def test_colors_group_omitted_without_paints(self):
        doc = make_node("Document", "DOCUMENT", children=[
            make_node("Box", "FRAME", absoluteBoundingBox={"x": 0, "y": 0, "width": 10, "height": 10}),
        ])
        groups = make_service(make_file_payload(document=doc)).extract_design_tokens("ABC")
        assert "colors" not in [g.name for g in groups]
        assert [g.name for g in groups] == ["spacing"]

    def test_empty_document_yields_no_groups(self):
        assert make_service(make_file_payload()).extract_design_tokens("ABC") == []

    def test_fetch_error_propagates(self):
        service = make_service(error=FetchError("Failed to fetch Figma file: 403"))
        with pytest.raises(FetchError):
            service.extract_design_tokens("ABC")

    def test_idempotent(self):
        payload = button_file_payload()
        first = render(make_service(payload).extract_design_tokens("ABC"), "json")
        second = render(make_service(payload).extract_design_tokens("ABC"), "json")
        assert first == second


# ─── strict mode ─────────────────────────────────────────────────────────────

def _duplicate_payload():
    doc = make_node("Document", "DOCUMENT", children=[
        make_node("Icon", "VECTOR", fills=[solid(1, 0, 0)]),
        make_node("Icon", "VECTOR", fills=[solid(0, 1, 0)]),
    ])
    return make_file_payload(document=doc)


def test_collisions_kept_by_default():
    groups = tokens_from_file(parse_file(_duplicate_payload()))
    assert [t.name for t in groups[0].tokens] == ["Icon_fill_0", "Icon_fill_0"]


def test_strict_mode_raises_on_collision():
    with pytest.raises(TokenNameCollisionError) as exc:
        tokens_from_file(parse_file(_duplicate_payload()), strict=True)
    assert exc.value.group == "colors"
    assert exc.value.names == ["Icon_fill_0"]


def test_strict_mode_passes_unique_names():
    groups = tokens_from_file(parse_file(button_file_payload()), strict=True)
    assert len(groups) == 2


# ─── validate_file ───────────────────────────────────────────────────────────

class TestValidateFile:
    def test_empty_components_and_styles(self):
        result = make_service(make_file_payload()).validate_file("ABC")
        assert result.valid is False
        assert result.issues == [
            "No components found in the file",
            "No styles found in the file",
        ]

    def test_valid_file(self):
        payload = make_file_payload(
            components={"1:1": {"name": "Button"}},
            styles={"S:1": {"name": "Primary", "styleType": "FILL"}},
        )
        result = make_service(payload).validate_file("ABC")
        assert result.valid is True
        assert result.issues == []

    def test_fetch_failure_becomes_issue(self):
        service = make_service(error=FetchError("Failed to fetch Figma file: 404 Client Error"))
        result = service.validate_file("ABC")
        assert result.valid is False
        assert len(result.issues) == 1
        assert result.issues[0].startswith("Failed to validate file:")
        assert "404" in result.issues[0]

    def test_blank_file_key_becomes_issue(self):
        service = make_service(error=ValueError("file_key is required"))
        result = service.validate_file("   ")
        assert result.valid is False
        assert result.issues == ["Failed to validate file: file_key is required"]


def test_validate_design_file_only_styles_missing():
    f = parse_file(make_file_payload(components={"1:1": {"name": "Button"}}))
    assert validate_design_file(f).issues == ["No styles found in the file"]


# ─── analyze_file ────────────────────────────────────────────────────────────

def test_analyze_file():
    doc = make_node("Document", "DOCUMENT", children=[
        make_node("Page", "CANVAS", children=[
            make_node("A", "TEXT"), make_node("B", "TEXT"), make_node("C", "FRAME"),
        ]),
    ])
    payload = make_file_payload(
        document=doc,
        components={
            "1:1": {"name": "Button", "componentProperties": {"size": {"type": "VARIANT"}}},
            "1:2": {"name": "Set", "type": "COMPONENT_SET"},
        },
        styles={"S:1": {"styleType": "TEXT"}, "S:2": {"name": "no type"}},
    )
    analysis = analyze_file(parse_file(payload))
    assert analysis.node_count == 5
    assert analysis.node_types == {"DOCUMENT": 1, "CANVAS": 1, "TEXT": 2, "FRAME": 1}
    assert analysis.component_types == {"COMPONENT": 1, "COMPONENT_SET": 1}
    assert analysis.style_types == {"TEXT": 1, "unknown": 1}
    assert analysis.has_color_styles is True
    assert analysis.has_text_styles is True
    assert analysis.has_component_variants is True
