"""Tests for parsing, serializing and file handling of flow documents."""

import json

import pytest

from waflows import FlowParseError, ParseErrorKind, dump_flow, load_flow, parse_flow, serialize_flow
from waflows.models import (
    ChoiceComponent,
    FooterComponent,
    FormComponent,
    MediaPickerComponent,
    TextComponent,
    TextEntryComponent,
    UnknownComponent,
)


class TestParseFlow:
    """Building the document tree from JSON text."""

    def test_components_are_typed_by_tag(self, flow_data):
        document = parse_flow(json.dumps(flow_data))

        heading, form = document.screens[0].layout.children
        assert isinstance(heading, TextComponent)
        assert isinstance(form, FormComponent)
        assert isinstance(form.children[0], TextEntryComponent)
        assert isinstance(form.children[1], FooterComponent)
        assert form.children[1].get_action().target_screen_id == "B"

    def test_entry_screen_is_first(self, flow_document):
        assert flow_document.entry_screen.id == "A"
        assert flow_document.screen_ids == ["A", "B"]
        assert flow_document.get_screen("B").is_terminal
        assert flow_document.get_screen("NOPE") is None

    def test_unknown_component_is_kept(self, make_flow, screen):
        document = make_flow([screen("A", [{"type": "Carousel", "name": "slides", "images": [1, 2]}])])

        component = document.screens[0].layout.children[0]
        assert isinstance(component, UnknownComponent)
        assert component.name == "slides"
        assert not component.is_recognized

    def test_media_picker_bounds_by_kind(self, make_flow, screen):
        document = make_flow(
            [
                screen(
                    "A",
                    [
                        {"type": "PhotoPicker", "name": "p", "min-uploaded-photos": 1, "max-uploaded-photos": 3},
                        {"type": "DocumentPicker", "name": "d", "max-uploaded-documents": 2},
                    ],
                )
            ]
        )

        photo, doc = document.screens[0].layout.children
        assert isinstance(photo, MediaPickerComponent)
        assert (photo.min_count, photo.max_count) == (1, 3)
        assert (doc.min_count, doc.max_count) == (None, 2)

    @pytest.mark.parametrize(
        "component",
        [
            {"type": "TextInput", "name": "t", "required": "${data.is_required}"},
            {"type": "Dropdown", "name": "d", "required": "${data.is_required}", "data-source": "${data.options}"},
            {"type": "PhotoPicker", "name": "p", "min-uploaded-photos": "${data.min}", "max-uploaded-photos": 3},
            {"type": "Footer", "label": "Send", "on-click-action": {"name": "complete", "payload": "${data.p}"}},
        ],
    )
    def test_dynamic_property_values(self, make_flow, screen, component):
        document = make_flow([screen("A", [{"type": "Form", "name": "f", "children": [component]}])])

        parsed = document.screens[0].layout.children[0].children[0]
        assert json.loads(serialize_flow(document))["screens"][0]["layout"]["children"][0]["children"][0] == component
        if isinstance(parsed, MediaPickerComponent):
            assert (parsed.min_count, parsed.max_count) == (None, 3)

    @pytest.mark.parametrize("tag", [5, None, ["Text"]])
    def test_non_string_type_is_unknown(self, make_flow, screen, tag):
        document = make_flow([screen("A", [{"type": tag, "text": "?"}])])

        component = document.screens[0].layout.children[0]
        assert isinstance(component, UnknownComponent)
        assert component.type == tag

    def test_malformed_text_keeps_raw_text(self):
        raw = '{"version": "7.1", "screens": ['

        with pytest.raises(FlowParseError) as exc_info:
            parse_flow(raw)

        assert exc_info.value.kind == ParseErrorKind.MALFORMED
        assert exc_info.value.raw_text == raw

    @pytest.mark.parametrize("data", [{"screens": []}, {"version": "7.1"}])
    def test_missing_root_field(self, data):
        with pytest.raises(FlowParseError) as exc_info:
            parse_flow(json.dumps(data))

        assert exc_info.value.kind == ParseErrorKind.SCHEMA_MISSING_FIELD

    def test_non_object_root(self):
        with pytest.raises(FlowParseError) as exc_info:
            parse_flow("[1, 2, 3]")

        assert exc_info.value.kind == ParseErrorKind.INVALID_STRUCTURE

    def test_invalid_structure_lists_details(self):
        with pytest.raises(FlowParseError) as exc_info:
            parse_flow(json.dumps({"version": "7.1", "screens": "WELCOME"}))

        error = exc_info.value
        assert error.kind == ParseErrorKind.INVALID_STRUCTURE
        assert error.details
        assert error.to_dict()["kind"] == "InvalidStructure"


class TestSerializeFlow:
    """Serialization is the structural inverse of parsing."""

    def test_round_trip(self, flow_document):
        assert parse_flow(serialize_flow(flow_document)) == flow_document

    def test_serialized_text_matches_input(self, flow_data, flow_document):
        assert json.loads(serialize_flow(flow_document)) == flow_data

    def test_unknown_fields_survive(self, flow_data):
        flow_data["custom_root"] = {"x": 1}
        flow_data["screens"][0]["layout"]["children"].append(
            {"type": "Carousel", "images": [{"src": "a.png"}], "scroll": "auto"}
        )
        flow_data["screens"][1]["data"] = {"greeting": {"type": "string", "__example__": "Hi"}}

        document = parse_flow(json.dumps(flow_data))

        assert json.loads(serialize_flow(document)) == flow_data

    @pytest.mark.parametrize("key", ["data-source", "data_source"])
    def test_data_source_key_is_preserved(self, make_flow, screen, key):
        dropdown = {"type": "Dropdown", "name": "color", key: [{"id": "r", "title": "Red"}]}
        document = make_flow([screen("A", [{"type": "Form", "name": "f", "children": [dropdown]}])])

        component = document.screens[0].layout.children[0].children[0]
        assert isinstance(component, ChoiceComponent)
        assert component.options[0].title == "Red"

        written = json.loads(serialize_flow(document))
        assert written["screens"][0]["layout"]["children"][0]["children"][0] == dropdown

    def test_non_ascii_is_written_verbatim(self, make_flow, screen):
        document = make_flow([screen("A", [{"type": "TextBody", "text": "¡Hola, señor!"}])])

        assert "¡Hola, señor!" in serialize_flow(document)


class TestFlowFiles:
    """Loading and saving documents on disk."""

    def test_load_flow(self, flow_file):
        document = load_flow(flow_file)
        assert document.screen_ids == ["A", "B"]

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_flow(tmp_path / "missing.json")

    def test_dump_then_load(self, tmp_path, flow_document):
        path = dump_flow(flow_document, tmp_path / "out" / "flow.json")

        assert path.exists()
        assert load_flow(path) == flow_document
