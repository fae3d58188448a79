"""Tests for ${form.*} payload binding."""

import copy

from waflows import resolve_payload
from waflows.state import PayloadBinder, find_form_references


class TestResolvePayload:
    def test_resolves_placeholder(self):
        payload, warnings = resolve_payload({"who": "${form.f1.name}"}, {"f1": {"name": "Alice"}})

        assert payload == {"who": "Alice"}
        assert warnings == []

    def test_unresolved_placeholder_becomes_empty_string(self):
        payload, warnings = resolve_payload({"who": "${form.f1.name}"}, {})

        assert payload == {"who": ""}
        assert len(warnings) == 1
        assert warnings[0].code == "UnresolvedBinding"
        assert warnings[0].expression == "${form.f1.name}"
        assert warnings[0].path == "payload.who"

    def test_template_is_not_mutated(self):
        template = {"a": ["${form.f.x}", {"b": "${form.f.y}"}], "c": 3}
        original = copy.deepcopy(template)

        payload, _ = resolve_payload(template, {"f": {"x": 1, "y": 2}})

        assert template == original
        assert payload == {"a": [1, {"b": 2}], "c": 3}

    def test_whole_placeholder_keeps_value_type(self):
        payload, _ = resolve_payload({"toppings": "${form.order.toppings}"}, {"order": {"toppings": ["ham", "olives"]}})

        assert payload == {"toppings": ["ham", "olives"]}

    def test_embedded_placeholders_are_interpolated(self):
        payload, warnings = resolve_payload(
            {"greeting": "Hello ${form.f1.name}, you are ${form.f1.age}!"},
            {"f1": {"name": "Alice", "age": 30}},
        )

        assert payload == {"greeting": "Hello Alice, you are 30!"}
        assert warnings == []

    def test_non_matching_values_pass_through(self):
        template = {"n": 1, "flag": True, "none": None, "data": "${data.city}", "plain": "text"}

        payload, warnings = resolve_payload(template, {"f1": {"name": "Alice"}})

        assert payload == template
        assert warnings == []

    def test_warning_paths_in_lists(self):
        binder = PayloadBinder({})

        result = binder.resolve({"items": ["${form.a.b}"]}, path="screens[A].payload")
        assert result.payload == {"items": [""]}
        assert result.warnings[0].path == "screens[A].payload.items[0]"


def test_find_form_references():
    assert find_form_references("${form.a.b} and ${form.c.d-e}") == [("a", "b"), ("c", "d-e")]
    assert find_form_references("${data.x}") == []
    assert find_form_references(42) == []


def test_bound_values_are_copies():
    form_values = {"order": {"toppings": ["ham"]}}

    payload, _ = resolve_payload({"toppings": "${form.order.toppings}"}, form_values)
    payload["toppings"].append("olives")

    assert form_values == {"order": {"toppings": ["ham"]}}


def test_dynamic_payload_string_passes_through():
    payload, warnings = resolve_payload("${data.payload}", {})

    assert payload == "${data.payload}"
    assert warnings == []
