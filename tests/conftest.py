"""Shared pytest fixtures for waflows tests."""

import copy
import json

import pytest

from waflows import parse_flow_data


def _screen(screen_id, children, **extra):
    screen = {
        "id": screen_id,
        "title": screen_id.title(),
        "layout": {"type": "SingleColumnLayout", "children": children},
    }
    screen.update(extra)
    return screen


def _footer(action, label="Continue"):
    return {"type": "Footer", "label": label, "on-click-action": action}


def _navigate(target, payload=None):
    action = {"name": "navigate", "next": {"type": "screen", "name": target}}
    if payload is not None:
        action["payload"] = payload
    return action


@pytest.fixture
def screen():
    """Factory for a screen dict."""
    return _screen


@pytest.fixture
def footer():
    """Factory for a footer dict carrying an inline action."""
    return _footer


@pytest.fixture
def navigate():
    """Factory for an inline navigate action."""
    return _navigate


@pytest.fixture
def make_flow():
    """Factory building a parsed document from a list of screen dicts."""

    def _make(screens, **root):
        data = {"version": "7.1", "screens": screens}
        data.update(root)
        return parse_flow_data(copy.deepcopy(data))

    return _make


@pytest.fixture
def flow_data():
    """Two-screen signup flow: A collects a name and navigates to terminal B."""
    return {
        "version": "7.1",
        "screens": [
            _screen(
                "A",
                [
                    {"type": "TextHeading", "text": "Welcome"},
                    {
                        "type": "Form",
                        "name": "f1",
                        "children": [
                            {"type": "TextInput", "name": "name", "label": "Your name", "required": True},
                            _footer(_navigate("B")),
                        ],
                    },
                ],
            ),
            _screen(
                "B",
                [
                    _footer(
                        {"name": "complete", "payload": {"who": "${form.f1.name}"}},
                        label="Submit",
                    ),
                ],
                terminal=True,
            ),
        ],
    }


@pytest.fixture
def flow_document(flow_data):
    return parse_flow_data(copy.deepcopy(flow_data))


@pytest.fixture
def flow_file(tmp_path, flow_data):
    path = tmp_path / "flow.json"
    path.write_text(json.dumps(flow_data), encoding="utf-8")
    return path


@pytest.fixture
def legacy_flow_data():
    """Screenshot-style flow using Button.action_id and a top-level actions array."""
    return {
        "version": "7.1",
        "screens": [
            _screen(
                "START",
                [
                    {"type": "Headline", "text": "Pick one"},
                    {
                        "type": "Form",
                        "name": "choice_form",
                        "children": [
                            {
                                "type": "RadioButtonGroup",
                                "name": "plan",
                                "data_source": [
                                    {"id": "basic", "title": "Basic"},
                                    {"id": "pro", "title": "Pro"},
                                ],
                            },
                        ],
                    },
                    {"type": "Button", "label": "Next", "action_id": "go_confirm"},
                ],
            ),
            _screen(
                "CONFIRM",
                [
                    {"type": "ScreenConfirmation", "text": "Thanks"},
                    {"type": "Button", "label": "Done", "action_id": "finish"},
                ],
                terminal=True,
            ),
        ],
        "actions": [
            {"id": "go_confirm", "type": "navigate", "screen_id": "CONFIRM"},
            {"id": "finish", "type": "complete", "payload": {"plan": "${form.choice_form.plan}"}},
        ],
    }
