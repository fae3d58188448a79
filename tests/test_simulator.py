"""Tests for the navigation simulator."""

import pytest

from waflows import NavigationSimulator, replay
from waflows.models import (
    CLOSED,
    ButtonClicked,
    EventLog,
    FieldChanged,
    FooterClicked,
    GoBack,
    SimulationErrorCode,
)


@pytest.fixture
def simulator(flow_document):
    return NavigationSimulator(flow_document)


class TestNavigation:
    def test_starts_on_first_screen(self, simulator):
        assert simulator.state.active_screen_id == "A"
        assert simulator.state.history == []
        assert simulator.active_screen.id == "A"

    def test_footer_navigates_and_back_returns(self, simulator):
        result = simulator.footer_clicked()
        assert result.ok
        assert result.state.active_screen_id == "B"
        assert result.state.history == ["A"]

        result = simulator.go_back()
        assert result.ok
        assert result.state.active_screen_id == "A"
        assert result.state.history == []

    def test_go_back_on_empty_history_is_noop(self, simulator):
        result = simulator.go_back()

        assert result.ok
        assert result.error is None
        assert result.state.active_screen_id == "A"

    def test_footer_by_path(self, simulator):
        result = simulator.handle(FooterClicked(path="screens[A].layout.children[1].children[1]"))

        assert result.ok
        assert result.state.active_screen_id == "B"

    def test_footer_path_not_found(self, simulator):
        result = simulator.handle(FooterClicked(path="screens[A].layout.children[7]"))

        assert not result.ok
        assert result.error.code == SimulationErrorCode.NO_ACTION
        assert result.state.active_screen_id == "A"

    def test_results_are_snapshots(self, simulator):
        first = simulator.footer_clicked()
        simulator.go_back()

        assert first.state.active_screen_id == "B"
        assert first.state.history == ["A"]

    def test_output_does_not_alias_session(self, make_flow, screen, footer):
        action = {"name": "complete", "payload": {"c": "${form.f.c}"}}
        simulator = NavigationSimulator(make_flow([screen("A", [footer(action)])]))
        simulator.field_changed("f", "c", ["a"])

        result = simulator.footer_clicked()
        result.output["c"].append("changed")

        assert simulator.state.form_values == {"f": {"c": ["a"]}}
        assert simulator.state.output == {"c": ["a"]}

    def test_reset(self, simulator):
        simulator.field_changed("f1", "name", "Alice")
        simulator.footer_clicked()

        result = simulator.reset()
        assert result.state.active_screen_id == "A"
        assert result.state.history == []
        assert result.state.form_values == {}


class TestFailures:
    def test_missing_navigation_target_leaves_state(self, make_flow, screen, footer, navigate):
        simulator = NavigationSimulator(make_flow([screen("A", [footer(navigate("NOPE"))])]))

        result = simulator.footer_clicked()
        assert result.status == "error"
        assert result.error.code == SimulationErrorCode.NAVIGATION_TARGET_MISSING
        assert result.state.active_screen_id == "A"
        assert result.state.history == []

    def test_no_actionable_footer(self, make_flow, screen):
        simulator = NavigationSimulator(make_flow([screen("A", [{"type": "Footer", "label": "Note"}])]))

        result = simulator.footer_clicked()
        assert result.error.code == SimulationErrorCode.NO_ACTION

    def test_unsupported_action(self, make_flow, screen, footer):
        simulator = NavigationSimulator(make_flow([screen("A", [footer({"name": "open_url", "url": "https://example.com"})])]))

        result = simulator.footer_clicked()
        assert result.error.code == SimulationErrorCode.UNSUPPORTED_ACTION
        assert result.state.active_screen_id == "A"

    def test_empty_document_starts_closed(self, make_flow):
        simulator = NavigationSimulator(make_flow([]))

        assert simulator.state.closed
        assert simulator.state.active_screen_id == CLOSED
        assert simulator.footer_clicked().error.code == SimulationErrorCode.SESSION_CLOSED


class TestLegacyButtons:
    def test_button_action_id_navigates(self, legacy_flow_data, make_flow):
        simulator = NavigationSimulator(make_flow(legacy_flow_data["screens"], actions=legacy_flow_data["actions"]))

        result = simulator.button_clicked("go_confirm")
        assert result.state.active_screen_id == "CONFIRM"
        assert result.state.history == ["START"]

    def test_button_completes_terminal_screen(self, legacy_flow_data, make_flow):
        simulator = NavigationSimulator(make_flow(legacy_flow_data["screens"], actions=legacy_flow_data["actions"]))
        simulator.field_changed("choice_form", "plan", "pro")
        simulator.button_clicked("go_confirm")

        result = simulator.button_clicked("finish")
        assert result.output == {"plan": "pro"}
        assert result.state.closed

    def test_dangling_action_id(self, legacy_flow_data, make_flow):
        simulator = NavigationSimulator(make_flow(legacy_flow_data["screens"], actions=legacy_flow_data["actions"]))

        result = simulator.button_clicked("missing")
        assert result.error.code == SimulationErrorCode.DANGLING_ACTION_ID
        assert result.state.active_screen_id == "START"


class TestSubmission:
    def test_complete_on_terminal_screen_closes(self, simulator):
        simulator.field_changed("f1", "name", "Alice")
        simulator.footer_clicked()

        result = simulator.footer_clicked()
        assert result.ok
        assert result.output == {"who": "Alice"}
        assert result.state.closed
        assert result.state.active_screen_id == CLOSED
        assert result.state.history == ["A"]

    def test_events_after_close_fail(self, simulator):
        simulator.footer_clicked()
        simulator.footer_clicked()

        for result in (simulator.go_back(), simulator.field_changed("f1", "name", "x"), simulator.complete({})):
            assert result.error.code == SimulationErrorCode.SESSION_CLOSED

    def test_unresolved_binding_warns(self, simulator):
        simulator.footer_clicked()

        result = simulator.footer_clicked()
        assert result.ok
        assert result.output == {"who": ""}
        assert [warning.expression for warning in result.warnings] == ["${form.f1.name}"]

    def test_complete_on_non_terminal_screen_stays_open(self, simulator):
        simulator.field_changed("f1", "name", "Alice")

        result = simulator.complete({"who": "${form.f1.name}"})
        assert result.output == {"who": "Alice"}
        assert not result.state.closed
        assert result.state.active_screen_id == "A"

    def test_data_exchange_follows_success_branch(self, make_flow, screen, footer, navigate):
        action = {"name": "data_exchange", "payload": {"step": "one"}, "success": navigate("B")}
        simulator = NavigationSimulator(make_flow([screen("A", [footer(action)]), screen("B", [], terminal=True)]))

        result = simulator.footer_clicked()
        assert result.ok
        assert result.state.active_screen_id == "B"
        assert result.output == {"step": "one"}


class TestReplay:
    def test_replay_event_log(self, flow_document):
        log = EventLog.model_validate(
            {
                "events": [
                    {"type": "field_changed", "form_name": "f1", "field_name": "name", "value": "Alice"},
                    {"type": "footer_clicked"},
                    {"type": "go_back"},
                    {"type": "footer_clicked"},
                    {"type": "footer_clicked"},
                ]
            }
        )

        results = replay(flow_document, log.events)
        assert [result.ok for result in results] == [True] * 5
        assert results[1].state.active_screen_id == "B"
        assert results[2].state.active_screen_id == "A"
        assert results[-1].output == {"who": "Alice"}
        assert results[-1].state.closed

    def test_replay_typed_events(self, legacy_flow_data, make_flow):
        document = make_flow(legacy_flow_data["screens"], actions=legacy_flow_data["actions"])

        results = replay(
            document,
            [FieldChanged(form_name="choice_form", field_name="plan", value="basic"), ButtonClicked(action_id="go_confirm"), GoBack()],
        )
        assert [result.state.active_screen_id for result in results] == ["START", "CONFIRM", "START"]
        assert results[0].state.get_value("choice_form", "plan") == "basic"

    def test_unknown_event_type(self, simulator):
        with pytest.raises(TypeError):
            simulator.handle(object())
