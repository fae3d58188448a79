"""
Navigation simulator for flow documents.
"""
import copy
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from ..models import (
    CLOSED,
    ActionKind,
    BindingWarning,
    ButtonClicked,
    Complete,
    DataExchange,
    FieldChanged,
    FlowDocument,
    FooterClicked,
    FooterComponent,
    GoBack,
    NavigationState,
    ResolvedAction,
    Screen,
    SimulationError,
    SimulationErrorCode,
    SimulationResult,
)
from .binding import resolve_payload


class NavigationSimulator:
    """
    Drives one interactive preview session over an immutable document.

    Every event returns a SimulationResult. Failed events leave the state
    exactly as it was; nothing here raises for a malformed document.
    """

    def __init__(self, document: FlowDocument):
        self.document = document
        self.state = self._initial_state()

    def _initial_state(self) -> NavigationState:
        entry = self.document.entry_screen
        if entry is None:
            # A document without screens starts (and stays) closed.
            return NavigationState(active_screen_id=CLOSED, closed=True)
        return NavigationState(active_screen_id=entry.id)

    def reset(self) -> SimulationResult:
        """Discard the current session and start again at the entry screen."""
        self.state = self._initial_state()
        logger.debug(f"Session reset, active screen {self.state.active_screen_id}")
        return self._success()

    @property
    def active_screen(self) -> Optional[Screen]:
        if self.state.closed:
            return None
        return self.document.get_screen(self.state.active_screen_id)

    # ====================
    # Events
    # ====================

    def button_clicked(self, action_id: str) -> SimulationResult:
        """Legacy addressing: resolve ``action_id`` against the document's actions."""
        if self.state.closed:
            return self._session_closed()

        definition = self.document.find_action(action_id)
        if definition is None:
            return self._error(
                SimulationErrorCode.DANGLING_ACTION_ID,
                f"Action '{action_id}' is not defined in the document's actions",
            )
        return self._dispatch(definition.resolve())

    def footer_clicked(self, footer: Optional[FooterComponent] = None) -> SimulationResult:
        """
        Modern addressing: run the footer's inline action.

        Without an explicit footer the first actionable footer of the active
        screen is used.
        """
        if self.state.closed:
            return self._session_closed()

        if footer is None:
            footers = self.active_screen.actionable_footers() if self.active_screen else []
            footer = footers[0] if footers else None

        action = footer.get_action() if footer is not None else None
        if action is None:
            return self._error(
                SimulationErrorCode.NO_ACTION,
                f"No actionable footer on screen '{self.state.active_screen_id}'",
            )
        return self._dispatch(action)

    def field_changed(self, form_name: str, field_name: str, value: Any) -> SimulationResult:
        if self.state.closed:
            return self._session_closed()

        self.state.set_value(form_name, field_name, value)
        logger.debug(f"Field {form_name}.{field_name} set to {value!r}")
        return self._success()

    def go_back(self) -> SimulationResult:
        """Pop the history stack. An empty history is a no-op, not an error."""
        if self.state.closed:
            return self._session_closed()

        if self.state.history:
            previous = self.state.history.pop()
            logger.debug(f"Back from {self.state.active_screen_id} to {previous}")
            self.state.active_screen_id = previous
        return self._success()

    def complete(self, payload: Dict[str, Any]) -> SimulationResult:
        if self.state.closed:
            return self._session_closed()
        return self._submit(ActionKind.COMPLETE.value, payload)

    def data_exchange(
        self, payload: Dict[str, Any], success_action: Optional[ResolvedAction] = None
    ) -> SimulationResult:
        if self.state.closed:
            return self._session_closed()
        return self._submit(ActionKind.DATA_EXCHANGE.value, payload, success_action)

    def handle(self, event: Any) -> SimulationResult:
        """Apply one typed event model."""
        if isinstance(event, ButtonClicked):
            return self.button_clicked(event.action_id)
        if isinstance(event, FooterClicked):
            if event.path is None:
                return self.footer_clicked()
            footer = self._footer_at(event.path)
            if footer is None and not self.state.closed:
                return self._error(
                    SimulationErrorCode.NO_ACTION,
                    f"No footer at '{event.path}' on screen '{self.state.active_screen_id}'",
                )
            return self.footer_clicked(footer)
        if isinstance(event, FieldChanged):
            return self.field_changed(event.form_name, event.field_name, event.value)
        if isinstance(event, GoBack):
            return self.go_back()
        if isinstance(event, Complete):
            return self.complete(event.payload)
        if isinstance(event, DataExchange):
            return self.data_exchange(event.payload)
        raise TypeError(f"Unsupported event type: {type(event).__name__}")

    # ====================
    # Transitions
    # ====================

    def _dispatch(self, action: ResolvedAction) -> SimulationResult:
        if action.is_navigate:
            return self._navigate(action.target_screen_id)
        if action.kind == ActionKind.COMPLETE.value:
            return self._submit(action.kind, action.payload)
        if action.kind == ActionKind.DATA_EXCHANGE.value:
            return self._submit(action.kind, action.payload, action.success)
        return self._error(
            SimulationErrorCode.UNSUPPORTED_ACTION,
            f"Action '{action.kind}' cannot be simulated",
        )

    def _navigate(self, target: Optional[str]) -> SimulationResult:
        if target is None or self.document.get_screen(target) is None:
            return self._error(
                SimulationErrorCode.NAVIGATION_TARGET_MISSING,
                f"Navigation target '{target}' does not exist",
            )

        logger.debug(f"Navigating from {self.state.active_screen_id} to {target}")
        self.state.history.append(self.state.active_screen_id)
        self.state.active_screen_id = target
        return self._success()

    def _submit(
        self,
        kind: str,
        payload: Any,
        success_action: Optional[ResolvedAction] = None,
    ) -> SimulationResult:
        resolved, warnings = resolve_payload(payload, self.state.form_values)
        logger.info(f"{kind} on {self.state.active_screen_id} emitted payload {resolved}")

        if success_action is not None:
            # The endpoint is not simulated; the success branch is always taken.
            follow_up = self._dispatch(success_action)
            if follow_up.ok:
                if follow_up.output is None:
                    self.state.output = copy.deepcopy(resolved)
                    follow_up.state.output = resolved
                    follow_up.output = resolved
                follow_up.warnings = warnings + follow_up.warnings
            return follow_up

        self.state.output = copy.deepcopy(resolved)

        screen = self.active_screen
        if screen is not None and screen.is_terminal:
            logger.debug(f"Terminal screen {screen.id} submitted, closing session")
            self.state.active_screen_id = CLOSED
            self.state.closed = True

        return self._success(output=resolved, warnings=warnings)

    def _footer_at(self, path: str) -> Optional[FooterComponent]:
        if self.active_screen is None:
            return None
        for visit in self.active_screen.walk():
            if visit.path == path and isinstance(visit.component, FooterComponent):
                return visit.component
        return None

    # ====================
    # Results
    # ====================

    def _success(
        self, output: Optional[Dict[str, Any]] = None, warnings: Optional[List[BindingWarning]] = None
    ) -> SimulationResult:
        return SimulationResult(
            status="success",
            state=self.state.model_copy(deep=True),
            output=output,
            warnings=warnings or [],
        )

    def _error(self, code: SimulationErrorCode, message: str) -> SimulationResult:
        logger.warning(f"Simulation error {code.value}: {message}")
        return SimulationResult(
            status="error",
            state=self.state.model_copy(deep=True),
            error=SimulationError(code=code, message=message),
        )

    def _session_closed(self) -> SimulationResult:
        return self._error(SimulationErrorCode.SESSION_CLOSED, "The session has already been closed")


def replay(document: FlowDocument, events: Iterable[Any]) -> List[SimulationResult]:
    """Run ``events`` in order against a fresh session over ``document``."""
    simulator = NavigationSimulator(document)
    return [simulator.handle(event) for event in events]
