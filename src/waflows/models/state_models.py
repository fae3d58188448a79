"""
Simulation state models.

This module defines Pydantic models for a navigation session: the mutable
state a simulator owns, the typed outcome returned for every event, and the
events a caller can replay against a document.
"""
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

CLOSED = "Closed"


class NavigationState(BaseModel):
    """
    State of one simulated session.

    ``form_values`` maps form name to field name to the value the user
    entered; it accumulates across screens for the whole session.
    """

    active_screen_id: str
    history: List[str] = []
    form_values: Dict[str, Dict[str, Any]] = {}
    closed: bool = False
    output: Optional[Union[Dict[str, Any], str]] = None

    def get_value(self, form_name: str, field_name: str, default: Any = None) -> Any:
        return self.form_values.get(form_name, {}).get(field_name, default)

    def set_value(self, form_name: str, field_name: str, value: Any) -> None:
        self.form_values.setdefault(form_name, {})[field_name] = value


class BindingWarning(BaseModel):
    """A placeholder that could not be resolved against the collected values."""

    code: Literal["UnresolvedBinding"] = "UnresolvedBinding"
    expression: str
    path: str


class SimulationErrorCode(str, Enum):
    DANGLING_ACTION_ID = "DanglingActionId"
    NAVIGATION_TARGET_MISSING = "NavigationTargetMissing"
    NO_ACTION = "NoAction"
    UNSUPPORTED_ACTION = "UnsupportedAction"
    SESSION_CLOSED = "SessionClosed"


class SimulationError(BaseModel):
    code: SimulationErrorCode
    message: str


class SimulationResult(BaseModel):
    """Outcome of a single simulator event."""

    status: Literal["success", "error"]
    state: NavigationState
    error: Optional[SimulationError] = None
    output: Optional[Union[Dict[str, Any], str]] = None
    warnings: List[BindingWarning] = []

    @property
    def ok(self) -> bool:
        return self.status == "success"


class ButtonClicked(BaseModel):
    type: Literal["button_clicked"] = "button_clicked"
    action_id: str


class FooterClicked(BaseModel):
    """Click on a footer; ``path`` selects one when a screen has several."""

    type: Literal["footer_clicked"] = "footer_clicked"
    path: Optional[str] = None


class FieldChanged(BaseModel):
    type: Literal["field_changed"] = "field_changed"
    form_name: str
    field_name: str
    value: Any = None


class GoBack(BaseModel):
    type: Literal["go_back"] = "go_back"


class Complete(BaseModel):
    type: Literal["complete"] = "complete"
    payload: Dict[str, Any] = {}


class DataExchange(BaseModel):
    type: Literal["data_exchange"] = "data_exchange"
    payload: Dict[str, Any] = {}


SimulationEvent = Annotated[
    Union[ButtonClicked, FooterClicked, FieldChanged, GoBack, Complete, DataExchange],
    Field(discriminator="type"),
]


class EventLog(BaseModel):
    """A list of events as read from a JSON file or request body."""

    events: List[SimulationEvent] = []
