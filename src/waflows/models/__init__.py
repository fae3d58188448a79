"""
Flow document models package.

This package contains Pydantic models that define the structure of a
WhatsApp Flow JSON document and of a simulated navigation session.
"""

# Import models in dependency order
from .action_models import ActionDefinition, ActionKind, FlowAction, NextTarget, ResolvedAction
from .component_models import (
    CHOICE_TYPES,
    MEDIA_PICKER_TYPES,
    RECOGNIZED_TYPES,
    TEXT_ENTRY_TYPES,
    TEXT_TYPES,
    ButtonComponent,
    ChoiceComponent,
    Component,
    ComponentVisit,
    DataSourceItem,
    DatePickerComponent,
    EmbeddedLinkComponent,
    FooterComponent,
    FormComponent,
    ImageComponent,
    MediaPickerComponent,
    OptInComponent,
    ScreenConfirmationComponent,
    TextComponent,
    TextEntryComponent,
    UnknownComponent,
    walk_components,
)
from .document_models import FlowDocument, Layout, Screen
from .state_models import (
    CLOSED,
    BindingWarning,
    ButtonClicked,
    Complete,
    DataExchange,
    EventLog,
    FieldChanged,
    FooterClicked,
    GoBack,
    NavigationState,
    SimulationError,
    SimulationErrorCode,
    SimulationEvent,
    SimulationResult,
)

# Ensure all models are fully rebuilt after all imports
Layout.model_rebuild()
FlowDocument.model_rebuild()

__all__ = [
    # Action models
    "ActionDefinition",
    "ActionKind",
    "FlowAction",
    "NextTarget",
    "ResolvedAction",
    # Component models
    "CHOICE_TYPES",
    "MEDIA_PICKER_TYPES",
    "RECOGNIZED_TYPES",
    "TEXT_ENTRY_TYPES",
    "TEXT_TYPES",
    "ButtonComponent",
    "ChoiceComponent",
    "Component",
    "ComponentVisit",
    "DataSourceItem",
    "DatePickerComponent",
    "EmbeddedLinkComponent",
    "FooterComponent",
    "FormComponent",
    "ImageComponent",
    "MediaPickerComponent",
    "OptInComponent",
    "ScreenConfirmationComponent",
    "TextComponent",
    "TextEntryComponent",
    "UnknownComponent",
    "walk_components",
    # Document models
    "FlowDocument",
    "Layout",
    "Screen",
    # State models
    "CLOSED",
    "BindingWarning",
    "ButtonClicked",
    "Complete",
    "DataExchange",
    "EventLog",
    "FieldChanged",
    "FooterClicked",
    "GoBack",
    "NavigationState",
    "SimulationError",
    "SimulationErrorCode",
    "SimulationEvent",
    "SimulationResult",
]
