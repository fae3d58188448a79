"""
Flow document models.

This module defines Pydantic models that represent the structure of a
WhatsApp Flow JSON document: the root object, its screens and their layouts.
"""
from typing import Dict, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .action_models import ActionDefinition
from .component_models import (
    Component,
    ComponentVisit,
    FooterComponent,
    FormComponent,
    walk_components,
)


class Layout(BaseModel):
    """Layout of a screen. Only the single-column variant exists."""

    model_config = ConfigDict(extra="allow", frozen=True)

    type: str = "SingleColumnLayout"
    children: List[Component] = []


class Screen(BaseModel):
    """
    One page of the flow.

    Screens are created at parse time and never change afterwards; the
    simulator only moves the active-screen pointer between them.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str
    title: Optional[str] = None
    terminal: Optional[bool] = None
    layout: Layout = Field(default_factory=Layout)

    @property
    def is_terminal(self) -> bool:
        return bool(self.terminal)

    def walk(self) -> Iterator[ComponentVisit]:
        """Yield every component of the screen with its path and enclosing form."""
        return walk_components(self.layout.children, f"screens[{self.id}].layout")

    def forms(self) -> List[FormComponent]:
        return [visit.component for visit in self.walk() if isinstance(visit.component, FormComponent)]

    def actionable_footers(self) -> List[FooterComponent]:
        return [
            visit.component
            for visit in self.walk()
            if isinstance(visit.component, FooterComponent) and visit.component.is_actionable
        ]


class FlowDocument(BaseModel):
    """
    Complete flow document.

    The first screen in ``screens`` is the entry point. ``routing_model`` is
    an adjacency list used for declarative validation only.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    version: str
    data_api_version: Optional[str] = None
    routing_model: Optional[Dict[str, List[str]]] = None
    screens: List[Screen]
    actions: Optional[List[ActionDefinition]] = None

    @property
    def screen_ids(self) -> List[str]:
        return [screen.id for screen in self.screens]

    @property
    def entry_screen(self) -> Optional[Screen]:
        return self.screens[0] if self.screens else None

    def get_screen(self, screen_id: str) -> Optional[Screen]:
        for screen in self.screens:
            if screen.id == screen_id:
                return screen
        return None

    def find_action(self, action_id: str) -> Optional[ActionDefinition]:
        for action in self.actions or []:
            if action.id == action_id:
                return action
        return None
