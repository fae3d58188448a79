"""
Action models.

This module defines Pydantic models for the two ways a flow document can
attach behaviour to a control: the inline ``on-click-action`` object used by
``Footer`` (and ``EmbeddedLink``/``OptIn``), and the document-level
``actions`` array addressed by ``Button.action_id``.
"""
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict


class ActionKind(str, Enum):
    """Action names understood by the simulator."""

    NAVIGATE = "navigate"
    COMPLETE = "complete"
    DATA_EXCHANGE = "data_exchange"


class NextTarget(BaseModel):
    """The ``next`` object of a navigate action."""

    model_config = ConfigDict(extra="allow", frozen=True)

    type: str = "screen"
    name: str


class ResolvedAction(BaseModel):
    """
    An action normalised from either addressing mode.

    Never serialized; the simulator and the validator work on this shape so
    that both conventions go through a single code path.
    """

    model_config = ConfigDict(frozen=True)

    kind: str
    target_screen_id: Optional[str] = None
    payload: Union[Dict[str, Any], str] = {}
    success: Optional["ResolvedAction"] = None
    error: Optional["ResolvedAction"] = None
    source: str = "inline"

    @property
    def is_navigate(self) -> bool:
        return self.kind == ActionKind.NAVIGATE.value

    @property
    def is_submission(self) -> bool:
        return self.kind in (ActionKind.COMPLETE.value, ActionKind.DATA_EXCHANGE.value)


class FlowAction(BaseModel):
    """Inline action as written under ``on-click-action``."""

    model_config = ConfigDict(extra="allow", frozen=True)

    name: str
    next: Optional[NextTarget] = None
    payload: Optional[Union[Dict[str, Any], str]] = None
    success: Optional["FlowAction"] = None
    error: Optional["FlowAction"] = None

    def resolve(self) -> ResolvedAction:
        target = None
        if self.next is not None and self.next.type == "screen":
            target = self.next.name
        return ResolvedAction(
            kind=self.name,
            target_screen_id=target,
            payload=self.payload if self.payload is not None else {},
            success=self.success.resolve() if self.success else None,
            error=self.error.resolve() if self.error else None,
            source="inline",
        )


class ActionDefinition(BaseModel):
    """
    Entry of the document-level ``actions`` array.

    Older generators emit buttons that only carry an ``action_id``; the
    definition they point at lives here.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str
    type: str
    screen_id: Optional[str] = None
    payload: Optional[Union[Dict[str, Any], str]] = None

    def resolve(self) -> ResolvedAction:
        return ResolvedAction(
            kind=self.type,
            target_screen_id=self.screen_id,
            payload=self.payload if self.payload is not None else {},
            source=f"actions[{self.id}]",
        )


ResolvedAction.model_rebuild()
FlowAction.model_rebuild()
