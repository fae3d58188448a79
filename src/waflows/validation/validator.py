"""
Structural and semantic checks for flow documents.

The validator is read-only: it walks an already parsed document and
collects findings. Every rule runs; nothing short-circuits on the first
failure, so a caller can show all issues at once.
"""
from collections import Counter
from typing import Any, Iterator, List, NamedTuple, Optional, Set, Tuple, Union

from loguru import logger

from ..models import (
    ButtonComponent,
    ChoiceComponent,
    FlowDocument,
    FooterComponent,
    FormComponent,
    MediaPickerComponent,
    ResolvedAction,
    Screen,
    UnknownComponent,
)
from ..state.binding import find_form_references
from .findings import Finding, FindingCode, Severity
from .rules import RuleSet, StrictnessLevel, get_ruleset


class ActionSite(NamedTuple):
    """An action together with where it was declared."""

    action: ResolvedAction
    path: str
    screen_id: Optional[str]


class PayloadReference(NamedTuple):
    form_name: str
    field_name: str
    path: str
    depth: int


def iter_payload_references(value: Any, path: str, depth: int = 0) -> Iterator[PayloadReference]:
    """
    Yield every ``${form.F.N}`` reference in a payload tree.

    ``depth`` is 1 for the value of a top-level payload key and grows with
    each object nested below it. List items keep the depth of their list.
    """
    if isinstance(value, dict):
        for key, item in value.items():
            yield from iter_payload_references(item, f"{path}.{key}", depth + 1)
    elif isinstance(value, list):
        for index, item in enumerate(value):
            yield from iter_payload_references(item, f"{path}[{index}]", depth)
    else:
        for form_name, field_name in find_form_references(value):
            yield PayloadReference(form_name, field_name, path, depth)


class FlowValidator:
    """Runs every rule of a RuleSet against one document."""

    def __init__(
        self,
        document: FlowDocument,
        mode: StrictnessLevel = StrictnessLevel.LENIENT,
        ruleset: Optional[RuleSet] = None,
    ):
        self.document = document
        self.mode = StrictnessLevel(mode)
        self.ruleset = ruleset or get_ruleset()

    @property
    def strict(self) -> bool:
        return self.mode == StrictnessLevel.STRICT

    def validate(self) -> List[Finding]:
        findings: List[Finding] = []
        findings.extend(self._check_version())
        findings.extend(self._check_screens())
        findings.extend(self._check_screen_references())
        findings.extend(self._check_routing_config())
        for screen in self.document.screens:
            findings.extend(self._check_components(screen))
            findings.extend(self._check_forms(screen))
            findings.extend(self._check_media_pickers(screen))
        findings.extend(self._check_form_names())
        findings.extend(self._check_action_ids())
        findings.extend(self._check_payloads())

        logger.debug(
            f"Validated flow against ruleset {self.ruleset.name} ({self.mode.value}): "
            f"{len(findings)} finding(s)"
        )
        return findings

    # ====================
    # Document level
    # ====================

    def _check_version(self) -> Iterator[Finding]:
        expected = self.ruleset.schema_version
        if self.document.version != expected:
            yield self._warning(
                FindingCode.VERSION_MISMATCH,
                f"Flow version '{self.document.version}' does not match expected '{expected}'",
                "version",
            )

    def _check_screens(self) -> Iterator[Finding]:
        screens = self.document.screens
        if not screens:
            yield self._error(FindingCode.EMPTY_FLOW, "Flow JSON must contain at least one screen", "screens")
            return

        seen: Set[str] = set()
        for index, screen in enumerate(screens):
            path = f"screens[{index}]"
            if screen.id in seen:
                yield self._error(
                    FindingCode.DUPLICATE_SCREEN_ID,
                    f"Screen id '{screen.id}' is declared more than once",
                    path,
                    screen.id,
                )
            seen.add(screen.id)

            if self.strict and not self.ruleset.matches_screen_id(screen.id):
                yield self._error(
                    FindingCode.INVALID_SCREEN_ID,
                    f"Screen id '{screen.id}' does not match {self.ruleset.screen_id_pattern}",
                    path,
                    screen.id,
                )

            if self.strict and not screen.title:
                yield self._warning(
                    FindingCode.MISSING_SCREEN_TITLE,
                    f"Screen '{screen.id}' has no title",
                    path,
                    screen.id,
                )

        if not any(screen.is_terminal for screen in screens):
            yield self._warning(
                FindingCode.NO_TERMINAL_SCREEN,
                "No screen is marked as terminal",
                "screens",
            )

    def _check_screen_references(self) -> Iterator[Finding]:
        known = set(self.document.screen_ids)

        for site in self._action_sites():
            target = site.action.target_screen_id
            if site.action.is_navigate and target not in known:
                yield self._error(
                    FindingCode.UNKNOWN_SCREEN_REFERENCE,
                    f"Navigate action targets unknown screen '{target}'",
                    site.path,
                    site.screen_id,
                )

        for source, targets in (self.document.routing_model or {}).items():
            if source not in known:
                yield self._error(
                    FindingCode.UNKNOWN_SCREEN_REFERENCE,
                    f"routing_model declares unknown screen '{source}'",
                    f"routing_model.{source}",
                )
            for index, target in enumerate(targets):
                if target not in known:
                    yield self._error(
                        FindingCode.UNKNOWN_SCREEN_REFERENCE,
                        f"routing_model entry '{source}' routes to unknown screen '{target}'",
                        f"routing_model.{source}[{index}]",
                    )

    def _check_routing_config(self) -> Iterator[Finding]:
        has_api_version = self.document.data_api_version is not None
        has_routing = self.document.routing_model is not None
        if has_api_version != has_routing:
            present, missing = (
                ("data_api_version", "routing_model") if has_api_version else ("routing_model", "data_api_version")
            )
            yield self._warning(
                FindingCode.INCOMPLETE_ROUTING_CONFIG,
                f"'{present}' is set but '{missing}' is missing; both are required for dynamic flows",
                missing,
            )

    # ====================
    # Screen level
    # ====================

    def _check_components(self, screen: Screen) -> Iterator[Finding]:
        for visit in screen.walk():
            component = visit.component

            if isinstance(component, UnknownComponent):
                yield self._warning(
                    FindingCode.UNKNOWN_COMPONENT_TYPE,
                    f"Unknown component type '{component.type}'",
                    visit.path,
                    screen.id,
                )
                continue

            if self.strict and not self.ruleset.is_standard(component.type):
                yield self._warning(
                    FindingCode.NON_STANDARD_COMPONENT,
                    f"Component '{component.type}' is not standard in ruleset {self.ruleset.name}",
                    visit.path,
                    screen.id,
                )

            if component.type in self.ruleset.input_types:
                if visit.form is None:
                    yield self._error(
                        FindingCode.INPUT_OUTSIDE_FORM,
                        f"{component.type} '{component.name}' must be inside a Form",
                        visit.path,
                        screen.id,
                    )
                if not component.name:
                    yield self._error(
                        FindingCode.MISSING_FIELD_NAME,
                        f"{component.type} has no name",
                        visit.path,
                        screen.id,
                    )

            if isinstance(component, ChoiceComponent):
                yield from self._check_data_source(component, visit.path, screen.id)

    def _check_data_source(self, component: ChoiceComponent, path: str, screen_id: str) -> Iterator[Finding]:
        options = component.options
        if not isinstance(options, list):
            # Missing or a dynamic ${data.*} reference; nothing to check statically.
            return

        key = "data-source" if component.data_source_dashed is not None else "data_source"
        ids = Counter(item.id for item in options if item.id)
        reported: Set[str] = set()
        for index, item in enumerate(options):
            item_path = f"{path}.{key}[{index}]"
            if not _filled(item.id) or not _filled(item.title):
                missing = "title" if _filled(item.id) else "id"
                yield self._error(
                    FindingCode.MISSING_DATA_SOURCE_TITLE,
                    f"Data source entry of '{component.name}' is missing '{missing}'; "
                    "every entry needs both id and title",
                    item_path,
                    screen_id,
                    critical=True,
                )
            if item.id and ids[item.id] > 1 and item.id not in reported:
                reported.add(item.id)
                yield self._error(
                    FindingCode.DUPLICATE_DATA_SOURCE_ID,
                    f"Data source id '{item.id}' is used more than once in '{component.name}'",
                    item_path,
                    screen_id,
                )

    def _check_forms(self, screen: Screen) -> Iterator[Finding]:
        for visit in screen.walk():
            form = visit.component
            if not isinstance(form, FormComponent):
                continue
            last = len(form.children) - 1
            for index, child in enumerate(form.children):
                if isinstance(child, FooterComponent) and child.is_actionable and index != last:
                    yield self._error(
                        FindingCode.FOOTER_NOT_LAST,
                        f"Footer of form '{form.name}' must be the last child of the form",
                        f"{visit.path}.children[{index}]",
                        screen.id,
                    )

    def _check_media_pickers(self, screen: Screen) -> Iterator[Finding]:
        pickers = [
            visit
            for visit in screen.walk()
            if isinstance(visit.component, MediaPickerComponent)
            and visit.component.type in self.ruleset.media_picker_types
        ]

        if len(pickers) > 1:
            kinds = ", ".join(visit.component.type for visit in pickers)
            yield self._error(
                FindingCode.MULTIPLE_MEDIA_PICKERS,
                f"Screen '{screen.id}' has {len(pickers)} media pickers ({kinds}); only one is allowed",
                pickers[1].path,
                screen.id,
            )

        for visit in pickers:
            picker = visit.component
            if picker.min_count is not None and picker.max_count is not None and picker.min_count > picker.max_count:
                yield self._error(
                    FindingCode.INVALID_MEDIA_BOUNDS,
                    f"{picker.type} '{picker.name}' has minimum {picker.min_count} above maximum {picker.max_count}",
                    visit.path,
                    screen.id,
                )

    # ====================
    # Cross-screen
    # ====================

    def _check_form_names(self) -> Iterator[Finding]:
        seen: Set[str] = set()
        for screen in self.document.screens:
            for visit in screen.walk():
                form = visit.component
                if not isinstance(form, FormComponent) or not form.name:
                    continue
                if form.name in seen:
                    yield self._error(
                        FindingCode.DUPLICATE_FORM_NAME,
                        f"Form name '{form.name}' is used more than once",
                        visit.path,
                        screen.id,
                    )
                seen.add(form.name)

    def _check_action_ids(self) -> Iterator[Finding]:
        for screen in self.document.screens:
            for visit in screen.walk():
                button = visit.component
                if not isinstance(button, ButtonComponent) or button.action_id is None:
                    continue
                if self.document.find_action(button.action_id) is None:
                    yield self._error(
                        FindingCode.DANGLING_ACTION_ID,
                        f"Button action_id '{button.action_id}' is not defined in actions",
                        visit.path,
                        screen.id,
                    )

    def _check_payloads(self) -> Iterator[Finding]:
        media_fields = self._media_fields()
        known_fields = self._form_fields()

        for site in self._action_sites():
            action = site.action
            payload_path = f"{site.path}.payload"
            for ref in iter_payload_references(action.payload, payload_path):
                field = (ref.form_name, ref.field_name)
                expression = f"${{form.{ref.form_name}.{ref.field_name}}}"

                if field not in known_fields:
                    yield self._warning(
                        FindingCode.UNRESOLVED_FORM_REFERENCE,
                        f"{expression} does not match any form field",
                        ref.path,
                        site.screen_id,
                    )

                if field not in media_fields:
                    continue
                if action.is_navigate:
                    yield self._error(
                        FindingCode.MEDIA_IN_NAVIGATE_PAYLOAD,
                        f"Media field {expression} cannot be sent in a navigate action",
                        ref.path,
                        site.screen_id,
                    )
                elif action.is_submission and ref.depth > 1:
                    yield self._error(
                        FindingCode.NESTED_MEDIA_PAYLOAD,
                        f"Media field {expression} must be a top-level payload property",
                        ref.path,
                        site.screen_id,
                    )

    # ====================
    # Helpers
    # ====================

    def _action_sites(self) -> Iterator[ActionSite]:
        for screen in self.document.screens:
            for visit in screen.walk():
                action = visit.component.get_action()
                if action is not None:
                    yield from _with_branches(action, f"{visit.path}.on-click-action", screen.id)
        for index, definition in enumerate(self.document.actions or []):
            yield ActionSite(definition.resolve(), f"actions[{index}]", None)

    def _media_fields(self) -> Set[Tuple[str, str]]:
        return {
            (visit.form.name, visit.component.name)
            for screen in self.document.screens
            for visit in screen.walk()
            if isinstance(visit.component, MediaPickerComponent) and visit.form is not None
        }

    def _form_fields(self) -> Set[Tuple[str, str]]:
        return {
            (visit.form.name, visit.component.name)
            for screen in self.document.screens
            for visit in screen.walk()
            if visit.form is not None and visit.component.name
        }

    def _error(
        self,
        code: FindingCode,
        message: str,
        path: str,
        screen_id: Optional[str] = None,
        critical: bool = False,
    ) -> Finding:
        return Finding(
            severity=Severity.ERROR,
            code=code,
            message=message,
            path=path,
            screen_id=screen_id,
            critical=critical,
        )

    def _warning(self, code: FindingCode, message: str, path: str, screen_id: Optional[str] = None) -> Finding:
        return Finding(severity=Severity.WARNING, code=code, message=message, path=path, screen_id=screen_id)


def _with_branches(action: ResolvedAction, path: str, screen_id: Optional[str]) -> Iterator[ActionSite]:
    yield ActionSite(action, path, screen_id)
    if action.success is not None:
        yield from _with_branches(action.success, f"{path}.success", screen_id)
    if action.error is not None:
        yield from _with_branches(action.error, f"{path}.error", screen_id)


def _filled(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def validate_flow(
    document: FlowDocument,
    mode: Union[StrictnessLevel, str] = StrictnessLevel.LENIENT,
    ruleset: Optional[Union[RuleSet, str]] = None,
) -> List[Finding]:
    """
    Validate ``document`` and return the ordered list of findings.

    Args:
        document: A parsed flow document.
        mode: Strictness level; STRICT enables the screen-id pattern, title
            and standard-component rules.
        ruleset: A RuleSet or the name of a built-in one.
    """
    if not isinstance(ruleset, RuleSet):
        ruleset = get_ruleset(ruleset)
    return FlowValidator(document, StrictnessLevel(mode), ruleset).validate()
