"""
Payload binding: resolves ``${form.<form_name>.<field_name>}`` placeholders.
"""
import copy
import re
from typing import Any, List, Mapping, NamedTuple, Tuple

from loguru import logger

from ..models import BindingWarning

FORM_REFERENCE = re.compile(r"\$\{form\.([A-Za-z0-9_\-]+)\.([A-Za-z0-9_\-]+)\}")


class BindingResult(NamedTuple):
    payload: Any
    warnings: List[BindingWarning]


def find_form_references(value: Any) -> List[Tuple[str, str]]:
    """Return every (form_name, field_name) referenced inside a string."""
    if not isinstance(value, str):
        return []
    return FORM_REFERENCE.findall(value)


class PayloadBinder:
    """
    Resolves form placeholders inside a payload template.

    A string that is exactly one placeholder is replaced by the stored value
    as-is, so list values from a CheckboxGroup stay lists. Placeholders inside
    longer text are interpolated as strings. Missing values become ``""`` and
    produce a warning.
    """

    def __init__(self, form_values: Mapping[str, Mapping[str, Any]]):
        self.form_values = form_values

    def resolve(self, template: Any, path: str = "payload") -> BindingResult:
        warnings: List[BindingWarning] = []
        payload = self._resolve_value(template, path, warnings)
        return BindingResult(payload, warnings)

    def _resolve_value(self, value: Any, path: str, warnings: List[BindingWarning]) -> Any:
        if isinstance(value, dict):
            return {
                key: self._resolve_value(item, f"{path}.{key}", warnings)
                for key, item in value.items()
            }
        if isinstance(value, list):
            return [
                self._resolve_value(item, f"{path}[{index}]", warnings)
                for index, item in enumerate(value)
            ]
        if isinstance(value, str):
            return self._resolve_string(value, path, warnings)
        return value

    def _resolve_string(self, value: str, path: str, warnings: List[BindingWarning]) -> Any:
        whole = FORM_REFERENCE.fullmatch(value)
        if whole:
            return self._lookup(whole.group(0), whole.group(1), whole.group(2), path, warnings)

        def interpolate(match: "re.Match[str]") -> str:
            found = self._lookup(match.group(0), match.group(1), match.group(2), path, warnings)
            return found if isinstance(found, str) else str(found)

        return FORM_REFERENCE.sub(interpolate, value)

    def _lookup(
        self,
        expression: str,
        form_name: str,
        field_name: str,
        path: str,
        warnings: List[BindingWarning],
    ) -> Any:
        form = self.form_values.get(form_name, {})
        if field_name in form:
            return copy.deepcopy(form[field_name])

        logger.warning(f"Unresolved binding {expression} at {path}")
        warnings.append(BindingWarning(expression=expression, path=path))
        return ""


def resolve_payload(template: Any, form_values: Mapping[str, Mapping[str, Any]]) -> BindingResult:
    """
    Resolve form placeholders in ``template`` against ``form_values``.

    The template is never mutated; a new tree is returned.
    """
    return PayloadBinder(form_values).resolve(template)
