"""
Validation findings.
"""
from collections import Counter
from enum import Enum
from typing import Dict, Iterable, Optional

from pydantic import BaseModel, ConfigDict


class Severity(str, Enum):
    ERROR = "Error"
    WARNING = "Warning"


class FindingCode(str, Enum):
    VERSION_MISMATCH = "VersionMismatch"
    INVALID_SCREEN_ID = "InvalidScreenId"
    UNKNOWN_SCREEN_REFERENCE = "UnknownScreenReference"
    MISSING_DATA_SOURCE_TITLE = "MissingDataSourceTitle"
    INPUT_OUTSIDE_FORM = "InputOutsideForm"
    FOOTER_NOT_LAST = "FooterNotLast"
    MULTIPLE_MEDIA_PICKERS = "MultipleMediaPickers"
    INVALID_MEDIA_BOUNDS = "InvalidMediaBounds"
    MEDIA_IN_NAVIGATE_PAYLOAD = "MediaInNavigatePayload"
    NESTED_MEDIA_PAYLOAD = "NestedMediaPayload"
    UNKNOWN_COMPONENT_TYPE = "UnknownComponentType"
    EMPTY_FLOW = "EmptyFlow"
    DUPLICATE_SCREEN_ID = "DuplicateScreenId"
    MISSING_FIELD_NAME = "MissingFieldName"
    DUPLICATE_FORM_NAME = "DuplicateFormName"
    DUPLICATE_DATA_SOURCE_ID = "DuplicateDataSourceId"
    DANGLING_ACTION_ID = "DanglingActionId"
    INCOMPLETE_ROUTING_CONFIG = "IncompleteRoutingConfig"
    MISSING_SCREEN_TITLE = "MissingScreenTitle"
    NO_TERMINAL_SCREEN = "NoTerminalScreen"
    NON_STANDARD_COMPONENT = "NonStandardComponent"
    UNRESOLVED_FORM_REFERENCE = "UnresolvedFormReference"


class Finding(BaseModel):
    """One diagnostic produced by the validator."""

    model_config = ConfigDict(frozen=True)

    severity: Severity
    code: FindingCode
    message: str
    path: str
    screen_id: Optional[str] = None
    critical: bool = False

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR


def has_errors(findings: Iterable[Finding]) -> bool:
    return any(finding.is_error for finding in findings)


def summarize(findings: Iterable[Finding]) -> Dict[str, int]:
    """Count findings per severity."""
    counts = Counter(finding.severity.value for finding in findings)
    return {severity.value: counts.get(severity.value, 0) for severity in Severity}
