"""
Rule sets for the flow validator.

The generators that produce flow documents were revised several times and
disagree on details such as which text components are standard. Each
revision is captured here as data; the validator never hard-codes one.
"""
import re
from enum import Enum
from typing import Dict, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..models import CHOICE_TYPES, MEDIA_PICKER_TYPES, TEXT_ENTRY_TYPES


class StrictnessLevel(str, Enum):
    LENIENT = "lenient"
    STRICT = "strict"


INPUT_TYPES = frozenset(TEXT_ENTRY_TYPES + CHOICE_TYPES + ("DatePicker", "OptIn") + MEDIA_PICKER_TYPES)

_COMMON_STANDARD = frozenset(
    {
        "Image",
        "Footer",
        "Form",
        "EmbeddedLink",
        "OptIn",
        "DatePicker",
        "TextInput",
        "TextArea",
        "CheckboxGroup",
        "Dropdown",
        "PhotoPicker",
        "DocumentPicker",
    }
)


class RuleSet(BaseModel):
    """
    Parameters of one validation ruleset.

    ``standard_components`` of ``None`` disables the non-standard component
    check altogether.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    schema_version: str
    screen_id_pattern: str = r"^[A-Z0-9_]+$"
    standard_components: Optional[FrozenSet[str]] = None
    input_types: FrozenSet[str] = INPUT_TYPES
    media_picker_types: FrozenSet[str] = frozenset(MEDIA_PICKER_TYPES)

    @field_validator("screen_id_pattern")
    @classmethod
    def validate_pattern(cls, value):
        """Validates that the screen id pattern compiles."""
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"screen_id_pattern is not a valid regular expression: {e}")
        return value

    def matches_screen_id(self, screen_id: str) -> bool:
        return re.match(self.screen_id_pattern, screen_id) is not None

    def is_standard(self, component_type: str) -> bool:
        if self.standard_components is None:
            return True
        return component_type in self.standard_components


RULESETS: Dict[str, RuleSet] = {
    # Text, edit and media generators: the Text* family, RadioButtonsGroup.
    "7.1": RuleSet(
        name="7.1",
        schema_version="7.1",
        standard_components=_COMMON_STANDARD
        | {"TextHeading", "TextSubheading", "TextBody", "TextCaption", "RadioButtonsGroup"},
    ),
    # Screenshot generator: plain Text/Headline, Button with action_id,
    # RadioButtonGroup, ScreenConfirmation. TextBody and friends are non-standard.
    "7.1-legacy": RuleSet(
        name="7.1-legacy",
        schema_version="7.1",
        standard_components=_COMMON_STANDARD
        | {"Text", "Headline", "Button", "RadioButtonGroup", "ScreenConfirmation"},
    ),
}

DEFAULT_RULESET = "7.1"


def get_ruleset(name: Optional[str] = None) -> RuleSet:
    """
    Look up a built-in ruleset by name.

    An unknown name yields a ruleset expecting that schema version with no
    component allow-list.
    """
    name = name or DEFAULT_RULESET
    if name in RULESETS:
        return RULESETS[name]
    return RuleSet(name=name, schema_version=name)
