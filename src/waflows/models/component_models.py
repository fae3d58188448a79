"""
Component models.

Every entry of a layout's ``children`` array is parsed into one variant of the
``Component`` tagged union. The ``type`` string picks the variant; tags that
are not recognised fall back to ``UnknownComponent``, which keeps every key so
the component survives re-serialization untouched.
"""
from typing import Annotated, Any, Dict, Iterator, List, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag

from .action_models import FlowAction, ResolvedAction

TEXT_TYPES = (
    "TextHeading",
    "TextSubheading",
    "TextBody",
    "TextCaption",
    "Text",
    "Headline",
    "RichText",
)
TEXT_ENTRY_TYPES = ("TextInput", "TextArea")
CHOICE_TYPES = ("CheckboxGroup", "RadioButtonGroup", "RadioButtonsGroup", "Dropdown")
MEDIA_PICKER_TYPES = ("PhotoPicker", "DocumentPicker")

# type tag -> union member tag
COMPONENT_FAMILIES: Dict[str, str] = {
    **{name: "text" for name in TEXT_TYPES},
    **{name: "text_entry" for name in TEXT_ENTRY_TYPES},
    **{name: "choice" for name in CHOICE_TYPES},
    **{name: "media_picker" for name in MEDIA_PICKER_TYPES},
    "Image": "image",
    "Button": "button",
    "DatePicker": "date_picker",
    "OptIn": "opt_in",
    "EmbeddedLink": "embedded_link",
    "Footer": "footer",
    "ScreenConfirmation": "screen_confirmation",
    "Form": "form",
}

RECOGNIZED_TYPES = frozenset(COMPONENT_FAMILIES)


class ComponentBase(BaseModel):
    """Attributes shared by every component variant."""

    model_config = ConfigDict(extra="allow", frozen=True)

    type: str
    name: Optional[str] = None
    label: Optional[str] = None
    text: Optional[Union[str, List[str]]] = None

    @property
    def is_recognized(self) -> bool:
        return True

    def get_action(self) -> Optional[ResolvedAction]:
        """Inline action carried by the component, if any."""
        return None


class TextComponent(ComponentBase):
    """Heading, subheading, body, caption and plain text variants."""

    style: Optional[Union[List[str], str]] = None


class ImageComponent(ComponentBase):
    src: Optional[str] = None
    image_id: Optional[str] = None


class ButtonComponent(ComponentBase):
    """Legacy button addressing its action through ``action_id``."""

    action_id: Optional[str] = None


class TextEntryComponent(ComponentBase):
    required: Optional[Union[bool, str]] = None


class DataSourceItem(BaseModel):
    """One option of a choice component. Both fields are mandatory on the wire."""

    model_config = ConfigDict(extra="allow", frozen=True)

    id: Optional[str] = None
    title: Optional[str] = None


DataSource = Union[List[DataSourceItem], str]


class ChoiceComponent(ComponentBase):
    """
    Checkbox group, radio group or dropdown.

    The v7 generators write ``data-source`` while the screenshot generator
    writes ``data_source``. Both are kept as separate fields so that the key
    that was read is the key that gets written back.
    """

    required: Optional[Union[bool, str]] = None
    data_source_dashed: Optional[DataSource] = Field(default=None, alias="data-source")
    data_source: Optional[DataSource] = None

    @property
    def options(self) -> Optional[DataSource]:
        if self.data_source_dashed is not None:
            return self.data_source_dashed
        return self.data_source


class DatePickerComponent(ComponentBase):
    required: Optional[Union[bool, str]] = None
    min_date: Optional[str] = Field(default=None, alias="min-date")
    max_date: Optional[str] = Field(default=None, alias="max-date")


class OptInComponent(ComponentBase):
    on_click_action: Optional[FlowAction] = Field(default=None, alias="on-click-action")

    def get_action(self) -> Optional[ResolvedAction]:
        return self.on_click_action.resolve() if self.on_click_action else None


def _static_count(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


class MediaPickerComponent(ComponentBase):
    """PhotoPicker or DocumentPicker."""

    min_uploaded_photos: Optional[Union[int, str]] = Field(default=None, alias="min-uploaded-photos")
    max_uploaded_photos: Optional[Union[int, str]] = Field(default=None, alias="max-uploaded-photos")
    min_uploaded_documents: Optional[Union[int, str]] = Field(default=None, alias="min-uploaded-documents")
    max_uploaded_documents: Optional[Union[int, str]] = Field(default=None, alias="max-uploaded-documents")

    @property
    def min_count(self) -> Optional[int]:
        """Static lower bound; None when unset or bound to a ${data.*} value."""
        if self.type == "DocumentPicker":
            return _static_count(self.min_uploaded_documents)
        return _static_count(self.min_uploaded_photos)

    @property
    def max_count(self) -> Optional[int]:
        if self.type == "DocumentPicker":
            return _static_count(self.max_uploaded_documents)
        return _static_count(self.max_uploaded_photos)


class EmbeddedLinkComponent(ComponentBase):
    on_click_action: Optional[FlowAction] = Field(default=None, alias="on-click-action")

    def get_action(self) -> Optional[ResolvedAction]:
        return self.on_click_action.resolve() if self.on_click_action else None


class FooterComponent(ComponentBase):
    """
    Footer of a screen or form.

    Without ``on-click-action`` a footer is decorative text only; with one it
    is the submit control of its form.
    """

    on_click_action: Optional[FlowAction] = Field(default=None, alias="on-click-action")

    @property
    def is_actionable(self) -> bool:
        return self.on_click_action is not None

    def get_action(self) -> Optional[ResolvedAction]:
        return self.on_click_action.resolve() if self.on_click_action else None


class ScreenConfirmationComponent(ComponentBase):
    pass


class FormComponent(ComponentBase):
    """Container scoping a set of named input fields."""

    children: List["Component"] = []


class UnknownComponent(BaseModel):
    """A component whose tag is not recognised, preserved opaquely."""

    model_config = ConfigDict(extra="allow", frozen=True)

    type: Any = None

    @property
    def name(self) -> Optional[str]:
        return (self.model_extra or {}).get("name")

    @property
    def is_recognized(self) -> bool:
        return False

    def get_action(self) -> Optional[ResolvedAction]:
        return None


def _component_tag(value: Any) -> str:
    if isinstance(value, dict):
        component_type = value.get("type")
    else:
        component_type = getattr(value, "type", None)
    if not isinstance(component_type, str):
        return "unknown"
    return COMPONENT_FAMILIES.get(component_type, "unknown")


Component = Annotated[
    Union[
        Annotated[TextComponent, Tag("text")],
        Annotated[ImageComponent, Tag("image")],
        Annotated[ButtonComponent, Tag("button")],
        Annotated[TextEntryComponent, Tag("text_entry")],
        Annotated[ChoiceComponent, Tag("choice")],
        Annotated[DatePickerComponent, Tag("date_picker")],
        Annotated[OptInComponent, Tag("opt_in")],
        Annotated[MediaPickerComponent, Tag("media_picker")],
        Annotated[EmbeddedLinkComponent, Tag("embedded_link")],
        Annotated[FooterComponent, Tag("footer")],
        Annotated[ScreenConfirmationComponent, Tag("screen_confirmation")],
        Annotated[FormComponent, Tag("form")],
        Annotated[UnknownComponent, Tag("unknown")],
    ],
    Discriminator(_component_tag),
]

FormComponent.model_rebuild()


class ComponentVisit(NamedTuple):
    """A component reached while walking a layout."""

    component: Any
    path: str
    form: Optional[FormComponent]


def walk_components(
    children: List[Any], path: str, form: Optional[FormComponent] = None
) -> Iterator[ComponentVisit]:
    """
    Yield every component below ``children`` in document order.

    Forms are yielded before their own children; each visit records the
    closest enclosing form.
    """
    for index, component in enumerate(children):
        component_path = f"{path}.children[{index}]"
        yield ComponentVisit(component, component_path, form)
        if isinstance(component, FormComponent):
            yield from walk_components(component.children, component_path, component)
