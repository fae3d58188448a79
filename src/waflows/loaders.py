"""
Functions for parsing, serializing, loading and saving flow documents.
"""
import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from loguru import logger
from pydantic import ValidationError

from .models import FlowDocument

REQUIRED_ROOT_FIELDS = ("version", "screens")


class ParseErrorKind(str, Enum):
    MALFORMED = "Malformed"
    SCHEMA_MISSING_FIELD = "SchemaMissingField"
    INVALID_STRUCTURE = "InvalidStructure"


class FlowParseError(ValueError):
    """
    Raised when text cannot be turned into a flow document.

    The offending text is kept on the exception so that it can be handed back
    to the user for editing.
    """

    def __init__(
        self,
        kind: ParseErrorKind,
        message: str,
        raw_text: Optional[str] = None,
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.raw_text = raw_text
        self.details = details or []

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message, "details": self.details}


def parse_flow_data(data: Any, raw_text: Optional[str] = None) -> FlowDocument:
    """
    Build a flow document from already-decoded JSON.

    Only the structural tree is built here; cross-references are left to the
    validator.

    Raises:
        FlowParseError: If ``version`` or ``screens`` is missing, or the data
            does not have the shape of a flow document.
    """
    if not isinstance(data, dict):
        raise FlowParseError(
            ParseErrorKind.INVALID_STRUCTURE,
            f"Flow JSON must be a JSON object, got {type(data).__name__}",
            raw_text,
        )

    missing = [field for field in REQUIRED_ROOT_FIELDS if field not in data]
    if missing:
        raise FlowParseError(
            ParseErrorKind.SCHEMA_MISSING_FIELD,
            f"Flow JSON is missing required field(s): {', '.join(missing)}",
            raw_text,
        )

    try:
        document = FlowDocument.model_validate(data)
    except ValidationError as e:
        details = [
            {"loc": ".".join(str(part) for part in error["loc"]), "msg": error["msg"]}
            for error in e.errors()
        ]
        raise FlowParseError(
            ParseErrorKind.INVALID_STRUCTURE,
            f"Flow JSON does not match the document structure ({len(details)} problem(s))",
            raw_text,
            details,
        ) from e

    logger.debug(f"Parsed flow document version {document.version} with {len(document.screens)} screen(s)")
    return document


def parse_flow(raw_text: str) -> FlowDocument:
    """
    Parse flow JSON text into a FlowDocument.

    Raises:
        FlowParseError: ``MALFORMED`` when the text is not JSON, otherwise as
            for ``parse_flow_data``.
    """
    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError as e:
        raise FlowParseError(
            ParseErrorKind.MALFORMED,
            f"Invalid JSON at line {e.lineno}, column {e.colno}: {e.msg}",
            raw_text,
        ) from e

    return parse_flow_data(data, raw_text)


def flow_to_dict(document: FlowDocument) -> Dict[str, Any]:
    """Plain JSON data for a document, using the keys that were read."""
    return document.model_dump(mode="json", by_alias=True, exclude_unset=True)


def serialize_flow(document: FlowDocument, indent: Optional[int] = 2) -> str:
    """Structural inverse of ``parse_flow``."""
    return json.dumps(flow_to_dict(document), indent=indent, ensure_ascii=False)


def load_flow(flow_path: Union[str, Path]) -> FlowDocument:
    """
    Load and parse a flow document from a JSON file.
    """
    flow_file = Path(flow_path)

    if not flow_file.exists():
        raise FileNotFoundError(f"Flow file not found: {flow_path}")

    logger.info(f"Loading flow document from: {flow_file}")
    return parse_flow(flow_file.read_text(encoding="utf-8"))


def dump_flow(document: FlowDocument, flow_path: Union[str, Path], indent: Optional[int] = 2) -> Path:
    """Write the serialized document to ``flow_path`` and return the path."""
    flow_file = Path(flow_path)
    flow_file.parent.mkdir(parents=True, exist_ok=True)
    flow_file.write_text(serialize_flow(document, indent=indent) + "\n", encoding="utf-8")
    logger.info(f"Flow document written to: {flow_file}")
    return flow_file
