"""
Tools for WhatsApp Flow JSON documents: parse them into typed models, check
them against the structural rules the generators are instructed to follow,
and simulate screen-to-screen navigation in a preview session.

Key functions:
- parse_flow / serialize_flow: Text to FlowDocument and back, losslessly
- load_flow / dump_flow: The same for files
- validate_flow: Returns a list of findings (errors and warnings), never raises
- NavigationSimulator: One preview session; every event returns a SimulationResult
- resolve_payload: Substitutes ${form.<form>.<field>} placeholders in a payload

Example document:
{
    "version": "7.1",
    "data_api_version": "3.0",
    "routing_model": {"WELCOME": ["DONE"], "DONE": []},
    "screens": [
        {
            "id": "WELCOME",
            "title": "Welcome",
            "layout": {
                "type": "SingleColumnLayout",
                "children": [
                    {
                        "type": "Form",
                        "name": "signup",
                        "children": [
                            {"type": "TextInput", "name": "email", "label": "Email"},
                            {
                                "type": "Footer",
                                "label": "Next",
                                "on-click-action": {
                                    "name": "navigate",
                                    "next": {"type": "screen", "name": "DONE"}
                                }
                            }
                        ]
                    }
                ]
            }
        },
        {
            "id": "DONE",
            "title": "Done",
            "terminal": true,
            "layout": {
                "type": "SingleColumnLayout",
                "children": [
                    {
                        "type": "Footer",
                        "label": "Submit",
                        "on-click-action": {
                            "name": "complete",
                            "payload": {"email": "${form.signup.email}"}
                        }
                    }
                ]
            }
        }
    ]
}

Settings are read from WAFLOWS_SCHEMA_VERSION, WAFLOWS_STRICTNESS and
WAFLOWS_LOG_LEVEL (a .env file is honoured by the command line).
"""

from .loaders import (
    FlowParseError,
    ParseErrorKind,
    dump_flow,
    flow_to_dict,
    load_flow,
    parse_flow,
    parse_flow_data,
    serialize_flow,
)
from .models import FlowDocument, NavigationState, SimulationResult
from .state import NavigationSimulator, replay, resolve_payload
from .validation import (
    Finding,
    FindingCode,
    RuleSet,
    Severity,
    StrictnessLevel,
    get_ruleset,
    has_errors,
    validate_flow,
)

__all__ = [
    "FlowParseError",
    "ParseErrorKind",
    "dump_flow",
    "flow_to_dict",
    "load_flow",
    "parse_flow",
    "parse_flow_data",
    "serialize_flow",
    "FlowDocument",
    "NavigationState",
    "SimulationResult",
    "NavigationSimulator",
    "replay",
    "resolve_payload",
    "Finding",
    "FindingCode",
    "RuleSet",
    "Severity",
    "StrictnessLevel",
    "get_ruleset",
    "has_errors",
    "validate_flow",
]
