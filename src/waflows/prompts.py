"""
Prompt templates for the text-generation service.

The rule text is assembled from a RuleSet so that the instructions given to
the model and the checks run on its answer come from the same data.
"""
from string import Template
from typing import Iterable, Optional

from .validation.findings import Finding
from .validation.rules import RuleSet, get_ruleset

STRUCTURE_RULES = Template(
    """KEY STRUCTURAL RULES:
1. ROOT PROPERTIES: the JSON starts with "version": "$version", "data_api_version": "3.0" and a "routing_model" mapping every screen id to the screen ids it can reach.
2. SCREENS: every screen has an "id" (uppercase letters, digits and underscores), a "title" and a "layout" of type "SingleColumnLayout". The last screen of a path has "terminal": true.
3. FORMS: input components ($input_types) go inside a component of "type": "Form". Every form has a unique "name".
4. FOOTERS: the Footer acting as the Next/Submit button of a form is the LAST item of that form's "children".
5. DATA SOURCES: every "data-source" item is an object with BOTH "id" and "title". An item with only an "id" is invalid; reuse the id as title if nothing better exists.
6. MEDIA: at most ONE $media_types per screen, never both. A media field may only be sent by a "complete" or "data_exchange" action, never "navigate", and only as a top-level payload property.
7. ACTIONS (Footer "on-click-action"):
   - navigate: {"name": "navigate", "next": {"type": "screen", "name": "SCREEN_ID"}}
   - complete: {"name": "complete", "payload": {"field": "$${form.form_name.field_name}"}}
   - data_exchange: {"name": "data_exchange", "payload": {...}}
   Every navigate target and routing_model entry names an existing screen id.
8. COMPONENTS: use only $standard_types."""
)

GENERATE_PROMPT = Template(
    """You are an expert UI/UX designer who creates valid WhatsApp Flows.
Generate a WhatsApp Flow JSON document for the request below.

$rules

User request:
$description

Output a single JSON object and nothing else."""
)

EDIT_PROMPT = Template(
    """You are an assistant that edits WhatsApp Flow JSON.
Apply the requested changes to the existing flow and return the complete, updated document.

$rules

If an instruction would break one of these rules, reach the user's intent in a compliant way.

Existing flow JSON:
$flow_json

Edit instructions:
$instructions

Output only the complete edited JSON object, without explanations or markdown."""
)

SCREENSHOT_PROMPT = Template(
    """You are an expert UI/UX designer converting website layouts into WhatsApp Flows.
Identify headers, text blocks, inputs, buttons, images and lists in the attached screenshot and
translate them into a WhatsApp Flow JSON document. Split long pages into several screens.

$rules
$additional

Output a single JSON object and nothing else."""
)

ANALYZE_PROMPT = Template(
    """You are an expert in designing user-friendly and efficient WhatsApp Flows.
Analyze the flow JSON below and suggest improvements for better user engagement and outcomes.

Flow JSON:
```json
$flow_json
```

Automated checks reported:
$findings

Give specific, actionable suggestions. Address every reported error first, then consider:
- Clarity and simplicity: intuitive screen layouts, concise text, not too many components per screen.
- User journey: logical navigation; fewer steps or screens where nothing is lost.
- Component usage: for example a RadioButtonsGroup instead of a Dropdown for a handful of options.
- Data handling: clear field names, well-defined data_exchange actions.
- Error handling: error branches for data submission and navigation failures.
- Actionability: clearly labelled footers and buttons whose actions lead where users expect.

Suggestions (markdown, one bullet point per suggestion):"""
)


def build_rules_text(ruleset: Optional[RuleSet] = None) -> str:
    ruleset = ruleset or get_ruleset()
    standard = sorted(ruleset.standard_components) if ruleset.standard_components else ["any documented component"]
    return STRUCTURE_RULES.substitute(
        version=ruleset.schema_version,
        input_types=", ".join(sorted(ruleset.input_types)),
        media_types=" or ONE ".join(sorted(ruleset.media_picker_types)),
        standard_types=", ".join(standard),
    )


def build_generate_prompt(description: str, ruleset: Optional[RuleSet] = None) -> str:
    return GENERATE_PROMPT.substitute(rules=build_rules_text(ruleset), description=description)


def build_edit_prompt(flow_json: str, instructions: str, ruleset: Optional[RuleSet] = None) -> str:
    return EDIT_PROMPT.substitute(
        rules=build_rules_text(ruleset),
        flow_json=flow_json,
        instructions=instructions,
    )


def build_screenshot_prompt(additional_instructions: Optional[str] = None, ruleset: Optional[RuleSet] = None) -> str:
    additional = ""
    if additional_instructions:
        additional = f"\nAdditional instructions from the user:\n{additional_instructions}\n"
    return SCREENSHOT_PROMPT.substitute(rules=build_rules_text(ruleset), additional=additional)


def build_analyze_prompt(flow_json: str, findings: Iterable[Finding] = ()) -> str:
    lines = [f"- {finding.severity.value} {finding.code.value} at {finding.path}: {finding.message}" for finding in findings]
    return ANALYZE_PROMPT.substitute(flow_json=flow_json, findings="\n".join(lines) or "- none")
