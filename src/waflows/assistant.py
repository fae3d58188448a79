"""
Boundary to the text-generation service.

The service itself is not part of this package: callers hand in a function
that takes a prompt and returns the model's text. The assistant builds the
prompt, feeds the answer to the parser and validates the result, keeping
parse failures apart from validation findings.
"""
import re
from typing import Callable, List, NamedTuple, Optional

from loguru import logger

from .loaders import parse_flow, serialize_flow
from .models import FlowDocument
from .prompts import build_analyze_prompt, build_edit_prompt, build_generate_prompt, build_screenshot_prompt
from .validation import Finding, RuleSet, StrictnessLevel, get_ruleset, validate_flow

CODE_FENCE = re.compile(r"^\s*```(?:json)?\s*\n(?P<body>.*?)\n\s*```\s*$", re.DOTALL)


class AssistantResult(NamedTuple):
    document: FlowDocument
    findings: List[Finding]
    raw_text: str


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code fence, if the model added one."""
    match = CODE_FENCE.match(text)
    return match.group("body") if match else text.strip()


class FlowAssistant:
    """
    Generates and edits flow documents through an injected completion function.

    Args:
        complete_fn: Callable receiving the prompt (and ``image=`` for
            screenshots) and returning the generated text.
        ruleset: Ruleset used for both the prompt and the validation.
        mode: Strictness used when validating the answer.
    """

    def __init__(
        self,
        complete_fn: Callable[..., str],
        ruleset: Optional[RuleSet] = None,
        mode: StrictnessLevel = StrictnessLevel.LENIENT,
    ):
        self.complete_fn = complete_fn
        self.ruleset = ruleset or get_ruleset()
        self.mode = mode

    def generate(self, description: str) -> AssistantResult:
        return self._run(build_generate_prompt(description, self.ruleset))

    def edit(self, document: FlowDocument, instructions: str) -> AssistantResult:
        """Returns a new document; ``document`` itself is left untouched."""
        return self._run(build_edit_prompt(serialize_flow(document), instructions, self.ruleset))

    def from_screenshot(self, screenshot_data_uri: str, additional_instructions: Optional[str] = None) -> AssistantResult:
        prompt = build_screenshot_prompt(additional_instructions, self.ruleset)
        return self._run(prompt, image=screenshot_data_uri)

    def analyze(self, document: FlowDocument) -> str:
        """
        Ask for UX and efficiency suggestions on ``document``.

        The validator's findings go into the prompt so that the answer covers
        them. Returns the markdown text as produced by the service.
        """
        findings = validate_flow(document, self.mode, self.ruleset)
        prompt = build_analyze_prompt(serialize_flow(document), findings)
        logger.debug(f"Requesting analysis of flow with {len(findings)} finding(s)")
        suggestions = (self.complete_fn(prompt) or "").strip()
        if not suggestions:
            raise ValueError("Text-generation service returned an empty response")
        return suggestions

    def _run(self, prompt: str, **kwargs) -> AssistantResult:
        logger.debug(f"Requesting flow from text-generation service ({len(prompt)} prompt chars)")
        raw_text = self.complete_fn(prompt, **kwargs)
        if not raw_text:
            raise ValueError("Text-generation service returned an empty response")

        # FlowParseError propagates with the raw text attached
        document = parse_flow(strip_code_fence(raw_text))
        findings = validate_flow(document, self.mode, self.ruleset)
        logger.info(f"Generated flow with {len(document.screens)} screen(s), {len(findings)} finding(s)")
        return AssistantResult(document, findings, raw_text)
