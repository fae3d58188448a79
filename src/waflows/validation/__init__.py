"""
Flow document validation: findings, rule sets and the validator itself.
"""
from .findings import Finding, FindingCode, Severity, has_errors, summarize
from .rules import DEFAULT_RULESET, RULESETS, RuleSet, StrictnessLevel, get_ruleset
from .validator import FlowValidator, validate_flow

__all__ = [
    'Finding',
    'FindingCode',
    'Severity',
    'has_errors',
    'summarize',
    'DEFAULT_RULESET',
    'RULESETS',
    'RuleSet',
    'StrictnessLevel',
    'get_ruleset',
    'FlowValidator',
    'validate_flow',
]
