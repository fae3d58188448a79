"""
Command line entry point: validate, format and simulate flow documents.
"""
import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from loguru import logger
from pydantic import ValidationError

from .loaders import FlowParseError, dump_flow, load_flow, serialize_flow
from .models import EventLog
from .state import replay
from .utils import configure_logging, get_settings
from .validation import StrictnessLevel, has_errors, summarize, validate_flow


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def cmd_validate(args: argparse.Namespace) -> int:
    settings = get_settings()
    document = load_flow(args.file)
    mode = StrictnessLevel.STRICT if args.strict else settings.strictness
    findings = validate_flow(document, mode, args.schema_version or settings.ruleset)

    if args.json:
        _print_json([finding.model_dump(mode="json") for finding in findings])
    else:
        for finding in findings:
            print(f"{finding.severity.value:<8} {finding.code.value:<26} {finding.path}: {finding.message}")
        counts = summarize(findings)
        print(f"{counts['Error']} error(s), {counts['Warning']} warning(s)")

    return 1 if has_errors(findings) else 0


def cmd_format(args: argparse.Namespace) -> int:
    document = load_flow(args.file)
    if args.output:
        dump_flow(document, args.output, indent=args.indent)
    else:
        print(serialize_flow(document, indent=args.indent))
    return 0


def cmd_simulate(args: argparse.Namespace) -> int:
    document = load_flow(args.file)
    events_file = Path(args.events)
    if not events_file.exists():
        raise FileNotFoundError(f"Events file not found: {args.events}")

    data = json.loads(events_file.read_text(encoding="utf-8"))
    if isinstance(data, list):
        data = {"events": data}
    log = EventLog.model_validate(data)

    results = replay(document, log.events)
    _print_json([result.model_dump(mode="json") for result in results])
    return 0 if all(result.ok for result in results) else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="waflows", description="WhatsApp Flow JSON tools")
    parser.add_argument("--verbose", "-v", action="count", help="Enable verbose logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser("validate", help="Check a flow document")
    validate_parser.add_argument("file", help="Path to the flow JSON file")
    validate_parser.add_argument("--strict", action="store_true", help="Enable strict rules")
    validate_parser.add_argument("--schema-version", default=None, help="Ruleset name (default: 7.1)")
    validate_parser.add_argument("--json", action="store_true", help="Print findings as JSON")
    validate_parser.set_defaults(func=cmd_validate)

    format_parser = subparsers.add_parser("format", help="Re-serialize a flow document")
    format_parser.add_argument("file", help="Path to the flow JSON file")
    format_parser.add_argument("--output", "-o", default=None, help="Write to this file instead of stdout")
    format_parser.add_argument("--indent", type=int, default=2, help="Indentation (default: 2)")
    format_parser.set_defaults(func=cmd_format)

    simulate_parser = subparsers.add_parser("simulate", help="Replay navigation events")
    simulate_parser.add_argument("file", help="Path to the flow JSON file")
    simulate_parser.add_argument("--events", required=True, help="JSON file with a list of events")
    simulate_parser.set_defaults(func=cmd_simulate)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv(override=True)
    args = build_parser().parse_args(argv)

    try:
        configure_logging(verbose=args.verbose)
    except ValidationError as e:
        logger.error(f"Invalid settings: {e}")
        return 2

    try:
        return args.func(args)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 2
    except FlowParseError as e:
        logger.error(f"{e.kind.value}: {e.message}")
        for detail in e.details:
            logger.error(f"  {detail['loc']}: {detail['msg']}")
        return 2
    except (ValidationError, json.JSONDecodeError) as e:
        logger.error(f"Invalid events file: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
