from flask import Flask, request, jsonify
import traceback

from dotenv import load_dotenv
from loguru import logger
from pydantic import ValidationError

from waflows import (
    FlowParseError,
    ParseErrorKind,
    StrictnessLevel,
    flow_to_dict,
    has_errors,
    parse_flow,
    parse_flow_data,
    replay,
    serialize_flow,
    validate_flow,
)
from waflows.models import EventLog
from waflows.utils import configure_logging, get_settings
from waflows.validation import summarize

load_dotenv(override=True)

app = Flask(__name__)


def _document_from_request(data):
    """Accept either a decoded ``flow`` object or the raw ``flow_json`` text."""
    if "flow_json" in data:
        if not isinstance(data["flow_json"], str):
            raise FlowParseError(ParseErrorKind.INVALID_STRUCTURE, "flow_json must be a string of JSON text")
        return parse_flow(data["flow_json"])
    return parse_flow_data(data.get("flow"))


def _parse_error_response(e: FlowParseError):
    logger.warning(f"Rejected flow JSON: {e.kind.value}: {e.message}")
    return jsonify({"success": False, "error": e.message, "detail": e.to_dict()}), 400


@app.route("/validate", methods=["POST"])
def validate():
    try:
        data = request.get_json(force=True) or {}
        document = _document_from_request(data)

        settings = get_settings()
        mode = data.get("strictness", settings.strictness)
        findings = validate_flow(document, StrictnessLevel(mode), data.get("schema_version", settings.ruleset))

        logger.info(f"Validated flow with {len(document.screens)} screen(s): {summarize(findings)}")
        return jsonify(
            {
                "success": True,
                "valid": not has_errors(findings),
                "summary": summarize(findings),
                "findings": [finding.model_dump(mode="json") for finding in findings],
            }
        )

    except FlowParseError as e:
        return _parse_error_response(e)
    except ValueError as e:
        return jsonify({"success": False, "error": str(e)}), 400
    except Exception as e:
        error_detail = traceback.format_exc()
        logger.error(f"Error validating flow: {error_detail}")
        return jsonify({"success": False, "error": str(e), "detail": error_detail}), 500


@app.route("/format", methods=["POST"])
def format_flow():
    try:
        data = request.get_json(force=True) or {}
        document = _document_from_request(data)
        indent = data.get("indent", 2)
        return jsonify(
            {
                "success": True,
                "flow": flow_to_dict(document),
                "flow_json": serialize_flow(document, indent=indent),
            }
        )

    except FlowParseError as e:
        return _parse_error_response(e)
    except Exception as e:
        error_detail = traceback.format_exc()
        logger.error(f"Error formatting flow: {error_detail}")
        return jsonify({"success": False, "error": str(e), "detail": error_detail}), 500


@app.route("/simulate", methods=["POST"])
def simulate():
    try:
        data = request.get_json(force=True) or {}
        document = _document_from_request(data)
        log = EventLog.model_validate({"events": data.get("events", [])})

        results = replay(document, log.events)
        final_state = results[-1].state if results else None
        return jsonify(
            {
                "success": all(result.ok for result in results),
                "results": [result.model_dump(mode="json") for result in results],
                "state": final_state.model_dump(mode="json") if final_state else None,
            }
        )

    except FlowParseError as e:
        return _parse_error_response(e)
    except ValidationError as e:
        details = [
            {"loc": ".".join(str(part) for part in error["loc"]), "msg": error["msg"]}
            for error in e.errors()
        ]
        return jsonify({"success": False, "error": "Invalid events", "detail": details}), 400
    except Exception as e:
        error_detail = traceback.format_exc()
        logger.error(f"Error simulating flow: {error_detail}")
        return jsonify({"success": False, "error": str(e), "detail": error_detail}), 500


if __name__ == "__main__":
    configure_logging()
    app.run(debug=True, port=5001)
