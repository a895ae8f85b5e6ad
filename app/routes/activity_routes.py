from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from flask import Blueprint, jsonify, request

from app.config import get_config, resolve_prompt_file
from core.activity_search import ActivitySearch
from core.criteria import REQUIRED_FIELDS, validate_search_criteria
from core.errors import PromptGenerationError
from core.prompt_manager import PromptManager
from core.response_parser import format_activities
from tools.llm_client import LLMClientWrapper, get_llm_client

logger = logging.getLogger(__name__)

SERVICE_NAME = "Family Activity Finder API"


def _timestamp() -> str:
    """Get current timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# Blueprint for activity routes
activity_bp = Blueprint('activities', __name__)

# Module-level collaborators (initialized in init_activity_routes)
_config: Dict[str, Any] = {}
_prompt_manager: Optional[PromptManager] = None
_llm_client: Optional[LLMClientWrapper] = None


def init_activity_routes(config: Optional[Dict[str, Any]] = None, llm_client: Optional[LLMClientWrapper] = None):
    """Initialize activity routes with dependencies."""
    global _config, _prompt_manager, _llm_client
    _config = config or get_config()
    _prompt_manager = PromptManager(resolve_prompt_file(_config))
    _prompt_manager.load_template()
    _llm_client = llm_client
    logger.info("Activity routes initialized (prompt file: %s)", _prompt_manager.prompt_file)


def _get_search() -> ActivitySearch:
    global _llm_client
    if _llm_client is None:
        _llm_client = get_llm_client(_config.get('ANTHROPIC_API_KEY'), _config.get('CLAUDE_MODEL'))
    return ActivitySearch(_prompt_manager, _llm_client, timeout=_config.get('REQUEST_TIMEOUT', 45))


@activity_bp.route("/api/health", methods=["GET"])
def health():
    return jsonify({
        "status": "OK",
        "timestamp": _timestamp(),
        "service": SERVICE_NAME,
    })


@activity_bp.route("/api/prompt/variables", methods=["GET"])
def prompt_variables():
    """List the placeholders used by the current prompt template."""
    return jsonify({
        "variables": _prompt_manager.get_template_variables(),
        "template_file": str(_prompt_manager.prompt_file),
    })


@activity_bp.route("/api/activities", methods=["POST"])
def search_activities():
    payload = request.get_json(force=True, silent=True)
    if not isinstance(payload, dict):
        payload = {}

    missing, errors = validate_search_criteria(payload)
    if missing:
        return jsonify({
            "error": "Missing required fields",
            "required": list(REQUIRED_FIELDS),
            "missing": missing,
            "timestamp": _timestamp(),
        }), 400
    if errors:
        return jsonify({
            "error": "Invalid search criteria",
            "message": "; ".join(errors),
            "timestamp": _timestamp(),
        }), 400

    try:
        outcome = _get_search().search(payload)
    except PromptGenerationError as exc:
        logger.error("Prompt generation failed: %s", exc)
        return jsonify({
            "error": "Invalid search criteria",
            "message": str(exc),
            "timestamp": _timestamp(),
        }), 400
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Error generating activities")
        status_code = getattr(exc, "status_code", None)
        if not isinstance(status_code, int) or status_code < 400:
            status_code = 500
        return jsonify({
            "error": "Failed to generate activities",
            "message": getattr(exc, "message", None) or str(exc) or "Internal server error",
            "timestamp": _timestamp(),
        }), status_code

    return jsonify({
        "success": True,
        "activities": format_activities(outcome["activities"]),
        "searchMode": outcome["mode"],
        "searchCriteria": payload,
        "timestamp": _timestamp(),
    })
