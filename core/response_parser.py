"""Turn free-form model output into a fixed-shape activity list."""

import json
import logging
import re
from typing import Any, Dict, List

from core.models import Activity, ParseResult

logger = logging.getLogger(__name__)

MAX_ACTIVITIES = 5

# Greedy: first "{" to last "}".
JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")

FALLBACK_ACTIVITY: Activity = {
    "title": "Activity Search Results",
    "emoji": "🔍",
    "description": "Please try your search again. We're working to improve our activity recommendations.",
    "location": "Various locations",
    "distance": "Varies",
    "ageAppropriate": True,
    "currentInfo": "Please refine your search criteria",
}

ACTIVITY_DEFAULTS: Dict[str, Any] = {
    "title": "Unknown Activity",
    "emoji": "🎯",
    "description": "No description available.",
    "location": "Location not specified",
    "distance": "Distance unknown",
}


def fallback_result() -> ParseResult:
    return {"status": "fallback", "activities": [dict(FALLBACK_ACTIVITY)]}


def parse_activities(raw_text: str) -> ParseResult:
    """
    Extract the ``activities`` array from a model reply.

    Returns at most five items, unmodified, tagged ``"ok"``. Anything that
    cannot be parsed yields the single placeholder activity tagged
    ``"fallback"``; this function never raises.
    """
    match = JSON_OBJECT_PATTERN.search(raw_text or "")
    if not match:
        logger.info("No JSON object in model response, using fallback activities")
        return fallback_result()

    try:
        parsed = json.loads(match.group(0))
    except (ValueError, RecursionError) as exc:
        logger.error("Error parsing model response: %s", exc)
        return fallback_result()

    activities = parsed.get("activities") if isinstance(parsed, dict) else None
    if not isinstance(activities, list):
        logger.info("Model response has no activities array, using fallback activities")
        return fallback_result()

    return {"status": "ok", "activities": activities[:MAX_ACTIVITIES]}


def format_activity(activity: Any) -> Activity:
    """Fill display defaults for fields the model left out."""
    if not isinstance(activity, dict):
        activity = {}

    formatted: Dict[str, Any] = dict(activity)
    for key, default in ACTIVITY_DEFAULTS.items():
        formatted[key] = activity.get(key) or default
    formatted["ageAppropriate"] = activity.get("ageAppropriate") is not False
    formatted["currentInfo"] = activity.get("currentInfo") or None
    return formatted


def format_activities(activities: List[Any]) -> List[Activity]:
    return [format_activity(activity) for activity in activities]
