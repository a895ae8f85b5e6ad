"""
Prompt loading and generation for activity searches.

The prompt lives in a markdown document under a ``## Main Prompt Template``
heading so it can be edited without a restart; the manager re-reads the file
whenever its modification time advances.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from core.errors import PromptGenerationError, TemplateError, TemplateNotFoundError
from core.models import SearchCriteria
from core.prompt_template import PromptTemplate
from core.state_normalizer import normalize_state

logger = logging.getLogger(__name__)

TEMPLATE_HEADING = "## Main Prompt Template"

# Required-ness is configured here rather than inferred from the template.
REQUIRED_VARIABLES = ("city", "ages", "availability", "distance")

DEFAULT_DISTANCE = "10"

DEFAULT_TEMPLATE = """Find 5 family-friendly activities in {{city}}, {{state}} for children aged {{ages}}.
Available: {{availability}}.
Maximum distance: {{distance}} miles from city center.{{preferences}}

Please search the web for current, accurate information about activities, events, venues, and their details. Include real locations with current operating hours, contact information, and recent reviews when possible.

Return EXACTLY 5 activities in this JSON format:
{
  "activities": [
    {
      "title": "Activity Name",
      "emoji": "🎯",
      "description": "Detailed description of the activity, what makes it special, and why it's good for the specified age group.",
      "location": "Specific address or venue name",
      "distance": "X.X miles",
      "ageAppropriate": true,
      "currentInfo": "Any current information like hours, prices, or special events"
    }
  ]
}

Requirements:
- All activities must be age-appropriate for {{ages}}
- Include diverse activity types (indoor/outdoor, educational/recreational)
- Provide accurate, current information from web search
- Include specific locations with addresses when possible
- Distance should be calculated from {{city}}, {{state}} city center
- Descriptions should be engaging and informative"""

FALLBACK_TEMPLATE = """Based on your knowledge, suggest 5 family-friendly activities in {{city}}, {{state}} for children aged {{ages}}.

Available: {{availability}}
Maximum distance: {{distance}} miles from city center
{{preferences}}

Return EXACTLY 5 activities in this JSON format:
{
  "activities": [
    {
      "title": "Activity Name",
      "emoji": "🎯",
      "description": "Detailed description of the activity and why it's good for the specified age group.",
      "location": "General area or type of venue (e.g., 'Downtown area', 'Local parks')",
      "distance": "Varies",
      "ageAppropriate": true,
      "currentInfo": "Note: Based on general knowledge - please verify current hours and availability"
    }
  ]
}

Focus on popular, well-established venues and activities that are likely to be available."""


def parse_markdown_template(content: str) -> str:
    """Extract the body of the main prompt template section."""
    lines = content.split("\n")
    start = -1
    end = len(lines)

    for i, line in enumerate(lines):
        stripped = line.strip()
        if stripped == TEMPLATE_HEADING:
            if start == -1:
                start = i + 1
        elif start > -1 and stripped.startswith("## "):
            end = i
            break

    if start == -1:
        raise TemplateNotFoundError(f"'{TEMPLATE_HEADING}' section not found in markdown file")

    body = lines[start:end]
    while body and not body[0].strip():
        body.pop(0)

    return "\n".join(body).strip()


def format_ages(ages: Union[str, Iterable[Any], None]) -> str:
    """Join ages into a ``"5, 8"`` style list."""
    if not ages:
        return ""
    if isinstance(ages, str):
        parts = ages.split(",")
    elif isinstance(ages, (list, tuple, set)):
        parts = [str(age) for age in ages]
    else:
        parts = [str(ages)]
    return ", ".join(part.strip() for part in parts if part.strip())


def _is_blank(value: Any) -> bool:
    if isinstance(value, str):
        return not value.strip()
    return value is None or value == ""


class PromptManager:
    """Loads the prompt template document and renders prompts from search criteria."""

    def __init__(self, prompt_file: Union[str, Path], required_variables: Iterable[str] = REQUIRED_VARIABLES):
        self.prompt_file = Path(prompt_file)
        self.required_variables = tuple(required_variables)
        self.template: Optional[str] = None
        self.last_modified: Optional[float] = None

    def load_template(self) -> bool:
        """
        Load the template if the backing file changed since the last load.

        Returns True when the document was (re)parsed. On any failure the
        built-in default template is used and a warning is logged.
        """
        try:
            path = self.prompt_file.resolve()
            mtime = path.stat().st_mtime

            if self.template is not None and self.last_modified is not None and mtime <= self.last_modified:
                return False

            content = path.read_text(encoding="utf-8")
            self.template = parse_markdown_template(content)
            self.last_modified = mtime

            logger.info("Prompt template loaded from: %s", path)
            return True
        except (OSError, UnicodeDecodeError, TemplateError) as exc:
            logger.warning("Error loading prompt template, using built-in default: %s", exc)
            self.template = DEFAULT_TEMPLATE
            self.last_modified = None
            return False

    def _build_variables(self, criteria: SearchCriteria) -> Dict[str, str]:
        raw_state = criteria.get("state") or ""
        state_info = normalize_state(raw_state)
        distance = criteria.get("distance") or DEFAULT_DISTANCE
        return {
            "city": criteria.get("city") or "",
            "state": state_info["full_name"] if state_info["is_valid"] else raw_state,
            "ages": format_ages(criteria.get("ages")),
            "availability": criteria.get("availability") or "",
            "distance": str(distance),
        }

    def _check_required(self, variables: Dict[str, str]) -> None:
        missing = [name for name in self.required_variables if _is_blank(variables.get(name))]
        if missing:
            raise PromptGenerationError(
                f"Missing required variables: {', '.join(missing)}",
                errors=[f"{name} is required" for name in missing],
                missing=missing,
            )

    def generate_prompt(self, criteria: SearchCriteria) -> str:
        """Render the main prompt for a search, picking up live template edits."""
        self.load_template()

        variables = self._build_variables(criteria)
        preferences = criteria.get("preferences")
        variables["preferences"] = f" Additional preferences: {preferences}" if preferences else ""

        self._check_required(variables)

        raw_state = criteria.get("state")
        if raw_state and not normalize_state(raw_state)["is_valid"]:
            logger.warning('Unrecognized state: "%s". Using as-is.', raw_state)

        return PromptTemplate(self.template).render(variables)

    def generate_fallback_prompt(self, criteria: SearchCriteria) -> str:
        """Render the knowledge-only prompt used when web search is rate-limited."""
        variables = self._build_variables(criteria)
        preferences = criteria.get("preferences")
        variables["preferences"] = f"Preferences: {preferences}" if preferences else ""

        self._check_required(variables)
        return PromptTemplate(FALLBACK_TEMPLATE).render(variables)

    def get_template_variables(self) -> List[str]:
        self.load_template()
        return PromptTemplate(self.template).get_variables()
