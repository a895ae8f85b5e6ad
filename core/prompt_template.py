"""
Placeholder substitution for prompt templates.
Templates use ``{{name}}`` tokens.
"""

import logging
import re
from typing import Any, List, Mapping

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{\{([^}]+)\}\}")


def find_unreplaced(text: str) -> List[str]:
    """Return every ``{{...}}`` token still present in text."""
    return [match.group(0) for match in PLACEHOLDER_PATTERN.finditer(text)]


class PromptTemplate:
    """Immutable prompt template with ``{{name}}`` placeholders."""

    def __init__(self, template: str):
        self._template = template

    @property
    def template(self) -> str:
        return self._template

    def render(self, variables: Mapping[str, Any]) -> str:
        """
        Replace template variables with the supplied values.

        Falsy values render as an empty string. Placeholders whose key is not
        in ``variables`` stay in the output verbatim and are logged.
        """
        result = self._template
        for key, value in variables.items():
            result = result.replace("{{%s}}" % key, str(value) if value else "")

        unreplaced = find_unreplaced(result)
        if unreplaced:
            logger.warning("Unreplaced template variables found: %s", unreplaced)

        return result

    def get_variables(self) -> List[str]:
        """Placeholder names in order of first appearance."""
        names: List[str] = []
        for match in PLACEHOLDER_PATTERN.finditer(self._template):
            name = match.group(1)
            if name not in names:
                names.append(name)
        return names

    def missing_variables(self, variables: Mapping[str, Any]) -> List[str]:
        """Placeholder names for which no key was supplied."""
        return [name for name in self.get_variables() if name not in variables]
