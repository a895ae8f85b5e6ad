"""Error types raised while building prompts and calling the model."""

from typing import List, Optional


class ActivityFinderError(Exception):
    """Base class for activity finder errors."""
    pass


class ValidationError(ActivityFinderError, ValueError):
    """Search criteria are missing or invalid."""

    def __init__(self, message: str, errors: Optional[List[str]] = None, missing: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = list(errors or [])
        self.missing = list(missing or [])


class PromptGenerationError(ValidationError):
    """Required template variables could not be resolved."""
    pass


class TemplateError(ActivityFinderError):
    """Prompt template document could not be read or parsed."""
    pass


class TemplateNotFoundError(TemplateError):
    """Prompt template section is missing from the markdown document."""
    pass


class UpstreamError(ActivityFinderError):
    """Language-model call failed."""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.status_code = status_code


class UpstreamTimeoutError(UpstreamError):
    """Language-model call exceeded the wall-clock budget."""

    def __init__(self, timeout: float):
        super().__init__(f"Claude API request timed out after {timeout:g} seconds", status_code=504)
        self.timeout = timeout


class LLMNotAvailableError(RuntimeError):
    """LLM not available error."""
    pass
