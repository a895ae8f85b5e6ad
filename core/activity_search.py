"""
Activity search orchestration.

Builds the prompt, calls the model (web search first, knowledge-only on rate
limit) under a single wall-clock deadline, and parses the reply.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Any, List, Optional

import anthropic

from core.errors import UpstreamTimeoutError
from core.models import SearchCriteria, SearchOutcome
from core.prompt_manager import PromptManager
from core.response_parser import parse_activities
from tools.llm_client import WEB_SEARCH_TOOL, LLMClientWrapper, extract_response_text

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 45.0
PRIMARY_MAX_TOKENS = 4000
FALLBACK_MAX_TOKENS = 2000


def is_rate_limit_error(exc: BaseException) -> bool:
    if isinstance(exc, anthropic.RateLimitError):
        return True
    if getattr(exc, "status_code", None) == 429:
        return True
    return "rate_limit_error" in str(exc)


class ActivitySearch:
    """Runs one activity search against the language model."""

    def __init__(
        self,
        prompt_manager: PromptManager,
        llm_client: LLMClientWrapper,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.prompt_manager = prompt_manager
        self.llm_client = llm_client
        self.timeout = timeout

    def _call_with_deadline(self, deadline: float, prompt: str, max_tokens: int,
                            tools: Optional[List[dict]] = None) -> Any:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise UpstreamTimeoutError(self.timeout)

        # One worker per attempt so the deadline only covers a call that has started.
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="llm-call")
        future = executor.submit(
            self.llm_client.create_message,
            prompt,
            max_tokens=max_tokens,
            tools=tools,
            timeout=remaining,
        )
        executor.shutdown(wait=False)
        try:
            return future.result(timeout=remaining)
        except FutureTimeoutError:
            logger.error("Claude API call exceeded %.0fs deadline", self.timeout)
            raise UpstreamTimeoutError(self.timeout)
        except anthropic.APITimeoutError:
            logger.error("Claude API client timed out")
            raise UpstreamTimeoutError(self.timeout)

    def search(self, criteria: SearchCriteria) -> SearchOutcome:
        """
        Find activities for the given criteria.

        Raises:
            PromptGenerationError: required fields are missing
            UpstreamTimeoutError: no reply within the deadline
            anthropic.APIError: any non-rate-limit upstream failure
        """
        prompt = self.prompt_manager.generate_prompt(criteria)
        deadline = time.monotonic() + self.timeout

        mode = "web_search"
        try:
            logger.info("Attempting search with web tools...")
            response = self._call_with_deadline(deadline, prompt, PRIMARY_MAX_TOKENS, tools=[WEB_SEARCH_TOOL])
        except UpstreamTimeoutError:
            raise
        except Exception as exc:
            if not is_rate_limit_error(exc):
                raise
            logger.warning("Rate limit hit, falling back to knowledge-based search...")
            mode = "knowledge_fallback"
            fallback_prompt = self.prompt_manager.generate_fallback_prompt(criteria)
            response = self._call_with_deadline(deadline, fallback_prompt, FALLBACK_MAX_TOKENS)

        response_text = extract_response_text(response)
        logger.debug("Extracted response text for parsing: %s...", response_text[:500])

        result = parse_activities(response_text)
        logger.info("Generated %d activities (mode=%s, parse=%s)",
                    len(result["activities"]), mode, result["status"])

        return {
            "activities": result["activities"],
            "mode": mode,
            "parse_status": result["status"],
        }
