"""Direct Anthropic API integration for LLM operations."""

import json
import os
from typing import Any, Dict, List, Optional

from anthropic import Anthropic

from core.errors import LLMNotAvailableError

DEFAULT_MODEL = "claude-sonnet-4-20250514"

WEB_SEARCH_TOOL: Dict[str, str] = {
    "type": "web_search_20250305",
    "name": "web_search",
}


def _block_field(block: Any, name: str) -> Any:
    if isinstance(block, dict):
        return block.get(name)
    return getattr(block, name, None)


def _to_jsonable(value: Any) -> Any:
    if hasattr(value, "model_dump"):
        return value.model_dump()
    return value


def extract_response_text(response: Any) -> str:
    """
    Pull the reply text out of a Messages API response.

    Web-search replies mix tool-use blocks with text blocks, so the first
    text-typed block wins. Failing that: the first block's text, the first
    block itself when it is a string, the first block serialized, and finally
    the whole response serialized.
    """
    content = _block_field(response, "content")
    if not content:
        return json.dumps(_to_jsonable(response), default=str)

    for block in content:
        text = _block_field(block, "text")
        if _block_field(block, "type") == "text" and text:
            return text

    first = content[0]
    if isinstance(first, str):
        return first
    text = _block_field(first, "text")
    if text:
        return text
    return json.dumps(_to_jsonable(first), default=str)


class LLMClientWrapper:
    """Wrapper around Anthropic client for single-prompt message calls."""

    def __init__(self, client: Anthropic, model: str = DEFAULT_MODEL):
        self.client = client
        self.model = model

    @property
    def messages(self):
        """Expose the underlying client's messages API for direct access."""
        return self.client.messages

    def create_message(
        self,
        prompt: str,
        max_tokens: int = 4000,
        tools: Optional[List[Dict[str, Any]]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Send a single user prompt.

        Args:
            prompt: User message content
            max_tokens: Maximum tokens in response
            tools: Optional server tools (e.g. web search)
            timeout: Per-request timeout in seconds

        Returns:
            Raw Messages API response
        """
        params: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }

        if tools:
            params["tools"] = tools

        if timeout is not None:
            params["timeout"] = timeout

        return self.client.messages.create(**params)


_client: Optional[Anthropic] = None
_wrapper: Optional[LLMClientWrapper] = None


def get_llm_client(api_key: Optional[str] = None, model: Optional[str] = None) -> LLMClientWrapper:
    """Get or create Anthropic client wrapper."""
    global _client, _wrapper
    if _client is None:
        api_key = api_key or os.getenv('ANTHROPIC_API_KEY') or os.getenv('CLAUDE_API_KEY')
        if not api_key:
            raise LLMNotAvailableError("ANTHROPIC_API_KEY environment variable not set")
        # The rate-limit fallback is the only retry; SDK retries would mask 429s.
        _client = Anthropic(api_key=api_key, max_retries=0)
        _wrapper = LLMClientWrapper(_client, model or os.getenv('CLAUDE_MODEL') or DEFAULT_MODEL)
    return _wrapper


def is_llm_available() -> bool:
    """Check if LLM is configured."""
    return bool(os.getenv('ANTHROPIC_API_KEY') or os.getenv('CLAUDE_API_KEY'))
