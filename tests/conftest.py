import json
import time
from pathlib import Path

import pytest

from app.server import create_app

PROJECT_PROMPT_FILE = Path(__file__).parent.parent / "config" / "prompts" / "family_activities.md"

SIMPLE_DOCUMENT = """# Test prompt

Intro text that is not part of the template.

## Main Prompt Template

Activities in {{city}}, {{state}} for ages {{ages}}.
When: {{availability}}. Within {{distance}} miles.{{preferences}}

## Notes

Ignored.
"""


def activities_json(*titles):
    return json.dumps({"activities": [{"title": title} for title in titles]})


def text_response(text):
    return {"content": [{"type": "text", "text": text}]}


class FakeAPIError(Exception):
    """Stands in for an Anthropic API status error."""

    def __init__(self, message, status_code):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class FakeLLMClient:
    """
    Records calls and replays scripted responses (or raises scripted errors).

    ``delay`` is either one sleep for every call or a list with one entry per call.
    """

    def __init__(self, *results, delay=0.0):
        self.results = list(results)
        self.delay = delay
        self.calls = []

    def _delay_for(self, index):
        if isinstance(self.delay, (list, tuple)):
            return self.delay[index] if index < len(self.delay) else 0.0
        return self.delay

    def create_message(self, prompt, max_tokens=4000, tools=None, timeout=None):
        index = len(self.calls)
        self.calls.append({"prompt": prompt, "max_tokens": max_tokens, "tools": tools, "timeout": timeout})
        delay = self._delay_for(index)
        if delay:
            time.sleep(delay)
        result = self.results.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result


@pytest.fixture
def prompt_file(tmp_path):
    path = tmp_path / "prompt.md"
    path.write_text(SIMPLE_DOCUMENT, encoding="utf-8")
    return path


@pytest.fixture
def search_criteria():
    return {
        "city": "Austin",
        "state": "TX",
        "ages": "5,8",
        "availability": "Saturday",
        "distance": 15,
    }


@pytest.fixture
def make_client(prompt_file):
    def _make(llm_client, **overrides):
        config = {
            "PROMPT_FILE": str(prompt_file),
            "REQUEST_TIMEOUT": 5,
            "CORS_ORIGINS": ["http://localhost:5173"],
            "LOG_LEVEL": "INFO",
            "DEBUG": False,
        }
        config.update(overrides)
        app = create_app(config, llm_client=llm_client)
        app.config["TESTING"] = True
        return app.test_client()
    return _make
