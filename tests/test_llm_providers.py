"""Tests for the OpenAI and Claude providers and JSON reply parsing."""

from unittest.mock import MagicMock

import httpx
import pytest

from llm import LLMError, LLMQuotaError, LLMRateLimitError, LLMResponseParseError, parse_json_object
from llm.json_utils import strip_code_fences
from llm.providers.claude import ClaudeProvider
from llm.providers.openai import OpenAIProvider


def _openai_client(content="hello"):
    client = MagicMock()
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    client.chat.completions.create.return_value = response
    return client


def _claude_client(text="hello"):
    client = MagicMock()
    response = MagicMock()
    response.content = [MagicMock(text=text)]
    client.messages.create.return_value = response
    return client


def _http_response(status: int) -> httpx.Response:
    return httpx.Response(status, request=httpx.Request("POST", "https://api.example.com"))


class TestOpenAIProvider:
    def test_system_prompt_prepended(self):
        client = _openai_client()
        OpenAIProvider(client=client).generate([{"role": "user", "content": "hi"}], system="be brief")
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["messages"][0] == {"role": "system", "content": "be brief"}
        assert kwargs["messages"][1] == {"role": "user", "content": "hi"}
        assert "response_format" not in kwargs

    def test_json_mode_sets_response_format(self):
        client = _openai_client('{"a": 1}')
        OpenAIProvider(client=client).generate([{"role": "user", "content": "hi"}], json_mode=True, temperature=0.2)
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["temperature"] == 0.2

    def test_empty_reply_raises(self):
        with pytest.raises(LLMError, match="empty"):
            OpenAIProvider(client=_openai_client(None)).generate([{"role": "user", "content": "hi"}])

    def test_quota_error_mapped(self):
        from openai import RateLimitError

        client = MagicMock()
        client.chat.completions.create.side_effect = RateLimitError(
            "You exceeded your current quota",
            response=_http_response(429),
            body={"code": "insufficient_quota"},
        )
        with pytest.raises(LLMQuotaError):
            OpenAIProvider(client=client).generate([{"role": "user", "content": "hi"}])

    def test_plain_rate_limit_is_not_quota(self):
        from openai import RateLimitError

        client = MagicMock()
        client.chat.completions.create.side_effect = RateLimitError(
            "Rate limit reached", response=_http_response(429), body=None
        )
        with pytest.raises(LLMRateLimitError) as exc_info:
            OpenAIProvider(client=client).generate([{"role": "user", "content": "hi"}])
        assert not isinstance(exc_info.value, LLMQuotaError)

    def test_unexpected_error_wrapped(self):
        client = MagicMock()
        client.chat.completions.create.side_effect = RuntimeError("socket closed")
        with pytest.raises(LLMError, match="socket closed"):
            OpenAIProvider(client=client).generate([{"role": "user", "content": "hi"}])


class TestClaudeProvider:
    def test_json_mode_appends_directive(self):
        client = _claude_client('{"a": 1}')
        ClaudeProvider(client=client).generate([{"role": "user", "content": "hi"}], system="rubric", json_mode=True)
        system = client.messages.create.call_args.kwargs["system"]
        assert system.startswith("rubric")
        assert "JSON object" in system

    def test_no_system_omits_key(self):
        client = _claude_client()
        assert ClaudeProvider(client=client).generate([{"role": "user", "content": "hi"}]) == "hello"
        assert "system" not in client.messages.create.call_args.kwargs

    def test_rate_limit_mapped(self):
        from anthropic import RateLimitError

        client = MagicMock()
        client.messages.create.side_effect = RateLimitError("slow down", response=_http_response(429), body=None)
        with pytest.raises(LLMRateLimitError):
            ClaudeProvider(client=client).generate([{"role": "user", "content": "hi"}])

    def test_empty_content_raises(self):
        client = MagicMock()
        client.messages.create.return_value = MagicMock(content=[])
        with pytest.raises(LLMError):
            ClaudeProvider(client=client).generate([{"role": "user", "content": "hi"}])


class TestParseJsonObject:
    def test_plain_object(self):
        assert parse_json_object('{"score": 50}') == {"score": 50}

    def test_fenced_object(self):
        assert parse_json_object('```json\n{"score": 50}\n```') == {"score": 50}

    def test_strip_code_fences_leaves_bare_text(self):
        assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'

    @pytest.mark.parametrize("reply", ["", "   ", "not json", "[1, 2]", '"text"'])
    def test_rejects_non_objects(self, reply):
        with pytest.raises(LLMResponseParseError):
            parse_json_object(reply)
