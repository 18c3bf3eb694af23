"""Helpers for LLM replies that are supposed to be a single JSON object."""

import json

import structlog

logger = structlog.get_logger()


class LLMResponseParseError(ValueError):
    """Reply was not a JSON object."""


def strip_code_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[-1]
    if text.endswith("```"):
        text = text.rsplit("```", 1)[0]
    return text.strip()


def parse_json_object(response: str) -> dict:
    """Parse an LLM reply into a dict, tolerating markdown fences.

    Raises:
        LLMResponseParseError: reply is empty, not JSON, or not an object.
    """
    if not response or not response.strip():
        raise LLMResponseParseError("Empty response from LLM")

    text = strip_code_fences(response)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning("llm.json_parse_failed", response=text[:200], error=str(e))
        raise LLMResponseParseError(f"LLM response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise LLMResponseParseError(f"Expected a JSON object, got {type(data).__name__}")
    return data
