"""OpenAI LLM provider."""

from ..base import LLMAuthError, LLMError, LLMProvider, LLMQuotaError, LLMRateLimitError


def _is_quota_error(e: Exception) -> bool:
    code = getattr(e, "code", None)
    if code == "insufficient_quota":
        return True
    body = getattr(e, "body", None)
    if isinstance(body, dict) and body.get("code") == "insufficient_quota":
        return True
    return "insufficient_quota" in str(e)


def _handle_openai_error(e: Exception):
    from openai import APIError, AuthenticationError, RateLimitError

    if isinstance(e, AuthenticationError):
        raise LLMAuthError(f"OpenAI auth failed: {e}") from e
    if isinstance(e, RateLimitError):
        if _is_quota_error(e):
            raise LLMQuotaError(f"OpenAI quota exceeded: {e}") from e
        raise LLMRateLimitError(f"OpenAI rate limit: {e}") from e
    if isinstance(e, APIError):
        raise LLMError(f"OpenAI API error: {e}") from e
    raise LLMError(f"OpenAI error: {e}") from e


class OpenAIProvider(LLMProvider):
    """OpenAI GPT provider."""

    provider_name = "openai"

    def __init__(self, api_key: str | None = None, model: str | None = None, client=None):
        self.model = model or "gpt-4o"

        if client:
            self.client = client
            return

        from openai import OpenAI

        self.client = OpenAI(api_key=api_key)

    def generate(
        self,
        messages: list[dict],
        system: str | None = None,
        max_tokens: int = 2000,
        json_mode: bool = False,
        temperature: float | None = None,
    ) -> str:
        full_messages = []
        if system:
            full_messages.append({"role": "system", "content": system})
        full_messages.extend(messages)

        kwargs = {
            "model": self.model,
            "max_tokens": max_tokens,
            "messages": full_messages,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        if temperature is not None:
            kwargs["temperature"] = temperature

        try:
            response = self.client.chat.completions.create(**kwargs)
        except Exception as e:
            _handle_openai_error(e)

        content = response.choices[0].message.content
        if not content:
            raise LLMError("OpenAI returned an empty response")
        return content
