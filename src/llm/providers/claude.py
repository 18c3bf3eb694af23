"""Claude (Anthropic) LLM provider."""

from ..base import LLMAuthError, LLMError, LLMProvider, LLMQuotaError, LLMRateLimitError

# Claude has no response_format switch; JSON mode is requested in the system prompt
_JSON_DIRECTIVE = (
    "Respond with a single valid JSON object only. "
    "Do not wrap it in markdown code fences and do not add any text before or after it."
)


class ClaudeProvider(LLMProvider):
    """Anthropic Claude provider."""

    provider_name = "claude"

    def __init__(self, api_key: str | None = None, model: str | None = None, client=None):
        self.model = model or "claude-sonnet-4-20250514"

        if client:
            self.client = client
            return

        from anthropic import Anthropic

        self.client = Anthropic(api_key=api_key)

    def _handle_error(self, e: Exception):
        from anthropic import APIError, AuthenticationError, PermissionDeniedError, RateLimitError

        if isinstance(e, AuthenticationError):
            raise LLMAuthError(f"Claude auth failed: {e}") from e
        if isinstance(e, RateLimitError):
            raise LLMRateLimitError(f"Claude rate limit: {e}") from e
        if isinstance(e, PermissionDeniedError) and "credit" in str(e).lower():
            raise LLMQuotaError(f"Claude credit balance exhausted: {e}") from e
        if isinstance(e, APIError):
            raise LLMError(f"Claude API error: {e}") from e
        raise LLMError(f"Claude error: {e}") from e

    def generate(
        self,
        messages: list[dict],
        system: str | None = None,
        max_tokens: int = 2000,
        json_mode: bool = False,
        temperature: float | None = None,
    ) -> str:
        if json_mode:
            system = f"{system}\n\n{_JSON_DIRECTIVE}" if system else _JSON_DIRECTIVE

        kwargs = {
            "model": self.model,
            "max_tokens": max_tokens,
            "messages": messages,
        }
        if system:
            kwargs["system"] = system
        if temperature is not None:
            kwargs["temperature"] = temperature

        try:
            response = self.client.messages.create(**kwargs)
        except Exception as e:
            self._handle_error(e)

        text_parts = [
            block.text for block in response.content if isinstance(getattr(block, "text", None), str)
        ]
        if not text_parts:
            raise LLMError("Claude returned an empty response")
        return "".join(text_parts)
