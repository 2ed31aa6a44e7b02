"""Completion service client.

Thin wrapper over ``litellm.completion`` that picks the text or vision model,
applies the configured limits, and turns provider failures into
``ExternalServiceError`` with a failure category callers can branch on.
"""

import logging
from typing import Any, Dict, List, Optional

from ..exceptions import ExternalServiceError, ServiceFailure

logger = logging.getLogger(__name__)


def classify_failure(exc: Exception) -> ServiceFailure:
    """Map a provider exception onto a failure category."""
    import litellm

    if isinstance(exc, litellm.RateLimitError):
        return ServiceFailure.RATE_LIMITED
    if isinstance(exc, (litellm.APIConnectionError, litellm.Timeout, ConnectionError, TimeoutError)):
        return ServiceFailure.UNREACHABLE
    return ServiceFailure.OTHER


class CompletionClient:
    """Sends chat-style messages to the configured model."""

    def __init__(
        self,
        model: str,
        vision_model: str = "",
        api_key: str = "",
        api_base: str = "",
        max_tokens: int = 1024,
        temperature: float = 0.3,
        timeout: int = 60,
    ):
        self.model = model
        self.vision_model = vision_model or model
        self.api_key = api_key
        self.api_base = api_base
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings) -> "CompletionClient":
        return cls(
            model=settings.chat_model,
            vision_model=settings.chat_vision_model,
            api_key=settings.chat_api_key,
            api_base=settings.chat_api_base,
            max_tokens=settings.chat_max_tokens,
            temperature=settings.chat_temperature,
            timeout=settings.chat_timeout,
        )

    def is_configured(self) -> bool:
        return bool(self.model)

    def complete(
        self,
        messages: List[Dict[str, Any]],
        vision: bool = False,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> str:
        """Return the text of the first choice.

        Raises:
            ExternalServiceError: not configured, or the provider call failed.
        """
        if not self.is_configured():
            raise ExternalServiceError(
                "completion",
                "The completion service is not configured. Set CHAT_MODEL.",
                category=ServiceFailure.NOT_CONFIGURED,
            )

        model = self.vision_model if vision else self.model
        kwargs: Dict[str, Any] = {
            "model": model,
            "messages": messages,
            "max_tokens": max_tokens or self.max_tokens,
            "temperature": self.temperature if temperature is None else temperature,
            "timeout": self.timeout,
        }
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.api_base:
            kwargs["api_base"] = self.api_base

        try:
            import litellm

            response = litellm.completion(**kwargs)
        except Exception as e:
            category = classify_failure(e)
            logger.warning(
                "Completion call failed",
                extra={"model": model, "category": category.value, "error": str(e)},
            )
            raise ExternalServiceError(
                "completion", f"Completion request failed: {type(e).__name__}", category=category
            ) from e

        return response.choices[0].message.content or ""
