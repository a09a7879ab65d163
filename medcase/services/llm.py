import logging

from anthropic import AsyncAnthropic
from openai import AsyncOpenAI

from medcase.config import (
    ANTHROPIC_API_KEY,
    LLM_DEFAULT_TIER,
    LLM_MODEL_FAST,
    LLM_MODEL_HIGH,
    LLM_MODEL_STANDARD,
    LLM_PROVIDER,
    OPENAI_API_KEY,
)

logger = logging.getLogger(__name__)


_ANTHROPIC_DEFAULTS = {
    "fast": "claude-3-5-haiku-20241022",
    "standard": "claude-sonnet-4-20250514",
    "high": "claude-sonnet-4-20250514",
}

_OPENAI_DEFAULTS = {
    "fast": "gpt-4o-mini",
    "standard": "gpt-4o",
    "high": "gpt-4o",
}


class LLMClient:
    def __init__(self) -> None:
        provider = (LLM_PROVIDER or "auto").lower()
        if provider == "auto":
            if ANTHROPIC_API_KEY:
                provider = "anthropic"
            elif OPENAI_API_KEY:
                provider = "openai"
            else:
                provider = "none"
        self.provider = provider

        self._anthropic = AsyncAnthropic(api_key=ANTHROPIC_API_KEY) if ANTHROPIC_API_KEY else None
        self._openai = AsyncOpenAI(api_key=OPENAI_API_KEY) if OPENAI_API_KEY else None

    def available(self) -> bool:
        if self.provider == "anthropic":
            return self._anthropic is not None
        if self.provider == "openai":
            return self._openai is not None
        return False

    def model_for_tier(self, tier: str | None) -> str:
        tier = (tier or LLM_DEFAULT_TIER or "standard").lower()
        if tier not in ("fast", "standard", "high"):
            tier = "standard"

        if tier == "fast" and LLM_MODEL_FAST:
            return LLM_MODEL_FAST
        if tier == "standard" and LLM_MODEL_STANDARD:
            return LLM_MODEL_STANDARD
        if tier == "high" and LLM_MODEL_HIGH:
            return LLM_MODEL_HIGH

        if self.provider == "anthropic":
            return _ANTHROPIC_DEFAULTS[tier]
        return _OPENAI_DEFAULTS[tier]

    async def generate_text(
        self,
        *,
        system: str,
        user: str,
        max_tokens: int = 4000,
        tier: str | None = None,
    ) -> str:
        """Send one system + user exchange and return the reply as plain text."""
        if not self.available():
            raise RuntimeError("LLM provider unavailable")

        model = self.model_for_tier(tier)
        logger.debug("Requesting completion from %s (%s)", self.provider, model)

        if self.provider == "anthropic":
            message = await self._anthropic.messages.create(
                model=model,
                max_tokens=max_tokens,
                system=system,
                messages=[{"role": "user", "content": user}],
            )
            raw = ""
            for block in message.content:
                if hasattr(block, "text"):
                    raw += block.text
        else:
            response = await self._openai.chat.completions.create(
                model=model,
                max_tokens=max_tokens,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
            )
            raw = response.choices[0].message.content or ""

        if not raw.strip():
            raise RuntimeError("LLM returned an empty response")
        return raw


_client: LLMClient | None = None


def get_llm_client() -> LLMClient:
    global _client
    if _client is None:
        _client = LLMClient()
    return _client
