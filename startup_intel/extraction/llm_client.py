"""LLM API client wrapper with provider abstraction."""

import asyncio

import structlog

from ..config.settings import settings, API_KEY_ENV_VARS

logger = structlog.get_logger()

# Used when SI_LLM_MODEL is not set
DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-5-haiku-latest",
    "gemini": "gemini-2.0-flash",
}


class ConfigurationError(Exception):
    """Raised when the model credential or provider is not configured."""


class LLMClient:
    """Unified LLM client supporting OpenAI, Anthropic, and Gemini."""

    def __init__(self, provider: str = None, api_key: str = None, model: str = None):
        self.provider = provider or settings.llm_provider
        self.model = model or settings.llm_model or DEFAULT_MODELS.get(self.provider)
        self._api_key = api_key
        self._client = None

    def _resolve_api_key(self) -> str:
        """Return the API key for the provider or raise ConfigurationError."""
        if self.provider not in API_KEY_ENV_VARS:
            raise ConfigurationError(f"Unknown LLM provider: {self.provider}")

        api_key = self._api_key or getattr(settings, f"{self.provider}_api_key", None)
        if not api_key:
            raise ConfigurationError(f"{API_KEY_ENV_VARS[self.provider]} is not configured")
        return api_key

    def ensure_configured(self) -> None:
        """Fail fast when no credential is available."""
        self._resolve_api_key()

    def _get_client(self):
        """Lazy initialization of the client."""
        if self._client is not None:
            return self._client

        api_key = self._resolve_api_key()

        if self.provider == "openai":
            import openai
            self._client = openai.AsyncOpenAI(api_key=api_key)

        elif self.provider == "anthropic":
            import anthropic
            self._client = anthropic.AsyncAnthropic(api_key=api_key)

        else:
            from google import genai
            self._client = genai.Client(api_key=api_key)

        return self._client

    async def complete(
        self,
        prompt: str,
        system: str = None,
        max_tokens: int = None,
        temperature: float = None,
        json_mode: bool = False
    ) -> str:
        """Generate a completion from the LLM. Single attempt, no retries."""
        client = self._get_client()
        max_tokens = max_tokens or settings.llm_max_tokens
        temperature = temperature if temperature is not None else settings.llm_temperature

        try:
            if self.provider == "openai":
                return await self._complete_openai(client, prompt, system, max_tokens, temperature, json_mode)
            elif self.provider == "anthropic":
                return await self._complete_anthropic(client, prompt, system, max_tokens, temperature)
            else:
                return await self._complete_gemini(client, prompt, system, max_tokens, temperature, json_mode)

        except Exception as e:
            logger.error("llm_call_failed", provider=self.provider, model=self.model, error=str(e))
            raise

    async def _complete_openai(self, client, prompt: str, system: str, max_tokens: int,
                               temperature: float, json_mode: bool) -> str:
        """Call OpenAI API."""
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        kwargs = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": messages
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = await client.chat.completions.create(**kwargs)
        return response.choices[0].message.content or ""

    async def _complete_anthropic(self, client, prompt: str, system: str, max_tokens: int,
                                  temperature: float) -> str:
        """Call Anthropic API. No JSON response mode; the prompt carries the contract."""
        messages = [{"role": "user", "content": prompt}]
        kwargs = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": messages
        }
        if system:
            kwargs["system"] = system

        response = await client.messages.create(**kwargs)
        return response.content[0].text

    async def _complete_gemini(self, client, prompt: str, system: str, max_tokens: int,
                               temperature: float, json_mode: bool) -> str:
        """Call Gemini API."""
        from google.genai import types

        # Combine system prompt with user prompt
        full_prompt = prompt
        if system:
            full_prompt = f"{system}\n\n{prompt}"

        config = types.GenerateContentConfig(
            temperature=temperature,
            max_output_tokens=max_tokens,
            response_mime_type="application/json" if json_mode else None,
        )

        # Gemini client is sync, run in executor
        def _sync_call():
            response = client.models.generate_content(
                model=self.model,
                contents=full_prompt,
                config=config,
            )
            return response.text

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, _sync_call)
