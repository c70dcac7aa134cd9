"""Structured-output LLM clients.

Every provider is reduced to one call: send a system prompt and a prompt,
get back an instance of a pydantic schema. Anything that goes wrong on the
way (transport, empty reply, invalid JSON, schema mismatch) surfaces as
``LLMProviderError``.
"""

import json
import logging
from typing import Protocol, TypeVar

from google import genai
from google.genai import types
from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, ValidationError

from config import settings
from services.errors import LLMProviderError

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

MAX_OUTPUT_TOKENS = 4096


class LLMClient(Protocol):
    provider: str
    model: str

    async def generate_structured(
        self,
        *,
        schema: type[SchemaT],
        system_prompt: str,
        prompt: str,
        temperature: float,
    ) -> SchemaT: ...


def strip_code_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()
    return text


def parse_structured(schema: type[SchemaT], text: str | None) -> SchemaT:
    """Parse a model reply into ``schema``."""
    if not text:
        raise LLMProviderError(f"Empty response for {schema.__name__}")
    try:
        return schema.model_validate(json.loads(strip_code_fences(text)))
    except json.JSONDecodeError as e:
        logger.error("Failed to parse LLM response as JSON: %s", e)
        raise LLMProviderError(f"Invalid JSON for {schema.__name__}: {e}") from e
    except ValidationError as e:
        logger.error("LLM response does not match %s: %s", schema.__name__, e)
        raise LLMProviderError(f"Response does not match {schema.__name__}") from e


def schema_instruction(schema: type[BaseModel]) -> str:
    return (
        "Respond with a single JSON object only, no prose or markdown, "
        "conforming to this JSON schema:\n"
        f"{json.dumps(schema.model_json_schema())}"
    )


class GeminiClient:
    provider = "gemini"

    def __init__(self, model: str, api_key: str | None = None):
        self.model = model
        key = api_key or settings.gemini_api_key
        if not key:
            raise LLMProviderError("GEMINI_API_KEY is missing", "gemini")
        self._client = genai.Client(api_key=key)

    async def generate_structured(
        self,
        *,
        schema: type[SchemaT],
        system_prompt: str,
        prompt: str,
        temperature: float,
    ) -> SchemaT:
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    system_instruction=f"{system_prompt}\n\n{schema_instruction(schema)}",
                    temperature=temperature,
                    max_output_tokens=MAX_OUTPUT_TOKENS,
                    response_mime_type="application/json",
                ),
            )
        except Exception as e:
            logger.error("Gemini API error: %s", e)
            raise LLMProviderError(f"Gemini API error: {e}", "gemini") from e
        return parse_structured(schema, response.text)


class OpenAICompatibleClient:
    """OpenAI chat-completions client; also serves DeepSeek and Ollama."""

    def __init__(
        self,
        provider: str,
        model: str,
        api_key: str,
        base_url: str | None = None,
        timeout_s: float = 300.0,
    ):
        self.provider = provider
        self.model = model
        # Retries and deadlines are owned by the pipeline
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url or None,
            timeout=timeout_s,
            max_retries=0,
        )

    async def generate_structured(
        self,
        *,
        schema: type[SchemaT],
        system_prompt: str,
        prompt: str,
        temperature: float,
    ) -> SchemaT:
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": f"{system_prompt}\n\n{schema_instruction(schema)}"},
                    {"role": "user", "content": prompt},
                ],
                temperature=temperature,
                response_format={"type": "json_object"},
                max_tokens=MAX_OUTPUT_TOKENS,
            )
        except OpenAIError as e:
            logger.error("%s API error: %s", self.provider, e)
            raise LLMProviderError(f"{self.provider} API error: {e}", self.provider) from e

        content = response.choices[0].message.content if response.choices else None
        return parse_structured(schema, content)


SUPPORTED_PROVIDERS = ("ollama", "openai", "deepseek", "gemini")


def get_llm_client(provider: str, model: str) -> LLMClient:
    """Build a client for ``provider``. Raises ``LLMProviderError`` when misconfigured."""
    if provider == "ollama":
        return OpenAICompatibleClient(
            "ollama", model, api_key="ollama", base_url=f"{settings.ollama_base_url.rstrip('/')}/v1"
        )
    if provider == "openai":
        if not settings.openai_api_key:
            raise LLMProviderError("OPENAI_API_KEY is missing", provider)
        return OpenAICompatibleClient(
            "openai", model, api_key=settings.openai_api_key, base_url=settings.openai_base_url
        )
    if provider == "deepseek":
        if not settings.deepseek_api_key:
            raise LLMProviderError("DEEPSEEK_API_KEY is missing", provider)
        return OpenAICompatibleClient(
            "deepseek", model, api_key=settings.deepseek_api_key, base_url=settings.deepseek_base_url
        )
    if provider == "gemini":
        return GeminiClient(model)
    raise LLMProviderError(f"Unsupported provider '{provider}'", provider)
