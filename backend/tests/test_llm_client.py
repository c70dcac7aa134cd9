import pytest
from pydantic import BaseModel

from config import settings
from models.schemas.agents import AnalysisResult
from models.schemas.local import LocalAnalysisAgent
from services.errors import LLMProviderError
from services.llm_client import (
    OpenAICompatibleClient,
    get_llm_client,
    parse_structured,
    schema_instruction,
    strip_code_fences,
)


class Verdict(BaseModel):
    score: int
    notes: list[str] = []


def test_strip_code_fences():
    assert strip_code_fences('```json\n{"score": 1}\n```') == '{"score": 1}'
    assert strip_code_fences('  {"score": 1}  ') == '{"score": 1}'


def test_parse_structured():
    result = parse_structured(Verdict, '```json\n{"score": 72, "notes": ["ok"]}\n```')
    assert result == Verdict(score=72, notes=["ok"])


def test_parse_structured_empty():
    with pytest.raises(LLMProviderError, match="Empty response"):
        parse_structured(Verdict, "")


def test_parse_structured_invalid_json():
    with pytest.raises(LLMProviderError, match="Invalid JSON"):
        parse_structured(Verdict, "score: 72")


def test_parse_structured_schema_mismatch():
    with pytest.raises(LLMProviderError, match="does not match Verdict"):
        parse_structured(Verdict, '{"notes": []}')


@pytest.mark.parametrize("schema", [AnalysisResult, LocalAnalysisAgent])
@pytest.mark.parametrize("raw", ["NaN", "Infinity", "-Infinity"])
def test_parse_structured_rejects_non_finite_scores(schema, raw):
    with pytest.raises(LLMProviderError, match=f"does not match {schema.__name__}"):
        parse_structured(schema, f'{{"final_score": {raw}}}')


def test_schema_instruction_embeds_json_schema():
    text = schema_instruction(Verdict)
    assert "JSON" in text
    assert '"score"' in text


def test_ollama_client_points_at_v1(monkeypatch):
    monkeypatch.setattr(settings, "ollama_base_url", "http://localhost:11434/")
    client = get_llm_client("ollama", "llama3.2")
    assert isinstance(client, OpenAICompatibleClient)
    assert client.provider == "ollama"
    assert client.model == "llama3.2"
    assert str(client._client.base_url).rstrip("/") == "http://localhost:11434/v1"


@pytest.mark.parametrize("provider,field", [
    ("openai", "openai_api_key"),
    ("deepseek", "deepseek_api_key"),
    ("gemini", "gemini_api_key"),
])
def test_missing_api_key(monkeypatch, provider, field):
    monkeypatch.setattr(settings, field, "")
    with pytest.raises(LLMProviderError, match="API_KEY is missing"):
        get_llm_client(provider, "some-model")


def test_unsupported_provider():
    with pytest.raises(LLMProviderError, match="Unsupported provider"):
        get_llm_client("anthropic-local", "x")
