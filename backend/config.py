import os
from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    # Provider credentials / endpoints
    default_provider: str = "ollama"
    default_model: str = "llama3.2"
    ollama_base_url: str = "http://127.0.0.1:11434"
    openai_api_key: str = ""
    openai_base_url: str = ""
    deepseek_api_key: str = ""
    deepseek_base_url: str = "https://api.deepseek.com"
    gemini_api_key: str = ""

    # Deadlines (milliseconds)
    semantic_timeout_ms: int = 60000
    agent_timeout_ms: int = 120000

    # Per-user fixed-window rate limit
    rate_limit_window_ms: int = 60000
    rate_limit_max_requests: int = 5
    rate_limit_cleanup_threshold: int = 1000

    # Retry policy for agent calls: RETRY_MAX_ATTEMPTS retries after the first try
    retry_max_attempts: int = 1
    retry_base_delay_ms: int = 1000
    retry_backoff_multiplier: float = 2

    analysis_temperature: float = 0.1
    feedback_temperature: float = 0.3

    # Score job matches from deterministic keyword overlap when semantic extraction fails
    job_match_keyword_fallback: bool = False

    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    log_level: str = "INFO"
    debug: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
