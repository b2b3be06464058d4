"""Configuration management using Pydantic settings."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Client settings loaded from environment variables and .env."""

    # API settings
    semantic_scholar_api_key: str = ""
    semantic_scholar_base_url: str = "https://api.semanticscholar.org/graph/v1"
    semantic_scholar_request_timeout: int = 30

    # Retry policy: fixed attempt budget, fixed wait between attempts
    semantic_scholar_max_retries: int = 5
    semantic_scholar_retry_wait: float = 10.0

    user_agent: str = "ss-tools"

    # Monitoring
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


def load_settings(**overrides) -> Settings:
    """Build a fresh Settings instance.

    Keyword overrides take precedence over the environment, which is
    convenient for tests and for callers that hold their own credentials.
    """
    return Settings(**overrides)
