"""Application settings using Pydantic."""

from functools import lru_cache
from pathlib import Path

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # LLM Configuration
    llm_provider: str = "deepseek"  # "deepseek" (hosted) or "ollama" (local)
    llm_model_name: str = "deepseek-chat"
    llm_base_url: str = "https://api.deepseek.com"
    deepseek_api_key: SecretStr | None = None
    llm_ollama_base_url: str = "http://localhost:11434"
    llm_temperature: float = 0.1
    llm_max_tokens: int = 4096
    llm_request_timeout: int = 120

    # Analysis Configuration
    max_chunk_chars: int = 24000
    min_text_length: int = 200
    chunk_delay_seconds: float = 0.5
    document_delay_seconds: float = 1.5
    rate_limit_backoff_seconds: float = 10.0
    rate_limit_max_retries: int | None = None  # None retries until the run is stopped
    min_priority: int = 1
    budget_cents: float | None = None
    estimated_output_tokens_per_document: int = 500

    # Pricing, cents per million tokens
    input_cost_per_million: float = 0.27
    output_cost_per_million: float = 1.10

    # Priority Configuration
    priority_data_sets: list[str] = []
    large_file_bytes: int = 50_000_000

    # Storage Configuration
    extracted_dir: Path = Path("data/extracted")
    output_dir: Path = Path("data/ai-analyzed")
    invalid_subdir: str = "invalid"
    roster_path: Path = Path("data/roster.json")
    database_url: str = "sqlite:///data/records.db"

    # Roster Configuration
    roster_top_n: int = 300
    roster_fetch_limit: int = 1500

    # Logging
    log_level: str = "INFO"

    @property
    def invalid_output_dir(self) -> Path:
        """Directory holding captured invalid model responses."""
        return self.output_dir / self.invalid_subdir


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
