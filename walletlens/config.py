import os

from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def model_post_init(self, __context: Any) -> None:
        """Pick up the legacy Next.js style variable when the primary one is unset."""

        super().model_post_init(__context)

        if not self.moralis_api_key:
            fallback = os.getenv("NEXT_PUBLIC_MORALIS_API_KEY")
            if fallback:
                object.__setattr__(self, "moralis_api_key", fallback)

    # Server Settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")

    # Indexer
    moralis_api_key: str = Field(
        default="",
        description="Moralis API key",
        validation_alias=AliasChoices("moralis_api_key", "MORALIS_API_KEY", "MORALIS_KEY"),
    )
    moralis_base_url: str = Field(
        default="https://deep-index.moralis.io/api/v2",
        description="Base URL for the Moralis deep index API",
    )
    enable_moralis: bool = Field(default=True, description="Enable Moralis provider")
    default_chain: str = Field(default="base", description="Chain used when the request names none")

    # Timeouts & concurrency
    request_timeout_seconds: int = Field(default=30, description="Indexer request timeout")
    metadata_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout for a single NFT token URI metadata fetch",
    )
    max_concurrent_requests: int = Field(
        default=10,
        ge=1,
        description="Max concurrent token URI metadata fetches per request",
    )

    # Client
    api_base_url: str = Field(
        default="http://127.0.0.1:8000",
        description="Base URL the presentation client calls",
    )

    @property
    def has_moralis_key(self) -> bool:
        return bool(self.moralis_api_key)


# Global settings instance
settings = Settings()
