from dataclasses import dataclass
from typing import Optional
import os
from dotenv import load_dotenv

from image_insight.constants import (
    API_KEY_ENV_NAMES,
    BYTES_PER_MB,
    DEFAULT_ANALYSIS_PROMPT,
    DEFAULT_HOST,
    DEFAULT_MAX_UPLOAD_MB,
    DEFAULT_PORT,
    DEFAULT_VISION_MODELS,
    PROVIDER_CLAUDE,
    PROVIDER_GEMINI,
    PROVIDER_OPENAI,
)
from image_insight.errors import ConfigError


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer (got {raw!r})") from exc


def _parse_megabytes(name: str, raw: str) -> int:
    try:
        return int(float(raw) * BYTES_PER_MB)
    except (ValueError, OverflowError) as exc:
        raise ConfigError(f"{name} must be a finite number of megabytes (got {raw!r})") from exc


@dataclass(frozen=True)
class Config:
    vision_provider: str
    api_key: str
    vision_model: str
    analysis_prompt: str
    log_level: str
    host: str
    port: int
    max_upload_bytes: int

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        provider = os.getenv("VISION_PROVIDER", PROVIDER_GEMINI).strip().lower()
        model = os.getenv("VISION_MODEL") or None
        prompt = os.getenv("ANALYSIS_PROMPT", DEFAULT_ANALYSIS_PROMPT)
        log_level = os.getenv("LOG_LEVEL", "INFO")
        host = os.getenv("HOST", DEFAULT_HOST)
        port = os.getenv("PORT", str(DEFAULT_PORT))
        max_upload_mb = os.getenv("MAX_UPLOAD_MB", str(DEFAULT_MAX_UPLOAD_MB))

        keys = {
            PROVIDER_GEMINI: os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or None,
            PROVIDER_CLAUDE: os.getenv("ANTHROPIC_API_KEY") or None,
            PROVIDER_OPENAI: os.getenv("OPENAI_API_KEY") or None,
        }

        return cls._validate(
            vision_provider=provider,
            api_key=keys.get(provider),
            vision_model=model,
            analysis_prompt=prompt,
            log_level=log_level,
            host=host,
            port=_parse_int("PORT", port),
            max_upload_bytes=_parse_megabytes("MAX_UPLOAD_MB", max_upload_mb),
        )

    @staticmethod
    def _validate(
        vision_provider: str,
        api_key: Optional[str],
        vision_model: Optional[str],
        analysis_prompt: str,
        log_level: str,
        host: str,
        port: int,
        max_upload_bytes: int,
    ) -> "Config":
        match vision_provider:
            case str() as p if p in DEFAULT_VISION_MODELS:
                pass
            case other:
                raise ConfigError(
                    f"VISION_PROVIDER must be one of {', '.join(DEFAULT_VISION_MODELS)} (got {other!r})"
                )

        match api_key:
            case None | "":
                raise ConfigError(f"{API_KEY_ENV_NAMES[vision_provider]} must be set in .env")
            case _:
                pass

        match analysis_prompt.strip():
            case "":
                raise ConfigError("ANALYSIS_PROMPT must not be blank")
            case _:
                pass

        match port:
            case int() as p if 0 < p < 65536:
                pass
            case _:
                raise ConfigError(f"PORT must be between 1 and 65535 (got {port})")

        match max_upload_bytes:
            case int() as n if n > 0:
                pass
            case _:
                raise ConfigError("MAX_UPLOAD_MB must be positive")

        return Config(
            vision_provider=vision_provider,
            api_key=api_key,
            vision_model=vision_model or DEFAULT_VISION_MODELS[vision_provider],
            analysis_prompt=analysis_prompt,
            log_level=log_level,
            host=host,
            port=port,
            max_upload_bytes=max_upload_bytes,
        )
