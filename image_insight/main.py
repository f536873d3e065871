"""Entry point — wires Config → VisionClient → ImageAnalyzer → FastAPI app."""
import logging
import sys

import uvicorn
from fastapi import FastAPI
from rich.logging import RichHandler

from image_insight.analyzer import ImageAnalyzer
from image_insight.config import Config
from image_insight.constants import (
    MSG_CONFIG_INVALID,
    MSG_SERVER_STARTING,
    PROVIDER_CLAUDE,
    PROVIDER_GEMINI,
    PROVIDER_OPENAI,
)
from image_insight.errors import ConfigError
from image_insight.vision.claude import ClaudeVisionClient
from image_insight.vision.client import VisionClient
from image_insight.vision.gemini import GeminiVisionClient
from image_insight.vision.openai import OpenAIVisionClient
from image_insight.web.app import create_app

_BACKENDS: dict[str, type[VisionClient]] = {
    PROVIDER_GEMINI: GeminiVisionClient,
    PROVIDER_CLAUDE: ClaudeVisionClient,
    PROVIDER_OPENAI: OpenAIVisionClient,
}


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(rich_tracebacks=True))


def build_vision_client(config: Config) -> VisionClient:
    backend = _BACKENDS[config.vision_provider]
    return backend(config.api_key, model=config.vision_model)


def build_app(config: Config) -> FastAPI:
    analyzer = ImageAnalyzer(build_vision_client(config), config.analysis_prompt)
    return create_app(config, analyzer)


def main() -> None:
    try:
        config = Config.from_env()
    except ConfigError as exc:
        _setup_logging("INFO")
        logging.getLogger(__name__).error(MSG_CONFIG_INVALID, exc)
        sys.exit(1)

    _setup_logging(config.log_level)
    logger = logging.getLogger(__name__)
    logger.info(
        MSG_SERVER_STARTING,
        config.host,
        config.port,
        config.vision_provider,
        config.vision_model,
    )

    app = build_app(config)
    uvicorn.run(app, host=config.host, port=config.port, log_config=None)


if __name__ == "__main__":
    main()
