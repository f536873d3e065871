"""ClaudeVisionClient — Anthropic Claude vision backend."""
from anthropic import AsyncAnthropic

from image_insight.constants import CLAUDE_MAX_TOKENS, CLAUDE_VISION_MODEL, PROVIDER_CLAUDE
from image_insight.models import AnalysisRequest
from image_insight.vision.client import VisionClient


class ClaudeVisionClient(VisionClient):
    provider = PROVIDER_CLAUDE

    def __init__(self, api_key: str, model: str = CLAUDE_VISION_MODEL) -> None:
        self._api_key = api_key
        self.model = model

    async def analyze(self, request: AnalysisRequest) -> str:
        client = AsyncAnthropic(api_key=self._api_key)
        message = await client.messages.create(
            model=self.model,
            max_tokens=CLAUDE_MAX_TOKENS,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": request.instruction},
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": request.payload.mime_type,
                                "data": request.payload.data,
                            },
                        },
                    ],
                }
            ],
        )
        texts = filter(lambda block: block.type == "text", message.content)
        return "".join(map(lambda block: block.text, texts))
