"""OpenAIVisionClient — OpenAI GPT-4o vision backend."""
from openai import AsyncOpenAI

from image_insight.constants import MSG_REMOTE_NO_CHOICES, OPENAI_VISION_MODEL, PROVIDER_OPENAI
from image_insight.errors import RemoteError
from image_insight.models import AnalysisRequest
from image_insight.vision.client import VisionClient


class OpenAIVisionClient(VisionClient):
    provider = PROVIDER_OPENAI

    def __init__(self, api_key: str, model: str = OPENAI_VISION_MODEL) -> None:
        self._api_key = api_key
        self.model = model

    async def analyze(self, request: AnalysisRequest) -> str:
        client = AsyncOpenAI(api_key=self._api_key)
        payload = request.payload
        response = await client.chat.completions.create(
            model=self.model,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": request.instruction},
                        {
                            "type": "image_url",
                            "image_url": {"url": f"data:{payload.mime_type};base64,{payload.data}"},
                        },
                    ],
                }
            ],
        )
        match response.choices:
            case []:
                raise RemoteError(MSG_REMOTE_NO_CHOICES)
            case [choice, *_]:
                return choice.message.content or ""
