"""GeminiVisionClient — Google Gemini vision backend."""
from google import genai
from google.genai import types

from image_insight.constants import GEMINI_VISION_MODEL, PROVIDER_GEMINI
from image_insight.models import AnalysisRequest
from image_insight.vision.client import VisionClient


class GeminiVisionClient(VisionClient):
    provider = PROVIDER_GEMINI

    def __init__(self, api_key: str, model: str = GEMINI_VISION_MODEL) -> None:
        self._api_key = api_key
        self.model = model

    async def analyze(self, request: AnalysisRequest) -> str:
        client = genai.Client(api_key=self._api_key)
        payload = request.payload
        response = await client.aio.models.generate_content(
            model=self.model,
            contents=[
                types.Content(
                    role="user",
                    parts=[
                        types.Part.from_text(text=request.instruction),
                        types.Part.from_bytes(
                            data=payload.to_bytes(), mime_type=payload.mime_type
                        ),
                    ],
                )
            ],
        )
        return response.text or ""
