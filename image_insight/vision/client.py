"""VisionClient — abstract base for image analysis backends."""
from abc import ABC, abstractmethod

from image_insight.models import AnalysisRequest


class VisionClient(ABC):
    provider: str
    model: str

    @abstractmethod
    async def analyze(self, request: AnalysisRequest) -> str:
        """Send instruction + image in one call and return the generated text. Raises on failure."""
        ...
