"""ImageAnalyzer — one remote call per request, normalized into an AnalysisResult."""
import logging
import time

from image_insight.constants import (
    MSG_ANALYSIS_ERROR,
    MSG_ANALYSIS_OK,
    MSG_ANALYSIS_REMOTE_FAIL,
    MSG_ANALYSIS_START,
    MSG_REMOTE_AUTH,
    MSG_REMOTE_RATE_LIMIT,
    MSG_REMOTE_STATUS,
)
from image_insight.encoder import SourceFile, encode, validate_media_type
from image_insight.errors import ReadError, ValidationError
from image_insight.models import (
    AnalysisRequest,
    AnalysisResult,
    EncodedPayload,
    ErrorKind,
    Failure,
    Success,
)
from image_insight.vision.client import VisionClient

logger = logging.getLogger(__name__)


# ── pure helpers (module-level so tests can import them directly) ──────────────


def _status_code(exc: Exception) -> int | None:
    """HTTP-ish status from SDK errors: `status_code` (anthropic/openai) or `code` (google-genai)."""
    match (getattr(exc, "status_code", None), getattr(exc, "code", None)):
        case (int() as code, _):
            return code
        case (_, int() as code):
            return code
        case _:
            return None


def _error_detail(exc: Exception) -> str:
    match getattr(exc, "message", None):
        case str() as message if message:
            return message
        case _:
            return str(exc) or type(exc).__name__


def describe_error(exc: Exception) -> str:
    """Human-readable one-liner for a failed remote call. Never a traceback."""
    detail = _error_detail(exc)
    match _status_code(exc):
        case 401 | 403 as code:
            reason = f"{MSG_REMOTE_AUTH % code}: {detail}"
        case 429 as code:
            reason = f"{MSG_REMOTE_RATE_LIMIT % code}: {detail}"
        case int() as code:
            reason = f"{MSG_REMOTE_STATUS % code}: {detail}"
        case None:
            reason = detail
    return MSG_ANALYSIS_ERROR % reason


# ── analyzer ──────────────────────────────────────────────────────────────────


class ImageAnalyzer:
    """Sends an AnalysisRequest to a VisionClient and never raises past itself."""

    def __init__(self, vision: VisionClient, prompt: str) -> None:
        self._vision = vision
        self._prompt = prompt

    @property
    def vision(self) -> VisionClient:
        return self._vision

    def build_request(self, payload: EncodedPayload) -> AnalysisRequest:
        return AnalysisRequest(instruction=self._prompt, payload=payload)

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        start = time.time()
        logger.info(
            MSG_ANALYSIS_START,
            self._vision.model,
            request.payload.mime_type,
            len(request.payload.data),
        )
        try:
            text = await self._vision.analyze(request)
        except Exception as exc:
            logger.exception(MSG_ANALYSIS_REMOTE_FAIL, time.time() - start)
            return Failure(describe_error(exc), ErrorKind.REMOTE)

        logger.info(MSG_ANALYSIS_OK, time.time() - start, len(text))
        return Success(text)

    async def analyze_payload(self, payload: EncodedPayload) -> AnalysisResult:
        """Analyze an already-encoded payload (e.g. a parsed data URI)."""
        try:
            validate_media_type(payload.mime_type)
        except ValidationError as exc:
            return Failure(str(exc), ErrorKind.VALIDATION)
        return await self.analyze(self.build_request(payload))

    async def describe(self, source: SourceFile) -> AnalysisResult:
        """Validate, encode and analyze one file with the configured prompt."""
        try:
            validate_media_type(source.media_type)
        except ValidationError as exc:
            return Failure(str(exc), ErrorKind.VALIDATION)

        try:
            payload = await encode(source)
        except ReadError as exc:
            return Failure(str(exc), ErrorKind.READ)

        return await self.analyze(self.build_request(payload))
