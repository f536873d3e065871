"""TDD: ImageAnalyzer tests written FIRST"""
import base64

import pytest
from unittest.mock import AsyncMock

from image_insight.analyzer import ImageAnalyzer, _status_code, describe_error
from image_insight.encoder import BytesSourceFile, SourceFile
from image_insight.errors import ValidationError
from image_insight.models import (
    AnalysisRequest,
    EncodedPayload,
    ErrorKind,
    Failure,
    Success,
)
from image_insight.vision.client import VisionClient

PROMPT = "Describe everything in the image."


class FakeVision(VisionClient):
    provider = "fake"
    model = "fake-model"

    def __init__(self, text: str = "", error: Exception | None = None) -> None:
        self.analyze = AsyncMock(return_value=text, side_effect=error)

    async def analyze(self, request: AnalysisRequest) -> str:  # replaced per instance
        ...


class SDKStatusError(Exception):
    """Shaped like anthropic/openai APIStatusError."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class GenAIError(Exception):
    """Shaped like google.genai.errors.APIError."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(f"{code} {message}")
        self.code = code
        self.message = message


class UnreadableSource(SourceFile):
    media_type = "image/png"
    size = None

    async def read(self) -> bytes:
        raise OSError("stream detached")


def make_payload(content: bytes = b"img", mime_type: str = "image/png") -> EncodedPayload:
    return EncodedPayload(data=base64.b64encode(content).decode(), mime_type=mime_type)


# ── describe_error ────────────────────────────────────────────────────────────


def test_describe_error_auth_mentions_authentication_and_code():
    message = describe_error(SDKStatusError("invalid x-api-key", 401))

    assert "auth" in message
    assert "401" in message
    assert "invalid x-api-key" in message


def test_describe_error_reads_genai_code():
    message = describe_error(GenAIError(403, "API key not valid"))

    assert "authentication failed (403)" in message
    assert "API key not valid" in message


def test_describe_error_rate_limit():
    assert "rate limit exceeded (429)" in describe_error(SDKStatusError("slow down", 429))


def test_describe_error_other_status():
    assert "service returned 500" in describe_error(SDKStatusError("boom", 500))


def test_describe_error_without_code_uses_message():
    assert describe_error(ConnectionError("connection reset")) == (
        "Error analyzing image: connection reset"
    )


def test_describe_error_empty_message_uses_class_name():
    assert describe_error(TimeoutError()) == "Error analyzing image: TimeoutError"


def test_status_code_ignores_non_integer_code():
    exc = Exception("x")
    exc.code = "UNAVAILABLE"

    assert _status_code(exc) is None


# ── analyze ───────────────────────────────────────────────────────────────────


async def test_analyze_success_returns_text():
    vision = FakeVision(text="A cat on a chair.")
    analyzer = ImageAnalyzer(vision, PROMPT)

    result = await analyzer.analyze(analyzer.build_request(make_payload()))

    assert result == Success("A cat on a chair.")


async def test_analyze_empty_text_is_success_not_failure():
    analyzer = ImageAnalyzer(FakeVision(text=""), PROMPT)

    result = await analyzer.analyze(analyzer.build_request(make_payload()))

    assert result == Success("")


async def test_analyze_auth_error_becomes_failure():
    analyzer = ImageAnalyzer(FakeVision(error=SDKStatusError("bad key", 401)), PROMPT)

    result = await analyzer.analyze(analyzer.build_request(make_payload()))

    match result:
        case Failure(message=message, kind=kind):
            assert "auth" in message
            assert kind is ErrorKind.REMOTE
        case _:
            pytest.fail(f"expected Failure, got {result!r}")


async def test_analyze_never_raises_on_unexpected_error():
    analyzer = ImageAnalyzer(FakeVision(error=KeyError("candidates")), PROMPT)

    result = await analyzer.analyze(analyzer.build_request(make_payload()))

    assert isinstance(result, Failure)


async def test_analyze_sends_exactly_one_request_with_prompt():
    vision = FakeVision(text="ok")
    analyzer = ImageAnalyzer(vision, PROMPT)
    payload = make_payload(b"abc", "image/jpeg")

    await analyzer.analyze(analyzer.build_request(payload))

    vision.analyze.assert_awaited_once()
    request = vision.analyze.await_args.args[0]
    assert request.instruction == PROMPT
    assert request.payload == payload


def test_request_rejects_blank_instruction():
    with pytest.raises(ValidationError):
        AnalysisRequest(instruction="  ", payload=make_payload())


# ── describe (validate → encode → analyze) ────────────────────────────────────


async def test_describe_rejects_non_image_before_network_call():
    vision = FakeVision(text="should not be used")
    analyzer = ImageAnalyzer(vision, PROMPT)

    result = await analyzer.describe(BytesSourceFile(b"%PDF-1.7", "application/pdf"))

    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.VALIDATION
    vision.analyze.assert_not_awaited()


async def test_describe_read_error_becomes_failure():
    vision = FakeVision(text="unused")
    analyzer = ImageAnalyzer(vision, PROMPT)

    result = await analyzer.describe(UnreadableSource())

    assert result.kind is ErrorKind.READ
    assert "stream detached" in result.message
    vision.analyze.assert_not_awaited()


async def test_describe_encodes_and_sends_payload():
    vision = FakeVision(text="A cat on a chair.")
    analyzer = ImageAnalyzer(vision, PROMPT)

    result = await analyzer.describe(BytesSourceFile(b"\x89PNG", "image/png"))

    assert result == Success("A cat on a chair.")
    request = vision.analyze.await_args.args[0]
    assert request.payload.to_bytes() == b"\x89PNG"
    assert request.payload.mime_type == "image/png"


async def test_sequential_cycles_never_mix_payloads():
    vision = FakeVision(text="ok")
    analyzer = ImageAnalyzer(vision, PROMPT)

    await analyzer.describe(BytesSourceFile(b"first", "image/png"))
    await analyzer.describe(BytesSourceFile(b"second", "image/jpeg"))

    second = vision.analyze.await_args_list[1].args[0]
    assert second.payload.to_bytes() == b"second"
    assert second.payload.mime_type == "image/jpeg"


async def test_analyze_payload_rejects_non_image():
    vision = FakeVision(text="unused")
    analyzer = ImageAnalyzer(vision, PROMPT)

    result = await analyzer.analyze_payload(make_payload(mime_type="text/plain"))

    assert result.kind is ErrorKind.VALIDATION
    vision.analyze.assert_not_awaited()
