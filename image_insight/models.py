"""Value types passed between the encoder, the analyzer and the surfaces."""
import base64
from dataclasses import dataclass
from enum import Enum

from image_insight.constants import MSG_EMPTY_INSTRUCTION
from image_insight.errors import ValidationError


@dataclass(frozen=True)
class EncodedPayload:
    data: str
    mime_type: str

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.data, validate=True)


@dataclass(frozen=True)
class AnalysisRequest:
    instruction: str
    payload: EncodedPayload

    def __post_init__(self) -> None:
        match self.instruction.strip():
            case "":
                raise ValidationError(MSG_EMPTY_INSTRUCTION)
            case _:
                pass


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    READ = "read"
    REMOTE = "remote"


@dataclass(frozen=True)
class Success:
    text: str


@dataclass(frozen=True)
class Failure:
    message: str
    kind: ErrorKind = ErrorKind.REMOTE


AnalysisResult = Success | Failure
