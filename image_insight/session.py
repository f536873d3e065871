"""AnalysisSession — per-user analysis cycle state with a stale-result guard.

A cycle runs IDLE → ENCODING → SENDING → SUCCEEDED | FAILED. Every cycle gets a
generation number; selecting a new file or starting a new cycle bumps it, and a
cycle whose number is no longer current when it resolves is dropped instead of
overwriting what the user is looking at. Requests already sent are never
cancelled, only ignored.
"""
import logging
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum

from image_insight.analyzer import ImageAnalyzer
from image_insight.constants import (
    MAX_SESSIONS,
    MSG_CYCLE_BUSY,
    MSG_FILE_TOO_LARGE,
    MSG_NO_FILE_SELECTED,
    MSG_READ_FAILED,
    MSG_SESSION_EVICTED,
    MSG_STALE_RESULT,
    MSG_STALE_SELECT,
)
from image_insight.encoder import BytesSourceFile, SourceFile, encode, validate_media_type
from image_insight.errors import ReadError, ValidationError
from image_insight.models import AnalysisResult, ErrorKind, Failure, Success

logger = logging.getLogger(__name__)


class CycleState(str, Enum):
    IDLE = "idle"
    ENCODING = "encoding"
    SENDING = "sending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


BUSY_STATES = (CycleState.ENCODING, CycleState.SENDING)


@dataclass(frozen=True)
class SessionView:
    state: CycleState
    text: str
    error: str
    has_file: bool

    @property
    def busy(self) -> bool:
        return self.state in BUSY_STATES

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "text": self.text,
            "error": self.error,
            "has_file": self.has_file,
            "busy": self.busy,
        }


class AnalysisSession:

    def __init__(self, analyzer: ImageAnalyzer, max_upload_bytes: int | None = None) -> None:
        self._analyzer = analyzer
        self._max_upload_bytes = max_upload_bytes
        self._file: SourceFile | None = None
        self._generation = 0
        self._state = CycleState.IDLE
        self._text = ""
        self._error = ""
        self._loading: int | None = None

    @property
    def loading(self) -> bool:
        """True while the current selection's bytes are still being read."""
        return self._loading == self._generation

    @property
    def busy(self) -> bool:
        return self._state in BUSY_STATES

    def view(self) -> SessionView:
        return SessionView(
            state=self._state,
            text=self._text,
            error=self._error,
            has_file=self._file is not None,
        )

    # ── transitions ───────────────────────────────────────────────────────────

    def _reset(self, state: CycleState = CycleState.IDLE) -> None:
        self._generation += 1
        self._state = state
        self._text = ""
        self._error = ""

    def _fail(self, message: str) -> SessionView:
        self._state = CycleState.FAILED
        self._error = message
        return self.view()

    def _finish(self, generation: int, result: AnalysisResult) -> SessionView:
        match generation == self._generation:
            case False:
                logger.debug(MSG_STALE_RESULT, generation, self._generation)
                return self.view()
            case True:
                pass

        match result:
            case Success(text=text):
                self._state = CycleState.SUCCEEDED
                self._text = text
            case Failure(message=message):
                self._state = CycleState.FAILED
                self._error = message
        return self.view()

    # ── user actions ──────────────────────────────────────────────────────────

    async def select(self, source: SourceFile) -> SessionView:
        """Pick a new file. Supersedes any outstanding cycle."""
        self._reset()
        self._file = None
        generation = self._generation
        self._loading = generation
        content = b""
        try:
            validate_media_type(source.media_type)
            content = await source.read()
        except ValidationError as exc:
            error = str(exc)
        except Exception as exc:
            error = MSG_READ_FAILED % (str(exc) or type(exc).__name__)
        else:
            error = self._size_error(len(content))

        match generation == self._generation:
            case False:
                logger.debug(MSG_STALE_SELECT, generation, self._generation)
                return self.view()
            case True:
                self._loading = None

        match error:
            case str() as message:
                return self._fail(message)
            case None:
                self._file = BytesSourceFile(content, source.media_type)
                return self.view()

    def _size_error(self, size: int) -> str | None:
        match self._max_upload_bytes:
            case int() as limit if size > limit:
                return MSG_FILE_TOO_LARGE % (size, limit)
            case _:
                return None

    async def analyze(self) -> SessionView:
        """Run one cycle for the selected file; ignored while a cycle is outstanding."""
        match (self._file, self.busy or self.loading):
            case (_, True):
                logger.info(MSG_CYCLE_BUSY, self._generation)
                return self.view()
            case (None, _):
                self._reset()
                return self._fail(MSG_NO_FILE_SELECTED)
            case (source, _):
                pass

        self._reset(CycleState.ENCODING)
        generation = self._generation
        try:
            payload = await encode(source)
        except ReadError as exc:
            return self._finish(generation, Failure(str(exc), ErrorKind.READ))

        match generation == self._generation:
            case True:
                self._state = CycleState.SENDING
            case False:
                logger.debug(MSG_STALE_RESULT, generation, self._generation)
                return self.view()

        result = await self._analyzer.analyze(self._analyzer.build_request(payload))
        return self._finish(generation, result)


class SessionStore:
    """In-memory map of session id → AnalysisSession, least recently used evicted first."""

    def __init__(
        self,
        analyzer: ImageAnalyzer,
        max_upload_bytes: int | None = None,
        max_sessions: int = MAX_SESSIONS,
    ) -> None:
        self._analyzer = analyzer
        self._max_upload_bytes = max_upload_bytes
        self._max_sessions = max_sessions
        self._sessions: OrderedDict[str, AnalysisSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def get(self, session_id: str) -> AnalysisSession:
        match self._sessions.get(session_id):
            case None:
                session = AnalysisSession(self._analyzer, self._max_upload_bytes)
                self._sessions[session_id] = session
            case session:
                self._sessions.move_to_end(session_id)

        while len(self._sessions) > self._max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.debug(MSG_SESSION_EVICTED, evicted)
        return session
