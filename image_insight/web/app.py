"""
Purpose:
- FastAPI application factory for the upload page and the JSON analysis API.
- The analyzer is built by the caller and injected, so tests can pass a fake VisionClient.
"""
import uuid

from fastapi import APIRouter, Cookie, FastAPI, File, Request, Response, UploadFile
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, Field

from image_insight.analyzer import ImageAnalyzer
from image_insight.config import Config
from image_insight.constants import (
    APP_TITLE,
    APP_VERSION,
    MSG_CYCLE_IN_PROGRESS,
    MSG_FILE_TOO_LARGE,
    SESSION_COOKIE,
)
from image_insight.encoder import SourceFile, parse_data_uri
from image_insight.errors import ValidationError
from image_insight.models import AnalysisResult, ErrorKind, Failure, Success
from image_insight.session import AnalysisSession, SessionStore
from image_insight.web.page import INDEX_HTML

router = APIRouter()
api = APIRouter(prefix="/api/v1", tags=["analysis"])


class UploadSourceFile(SourceFile):
    """SourceFile over a FastAPI UploadFile; rewinds so repeated reads return the same bytes."""

    def __init__(self, upload: UploadFile) -> None:
        self._upload = upload
        self.media_type = upload.content_type or ""
        self.size = upload.size

    async def read(self) -> bytes:
        await self._upload.seek(0)
        return await self._upload.read()


class InlineImageIn(BaseModel):
    image: str = Field(..., description="Base64 data URI, e.g. data:image/png;base64,...")


# ── helpers ───────────────────────────────────────────────────────────────────


_FAILURE_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.READ: 400,
    ErrorKind.REMOTE: 502,
}


def _result_response(result: AnalysisResult) -> JSONResponse:
    match result:
        case Success(text=text):
            return JSONResponse({"ok": True, "text": text})
        case Failure(message=message, kind=kind):
            return JSONResponse(
                status_code=_FAILURE_STATUS[kind],
                content={"ok": False, "error": message, "kind": kind.value},
            )


def _analyzer(request: Request) -> ImageAnalyzer:
    return request.app.state.analyzer


def _session(request: Request, response: Response, session_id: str | None) -> AnalysisSession:
    match session_id:
        case str() as sid if sid:
            pass
        case _:
            sid = uuid.uuid4().hex
            response.set_cookie(SESSION_COOKIE, sid, httponly=True, samesite="lax")
    return request.app.state.sessions.get(sid)


# ── page + health ─────────────────────────────────────────────────────────────


@router.get("/", response_class=HTMLResponse)
def index() -> HTMLResponse:
    return HTMLResponse(INDEX_HTML.format(title=APP_TITLE))


@router.get("/healthz")
def healthz(request: Request) -> dict:
    vision = _analyzer(request).vision
    return {"status": "ok", "provider": vision.provider, "model": vision.model}


# ── stateless analysis ────────────────────────────────────────────────────────


def _oversize(request: Request, size: int | None) -> Failure | None:
    limit = request.app.state.config.max_upload_bytes
    match size:
        case int() as n if n > limit:
            return Failure(MSG_FILE_TOO_LARGE % (n, limit), ErrorKind.VALIDATION)
        case _:
            return None


@api.post("/analyze")
async def analyze(request: Request, image: UploadFile = File(...)) -> JSONResponse:
    match _oversize(request, image.size):
        case Failure() as failure:
            return _result_response(failure)
        case None:
            pass
    result = await _analyzer(request).describe(UploadSourceFile(image))
    return _result_response(result)


@api.post("/analyze/inline")
async def analyze_inline(request: Request, body: InlineImageIn) -> JSONResponse:
    try:
        payload = parse_data_uri(body.image)
    except ValidationError as exc:
        return _result_response(Failure(str(exc), ErrorKind.VALIDATION))
    match _oversize(request, len(payload.to_bytes())):
        case Failure() as failure:
            return _result_response(failure)
        case None:
            pass
    result = await _analyzer(request).analyze_payload(payload)
    return _result_response(result)


# ── session (browser page) ────────────────────────────────────────────────────


@api.get("/session")
def session_view(
    request: Request,
    response: Response,
    session_id: str | None = Cookie(default=None, alias=SESSION_COOKIE),
) -> dict:
    return _session(request, response, session_id).view().to_dict()


@api.post("/session/image")
async def session_select(
    request: Request,
    response: Response,
    image: UploadFile = File(...),
    session_id: str | None = Cookie(default=None, alias=SESSION_COOKIE),
) -> dict:
    session = _session(request, response, session_id)
    view = await session.select(UploadSourceFile(image))
    return view.to_dict()


@api.post("/session/analyze", response_model=None)
async def session_analyze(
    request: Request,
    response: Response,
    session_id: str | None = Cookie(default=None, alias=SESSION_COOKIE),
) -> JSONResponse | dict:
    session = _session(request, response, session_id)
    match session.busy or session.loading:
        case True:
            return JSONResponse(
                status_code=409,
                content={**session.view().to_dict(), "error": MSG_CYCLE_IN_PROGRESS},
            )
        case False:
            pass
    view = await session.analyze()
    return view.to_dict()


def create_app(config: Config, analyzer: ImageAnalyzer) -> FastAPI:
    app = FastAPI(title=APP_TITLE, version=APP_VERSION)
    app.state.config = config
    app.state.analyzer = analyzer
    app.state.sessions = SessionStore(analyzer, config.max_upload_bytes)
    app.include_router(router)
    app.include_router(api)
    return app
