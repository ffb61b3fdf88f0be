"""HttpTranscriptionClient — multipart upload to ASR servers via httpx."""
import json
import logging
from typing import Any, Optional

import httpx

from asr_compare.constants import (
    ERROR_BODY_LIMIT,
    MSG_ERR_BAD_BODY,
    MSG_ERR_STATUS,
    MSG_ERR_TIMEOUT,
    MSG_ERR_TRANSPORT,
    MSG_HEALTH_FAILED,
    MSG_LEG_START,
    PATH_HEALTH,
    PATH_MODELS,
    PATH_TRANSCRIBE_UPLOAD,
    UPLOAD_FIELD,
)
from asr_compare.models import (
    BackendDescriptor,
    BackendRequest,
    ErrorKind,
    Task,
    TranscriptionResult,
)
from asr_compare.transcription.client import BackendCallError, TranscriptionClient

logger = logging.getLogger(__name__)


# ── pure helpers (module-level so tests can import them directly) ──────────────


def _describe(exc: Exception) -> str:
    return str(exc) or type(exc).__name__


def _auth_headers(backend: BackendDescriptor) -> dict[str, str]:
    match backend.api_key:
        case str() as key if key:
            return {"Authorization": f"Bearer {key}"}
        case _:
            return {}


def _raise_for_status(response: httpx.Response) -> None:
    match response.is_success:
        case True:
            return
        case False:
            body = response.text[:ERROR_BODY_LIMIT]
            raise BackendCallError(
                ErrorKind.BACKEND_REJECTED, MSG_ERR_STATUS % (response.status_code, body)
            )


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise BackendCallError(ErrorKind.BACKEND_REJECTED, MSG_ERR_BAD_BODY % exc) from exc


def _parse_task(raw: Any, fallback: Task) -> Task:
    try:
        return Task(raw)
    except ValueError:
        return fallback


def parse_result(payload: Any, request: BackendRequest) -> TranscriptionResult:
    """Turn a success body into a TranscriptionResult, falling back to request provenance."""
    match payload:
        case {"text": str() as text}:
            pass
        case _:
            raise BackendCallError(
                ErrorKind.BACKEND_REJECTED,
                MSG_ERR_BAD_BODY % repr(payload)[:ERROR_BODY_LIMIT],
            )

    audio = request.audio
    recording = audio.recording
    return TranscriptionResult(
        backend=request.backend,
        text=text.strip(),
        task=_parse_task(payload.get("task"), request.task),
        language=payload.get("language") or request.language,
        file_name=payload.get("file_name") or (None if recording else audio.file_name),
        file_size=payload.get("file_size") or (None if recording else audio.size),
        recorded_seconds=payload.get("recorded_seconds") or (recording.seconds if recording else None),
        sample_rate=payload.get("sample_rate") or (recording.sample_rate if recording else None),
    )


# ── client ────────────────────────────────────────────────────────────────────


class HttpTranscriptionClient(TranscriptionClient):
    """Talks to ``{base_url}/transcribe/upload``. The httpx pool is shared by all legs."""

    def __init__(self, http: Optional[httpx.AsyncClient] = None) -> None:
        self._http = http or httpx.AsyncClient()

    async def __aenter__(self) -> "HttpTranscriptionClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _exchange(
        self, request: BackendRequest, backend: BackendDescriptor, deadline: float
    ) -> TranscriptionResult:
        audio = request.audio
        logger.info(MSG_LEG_START, backend.key)
        try:
            response = await self._http.post(
                backend.base_url + PATH_TRANSCRIBE_UPLOAD,
                data=request.form_fields(),
                files={UPLOAD_FIELD: (audio.file_name, audio.data, audio.media_type)},
                headers=_auth_headers(backend),
                timeout=deadline,
            )
        except httpx.TimeoutException as exc:
            raise BackendCallError(ErrorKind.TIMEOUT, MSG_ERR_TIMEOUT % deadline) from exc
        except httpx.TransportError as exc:
            raise BackendCallError(ErrorKind.TRANSPORT, MSG_ERR_TRANSPORT % _describe(exc)) from exc

        _raise_for_status(response)
        return parse_result(_json_body(response), request)

    # ── server introspection ─────────────────────────────────────────────────

    async def health_check(self, base_url: str, timeout: float = 5.0) -> bool:
        try:
            response = await self._http.get(base_url + PATH_HEALTH, timeout=timeout)
        except httpx.HTTPError as exc:
            logger.warning(MSG_HEALTH_FAILED, base_url, _describe(exc))
            return False
        return response.status_code == 200

    async def list_models(self, base_url: str, timeout: float = 5.0) -> dict[str, Any]:
        """Return the server's ``/models`` listing. Raises BackendCallError on failure."""
        try:
            response = await self._http.get(base_url + PATH_MODELS, timeout=timeout)
        except httpx.TimeoutException as exc:
            raise BackendCallError(ErrorKind.TIMEOUT, MSG_ERR_TIMEOUT % timeout) from exc
        except httpx.TransportError as exc:
            raise BackendCallError(ErrorKind.TRANSPORT, MSG_ERR_TRANSPORT % _describe(exc)) from exc
        _raise_for_status(response)
        match _json_body(response):
            case dict() as listing:
                return listing
            case other:
                raise BackendCallError(
                    ErrorKind.BACKEND_REJECTED, MSG_ERR_BAD_BODY % repr(other)[:ERROR_BODY_LIMIT]
                )
