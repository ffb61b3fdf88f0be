"""WhisperTranscriptionClient — OpenAI Whisper speech-to-text backend."""
import io
import logging

import openai
from openai import AsyncOpenAI

from asr_compare.constants import (
    ERROR_BODY_LIMIT,
    MSG_ERR_STATUS,
    MSG_ERR_TIMEOUT,
    MSG_ERR_TRANSPORT,
    MSG_LEG_START,
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


def _whisper_kwargs(request: BackendRequest) -> dict:
    kwargs: dict = {"model": request.model}
    match request.options.get("prompt"):
        case str() as prompt if prompt:
            kwargs["prompt"] = prompt
        case _:
            pass
    match request.options.get("temperature"):
        case float() | int() as temperature if temperature:
            kwargs["temperature"] = temperature
        case _:
            pass
    # Whisper's translation endpoint always targets English and takes no language.
    match (request.task, request.language):
        case (Task.TRANSCRIBE, str() as lang) if lang:
            kwargs["language"] = lang
        case _:
            pass
    return kwargs


class WhisperTranscriptionClient(TranscriptionClient):

    def __init__(self, api_key: str | None = None) -> None:
        self._api_key = api_key

    async def _exchange(
        self, request: BackendRequest, backend: BackendDescriptor, deadline: float
    ) -> TranscriptionResult:
        logger.info(MSG_LEG_START, backend.key)
        audio_file = io.BytesIO(request.audio.data)
        audio_file.name = request.audio.file_name
        async with AsyncOpenAI(
            api_key=backend.api_key or self._api_key,
            base_url=backend.base_url,
            timeout=deadline,
            max_retries=0,
        ) as client:
            endpoint = (
                client.audio.translations
                if request.task is Task.TRANSLATE
                else client.audio.transcriptions
            )
            try:
                response = await endpoint.create(file=audio_file, **_whisper_kwargs(request))
            except openai.APITimeoutError as exc:
                raise BackendCallError(ErrorKind.TIMEOUT, MSG_ERR_TIMEOUT % deadline) from exc
            except openai.APIConnectionError as exc:
                raise BackendCallError(ErrorKind.TRANSPORT, MSG_ERR_TRANSPORT % exc) from exc
            except openai.APIStatusError as exc:
                raise BackendCallError(
                    ErrorKind.BACKEND_REJECTED,
                    MSG_ERR_STATUS % (exc.status_code, str(exc.message)[:ERROR_BODY_LIMIT]),
                ) from exc

        # Translation output is English and no language hint is sent for it.
        return TranscriptionResult(
            backend=request.backend,
            text=response.text.strip(),
            task=request.task,
            language=None if request.task is Task.TRANSLATE else request.language,
            file_name=request.audio.file_name,
            file_size=request.audio.size,
        )
