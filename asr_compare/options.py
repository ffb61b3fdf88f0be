"""OptionMapper — shapes a model-agnostic request for one backend's capabilities."""
import logging

from asr_compare.constants import MSG_LANGUAGE_CLEARED, MSG_TASK_DOWNGRADED
from asr_compare.models import (
    BackendDescriptor,
    BackendRequest,
    Task,
    TranscriptionRequest,
)
from asr_compare.registry import BackendRegistry

logger = logging.getLogger(__name__)


def effective_task(task: Task, backend: BackendDescriptor) -> Task:
    """Translation is downgraded on backends that cannot translate, never upgraded."""
    match (task, backend.supports_translation):
        case (Task.TRANSLATE, False):
            logger.debug(MSG_TASK_DOWNGRADED, backend.key)
            return Task.TRANSCRIBE
        case _:
            return task


def effective_language(language: str | None, backend: BackendDescriptor) -> str | None:
    """Return the tag if the backend knows it, else None (auto-detect)."""
    match language:
        case None | "":
            return None
        case tag if backend.supports_language(tag):
            return tag
        case tag:
            logger.debug(MSG_LANGUAGE_CLEARED, backend.key, tag)
            return None


def map_request(request: TranscriptionRequest, backend: BackendDescriptor) -> BackendRequest:
    options = request.options.merged_over(backend.defaults)
    return BackendRequest(
        backend=backend.key,
        model=backend.remote_model,
        task=effective_task(request.task, backend),
        language=effective_language(request.language, backend),
        options=options.non_default(),
        audio=request.audio,
    )


class OptionMapper:

    def __init__(self, registry: BackendRegistry) -> None:
        self._registry = registry

    def map(self, request: TranscriptionRequest, key: str) -> BackendRequest:
        """Raises BackendNotFoundError for an unknown key; never fails on option content."""
        return map_request(request, self._registry.get(key))
