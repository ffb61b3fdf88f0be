"""TranscriptionService — transport-agnostic entry points for single and comparison runs."""
import logging
from collections.abc import Iterable
from typing import Optional

from asr_compare.aggregator import summarize
from asr_compare.dispatcher import Dispatcher
from asr_compare.errors import TranscriptionFailedError
from asr_compare.models import (
    ComparisonReport,
    Failure,
    Success,
    TranscriptionRequest,
    TranscriptionResult,
)

logger = logging.getLogger(__name__)


class TranscriptionService:

    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher

    async def transcribe(self, request: TranscriptionRequest, key: str) -> TranscriptionResult:
        """Run one backend. Raises TranscriptionFailedError carrying the leg's error."""
        match await self._dispatcher.dispatch_one(request, key):
            case Success(result=result):
                return result
            case Failure(error=error):
                logger.error("Transcription on %s failed: %s", key, error.message)
                raise TranscriptionFailedError(error)

    async def compare(
        self, request: TranscriptionRequest, keys: Optional[Iterable[str]] = None
    ) -> ComparisonReport:
        """Run every selected backend (all registered ones by default) and summarize.

        Failed legs stay in the report; an empty selection raises EmptyInputError.
        """
        selected = list(keys) if keys is not None else self._dispatcher.registry.keys()
        outcomes = await self._dispatcher.dispatch_all(request, selected)
        return summarize(outcomes)
