"""TranscriptionClient — abstract base for remote speech-to-text backends."""
import asyncio
import logging
import time
from abc import ABC, abstractmethod

from asr_compare.constants import (
    MSG_ERR_INTERNAL,
    MSG_ERR_TIMEOUT,
    MSG_LEG_FAIL,
    MSG_LEG_OK,
)
from asr_compare.models import (
    BackendDescriptor,
    BackendOutcome,
    BackendRequest,
    ErrorDescriptor,
    ErrorKind,
    Failure,
    Success,
    TranscriptionResult,
)

logger = logging.getLogger(__name__)


class BackendCallError(Exception):
    """Raised by ``_exchange`` implementations with an already classified kind."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class TranscriptionClient(ABC):
    """One request/response exchange against one backend, with a hard deadline.

    ``call`` never raises for backend failures: every failure path becomes a
    ``Failure`` outcome carrying an ErrorDescriptor. Only task cancellation
    propagates, so the caller can account for canceled legs itself.
    """

    @abstractmethod
    async def _exchange(
        self, request: BackendRequest, backend: BackendDescriptor, deadline: float
    ) -> TranscriptionResult:
        """Perform the exchange. Raises BackendCallError (or anything) on failure."""
        ...

    async def call(
        self, request: BackendRequest, backend: BackendDescriptor, deadline: float
    ) -> BackendOutcome:
        start = time.perf_counter()
        try:
            result = await asyncio.wait_for(
                self._exchange(request, backend, deadline), timeout=deadline
            )
        except asyncio.TimeoutError:
            error = ErrorDescriptor(ErrorKind.TIMEOUT, MSG_ERR_TIMEOUT % deadline)
        except BackendCallError as exc:
            error = ErrorDescriptor(exc.kind, str(exc))
        except Exception as exc:
            logger.exception("Unexpected failure calling %s", backend.key)
            error = ErrorDescriptor(ErrorKind.INTERNAL, MSG_ERR_INTERNAL % exc)
        else:
            elapsed = time.perf_counter() - start
            logger.info(MSG_LEG_OK, backend.key, elapsed)
            return Success(backend=backend.key, result=result, elapsed=elapsed)

        elapsed = time.perf_counter() - start
        logger.warning(MSG_LEG_FAIL, backend.key, elapsed, error.message)
        return Failure(backend=backend.key, error=error, elapsed=elapsed)
