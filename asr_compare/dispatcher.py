"""Dispatcher — concurrent fan-out of one request to many backends, joined in request order."""
import asyncio
import logging
import time
from collections.abc import Iterable, Mapping
from typing import Optional

from asr_compare.constants import (
    MSG_DISPATCH_CANCELED,
    MSG_ERR_INTERNAL,
    MSG_LEG_CANCELED,
    MSG_LEG_CRASHED,
)
from asr_compare.errors import BackendNotFoundError, ConfigurationError
from asr_compare.models import (
    BackendDescriptor,
    BackendOutcome,
    ErrorDescriptor,
    ErrorKind,
    Failure,
    TranscriptionRequest,
)
from asr_compare.options import map_request
from asr_compare.registry import BackendRegistry
from asr_compare.transcription.client import TranscriptionClient

logger = logging.getLogger(__name__)


class Dispatcher:
    """Runs one asyncio task per leg and always returns one outcome per requested key.

    Legs never cancel each other: a failure or timeout in one leg is reported
    for that leg only, and the join waits for every leg to finish.
    """

    def __init__(
        self,
        registry: BackendRegistry,
        clients: Mapping[str, TranscriptionClient],
        deadline: float,
    ) -> None:
        self._registry = registry
        self._clients = dict(clients)
        self._deadline = deadline

    @property
    def registry(self) -> BackendRegistry:
        return self._registry

    async def dispatch_one(self, request: TranscriptionRequest, key: str) -> BackendOutcome:
        [outcome] = await self.dispatch_all(request, [key])
        return outcome

    async def dispatch_all(
        self,
        request: TranscriptionRequest,
        keys: Iterable[str],
        cancel: Optional[asyncio.Event] = None,
    ) -> list[BackendOutcome]:
        if request is None:
            raise ValueError("dispatch requires a TranscriptionRequest")

        # Either a finished outcome (unknown key) or a running leg, in request order.
        slots: list[tuple[str, BackendOutcome | asyncio.Task]] = []
        for key in keys:
            try:
                backend = self._registry.get(key)
            except BackendNotFoundError as exc:
                slots.append((key, Failure(backend=key, error=exc.describe(), elapsed=0.0)))
                continue
            slots.append((key, asyncio.create_task(self._run_leg(request, backend))))

        legs = [slot for _, slot in slots if isinstance(slot, asyncio.Task)]
        watcher = (
            asyncio.create_task(_cancel_when_set(cancel, legs))
            if cancel is not None and legs
            else None
        )
        try:
            await asyncio.gather(*legs, return_exceptions=True)
        finally:
            match watcher:
                case None:
                    pass
                case task:
                    task.cancel()

        return [_settled(key, slot) for key, slot in slots]

    def _client_for(self, backend: BackendDescriptor) -> TranscriptionClient:
        match self._clients.get(backend.kind):
            case None:
                raise ConfigurationError(f"No client for backend kind {backend.kind!r}")
            case client:
                return client

    async def _run_leg(
        self, request: TranscriptionRequest, backend: BackendDescriptor
    ) -> BackendOutcome:
        start = time.perf_counter()
        try:
            client = self._client_for(backend)
            return await client.call(map_request(request, backend), backend, self._deadline)
        except asyncio.CancelledError:
            logger.info("%s: %s", backend.key, MSG_LEG_CANCELED)
            error = ErrorDescriptor(ErrorKind.CANCELED, MSG_LEG_CANCELED)
        except Exception as exc:
            logger.exception(MSG_LEG_CRASHED, backend.key)
            error = ErrorDescriptor(ErrorKind.INTERNAL, MSG_ERR_INTERNAL % exc)
        return Failure(backend=backend.key, error=error, elapsed=time.perf_counter() - start)


def _settled(key: str, slot: BackendOutcome | asyncio.Task) -> BackendOutcome:
    """Outcome of a finished slot; a leg canceled before it ever ran still gets one."""
    match slot:
        case asyncio.Task() as leg if leg.cancelled():
            return Failure(
                backend=key,
                error=ErrorDescriptor(ErrorKind.CANCELED, MSG_LEG_CANCELED),
                elapsed=0.0,
            )
        case asyncio.Task() as leg if leg.exception() is not None:
            return Failure(
                backend=key,
                error=ErrorDescriptor(ErrorKind.INTERNAL, MSG_ERR_INTERNAL % leg.exception()),
                elapsed=0.0,
            )
        case asyncio.Task() as leg:
            return leg.result()
        case outcome:
            return outcome


async def _cancel_when_set(cancel: asyncio.Event, legs: list[asyncio.Task]) -> None:
    await cancel.wait()
    pending = [leg for leg in legs if not leg.done()]
    logger.warning(MSG_DISPATCH_CANCELED, len(pending))
    for leg in pending:
        leg.cancel()
