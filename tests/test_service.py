"""TranscriptionService tests — single-backend and comparison paths."""
import pytest
from unittest.mock import AsyncMock, MagicMock

from asr_compare.errors import EmptyInputError, TranscriptionFailedError
from asr_compare.models import (
    ErrorDescriptor,
    ErrorKind,
    Failure,
    Success,
    Task,
    TranscriptionResult,
)
from asr_compare.service import TranscriptionService

from conftest import make_request


def make_dispatcher(registry, *, one=None, many=None):
    dispatcher = MagicMock()
    dispatcher.registry = registry
    dispatcher.dispatch_one = AsyncMock(return_value=one)
    dispatcher.dispatch_all = AsyncMock(return_value=many)
    return dispatcher


def ok(key: str, seconds: float = 0.1) -> Success:
    result = TranscriptionResult(backend=key, text="xin chào", task=Task.TRANSCRIBE)
    return Success(backend=key, result=result, elapsed=seconds)


@pytest.mark.asyncio
async def test_transcribe_returns_result_on_success(registry):
    service = TranscriptionService(make_dispatcher(registry, one=ok("chunkformer")))

    result = await service.transcribe(make_request(), "chunkformer")

    assert result.text == "xin chào"


@pytest.mark.asyncio
async def test_transcribe_raises_with_error_descriptor_on_failure(registry):
    error = ErrorDescriptor(ErrorKind.TIMEOUT, "No response within 30.0s")
    failure = Failure(backend="chunkformer", error=error, elapsed=30.0)
    service = TranscriptionService(make_dispatcher(registry, one=failure))

    with pytest.raises(TranscriptionFailedError) as info:
        await service.transcribe(make_request(), "chunkformer")

    assert info.value.error is error
    assert info.value.kind is ErrorKind.TIMEOUT


@pytest.mark.asyncio
async def test_compare_defaults_to_all_registered_backends(registry):
    dispatcher = make_dispatcher(registry, many=[ok("whisper_jax"), ok("omni_lingual"), ok("chunkformer")])
    service = TranscriptionService(dispatcher)

    report = await service.compare(make_request())

    _request, keys = dispatcher.dispatch_all.call_args.args
    assert keys == ["whisper_jax", "omni_lingual", "chunkformer"]
    assert report.success_ratio == 1


@pytest.mark.asyncio
async def test_compare_keeps_failed_legs_in_report(registry):
    failure = Failure(
        backend="omni_lingual", error=ErrorDescriptor(ErrorKind.TRANSPORT, "refused"), elapsed=0.01
    )
    service = TranscriptionService(make_dispatcher(registry, many=[ok("whisper_jax"), failure]))

    report = await service.compare(make_request(), ["whisper_jax", "omni_lingual"])

    assert report.total == 2
    assert report.success_count == 1
    assert report.fastest is failure


@pytest.mark.asyncio
async def test_compare_with_empty_selection_signals_empty_input(registry):
    service = TranscriptionService(make_dispatcher(registry, many=[]))

    with pytest.raises(EmptyInputError):
        await service.compare(make_request(), [])
