import pytest

from asr_compare.models import (
    AudioPayload,
    BackendDescriptor,
    DecodingOptions,
    Task,
    TranscriptionRequest,
)
from asr_compare.registry import BackendRegistry


def make_backend(key: str = "whisper_jax", **overrides) -> BackendDescriptor:
    fields = dict(
        key=key,
        label=key.title(),
        base_url="http://asr.test",
        supports_translation=True,
        languages=("en", "vi"),
        default_language="en",
    )
    fields.update(overrides)
    return BackendDescriptor(**fields)


def make_request(**overrides) -> TranscriptionRequest:
    fields = dict(
        audio=AudioPayload(data=b"RIFF-fake", media_type="audio/wav", file_name="sample.wav"),
        task=Task.TRANSCRIBE,
        language=None,
        options=DecodingOptions(),
    )
    fields.update(overrides)
    return TranscriptionRequest(**fields)


@pytest.fixture
def request_():
    return make_request()


@pytest.fixture
def registry():
    return BackendRegistry([
        make_backend("whisper_jax"),
        make_backend(
            "omni_lingual",
            supports_translation=False,
            languages=("eng_Latn", "vie_Latn"),
            default_language="eng_Latn",
        ),
        make_backend("chunkformer", default_language="vi"),
    ])
