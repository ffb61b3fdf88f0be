"""OptionMapper tests — capability downgrades and default omission."""
import pytest

from asr_compare.errors import BackendNotFoundError
from asr_compare.models import DecodingOptions, Task
from asr_compare.options import OptionMapper, map_request

from conftest import make_backend, make_request


def test_translate_downgraded_when_backend_cannot_translate():
    backend = make_backend("omni_lingual", supports_translation=False)

    mapped = map_request(make_request(task=Task.TRANSLATE), backend)

    assert mapped.task is Task.TRANSCRIBE


def test_translate_kept_when_backend_translates():
    mapped = map_request(make_request(task=Task.TRANSLATE), make_backend())

    assert mapped.task is Task.TRANSLATE


def test_transcribe_never_upgraded():
    mapped = map_request(make_request(task=Task.TRANSCRIBE), make_backend())

    assert mapped.task is Task.TRANSCRIBE


def test_unknown_language_becomes_auto_detect():
    backend = make_backend(languages=("eng_Latn", "vie_Latn"))

    mapped = map_request(make_request(language="en"), backend)

    assert mapped.language is None
    assert "language" not in mapped.form_fields()


def test_known_language_passed_through():
    mapped = map_request(make_request(language="vi"), make_backend())

    assert mapped.language == "vi"
    assert mapped.form_fields()["language"] == "vi"


def test_default_knobs_are_omitted():
    mapped = map_request(make_request(), make_backend())

    assert mapped.options == {}
    assert mapped.form_fields() == {"model": "whisper_jax", "task": "transcribe"}


def test_set_knobs_are_passed_through():
    options = DecodingOptions(num_beams=5, temperature=0.2, prompt="names: Nguyen")

    mapped = map_request(make_request(options=options), make_backend())

    assert mapped.options == {"num_beams": 5, "temperature": 0.2, "prompt": "names: Nguyen"}
    assert mapped.form_fields()["num_beams"] == "5"


def test_backend_defaults_apply_under_request_knobs():
    backend = make_backend(defaults=DecodingOptions(num_beams=2, chunk_sec=30.0))
    request = make_request(options=DecodingOptions(num_beams=6))

    mapped = map_request(request, backend)

    assert mapped.options == {"num_beams": 6, "chunk_sec": 30.0}


def test_audio_attached_verbatim():
    request = make_request()

    mapped = map_request(request, make_backend())

    assert mapped.audio is request.audio


def test_remote_model_name_used_when_configured():
    mapped = map_request(make_request(), make_backend("qwen3_small", model="qwen3_0_6B"))

    assert mapped.backend == "qwen3_small"
    assert mapped.model == "qwen3_0_6B"


def test_mapper_resolves_key(registry):
    mapped = OptionMapper(registry).map(make_request(task=Task.TRANSLATE), "omni_lingual")

    assert mapped.task is Task.TRANSCRIBE


def test_mapper_unknown_key_raises_not_found(registry):
    with pytest.raises(BackendNotFoundError):
        OptionMapper(registry).map(make_request(), "missing")
