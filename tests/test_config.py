"""Config tests — environment loading and validation."""
import pytest
from asr_compare.config import Config


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    monkeypatch.setattr("asr_compare.config.load_dotenv", lambda **_: None)
    for name in ("ASR_API_ENDPOINT", "ASR_BACKENDS_FILE", "ASR_TIMEOUT", "ASR_API_KEY", "OPENAI_API_KEY", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_config_from_env_success(monkeypatch):
    monkeypatch.setenv("ASR_API_ENDPOINT", "https://asr.example.com/")
    monkeypatch.setenv("ASR_TIMEOUT", "12.5")
    monkeypatch.setenv("ASR_API_KEY", "secret")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    config = Config.from_env()

    assert config.api_endpoint == "https://asr.example.com"
    assert config.timeout == 12.5
    assert config.api_key == "secret"
    assert config.log_level == "DEBUG"


def test_config_defaults():
    """Optional fields have sensible defaults."""
    config = Config.from_env()

    assert config.api_endpoint == "http://127.0.0.1:8000"
    assert config.timeout == 30.0
    assert config.backends_file is None
    assert config.api_key is None
    assert config.openai_api_key is None
    assert config.log_level == "INFO"


def test_config_empty_optional_values_become_none(monkeypatch):
    monkeypatch.setenv("ASR_BACKENDS_FILE", "")
    monkeypatch.setenv("OPENAI_API_KEY", "")

    config = Config.from_env()

    assert config.backends_file is None
    assert config.openai_api_key is None


def test_config_non_numeric_timeout_fails(monkeypatch):
    monkeypatch.setenv("ASR_TIMEOUT", "soon")

    with pytest.raises(ValueError, match="ASR_TIMEOUT"):
        Config.from_env()


def test_config_non_positive_timeout_fails(monkeypatch):
    monkeypatch.setenv("ASR_TIMEOUT", "0")

    with pytest.raises(ValueError, match="ASR_TIMEOUT"):
        Config.from_env()


def test_config_blank_endpoint_fails(monkeypatch):
    monkeypatch.setenv("ASR_API_ENDPOINT", "   ")

    with pytest.raises(ValueError, match="ASR_API_ENDPOINT"):
        Config.from_env()


def test_config_immutable():
    """Frozen dataclass: attribute assignment must fail."""
    config = Config(
        api_endpoint="http://localhost:8000",
        backends_file=None,
        timeout=30.0,
        api_key=None,
        openai_api_key=None,
        log_level="INFO",
    )

    with pytest.raises(Exception):
        config.timeout = 1.0
