from dataclasses import dataclass
from typing import Optional
import os
from dotenv import load_dotenv

from asr_compare.constants import (
    DEFAULT_API_ENDPOINT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_TIMEOUT_SECONDS,
)


@dataclass(frozen=True)
class Config:
    api_endpoint: str
    backends_file: Optional[str]
    timeout: float
    api_key: Optional[str]
    openai_api_key: Optional[str]
    log_level: str

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        endpoint = os.getenv("ASR_API_ENDPOINT", DEFAULT_API_ENDPOINT)
        backends_file = os.getenv("ASR_BACKENDS_FILE") or None
        raw_timeout = os.getenv("ASR_TIMEOUT", DEFAULT_TIMEOUT_SECONDS)
        api_key = os.getenv("ASR_API_KEY") or None
        openai_api_key = os.getenv("OPENAI_API_KEY") or None
        log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL)

        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ValueError(f"ASR_TIMEOUT must be a number, got {raw_timeout!r}") from None

        return cls._validate(
            api_endpoint=endpoint,
            backends_file=backends_file,
            timeout=timeout,
            api_key=api_key,
            openai_api_key=openai_api_key,
            log_level=log_level,
        )

    @staticmethod
    def _validate(
        api_endpoint: Optional[str],
        backends_file: Optional[str],
        timeout: float,
        api_key: Optional[str],
        openai_api_key: Optional[str],
        log_level: str,
    ) -> "Config":
        match (api_endpoint or "").strip():
            case "":
                raise ValueError("ASR_API_ENDPOINT must not be empty")
            case endpoint:
                api_endpoint = endpoint.rstrip("/")

        match timeout:
            case t if t > 0:
                pass
            case _:
                raise ValueError("ASR_TIMEOUT must be greater than zero")

        return Config(
            api_endpoint=api_endpoint,
            backends_file=backends_file,
            timeout=timeout,
            api_key=api_key,
            openai_api_key=openai_api_key,
            log_level=log_level,
        )
