"""BackendRegistry — read-only catalog of ASR backends, loaded once at startup."""
import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Iterable

from asr_compare.config import Config
from asr_compare.constants import (
    DEFAULT_BACKENDS,
    ISO_LANGUAGES,
    KIND_HTTP,
    KIND_OPENAI,
    MSG_ERR_NOT_FOUND,
    MSG_REGISTRY_LOADED,
    OPENAI_BASE_URL,
    WHISPER_BACKEND_KEY,
    WHISPER_BACKEND_LABEL,
    WHISPER_DEFAULT_LANGUAGE,
    WHISPER_MODEL,
)
from asr_compare.errors import BackendNotFoundError, ConfigurationError
from asr_compare.models import BackendDescriptor, DecodingOptions

logger = logging.getLogger(__name__)

_KINDS = (KIND_HTTP, KIND_OPENAI)


# ── catalog parsing ───────────────────────────────────────────────────────────


def descriptor_from_dict(raw: dict[str, Any], default_base_url: str = "") -> BackendDescriptor:
    """Build a BackendDescriptor from one JSON catalog entry."""
    match raw:
        case {"key": str() as key} if key:
            pass
        case _:
            raise ConfigurationError(f"Backend entry without a key: {raw!r}")

    kind = raw.get("kind", KIND_HTTP)
    if kind not in _KINDS:
        raise ConfigurationError(f"Backend {key}: unknown kind {kind!r}")

    match raw.get("base_url"):
        case None | "":
            base_url = default_base_url.rstrip("/")
        case str() as url:
            base_url = url.rstrip("/")
        case other:
            raise ConfigurationError(f"Backend {key}: base_url must be a string, got {other!r}")
    if not base_url:
        raise ConfigurationError(f"Backend {key}: base_url is required")

    match raw.get("languages", []):
        case list() as tags if all(isinstance(tag, str) for tag in tags):
            languages = tuple(tags)
        case other:
            raise ConfigurationError(
                f"Backend {key}: languages must be a list of strings, got {other!r}"
            )

    match raw.get("supports_translation", True):
        case bool() as supports_translation:
            pass
        case other:
            raise ConfigurationError(
                f"Backend {key}: supports_translation must be true or false, got {other!r}"
            )

    label = _optional_str(raw, "label", key)
    model = _optional_str(raw, "model", key)
    default_language = _optional_str(raw, "default_language", key)
    api_key = _optional_str(raw, "api_key", key)
    if default_language and default_language not in languages:
        raise ConfigurationError(
            f"Backend {key}: default_language {default_language!r} not in its languages"
        )

    match raw.get("defaults", {}):
        case dict() as knobs:
            pass
        case other:
            raise ConfigurationError(f"Backend {key}: defaults must be an object, got {other!r}")
    try:
        defaults = DecodingOptions(**knobs)
    except TypeError as exc:
        raise ConfigurationError(f"Backend {key}: bad defaults: {exc}") from exc

    return BackendDescriptor(
        key=key,
        label=label or key,
        base_url=base_url,
        model=model,
        kind=kind,
        supports_translation=supports_translation,
        languages=languages,
        default_language=default_language,
        defaults=defaults,
        api_key=api_key or None,
    )


def _optional_str(raw: dict[str, Any], name: str, key: str) -> str:
    match raw.get(name):
        case None:
            return ""
        case str() as value:
            return value
        case other:
            raise ConfigurationError(f"Backend {key}: {name} must be a string, got {other!r}")


def default_catalog(base_url: str) -> list[BackendDescriptor]:
    return [
        BackendDescriptor(
            key=key,
            label=label,
            base_url=base_url,
            supports_translation=translates,
            languages=languages,
            default_language=default_language,
        )
        for key, label, translates, languages, default_language in DEFAULT_BACKENDS
    ]


def whisper_descriptor(api_key: str) -> BackendDescriptor:
    return BackendDescriptor(
        key=WHISPER_BACKEND_KEY,
        label=WHISPER_BACKEND_LABEL,
        base_url=OPENAI_BASE_URL,
        model=WHISPER_MODEL,
        kind=KIND_OPENAI,
        supports_translation=True,
        languages=ISO_LANGUAGES,
        default_language=WHISPER_DEFAULT_LANGUAGE,
        api_key=api_key,
    )


def _load_catalog_file(path: Path, default_base_url: str) -> list[BackendDescriptor]:
    try:
        with open(path) as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Cannot read backend catalog {path}: {exc}") from exc

    match raw:
        case list() as entries:
            return [descriptor_from_dict(entry, default_base_url) for entry in entries]
        case _:
            raise ConfigurationError(f"Backend catalog {path} must be a JSON list")


# ── registry ──────────────────────────────────────────────────────────────────


class BackendRegistry:
    """Ordered, immutable set of backends. Safe to share across concurrent legs."""

    def __init__(self, descriptors: Iterable[BackendDescriptor]) -> None:
        ordered = tuple(descriptors)
        by_key: dict[str, BackendDescriptor] = {}
        for descriptor in ordered:
            if descriptor.key in by_key:
                raise ConfigurationError(f"Duplicate backend key: {descriptor.key}")
            by_key[descriptor.key] = descriptor
        self._ordered = ordered
        self._by_key = by_key

    @classmethod
    def from_config(cls, config: Config) -> "BackendRegistry":
        match config.backends_file:
            case str() as path if path:
                descriptors = _load_catalog_file(Path(path), config.api_endpoint)
                source = path
            case _:
                descriptors = default_catalog(config.api_endpoint)
                source = config.api_endpoint

        match config.api_key:
            case str() as key if key:
                descriptors = [
                    replace(d, api_key=key) if d.kind == KIND_HTTP and not d.api_key else d
                    for d in descriptors
                ]
            case _:
                pass

        match config.openai_api_key:
            case str() as key if key and not any(d.key == WHISPER_BACKEND_KEY for d in descriptors):
                descriptors.append(whisper_descriptor(key))
            case _:
                pass

        logger.info(MSG_REGISTRY_LOADED, len(descriptors), source)
        return cls(descriptors)

    def list_backends(self) -> tuple[BackendDescriptor, ...]:
        return self._ordered

    def keys(self) -> list[str]:
        return [d.key for d in self._ordered]

    def get(self, key: str) -> BackendDescriptor:
        match self._by_key.get(key):
            case None:
                raise BackendNotFoundError(MSG_ERR_NOT_FOUND % key)
            case descriptor:
                return descriptor

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __len__(self) -> int:
        return len(self._ordered)
