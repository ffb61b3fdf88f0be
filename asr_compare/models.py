"""Data model shared by the registry, mapper, clients, dispatcher and aggregator."""
import mimetypes
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from asr_compare.constants import (
    DEFAULT_MEDIA_TYPE,
    FIELD_RECORDED_SECONDS,
    FIELD_SAMPLE_RATE,
    KIND_HTTP,
)


class Task(str, Enum):
    TRANSCRIBE = "transcribe"
    TRANSLATE = "translate"


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    BACKEND_REJECTED = "backend_rejected"
    EMPTY_INPUT = "empty_input"
    CANCELED = "canceled"
    INTERNAL = "internal"


# ── request side ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class RecordingInfo:
    seconds: float
    sample_rate: int


@dataclass(frozen=True)
class AudioPayload:
    data: bytes
    media_type: str
    file_name: str
    recording: Optional[RecordingInfo] = None

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "AudioPayload":
        p = Path(path)
        media_type, _ = mimetypes.guess_type(p.name)
        return cls(
            data=p.read_bytes(),
            media_type=media_type or DEFAULT_MEDIA_TYPE,
            file_name=p.name,
        )


@dataclass(frozen=True)
class DecodingOptions:
    """Decoding knobs. Zero or empty means "let the backend choose"."""

    num_beams: int = 0
    temperature: float = 0.0
    chunk_sec: float = 0.0
    stride_leading: float = 0.0
    stride_trailing: float = 0.0
    prompt: str = ""

    def non_default(self) -> dict[str, Union[int, float, str]]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name)}

    def merged_over(self, defaults: "DecodingOptions") -> "DecodingOptions":
        """Knobs set here win; unset knobs fall back to ``defaults``."""
        return DecodingOptions(**{**defaults.non_default(), **self.non_default()})


@dataclass(frozen=True)
class TranscriptionRequest:
    audio: AudioPayload
    task: Task = Task.TRANSCRIBE
    language: Optional[str] = None
    options: DecodingOptions = field(default_factory=DecodingOptions)


# ── backends ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class BackendDescriptor:
    key: str
    label: str
    base_url: str
    model: str = ""
    kind: str = KIND_HTTP
    supports_translation: bool = True
    languages: tuple[str, ...] = ()
    default_language: str = ""
    defaults: DecodingOptions = field(default_factory=DecodingOptions)
    api_key: Optional[str] = field(default=None, repr=False)

    @property
    def remote_model(self) -> str:
        return self.model or self.key

    def supports_language(self, tag: str) -> bool:
        return tag in self.languages


@dataclass(frozen=True)
class BackendRequest:
    """A request already shaped for one backend."""

    backend: str
    model: str
    task: Task
    language: Optional[str]
    options: dict[str, Union[int, float, str]]
    audio: AudioPayload

    def form_fields(self) -> dict[str, str]:
        flat = {"model": self.model, "task": self.task.value}
        match self.language:
            case str() as lang if lang:
                flat["language"] = lang
            case _:
                pass
        flat.update({name: str(value) for name, value in self.options.items()})
        match self.audio.recording:
            case RecordingInfo(seconds=seconds, sample_rate=rate):
                flat[FIELD_RECORDED_SECONDS] = str(seconds)
                flat[FIELD_SAMPLE_RATE] = str(rate)
            case None:
                pass
        return flat


# ── outcomes ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TranscriptionResult:
    backend: str
    text: str
    task: Task
    language: Optional[str] = None
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    recorded_seconds: Optional[float] = None
    sample_rate: Optional[int] = None


@dataclass(frozen=True)
class ErrorDescriptor:
    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class Success:
    backend: str
    result: TranscriptionResult
    elapsed: float

    ok = True

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed * 1000


@dataclass(frozen=True)
class Failure:
    backend: str
    error: ErrorDescriptor
    elapsed: float

    ok = False

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed * 1000


BackendOutcome = Union[Success, Failure]


@dataclass(frozen=True)
class ComparisonReport:
    outcomes: tuple[BackendOutcome, ...]
    success_count: int
    fastest: BackendOutcome
    slowest: BackendOutcome

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def success_ratio(self) -> float:
        return self.success_count / self.total
