"""Entry point — wires Config → BackendRegistry → clients → Dispatcher → TranscriptionService."""
import argparse
import asyncio
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from asr_compare.config import Config
from asr_compare.constants import (
    KIND_HTTP,
    KIND_OPENAI,
    MSG_HEALTH_DOWN,
    MSG_HEALTH_OK,
    MSG_NO_TEXT,
    MSG_SERVER_MODELS,
    MSG_SERVER_MODELS_FAILED,
    MSG_STARTING,
    MSG_SUMMARY,
    MSG_TRANSCRIPTION_FAILED,
)
from asr_compare.dispatcher import Dispatcher
from asr_compare.errors import AsrCompareError, TranscriptionFailedError
from asr_compare.models import (
    AudioPayload,
    ComparisonReport,
    DecodingOptions,
    Failure,
    Success,
    Task,
    TranscriptionRequest,
)
from asr_compare.registry import BackendRegistry
from asr_compare.service import TranscriptionService
from asr_compare.transcription.client import BackendCallError
from asr_compare.transcription.http import HttpTranscriptionClient
from asr_compare.transcription.whisper import WhisperTranscriptionClient

logger = logging.getLogger(__name__)


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(rich_tracebacks=True))


# ── argument parsing ──────────────────────────────────────────────────────────


def _add_request_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("audio", help="Audio file (wav, mp3, m4a, ogg, flac)")
    parser.add_argument("--task", choices=[t.value for t in Task], default=Task.TRANSCRIBE.value)
    parser.add_argument("--language", default=None, help="Language hint; omitted means auto-detect")
    parser.add_argument("--num-beams", type=int, default=0)
    parser.add_argument("--temperature", type=float, default=0.0)
    parser.add_argument("--chunk-sec", type=float, default=0.0)
    parser.add_argument("--stride-leading", type=float, default=0.0)
    parser.add_argument("--stride-trailing", type=float, default=0.0)
    parser.add_argument("--prompt", default="")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="asr-compare",
        description="Transcribe one audio sample with one or many ASR backends.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("models", help="List configured backends")
    sub.add_parser("health", help="Check every backend server")
    sub.add_parser("server-models", help="Ask every backend server which models it serves")

    transcribe = sub.add_parser("transcribe", help="Transcribe with a single backend")
    _add_request_args(transcribe)
    transcribe.add_argument("--model", required=True, help="Backend key")

    compare = sub.add_parser("compare", help="Run every selected backend concurrently")
    _add_request_args(compare)
    compare.add_argument(
        "--models",
        default=None,
        help="Comma-separated backend keys (default: all, in registration order)",
    )
    return parser


def request_from_args(args: argparse.Namespace) -> TranscriptionRequest:
    return TranscriptionRequest(
        audio=AudioPayload.from_path(args.audio),
        task=Task(args.task),
        language=args.language or None,
        options=DecodingOptions(
            num_beams=args.num_beams,
            temperature=args.temperature,
            chunk_sec=args.chunk_sec,
            stride_leading=args.stride_leading,
            stride_trailing=args.stride_trailing,
            prompt=args.prompt,
        ),
    )


def parse_model_keys(raw: Optional[str]) -> Optional[list[str]]:
    match raw:
        case None:
            return None
        case text:
            return [k.strip() for k in text.split(",") if k.strip()]


# ── rendering ─────────────────────────────────────────────────────────────────


def _label(registry: BackendRegistry, key: str) -> str:
    return registry.get(key).label if key in registry else key


# Catalog entries and backend keys come from user input; cells render as markup.
def render_backends(registry: BackendRegistry) -> Table:
    table = Table(title="Backends")
    for column in ("Key", "Label", "Base URL", "Kind", "Translate", "Default language", "Languages"):
        table.add_column(column)
    for d in registry.list_backends():
        table.add_row(
            escape(d.key),
            escape(d.label),
            escape(d.base_url),
            d.kind,
            "yes" if d.supports_translation else "no",
            escape(d.default_language or "auto"),
            str(len(d.languages)),
        )
    return table


def render_report(report: ComparisonReport, registry: BackendRegistry) -> Table:
    table = Table(title="Model Comparison Results")
    for column in ("Model", "Status", "Time", "Transcription"):
        table.add_column(column)
    for outcome in report.outcomes:
        match outcome:
            case Success(backend=key, result=result, elapsed=elapsed):
                table.add_row(
                    escape(_label(registry, key)), "ok", f"{elapsed:.2f}s", escape(result.text or MSG_NO_TEXT)
                )
            case Failure(backend=key, error=error, elapsed=elapsed):
                table.add_row(
                    escape(_label(registry, key)),
                    f"[red]{error.kind.value}[/red]",
                    f"{elapsed:.2f}s",
                    escape(error.message),
                )
    return table


def summary_line(report: ComparisonReport, registry: BackendRegistry) -> str:
    return MSG_SUMMARY % (
        report.success_count,
        report.total,
        _label(registry, report.fastest.backend),
        report.fastest.elapsed,
        _label(registry, report.slowest.backend),
        report.slowest.elapsed,
    )


# ── commands ──────────────────────────────────────────────────────────────────


async def _health(http: HttpTranscriptionClient, registry: BackendRegistry, console: Console) -> int:
    urls = list(dict.fromkeys(d.base_url for d in registry.list_backends() if d.kind == KIND_HTTP))
    statuses = await asyncio.gather(*(http.health_check(url) for url in urls))
    for url, healthy in zip(urls, statuses):
        console.print(f"{url}: {MSG_HEALTH_OK if healthy else MSG_HEALTH_DOWN}", markup=False)
    return 0 if all(statuses) else 1


async def _server_models(http: HttpTranscriptionClient, registry: BackendRegistry, console: Console) -> int:
    urls = list(dict.fromkeys(d.base_url for d in registry.list_backends() if d.kind == KIND_HTTP))
    code = 0
    for url in urls:
        try:
            listing = await http.list_models(url)
        except BackendCallError as exc:
            console.print(MSG_SERVER_MODELS_FAILED % (url, exc.kind.value, exc), markup=False)
            code = 1
            continue
        console.print(
            MSG_SERVER_MODELS % (
                url,
                ", ".join(map(str, listing.get("available_models") or [])) or "-",
                listing.get("default_model") or "-",
                listing.get("current_model") or "-",
            ),
            markup=False,
        )
    return code


async def run(args: argparse.Namespace, config: Config, console: Console) -> int:
    registry = BackendRegistry.from_config(config)
    async with HttpTranscriptionClient() as http:
        clients = {
            KIND_HTTP: http,
            KIND_OPENAI: WhisperTranscriptionClient(config.openai_api_key),
        }
        service = TranscriptionService(Dispatcher(registry, clients, config.timeout))

        match args.command:
            case "models":
                console.print(render_backends(registry))
                return 0
            case "health":
                return await _health(http, registry, console)
            case "server-models":
                return await _server_models(http, registry, console)
            case "transcribe":
                try:
                    result = await service.transcribe(request_from_args(args), args.model)
                except TranscriptionFailedError as exc:
                    console.print(MSG_TRANSCRIPTION_FAILED % exc.error.message, markup=False)
                    return 1
                console.print(result.text or MSG_NO_TEXT, markup=False)
                return 0
            case "compare":
                report = await service.compare(request_from_args(args), parse_model_keys(args.models))
                console.print(render_report(report, registry))
                console.print(summary_line(report, registry), markup=False)
                return 0
            case other:
                raise ValueError(f"Unknown command: {other}")


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = Config.from_env()
    _setup_logging(config.log_level)
    logger.info(MSG_STARTING)

    console = Console()
    try:
        return asyncio.run(run(args, config, console))
    except (AsrCompareError, OSError) as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
