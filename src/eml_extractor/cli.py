"""Command-line entry point for the message extractor."""

from __future__ import annotations

import argparse
import asyncio
import time
from pathlib import Path

from eml_extractor.core import AppSettings, configure_logging, load_app_settings
from eml_extractor.core.models import ProgressEvent
from eml_extractor.encoding import detect_file_encoding
from eml_extractor.ingestion import AttachmentExtractor


def build_parser() -> argparse.ArgumentParser:
    """Create and configure the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Extract attachments and inline resources from .eml files"
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to a .env file containing configuration overrides.",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="info",
        choices=["info", "extract", "detect"],
        help="Operation to execute.",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        help="Files whose encoding should be detected (detect command).",
    )
    parser.add_argument(
        "--source",
        type=Path,
        default=None,
        help="Directory containing message files (overrides configuration).",
    )
    parser.add_argument(
        "--dest",
        type=Path,
        default=None,
        help="Directory receiving extracted messages (overrides configuration).",
    )
    return parser


def execute(args: argparse.Namespace, settings: AppSettings) -> int:
    """Execute the requested CLI command and return an exit code."""
    command = args.command
    if command == "info":
        print(f"Source directory: {settings.extraction.source_dir or '-'}")
        print(f"Destination directory: {settings.extraction.dest_dir or '-'}")
        print(f"Message extension: {settings.extraction.extension}")
        print(f"Legacy codepage: {settings.encoding.legacy_codepage}")
        return 0
    if command == "extract":
        return _run_extract(
            settings,
            source=args.source or settings.extraction.source_dir,
            dest=args.dest or settings.extraction.dest_dir,
        )
    if command == "detect":
        return _run_detect(args.paths)
    return 1


def main() -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args()

    settings = load_app_settings(env_file=args.env_file)
    configure_logging(settings.logging)
    raise SystemExit(execute(args, settings))


def _format_elapsed(seconds: float) -> str:
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def _print_progress(event: ProgressEvent) -> None:
    print(
        f"Processed {event.processed_count} file(s) ({event.percent_complete}%)"
    )


def _run_extract(
    settings: AppSettings, *, source: Path | None, dest: Path | None
) -> int:
    """Run an extraction and report the outcome."""
    if source is None or dest is None:
        print("Both a source and a destination directory are required.")
        return 2

    extractor = AttachmentExtractor.from_settings(
        settings, progress_listeners=[_print_progress]
    )
    started = time.monotonic()
    job = asyncio.run(extractor.extract(source, dest))
    elapsed = _format_elapsed(time.monotonic() - started)

    if job is None:
        print(f"No message files found under {source}.")
        return 0
    print(
        f"Processed {job.processed} of {job.total} file(s), "
        f"{job.failed} failed. Elapsed {elapsed}"
    )
    return 0


def _run_detect(paths: list[Path]) -> int:
    """Print the detected encoding of each file."""
    if not paths:
        print("No files given.")
        return 2
    status = 0
    for path in paths:
        try:
            encoding = detect_file_encoding(path)
        except OSError as exc:
            print(f"{path}: error: {exc}")
            status = 1
            continue
        print(f"{path}: {encoding or 'unknown'}")
    return status


if __name__ == "__main__":
    main()
