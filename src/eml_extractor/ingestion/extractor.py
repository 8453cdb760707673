"""Extraction of bodies, attachments and inline resources from message files."""

from __future__ import annotations

import asyncio
import logging
import os
import threading
from collections.abc import AsyncIterator, Iterable, Iterator
from pathlib import Path

from ..core.config import AppSettings
from ..core.interfaces import MessageParser, ProgressListener, TextNormalizerProtocol
from ..core.models import (
    ContentNode,
    ExtractionJob,
    Leaf,
    MessageFile,
    MessagePart,
    ProgressEvent,
)
from ..encoding.filenames import FilenameSanitizer, generate_placeholder_name
from ..encoding.normalizer import TextNormalizer
from .parser import EmailParser

LOGGER = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".eml"
DEFAULT_BODY_FILENAME = "email.html"


def iter_parts(node: ContentNode) -> Iterator[MessagePart]:
    """Yield every leaf part of a content tree in document order."""
    if isinstance(node, Leaf):
        yield node.part
        return
    for child in node.children:
        yield from iter_parts(child)


def _unique_path(folder: Path, name: str) -> Path:
    candidate = folder / name
    if not candidate.exists():
        return candidate
    stem, suffix = os.path.splitext(name)
    counter = 1
    while True:
        candidate = folder / f"{stem} ({counter}){suffix}"
        if not candidate.exists():
            return candidate
        counter += 1


def _write_part(folder: Path, name: str, part: MessagePart) -> Path:
    target = _unique_path(folder, name)
    target.write_bytes(part.decode())
    return target


def _write_text(target: Path, text: str) -> None:
    target.write_text(text, encoding="utf-8")


class AttachmentExtractor:
    """Walk a directory of message files and unpack each one into a folder.

    Every message gets its own destination folder holding the normalized body,
    its attachments and its inline resources. Failures are isolated per
    message: they are logged and counted, and the run moves on.
    """

    def __init__(
        self,
        parser: MessageParser | None = None,
        *,
        normalizer: TextNormalizerProtocol | None = None,
        sanitizer: FilenameSanitizer | None = None,
        extension: str = DEFAULT_EXTENSION,
        body_filename: str = DEFAULT_BODY_FILENAME,
        progress_listeners: Iterable[ProgressListener] = (),
    ) -> None:
        # pylint: disable=too-many-arguments
        """Initialise the extractor with its parser and text helpers."""
        self._parser = parser or EmailParser()
        self._normalizer = normalizer or TextNormalizer()
        self._sanitizer = sanitizer or FilenameSanitizer(self._normalizer)
        self._extension = extension.lower()
        self._body_filename = body_filename
        self._listeners: list[ProgressListener] = list(progress_listeners)
        self._cancelled = threading.Event()
        self._job: ExtractionJob | None = None

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        *,
        parser: MessageParser | None = None,
        progress_listeners: Iterable[ProgressListener] = (),
    ) -> AttachmentExtractor:
        """Build an extractor configured from application settings."""
        normalizer = TextNormalizer(
            legacy_codepage=settings.encoding.legacy_codepage,
            fallback_codepage=settings.encoding.fallback_codepage,
        )
        sanitizer = FilenameSanitizer(
            normalizer,
            placeholder=settings.encoding.placeholder_name,
            max_length=settings.encoding.max_filename_length,
        )
        return cls(
            parser,
            normalizer=normalizer,
            sanitizer=sanitizer,
            extension=settings.extraction.extension,
            body_filename=settings.extraction.body_filename,
            progress_listeners=progress_listeners,
        )

    @property
    def job(self) -> ExtractionJob | None:
        """Bookkeeping of the most recent run, if one started."""
        return self._job

    def subscribe(self, listener: ProgressListener) -> None:
        """Register a callback receiving every progress event."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: ProgressListener) -> None:
        """Remove a previously registered callback."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def cancel(self) -> None:
        """Stop the current run before the next message file."""
        self._cancelled.set()

    def find_message_files(self, directory: Path) -> list[Path]:
        """Recursively list message files, files before subdirectories."""
        try:
            with os.scandir(directory) as iterator:
                entries = sorted(iterator, key=lambda entry: entry.name)
        except OSError as exc:
            LOGGER.error("Unable to read directory %s: %s", directory, exc)
            return []

        found: list[Path] = []
        subdirectories: list[Path] = []
        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    subdirectories.append(Path(entry.path))
                elif entry.is_file() and entry.name.lower().endswith(self._extension):
                    found.append(Path(entry.path))
            except OSError as exc:
                LOGGER.warning("Unable to inspect %s: %s", entry.path, exc)

        for subdirectory in subdirectories:
            found.extend(self.find_message_files(subdirectory))
        return found

    async def run(
        self, source_dir: Path | str | None, dest_dir: Path | str | None
    ) -> AsyncIterator[ProgressEvent]:
        """Extract every message under ``source_dir`` into ``dest_dir``.

        Yields one :class:`ProgressEvent` per message file, whether it was
        extracted or skipped because of an error.
        """
        if not source_dir or not dest_dir:
            LOGGER.warning(
                "Source and destination directories are required, nothing to do"
            )
            return

        source = Path(source_dir)
        destination = Path(dest_dir)
        self._cancelled.clear()

        if not await asyncio.to_thread(source.is_dir):
            LOGGER.info("Source directory %s does not exist, nothing to do", source)
            return

        message_files = await asyncio.to_thread(self.find_message_files, source)
        if not message_files:
            LOGGER.info("No %s files found under %s", self._extension, source)
            return

        job = ExtractionJob(
            source_dir=source, dest_dir=destination, total=len(message_files)
        )
        self._job = job
        LOGGER.info(
            "Starting extraction of %s message file(s) from %s into %s",
            job.total,
            source,
            destination,
        )

        for message_path in message_files:
            if self._cancelled.is_set():
                LOGGER.info(
                    "Extraction cancelled after %s of %s file(s)",
                    job.processed,
                    job.total,
                )
                break

            try:
                await self._process_file(message_path, destination)
            except Exception as exc:  # pylint: disable=broad-except
                job.failed += 1
                LOGGER.error(
                    "Failed to process message file %s: %s",
                    message_path,
                    exc,
                    exc_info=True,
                )

            job.processed += 1
            event = ProgressEvent(
                processed_count=job.processed,
                percent_complete=job.percent_complete,
            )
            self._notify(event)
            yield event

        LOGGER.info(
            "Extraction completed: processed=%s, failed=%s, total=%s",
            job.processed,
            job.failed,
            job.total,
        )

    async def extract(
        self, source_dir: Path | str | None, dest_dir: Path | str | None
    ) -> ExtractionJob | None:
        """Drain :meth:`run` and return the resulting job bookkeeping."""
        self._job = None
        async for _ in self.run(source_dir, dest_dir):
            pass
        return self._job

    def _notify(self, event: ProgressEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as exc:  # pylint: disable=broad-except
                LOGGER.warning("Progress listener failed: %s", exc, exc_info=True)

    async def _process_file(self, message_path: Path, destination: Path) -> None:
        message = await asyncio.to_thread(self._parser.parse_file, message_path)

        folder_name = (
            f"{self._sanitizer.sanitize(message.subject)}_{generate_placeholder_name()}"
        )
        folder = destination / folder_name
        await asyncio.to_thread(folder.mkdir, parents=True)

        await self._save_body(message, folder)

        handled: set[MessagePart] = set(message.body_parts)
        for part in message.attachments:
            await self._save_part(part, folder, "attachment")
            handled.add(part)

        for part in iter_parts(message.content):
            if part in handled:
                continue
            if part.is_inline or part.is_attachment:
                await self._save_part(part, folder, "inline resource")
                handled.add(part)

        LOGGER.debug("Extracted %s into %s", message_path, folder)

    async def _save_body(self, message: MessageFile, folder: Path) -> None:
        body = self._normalizer.normalize(message.body)
        await asyncio.to_thread(_write_text, folder / self._body_filename, body)

    async def _save_part(self, part: MessagePart, folder: Path, kind: str) -> None:
        raw_name = part.filename
        if raw_name is None or not raw_name.strip():
            raw_name = generate_placeholder_name()
        name = self._sanitizer.sanitize(raw_name)
        target = await asyncio.to_thread(_write_part, folder, name, part)
        LOGGER.info("Saved %s %s to %s", kind, target.name, folder)


__all__ = ["AttachmentExtractor", "iter_parts"]
