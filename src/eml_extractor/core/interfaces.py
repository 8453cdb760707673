"""Protocol interfaces for decoupling components."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from .models import MessageFile, ProgressEvent


class MessageParser(Protocol):
    """Turns a stored message file into a :class:`MessageFile`."""

    def parse_file(self, path: Path) -> MessageFile:
        """Read and parse the message stored at ``path``."""
        raise NotImplementedError


class TextNormalizerProtocol(Protocol):
    """Re-encodes arbitrary text into the canonical form."""

    def normalize(self, text: str | None) -> str:
        """Return ``text`` decoded consistently; never raises."""
        raise NotImplementedError


class ProgressListener(Protocol):
    """Callback notified after each processed message."""

    def __call__(self, event: ProgressEvent) -> None:
        """Receive a progress snapshot."""
        raise NotImplementedError


__all__ = ["MessageParser", "ProgressListener", "TextNormalizerProtocol"]
