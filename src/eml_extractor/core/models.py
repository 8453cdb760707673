"""Core domain models used across the application."""

from __future__ import annotations

from dataclasses import dataclass, field
from email.message import Message
from pathlib import Path

from chardet.universaldetector import UniversalDetector


@dataclass(slots=True)
class ByteClassification:
    """Outcome of inspecting a byte window for textual content."""

    is_text: bool
    has_bom: bool


# pylint: disable=too-many-instance-attributes
@dataclass(slots=True)
class DetectionState:
    """Per-session state of a charset detection run.

    A session is fed zero or more chunks and finalized once. ``analyzer`` is the
    session-wide statistical detector; ``candidate_encodings`` collects the
    names voted by independent per-window probes.
    """

    started: bool = False
    done: bool = False
    has_byte_order_mark: bool = False
    is_text: bool = False
    candidate_encodings: list[str] = field(default_factory=list)
    resolved_encoding: str | None = None
    analyzer: UniversalDetector = field(
        default_factory=UniversalDetector, repr=False, compare=False
    )


@dataclass(slots=True)
class EncodingVote:
    """Aggregated votes for one encoding name."""

    encoding: str
    count: int
    weight: float

    @property
    def score(self) -> float:
        return self.count * self.weight


@dataclass(slots=True, eq=False)
class MessagePart:
    """Single MIME leaf able to produce its decoded bytes."""

    filename: str | None
    content_type: str
    disposition: str | None
    source: Message = field(repr=False)

    @property
    def is_attachment(self) -> bool:
        return self.disposition == "attachment"

    @property
    def is_inline(self) -> bool:
        return self.disposition == "inline"

    def decode(self) -> bytes:
        """Return the transfer-decoded payload of the part."""
        if self.source.is_multipart():
            # message/rfc822 and similar containers carry nested messages
            return b"".join(
                nested.as_bytes() for nested in self.source.get_payload()
            )
        payload = self.source.get_payload(decode=True)
        return payload or b""


@dataclass(slots=True)
class Leaf:
    """Content tree node wrapping a single part."""

    part: MessagePart


@dataclass(slots=True)
class Multipart:
    """Content tree node grouping child nodes."""

    content_type: str
    children: tuple[ContentNode, ...]


ContentNode = Leaf | Multipart


# pylint: disable=too-many-instance-attributes
@dataclass(slots=True)
class MessageFile:
    """Parsed message file ready for extraction."""

    path: Path
    subject: str
    html_body: str | None
    text_body: str | None
    attachments: tuple[MessagePart, ...]
    content: ContentNode
    body_parts: tuple[MessagePart, ...] = ()

    @property
    def body(self) -> str | None:
        """Preferred body: HTML when present, plain text otherwise."""
        return self.html_body if self.html_body is not None else self.text_body


@dataclass(slots=True)
class ExtractionJob:
    """Bookkeeping for a single extraction run."""

    source_dir: Path
    dest_dir: Path
    total: int
    processed: int = 0
    failed: int = 0

    @property
    def percent_complete(self) -> int:
        if self.total <= 0:
            return 0
        return self.processed * 100 // self.total


@dataclass(slots=True, frozen=True)
class ProgressEvent:
    """Snapshot emitted after each message file completes."""

    processed_count: int
    percent_complete: int


__all__ = [
    "ByteClassification",
    "ContentNode",
    "DetectionState",
    "EncodingVote",
    "ExtractionJob",
    "Leaf",
    "MessageFile",
    "MessagePart",
    "Multipart",
    "ProgressEvent",
]
