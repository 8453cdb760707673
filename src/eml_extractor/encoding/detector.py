"""Character encoding detection built on ``chardet``.

A detection session is an explicit :class:`DetectionState` value. Each chunk is
fed to a session-wide ``UniversalDetector``; while that detector is not yet
confident, every chunk is also split into small windows probed independently,
and the names those probes report are kept as votes. Finalizing a session
prefers the confident answer and otherwise picks the best weighted vote.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import BinaryIO

from chardet.universaldetector import UniversalDetector

from ..core.models import DetectionState, EncodingVote
from .classifier import classify

LOGGER = logging.getLogger(__name__)

READ_CHUNK_SIZE = 16 * 1024
MAX_READ_BYTES = 20 * 1024 * 1024
SUB_WINDOW_SIZE = 4 * 1024
MAX_CANDIDATES = 2000
MIN_WINDOW_CONFIDENCE = 0.30

_FAMILY_WEIGHTS = (
    ("UTF-32", 2.0),
    ("UTF-16", 1.8),
    ("UTF-8", 1.5),
    ("UTF-7", 1.3),
)
_ASCII_WEIGHT = 0.2
_DEFAULT_WEIGHT = 1.0


def new_state() -> DetectionState:
    """Return an empty detection session."""
    return DetectionState()


def reset(state: DetectionState) -> DetectionState:
    """Clear every field of ``state`` so it can serve a new input."""
    state.started = False
    state.done = False
    state.has_byte_order_mark = False
    state.is_text = False
    state.candidate_encodings.clear()
    state.resolved_encoding = None
    state.analyzer.reset()
    return state


def _confident_encoding(analyzer: UniversalDetector) -> str | None:
    if not analyzer.done:
        return None
    return analyzer.result.get("encoding") or None


def _probe_windows(state: DetectionState, chunk: bytes) -> None:
    probe = UniversalDetector()
    for offset in range(0, len(chunk), SUB_WINDOW_SIZE):
        probe.reset()
        probe.feed(chunk[offset : offset + SUB_WINDOW_SIZE])
        result = probe.close()
        encoding = result.get("encoding")
        confidence = result.get("confidence") or 0.0
        if encoding and confidence > MIN_WINDOW_CONFIDENCE:
            state.candidate_encodings.append(encoding)


def feed(
    state: DetectionState,
    buffer: bytes,
    start: int = 0,
    count: int | None = None,
) -> DetectionState:
    """Feed one chunk of data into the detection session."""
    if state.done:
        return state

    end = len(buffer) if count is None else start + count
    chunk = bytes(buffer[start:end])

    if not state.started:
        reset(state)
        state.started = True
        verdict = classify(chunk)
        if not verdict.is_text:
            state.is_text = False
            state.done = True
            return state
        state.has_byte_order_mark = verdict.has_bom
        state.is_text = True

    if not chunk:
        return state

    state.analyzer.feed(chunk)
    confident = _confident_encoding(state.analyzer)
    if confident:
        state.resolved_encoding = confident
        state.done = True
        return state

    if len(state.candidate_encodings) < MAX_CANDIDATES:
        _probe_windows(state, chunk)
    return state


def family_weight(encoding: str) -> float:
    """Return the voting multiplier for an encoding name."""
    upper = encoding.upper()
    for prefix, weight in _FAMILY_WEIGHTS:
        if upper.startswith(prefix):
            return weight
    if upper == "ASCII":
        return _ASCII_WEIGHT
    return _DEFAULT_WEIGHT


def tally(candidates: Iterable[str]) -> list[EncodingVote]:
    """Group candidate names in first-seen order."""
    votes: dict[str, EncodingVote] = {}
    for name in candidates:
        entry = votes.get(name)
        if entry is None:
            votes[name] = EncodingVote(
                encoding=name, count=1, weight=family_weight(name)
            )
        else:
            entry.count += 1
    return list(votes.values())


def vote(candidates: Iterable[str]) -> str | None:
    """Pick the best-scoring encoding; ties go to the first group seen."""
    votes = tally(candidates)
    if not votes:
        return None
    return max(votes, key=lambda entry: entry.score).encoding


def finalize(state: DetectionState) -> str | None:
    """Close the session and return the detected encoding, if any."""
    if state.done and state.resolved_encoding is not None:
        return state.resolved_encoding
    state.done = True
    confident = _confident_encoding(state.analyzer)
    if confident:
        state.resolved_encoding = confident
    else:
        state.resolved_encoding = vote(state.candidate_encodings)
    return state.resolved_encoding


def detect_state(stream: BinaryIO) -> DetectionState:
    """Run a complete session over ``stream`` and return its final state."""
    state = new_state()
    max_reads = MAX_READ_BYTES // READ_CHUNK_SIZE
    for _ in range(max_reads):
        chunk = stream.read(READ_CHUNK_SIZE)
        if not chunk:
            break
        feed(state, chunk)
        if state.done:
            break
    finalize(state)
    return state


def detect(stream: BinaryIO) -> str | None:
    """Detect the encoding of the data readable from ``stream``."""
    return detect_state(stream).resolved_encoding


def detect_bytes(data: bytes) -> str | None:
    """Detect the encoding of an in-memory buffer."""
    return detect(io.BytesIO(data))


def detect_file_encoding(path: Path | str, default: str | None = None) -> str | None:
    """Detect the encoding of a file on disk, returning ``default`` if unknown."""
    with Path(path).open("rb") as handle:
        return detect(handle) or default


def try_load_file(path: Path | str, default: str = "") -> str:
    """Read a text file with its detected encoding; ``default`` on any failure."""
    file_path = Path(path)
    if not file_path.is_file():
        return default
    try:
        encoding = detect_file_encoding(file_path, default="utf-8")
        return file_path.read_text(encoding=encoding)
    except (OSError, UnicodeError, LookupError) as exc:
        LOGGER.warning("Unable to load text file %s: %s", file_path, exc)
        return default


__all__ = [
    "detect",
    "detect_bytes",
    "detect_file_encoding",
    "detect_state",
    "family_weight",
    "feed",
    "finalize",
    "new_state",
    "reset",
    "tally",
    "try_load_file",
    "vote",
]
