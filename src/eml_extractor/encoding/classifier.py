"""Heuristics deciding whether a byte buffer holds text."""

from __future__ import annotations

from ..core.models import ByteClassification

_BYTE_ORDER_MARKS = (
    b"\xef\xbb\xbf",  # UTF-8
    b"\x00\x00\xfe\xff",  # UTF-32 BE
    b"\xfe\xff",  # UTF-16 BE
    b"\xff\xfe",  # UTF-16 LE
    b"\x2b\x2f\x76",  # UTF-7
)

_MIN_SAMPLE = 4
_CONTROL_LIMIT = 0x0A


def _window(buffer: bytes, start: int, count: int | None) -> bytes:
    end = len(buffer) if count is None else start + count
    return bytes(buffer[start:end])


def has_byte_order_mark(buffer: bytes, start: int = 0) -> bool:
    """Return ``True`` when the data at ``start`` begins with a known BOM."""
    head = bytes(buffer[start : start + _MIN_SAMPLE])
    return any(head.startswith(mark) for mark in _BYTE_ORDER_MARKS)


def classify(
    buffer: bytes, start: int = 0, count: int | None = None
) -> ByteClassification:
    """Classify ``buffer[start:start + count]`` as textual or binary.

    Windows shorter than four bytes are too small to judge and count as text.
    Otherwise a window is binary when it holds a ``00 00`` pair; it is text
    when ``00`` followed by a low control byte appears in at most a tenth of
    the window.
    """
    window = _window(buffer, start, count)
    if has_byte_order_mark(window):
        return ByteClassification(is_text=True, has_bom=True)
    if len(window) < _MIN_SAMPLE:
        return ByteClassification(is_text=True, has_bom=False)

    null_sequences = 0
    control_sequences = 0
    for previous, current in zip(window, window[1:]):
        if previous != 0:
            continue
        if current == 0:
            null_sequences += 1
            if null_sequences > 1:
                break
        elif current < _CONTROL_LIMIT:
            control_sequences += 1

    is_text = null_sequences == 0 and control_sequences <= len(window) // 10
    return ByteClassification(is_text=is_text, has_bom=False)


def is_textual(buffer: bytes, start: int = 0, count: int | None = None) -> bool:
    """Shortcut returning only the text/binary verdict of :func:`classify`."""
    return classify(buffer, start, count).is_text


__all__ = ["classify", "has_byte_order_mark", "is_textual"]
