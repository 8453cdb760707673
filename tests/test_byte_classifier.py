"""Tests for the text/binary byte classifier."""

from __future__ import annotations

import pytest

from eml_extractor.encoding.classifier import classify, has_byte_order_mark, is_textual


@pytest.mark.parametrize("data", [b"", b"a", b"\x00\x00", b"\x00\x00\x00"])
def test_short_buffers_are_text(data: bytes) -> None:
    """Buffers shorter than four bytes are too small to judge."""

    assert classify(data).is_text is True


@pytest.mark.parametrize(
    "data",
    [
        b"\xef\xbb\xbfhello",
        b"\xfe\xff\x00h\x00i",
        b"\xff\xfeh\x00i\x00",
        b"\x00\x00\xfe\xff\x00\x00\x00h",
        b"+/v8-hello",
        b"\xef\xbb\xbf",
    ],
)
def test_byte_order_marks_are_reported(data: bytes) -> None:
    verdict = classify(data)

    assert verdict.has_bom is True
    assert verdict.is_text is True


def test_plain_text_has_no_bom() -> None:
    verdict = classify(b"Hello, this is a plain message body.")

    assert verdict.is_text is True
    assert verdict.has_bom is False


def test_null_pair_marks_buffer_binary() -> None:
    assert classify(b"GIF89a\x00\x00\x01\x02\x03").is_text is False


def test_control_sequences_above_limit_mark_binary() -> None:
    """``00`` followed by low control bytes in over a tenth of the data is binary."""

    data = b"\x00\x01" * 10

    assert classify(data).is_text is False


def test_occasional_control_sequence_is_tolerated() -> None:
    data = b"abcdefghij" * 3 + b"\x00\x05"

    assert is_textual(data) is True


def test_window_limits_the_inspected_bytes() -> None:
    data = b"\x00\x00\x00\x00" + b"readable text follows"

    assert classify(data).is_text is False
    assert classify(data, start=4).is_text is True
    assert classify(data, start=4, count=2).is_text is True


def test_has_byte_order_mark_honours_start_offset() -> None:
    data = b"xx\xef\xbb\xbfrest"

    assert has_byte_order_mark(data) is False
    assert has_byte_order_mark(data, start=2) is True
