"""Tests for filesystem-safe name generation."""

from __future__ import annotations

import pytest

from eml_extractor.encoding.filenames import (
    PLACEHOLDER_PATTERN,
    RESERVED_CHARACTERS,
    FilenameSanitizer,
    generate_placeholder_name,
    sanitize_filename,
)


class ExplodingNormalizer:
    """Normalizer double that always fails."""

    def normalize(self, text: str | None) -> str:
        raise RuntimeError(f"cannot normalize {text!r}")


def test_reserved_characters_are_replaced() -> None:
    sanitizer = FilenameSanitizer()

    assert sanitizer.sanitize('a<b>c:d"e/f\\g|h?i*j') == "a_b_c_d_e_f_g_h_i_j"


def test_adjacent_reserved_characters_each_become_underscore() -> None:
    assert sanitize_filename("Re: Fw: report?") == "Re_ Fw_ report_"
    assert sanitize_filename("a//b") == "a__b"


@pytest.mark.parametrize("raw", [None, "", "   ", ".", ".."])
def test_empty_names_use_placeholder(raw: str | None) -> None:
    assert FilenameSanitizer().sanitize(raw) == "no subject"


def test_custom_placeholder() -> None:
    sanitizer = FilenameSanitizer(placeholder="untitled")

    assert sanitizer.sanitize("") == "untitled"


@pytest.mark.parametrize(
    "raw",
    [
        "normal name.pdf",
        "tab\tand\nnewline",
        "<<<>>>",
        'C:\\Users\\"me"\\file?.txt',
        "Отчёт/за|май",
        "\x00\x01\x1f",
    ],
)
def test_result_is_never_empty_or_reserved(raw: str) -> None:
    result = sanitize_filename(raw)

    assert result
    assert not set(result) & RESERVED_CHARACTERS


def test_long_names_keep_their_extension() -> None:
    sanitizer = FilenameSanitizer(max_length=32)

    result = sanitizer.sanitize("x" * 100 + ".pdf")

    assert len(result) == 32
    assert result.endswith(".pdf")


def test_failure_returns_generated_token() -> None:
    sanitizer = FilenameSanitizer(ExplodingNormalizer())

    assert PLACEHOLDER_PATTERN.match(sanitizer.sanitize("anything"))


def test_generated_placeholders_are_unique() -> None:
    first = generate_placeholder_name()
    second = generate_placeholder_name()

    assert first != second
    assert PLACEHOLDER_PATTERN.match(first)


def test_truncated_stem_drops_trailing_dots_and_spaces() -> None:
    sanitizer = FilenameSanitizer(max_length=32)

    result = sanitizer.sanitize("report" + " ." * 30 + ".pdf")

    stem = result.removesuffix(".pdf")
    assert result.endswith(".pdf")
    assert stem == "report"
    assert len(result) <= 32


def test_truncated_name_without_extension_drops_trailing_spaces() -> None:
    sanitizer = FilenameSanitizer(max_length=16)

    result = sanitizer.sanitize("abcdefghij" + " " * 10 + "x" * 10)

    assert result == "abcdefghij"
