"""Encoding detection, text normalization and filename sanitizing."""

from .classifier import classify, has_byte_order_mark, is_textual
from .detector import (
    detect,
    detect_bytes,
    detect_file_encoding,
    feed,
    finalize,
    new_state,
    reset,
    try_load_file,
    vote,
)
from .filenames import (
    PLACEHOLDER_PATTERN,
    FilenameSanitizer,
    generate_placeholder_name,
    sanitize_filename,
)
from .normalizer import TextNormalizer, normalize_text

__all__ = [
    "FilenameSanitizer",
    "PLACEHOLDER_PATTERN",
    "TextNormalizer",
    "classify",
    "detect",
    "detect_bytes",
    "detect_file_encoding",
    "feed",
    "finalize",
    "generate_placeholder_name",
    "has_byte_order_mark",
    "is_textual",
    "new_state",
    "normalize_text",
    "reset",
    "sanitize_filename",
    "try_load_file",
    "vote",
]
