"""Conversion of decoded strings into filesystem-safe names."""

from __future__ import annotations

import logging
import os
import re
import uuid

from ..core.interfaces import TextNormalizerProtocol
from .normalizer import TextNormalizer

LOGGER = logging.getLogger(__name__)

DEFAULT_PLACEHOLDER = "no subject"
DEFAULT_MAX_LENGTH = 64
REPLACEMENT = "_"

# Union of the characters rejected by Windows and POSIX filesystems.
RESERVED_CHARACTERS = frozenset('<>:"/\\|?*' + "".join(chr(code) for code in range(32)))

PLACEHOLDER_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$"
)

_RESERVED_RE = re.compile("[" + re.escape("".join(sorted(RESERVED_CHARACTERS))) + "]")


def generate_placeholder_name() -> str:
    """Return a fresh unique token usable as a file or folder name."""
    return str(uuid.uuid4())


def _truncate(name: str, max_length: int) -> str:
    if len(name) <= max_length:
        return name
    stem, suffix = os.path.splitext(name)
    if not suffix or len(suffix) >= max_length:
        return name[:max_length].rstrip(" .") or name[:max_length]
    # Windows drops trailing dots and spaces from a stem.
    trimmed = stem[: max_length - len(suffix)].rstrip(" .")
    return (trimmed or stem[: max_length - len(suffix)]) + suffix


class FilenameSanitizer:
    """Map arbitrary decoded strings to safe, non-empty names."""

    def __init__(
        self,
        normalizer: TextNormalizerProtocol | None = None,
        *,
        placeholder: str = DEFAULT_PLACEHOLDER,
        max_length: int = DEFAULT_MAX_LENGTH,
    ) -> None:
        """Configure the normalizer, empty-name placeholder and length cap."""
        self._normalizer = normalizer or TextNormalizer()
        self._placeholder = placeholder
        self._max_length = max_length

    def sanitize(self, raw_name: str | None) -> str:
        """Return a filesystem-safe version of ``raw_name``."""
        try:
            name = self._normalizer.normalize(raw_name)
            if not name.strip(" ."):
                name = self._placeholder
            safe = _RESERVED_RE.sub(REPLACEMENT, name)
            return _truncate(safe, self._max_length)
        except Exception as exc:  # pylint: disable=broad-except
            LOGGER.warning("Unable to sanitize name %r: %s", raw_name, exc)
            return generate_placeholder_name()


_DEFAULT_SANITIZER: FilenameSanitizer | None = None


def sanitize_filename(raw_name: str | None) -> str:
    """Sanitize ``raw_name`` with a lazily created default sanitizer."""
    global _DEFAULT_SANITIZER  # pylint: disable=global-statement
    if _DEFAULT_SANITIZER is None:
        _DEFAULT_SANITIZER = FilenameSanitizer()
    return _DEFAULT_SANITIZER.sanitize(raw_name)


__all__ = [
    "DEFAULT_PLACEHOLDER",
    "FilenameSanitizer",
    "PLACEHOLDER_PATTERN",
    "RESERVED_CHARACTERS",
    "generate_placeholder_name",
    "sanitize_filename",
]
