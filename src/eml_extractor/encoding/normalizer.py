"""Best-effort re-encoding of decoded message text."""

from __future__ import annotations

import locale
import logging

from .detector import detect_bytes

LOGGER = logging.getLogger(__name__)

DEFAULT_LEGACY_CODEPAGE = "cp1251"


class TextNormalizer:
    """Bring text into a consistent encoding.

    Text representable in the legacy codepage is round-tripped through it.
    Anything else is encoded with the fallback codepage, the resulting bytes
    are run through charset detection and decoded again. Failures leave the
    text untouched.
    """

    def __init__(
        self,
        legacy_codepage: str = DEFAULT_LEGACY_CODEPAGE,
        fallback_codepage: str | None = None,
    ) -> None:
        """Store the codepages used by the fast path and the fallback."""
        self._legacy_codepage = legacy_codepage
        self._fallback_codepage = fallback_codepage or locale.getpreferredencoding(
            False
        )

    @property
    def fallback_codepage(self) -> str:
        return self._fallback_codepage

    def normalize(self, text: str | None) -> str:
        """Return ``text`` normalized; never raises."""
        if not text:
            return ""
        try:
            return text.encode(self._legacy_codepage).decode(self._legacy_codepage)
        except UnicodeError:
            LOGGER.debug(
                "Text not representable in %s, detecting encoding",
                self._legacy_codepage,
            )
        except LookupError as exc:
            LOGGER.warning("Unknown legacy codepage %s: %s", self._legacy_codepage, exc)
        return self._detect_and_decode(text)

    def _detect_and_decode(self, text: str) -> str:
        try:
            raw = text.encode(self._fallback_codepage)
            encoding = detect_bytes(raw) or self._fallback_codepage
            return raw.decode(encoding)
        except (UnicodeError, LookupError) as exc:
            LOGGER.warning("Unable to normalize text, keeping original: %s", exc)
            return text


_DEFAULT_NORMALIZER: TextNormalizer | None = None


def normalize_text(text: str | None) -> str:
    """Normalize ``text`` with a lazily created default normalizer."""
    global _DEFAULT_NORMALIZER  # pylint: disable=global-statement
    if _DEFAULT_NORMALIZER is None:
        _DEFAULT_NORMALIZER = TextNormalizer()
    return _DEFAULT_NORMALIZER.normalize(text)


__all__ = ["DEFAULT_LEGACY_CODEPAGE", "TextNormalizer", "normalize_text"]
