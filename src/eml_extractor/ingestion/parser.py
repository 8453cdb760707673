"""Utilities for parsing stored RFC822 messages into structured models."""

from __future__ import annotations

from email import policy
from email.message import EmailMessage, Message
from email.parser import BytesParser
from pathlib import Path

from ..core.models import ContentNode, Leaf, MessageFile, MessagePart, Multipart


class EmailParser:
    """Convert raw message files into :class:`MessageFile` instances."""

    def __init__(self) -> None:
        """Prepare internal parser instance."""
        self._parser = BytesParser(policy=policy.default)

    def parse_file(self, path: Path) -> MessageFile:
        """Read ``path`` and parse its contents."""
        with path.open("rb") as handle:
            message = self._parser.parse(handle)
        return build_message_file(path, message)

    def parse(self, payload: bytes, path: Path) -> MessageFile:
        """Parse raw RFC822 bytes that were loaded from ``path``."""
        message = self._parser.parsebytes(payload)
        return build_message_file(path, message)


def build_message_file(path: Path, message: EmailMessage) -> MessageFile:
    """Assemble a :class:`MessageFile` from an already parsed message."""
    index: dict[int, MessagePart] = {}
    content = _build_tree(message, index)

    html_part = message.get_body(preferencelist=("html",))
    text_part = message.get_body(preferencelist=("plain",))
    body_parts = tuple(
        _lookup(part, index) for part in (html_part, text_part) if part is not None
    )

    return MessageFile(
        path=path,
        subject=str(message.get("Subject") or ""),
        html_body=_read_text(html_part),
        text_body=_read_text(text_part),
        attachments=tuple(
            _lookup(part, index)
            for part in message.iter_attachments()
            if not _is_container(part) and part.is_attachment()
        ),
        content=content,
        body_parts=body_parts,
    )


def _is_container(part: Message) -> bool:
    return part.is_multipart() and part.get_content_maintype() == "multipart"


def _build_tree(part: EmailMessage, index: dict[int, MessagePart]) -> ContentNode:
    if _is_container(part):
        children = tuple(_build_tree(child, index) for child in part.iter_parts())
        return Multipart(content_type=part.get_content_type(), children=children)
    leaf = _to_part(part)
    index[id(part)] = leaf
    return Leaf(part=leaf)


def _to_part(part: Message) -> MessagePart:
    return MessagePart(
        filename=part.get_filename(),
        content_type=part.get_content_type(),
        disposition=part.get_content_disposition(),
        source=part,
    )


def _lookup(part: Message, index: dict[int, MessagePart]) -> MessagePart:
    existing = index.get(id(part))
    return existing if existing is not None else _to_part(part)


def _read_text(part: Message | None) -> str | None:
    if part is None:
        return None
    try:
        content = part.get_content()
    except LookupError:
        # unknown charset, fall back to a lossy decode of the raw payload
        payload = part.get_payload(decode=True) or b""
        return payload.decode("utf-8", errors="replace")
    if not isinstance(content, str):
        return None
    return content


__all__ = ["EmailParser", "build_message_file"]
