"""Message parsing and extraction pipeline components."""

from .extractor import AttachmentExtractor, iter_parts
from .parser import EmailParser, build_message_file

__all__ = [
    "AttachmentExtractor",
    "EmailParser",
    "build_message_file",
    "iter_parts",
]
