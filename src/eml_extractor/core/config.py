"""Application configuration models and loader utilities."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, cast

from dotenv import dotenv_values
from pydantic import BaseModel, Field


class ExtractionSettings(BaseModel):
    """Settings describing where messages are read from and written to."""

    source_dir: Path | None = Field(
        default=None, description="Directory tree containing message files"
    )
    dest_dir: Path | None = Field(
        default=None, description="Directory receiving one folder per message"
    )
    extension: str = Field(
        default=".eml", description="File extension identifying message files"
    )
    body_filename: str = Field(
        default="email.html", description="Name of the body file in each folder"
    )


class EncodingSettings(BaseModel):
    """Settings for text normalization and filename sanitizing."""

    legacy_codepage: str = Field(
        default="cp1251", description="Codepage used for the round-trip fast path"
    )
    fallback_codepage: str | None = Field(
        default=None,
        description="Codepage used when the fast path fails; platform default if unset",
    )
    placeholder_name: str = Field(
        default="no subject", description="Name substituted for empty subjects"
    )
    max_filename_length: int = Field(
        default=64, ge=16, description="Longest file or folder name produced"
    )


class LoggingSettings(BaseModel):
    """Logging preferences."""

    level: str = Field(default="INFO", description="Root logging level")
    structured: bool = Field(
        default=False, description="Toggle JSON structured logging"
    )
    log_file: Path | None = Field(
        default=None, description="Optional file receiving a copy of all logs"
    )


class AppSettings(BaseModel):
    """Aggregated application configuration."""

    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    encoding: EncodingSettings = Field(default_factory=EncodingSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


ENV_PREFIX = "EML_EXTRACTOR_"


def _normalize_key(raw_key: str) -> list[str]:
    """Convert an environment variable key into a nested attribute path."""
    trimmed = raw_key.removeprefix(ENV_PREFIX)
    return [segment.lower() for segment in trimmed.split("__") if segment]


def _merge_into_tree(tree: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign a value to a nested dictionary given a path."""
    cursor = tree
    for segment in path[:-1]:
        next_node = cursor.setdefault(segment, {})
        cursor = cast(dict[str, Any], next_node)
    cursor[path[-1]] = value


def _collect_env_values(
    env_file: Path | str | None, include_environment: bool
) -> dict[str, Any]:
    """Load configuration values from environment variables and optional file."""
    collected: dict[str, Any] = {}

    file_values = {}
    if env_file:
        env_path = Path(env_file)
        if env_path.is_file():
            file_values = {
                key: value
                for key, value in dotenv_values(env_path).items()
                if key and key.startswith(ENV_PREFIX)
            }

    env_values = {}
    if include_environment:
        env_values = {
            key: value
            for key, value in os.environ.items()
            if key.startswith(ENV_PREFIX)
        }

    combined: dict[str, Any] = {**file_values, **env_values}

    for key, value in combined.items():
        path = _normalize_key(key)
        if not path:
            continue
        normalized_value: Any = value
        if isinstance(value, str) and value == "":
            normalized_value = None
        elif isinstance(value, str):
            lowercase_value = value.lower()
            if lowercase_value == "true":
                normalized_value = True
            elif lowercase_value == "false":
                normalized_value = False
        _merge_into_tree(collected, path, normalized_value)

    return collected


@lru_cache(maxsize=1)
def load_app_settings(
    env_file: Path | str | None = None,
    include_environment: bool = True,
    **overrides: Any,
) -> AppSettings:
    """Load application settings, applying env files and overrides."""
    collected = _collect_env_values(env_file, include_environment)
    if overrides:
        collected.update(overrides)
    return AppSettings.model_validate(collected)


__all__ = [
    "AppSettings",
    "EncodingSettings",
    "ExtractionSettings",
    "LoggingSettings",
    "load_app_settings",
]
