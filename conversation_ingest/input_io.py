# Conversation Ingest
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Input I/O helpers.

This module centralizes how raw conversation payloads are read from files or
stdin, and how request-style bodies (`{"title": ..., "format": ...,
"data": ...}`) are unwrapped before parsing.
"""

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from conversation_ingest.config import ConfigError
from conversation_ingest.models import SUPPORTED_FORMATS


_JSON_SUFFIXES = {".json"}
_YAML_SUFFIXES = {".yaml", ".yml"}


@dataclass(frozen=True)
class Payload:
    """
    Raw input plus the optional overrides that came with it.

    Attributes:
        data:
            Structured value or text to parse.
        title:
            Title found next to the data, if any.
        format:
            Format tag found next to the data, if it is a supported one.
    """

    data: Any
    title: str | None = None
    format: str | None = None


def unwrap_payload(body: Any) -> Payload:
    """Split a request body into data and overrides.

    A mapping with a `data` key is a wrapped request: its `title` (string) and
    `format` (one of the supported tags) are picked up, anything else is
    ignored. Otherwise the body itself is the data; a root-level `title`
    string is still used as title.
    """

    if not isinstance(body, dict):
        return Payload(data=body)

    title = body.get("title")
    title = title if isinstance(title, str) and title.strip() else None

    if "data" in body:
        fmt = body.get("format")
        return Payload(
            data=body["data"],
            title=title,
            format=fmt if fmt in SUPPORTED_FORMATS else None,
        )

    return Payload(data=body, title=title)


def _decode_text(text: str) -> Any:
    """Decode text that looks like JSON; keep anything else as text."""

    stripped = text.lstrip("\ufeff").strip()
    if stripped[:1] in {"{", "["}:
        try:
            return json.loads(stripped)
        except ValueError:
            pass
    return text


def read_input(path: str | Path) -> Any:
    """Read a raw payload from a file or stdin.

    Args:
        path:
            File path, or `-` for stdin.

    Returns:
        Decoded JSON/YAML for `.json`/`.yaml`/`.yml` files. Any other text
        (including stdin) is decoded as JSON when it looks like JSON and
        returned as text otherwise.

    Raises:
        ConfigError:
            If the file cannot be read or decoded.
    """

    if str(path) == "-":
        return _decode_text(sys.stdin.read())

    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Input file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8-sig")
    except Exception as exc:  # noqa: BLE001
        raise ConfigError(f"Failed to read input file '{path}': {exc}") from exc

    suffix = path.suffix.lower()
    try:
        if suffix in _JSON_SUFFIXES:
            return json.loads(text)
        if suffix in _YAML_SUFFIXES:
            return yaml.safe_load(text)
    except Exception as exc:  # noqa: BLE001
        raise ConfigError(f"Failed to decode input file '{path}': {exc}") from exc

    return _decode_text(text)
