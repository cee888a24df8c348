# Conversation Ingest
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Conversation parser interface and error taxonomy."""

from dataclasses import dataclass
from typing import Any, Protocol

from conversation_ingest.models import NormalizedConversation


class ConversationParser(Protocol):
    """Interface for one input format.

    Each parser pairs a detection predicate with a shape validator:

    - `detects()` inspects unlabeled input and answers whether it carries this
      format's signature. It must never raise.
    - `validate()` checks the shape again (also when the format was given
      explicitly) and returns the typed source value consumed by `parse()`.
    """

    format: str
    default_title: str

    def detects(self, raw: Any) -> bool:
        """Return True if the raw input looks like this format."""

        raise NotImplementedError

    def validate(self, raw: Any) -> Any:
        """Return the typed source value or raise ShapeMismatchError."""

        raise NotImplementedError

    def parse(
        self, source: Any, title: str | None = None, default_title: str | None = None
    ) -> NormalizedConversation:
        """Convert a validated source value into a normalized conversation.

        Title precedence: `title`, a title embedded in the input,
        `default_title`, then the parser's own `default_title`.
        """

        raise NotImplementedError


@dataclass(eq=False)
class ParserError(RuntimeError):
    """Base class for ingest failures reported to callers."""

    message: str
    format: str | None = None

    kind = "parse"

    def __str__(self) -> str:
        if self.format:
            return f"[{self.format}] {self.message}"
        return self.message


@dataclass(eq=False)
class DetectionError(ParserError):
    """No parser recognized the input (or an unsupported format was named)."""

    attempted: tuple[str, ...] = ()

    kind = "detection"


@dataclass(eq=False)
class ShapeMismatchError(ParserError):
    """The payload does not have the structure the selected format requires."""

    kind = "shape"


@dataclass(eq=False)
class ParseFailureError(ParserError):
    """A parser failed while processing an input with a valid shape."""

    kind = "parse"
