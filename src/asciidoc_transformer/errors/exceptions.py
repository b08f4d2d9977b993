"""Custom exception hierarchy for asciidoc_transformer."""

from __future__ import annotations

from typing import Any


class AsciidocTransformerError(Exception):
    """Base exception for all asciidoc_transformer errors."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(AsciidocTransformerError):
    """Invalid or missing option — raised at construction, before any document is processed.

    Examples: unknown backend, unknown safe mode, plugin that cannot be imported.
    """

    def __init__(self, message: str = "", option: str | None = None) -> None:
        super().__init__(message)
        self.option = option


class ParseError(AsciidocTransformerError):
    """The AsciiDoc processor rejected the source.

    Never cached: the pending entry is dropped so a later request retries.
    """

    def __init__(
        self,
        message: str = "",
        origin: str | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.origin = origin
        self.original = original


class ConversionError(AsciidocTransformerError):
    """Converting a parsed document to the target backend failed."""

    def __init__(
        self,
        message: str = "",
        origin: str | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.origin = origin
        self.original = original
