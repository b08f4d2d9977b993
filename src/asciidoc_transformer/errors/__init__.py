"""Error handling — exception hierarchy for parsing, conversion and configuration."""

from asciidoc_transformer.errors.exceptions import (
    AsciidocTransformerError,
    ConfigurationError,
    ConversionError,
    ParseError,
)

__all__ = [
    "AsciidocTransformerError",
    "ConfigurationError",
    "ConversionError",
    "ParseError",
]
