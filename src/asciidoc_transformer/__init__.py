"""asciidoc_transformer — memoized AsciiDoc transformer for content graphs."""

from asciidoc_transformer.cache import CacheStats, MemoCache, MemoCacheManager, fingerprint
from asciidoc_transformer.errors import (
    AsciidocTransformerError,
    ConfigurationError,
    ConversionError,
    ParseError,
)
from asciidoc_transformer.transformer import AsciidocTransformer
from asciidoc_transformer.types import (
    Author,
    DocumentNode,
    FileInfo,
    Heading,
    HeadingLevel,
    NodeInternal,
    ParsedDocument,
    QueryArg,
    QueryField,
    SafeMode,
    TransformerContext,
)

__version__ = "0.1.0"

__all__ = [
    "AsciidocTransformer",
    "AsciidocTransformerError",
    "Author",
    "CacheStats",
    "ConfigurationError",
    "ConversionError",
    "DocumentNode",
    "FileInfo",
    "Heading",
    "HeadingLevel",
    "MemoCache",
    "MemoCacheManager",
    "NodeInternal",
    "ParseError",
    "ParsedDocument",
    "QueryArg",
    "QueryField",
    "SafeMode",
    "TransformerContext",
    "fingerprint",
]
