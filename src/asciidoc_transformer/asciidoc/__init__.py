"""Built-in AsciiDoc processor: parser, document model and HTML5 converter."""

from asciidoc_transformer.asciidoc.document import Document
from asciidoc_transformer.asciidoc.extensions import (
    ExtensionRegistry,
    PrismSyntaxHighlighter,
    SyntaxHighlighter,
)
from asciidoc_transformer.asciidoc.nodes import Block, DocumentTitle, Ref, RevisionInfo
from asciidoc_transformer.asciidoc.processor import Processor

__all__ = [
    "Block",
    "Document",
    "DocumentTitle",
    "ExtensionRegistry",
    "PrismSyntaxHighlighter",
    "Processor",
    "Ref",
    "RevisionInfo",
    "SyntaxHighlighter",
]
