"""AsciiDoc processor — loads sources into documents and converts them."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from asciidoc_transformer.asciidoc.converter import Html5Converter
from asciidoc_transformer.asciidoc.document import Document
from asciidoc_transformer.asciidoc.extensions import (
    ExtensionRegistry,
    PrismSyntaxHighlighter,
    SyntaxHighlighterRegistry,
)
from asciidoc_transformer.asciidoc.nodes import Block
from asciidoc_transformer.asciidoc.parser import Parser
from asciidoc_transformer.types import SafeMode

logger = logging.getLogger(__name__)

_INTRINSIC_ATTRIBUTES: dict[str, str] = {
    "idprefix": "_",
    "idseparator": "_",
    "basebackend": "html",
    "outfilesuffix": ".html",
}


class Processor:
    """Owns the extensions and syntax highlighters used for every document it loads.

    ``load`` runs synchronously and touches no shared state beyond the
    registries, so it may run in a worker thread.
    """

    def __init__(self) -> None:
        self.extensions = ExtensionRegistry()
        self.syntax_highlighters = SyntaxHighlighterRegistry()

    def register_prism(self) -> None:
        self.syntax_highlighters.register("prism", PrismSyntaxHighlighter)

    def load(self, source: str, options: Mapping[str, Any] | None = None) -> Document:
        """Parse ``source``.

        Recognised options: ``safe`` (default ``secure``), ``backend``,
        ``base_dir`` and ``attributes``. Anything else is ignored here.
        """
        options = dict(options or {})
        safe = SafeMode(options.get("safe") or SafeMode.SECURE)
        backend = options.get("backend") or "html5"
        base_dir = Path(options["base_dir"]) if options.get("base_dir") else None

        attributes, locked = _initial_attributes(options.get("attributes"), backend, safe)
        source = self.extensions.preprocess(source)
        parser = Parser(source, attributes, locked=locked, safe=safe, base_dir=base_dir)
        title, blocks = parser.parse()

        highlighter = self.syntax_highlighters.get(attributes.get("source-highlighter"))
        document = Document(
            source,
            attributes,
            _wrap_preamble(title, blocks),
            parser.refs,
            converter=Html5Converter(highlighter, self.extensions),
            safe=safe,
            base_dir=base_dir,
            title=title,
            title_ref=parser.title_ref,
        )
        self.extensions.process_tree(document)
        return document

    def convert(self, source: str, options: Mapping[str, Any] | None = None) -> str:
        return self.load(source, options).convert()


def _initial_attributes(
    api_attributes: Mapping[str, Any] | None,
    backend: str,
    safe: SafeMode,
) -> tuple[dict[str, Any], set[str]]:
    """Seed document attributes; API values are locked unless they end with ``@``."""
    attributes: dict[str, Any] = {
        **_INTRINSIC_ATTRIBUTES,
        "backend": backend,
        "safe-mode-name": safe.value,
        "safe-mode-level": str(safe.level),
    }
    locked: set[str] = set()
    for name, value in (api_attributes or {}).items():
        key = name.lower()
        if value is None or value is False:
            attributes.pop(key, None)
            locked.add(key)
            continue
        text = "" if value is True else str(value)
        if text.endswith("@"):
            attributes[key] = text[:-1]
        else:
            attributes[key] = text
            locked.add(key)
    return attributes, locked


def _wrap_preamble(title: str | None, blocks: list[Block]) -> list[Block]:
    """Group content before the first section into a preamble.

    Only documents with a title and at least one section get a preamble.
    """
    if title is None or not blocks or blocks[0].context == "section":
        return blocks
    first_section = next((i for i, b in enumerate(blocks) if b.context == "section"), None)
    if first_section is None:
        return blocks
    preamble = Block("preamble", blocks=blocks[:first_section])
    return [preamble, *blocks[first_section:]]
