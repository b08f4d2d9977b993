"""AsciiDoc transformer: memoized parse/render stages and the node query surface."""

from __future__ import annotations

import asyncio
import importlib
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from asciidoc_transformer.asciidoc.document import Document
from asciidoc_transformer.asciidoc.processor import Processor
from asciidoc_transformer.cache.keys import AST_KEY, HEADINGS_KEY, HTML_KEY, TIME_TO_READ_KEY
from asciidoc_transformer.cache.manager import MemoCacheManager
from asciidoc_transformer.config.defaults import DEFAULT_WORDS_PER_MINUTE
from asciidoc_transformer.config.hierarchy import merge_with_defaults
from asciidoc_transformer.config.schema import TransformerOptions
from asciidoc_transformer.errors.exceptions import ConfigurationError, ConversionError, ParseError
from asciidoc_transformer.metadata import (
    extract_authors,
    parse_revdate,
    parse_revnumber,
    without_author_attributes,
)
from asciidoc_transformer.text import count_words, reading_time, strip_markup, strip_tags
from asciidoc_transformer.types import (
    DocumentNode,
    Heading,
    HeadingLevel,
    ParsedDocument,
    QueryArg,
    QueryField,
    SafeMode,
    TransformerContext,
)

logger = logging.getLogger(__name__)

_MIME_TYPES = [
    "text/asciidoc",
    "text/x-asciidoc",
    "application/asciidoc",
    "application/x-asciidoc",
    "text/adoc",
    "text/x-adoc",
    "application/adoc",
    "application/x-adoc",
]


class AsciidocTransformer:
    """Turns AsciiDoc nodes into HTML, outlines, reading times and metadata.

    Every derived artifact goes through one memo cache owned by the
    instance: the parsed document (``ast``), the HTML (``html``), the
    outline (``headings``) and the word count behind ``timeToRead``. Each
    slot is keyed by the node's content, origin and timestamp, so an
    edited node simply maps to new slots.
    """

    @staticmethod
    def mime_types() -> list[str]:
        return list(_MIME_TYPES)

    def __init__(
        self,
        options: Mapping[str, Any] | None = None,
        context: TransformerContext | Mapping[str, Any] | None = None,
        processor: Processor | None = None,
        cache: MemoCacheManager | None = None,
    ) -> None:
        if not isinstance(context, TransformerContext):
            context = TransformerContext.model_validate(dict(context or {}))

        self.options = TransformerOptions.from_mapping(
            merge_with_defaults(context.local_options, options)
        )
        self.resolve_node_file_path = context.resolve_node_file_path
        self.assets = context.assets

        self._processor = processor or Processor()
        if self.options.prism:
            self._processor.register_prism()
        for plugin in self.options.extensions:
            self._register_plugin(plugin)

        self._cache = cache or MemoCacheManager(max_entries=self.options.cache_max_entries)

    @property
    def cache(self) -> MemoCacheManager:
        return self._cache

    @property
    def processor(self) -> Processor:
        return self._processor

    # ── Excerpt & metadata ──

    def parse(self, source: str) -> ParsedDocument:
        """Extract the excerpt and metadata of a freshly loaded source.

        Always loads in ``secure`` mode: there is no base directory at this
        point, so includes are not followed.
        """
        try:
            document = self._processor.load(
                source, self.options.processor_options(safe=SafeMode.SECURE)
            )
        except Exception as e:
            raise ParseError(f"Failed to parse source: {e}", original=e) from e

        title = document.get_document_title(partition=True)
        revision = document.get_revision_info()
        attributes = document.get_attributes()
        preamble = _first_block_source(document)

        return ParsedDocument(
            source=source,
            excerpt=preamble or attributes.get("description") or "",
            title=title.main if title else None,
            subtitle=title.subtitle if title else None,
            preamble=preamble,
            revnumber=parse_revnumber(revision.number),
            revdate=parse_revdate(revision.date),
            authorlist=extract_authors(attributes),
            attributes=without_author_attributes(attributes),
        )

    # ── Memoized stages ──

    async def to_structured_document(self, node: DocumentNode) -> Document:
        return await self._cache.memoize(node, AST_KEY, lambda: self._load(node))

    async def to_rendered_output(self, node: DocumentNode) -> str:
        return await self._cache.memoize(node, HTML_KEY, lambda: self._render(node))

    async def to_headings(
        self,
        node: DocumentNode,
        depth: int | HeadingLevel | str | None = None,
        strip_tags: bool = True,
    ) -> list[Heading]:
        """Outline of ``node`` in document order.

        The cached outline is unfiltered; ``depth`` and ``strip_tags`` are
        applied to a copy on every call.
        """
        headings = await self._cache.memoize(node, HEADINGS_KEY, lambda: self._outline(node))
        level = _section_level(depth)
        selected = [h for h in headings if level is None or h.depth == level]
        if strip_tags:
            return [h.model_copy(update={"value": _strip(h.value)}) for h in selected]
        return [h.model_copy() for h in selected]

    async def to_reading_time(
        self,
        node: DocumentNode,
        words_per_minute: int = DEFAULT_WORDS_PER_MINUTE,
    ) -> int:
        if words_per_minute < 1:
            raise ValueError(f"words_per_minute must be positive, got {words_per_minute}")
        word_count = await self._cache.memoize(
            node, TIME_TO_READ_KEY, lambda: self._word_count(node)
        )
        return reading_time(word_count, words_per_minute)

    # ── Query surface ──

    def extend_node_type(self) -> dict[str, QueryField]:
        return {
            "content": QueryField(type="String", resolver=self._resolve_content),
            "stem": QueryField(type="String", resolver=self._resolve_stem),
            "headings": QueryField(
                type="[Heading]",
                args={
                    "depth": QueryArg(type="HeadingLevel"),
                    "stripTags": QueryArg(type="Boolean", default=True),
                },
                resolver=self._resolve_headings,
            ),
            "timeToRead": QueryField(
                type="Int",
                args={
                    "speed": QueryArg(
                        type="Int",
                        default=DEFAULT_WORDS_PER_MINUTE,
                        description="Words per minute",
                    )
                },
                resolver=self._resolve_time_to_read,
            ),
        }

    async def _resolve_content(self, node: DocumentNode, args: dict[str, Any]) -> str:
        return await self.to_rendered_output(node)

    async def _resolve_stem(self, node: DocumentNode, args: dict[str, Any]) -> str | None:
        return node.stem

    async def _resolve_headings(self, node: DocumentNode, args: dict[str, Any]) -> list[Heading]:
        strip = args.get("stripTags")
        return await self.to_headings(node, args.get("depth"), strip is not False)

    async def _resolve_time_to_read(self, node: DocumentNode, args: dict[str, Any]) -> int:
        speed = args.get("speed")
        return await self.to_reading_time(
            node, DEFAULT_WORDS_PER_MINUTE if speed is None else speed
        )

    # ── Stage bodies (run on cache miss) ──

    async def _load(self, node: DocumentNode) -> Document:
        options = self.options.processor_options(base_dir=_base_dir(node))
        try:
            return await asyncio.to_thread(self._processor.load, node.source, options)
        except Exception as e:
            raise ParseError(
                f"Failed to parse {node.internal.origin or '<unknown>'}: {e}",
                origin=node.internal.origin,
                original=e,
            ) from e

    async def _render(self, node: DocumentNode) -> str:
        document = await self.to_structured_document(node)
        try:
            return await asyncio.to_thread(document.convert)
        except Exception as e:
            raise ConversionError(
                f"Failed to convert {node.internal.origin or '<unknown>'}: {e}",
                origin=node.internal.origin,
                original=e,
            ) from e

    async def _outline(self, node: DocumentNode) -> list[Heading]:
        document = await self.to_structured_document(node)
        return [
            Heading(depth=ref.level, value=ref.title or "", anchor=ref.id or None)
            for ref in document.get_outline()
        ]

    async def _word_count(self, node: DocumentNode) -> int:
        html = await self.to_rendered_output(node)
        return count_words(strip_markup(html))

    def _register_plugin(self, name: str) -> None:
        try:
            module = importlib.import_module(name)
        except ImportError as e:
            raise ConfigurationError(f"Cannot import plugin '{name}': {e}", option="plugins") from e
        register = getattr(module, "register", None)
        if not callable(register):
            raise ConfigurationError(
                f"Plugin '{name}' has no register(registry) function", option="plugins"
            )
        register(self._processor.extensions)
        logger.info("Registered AsciiDoc plugin '%s'", name)


def _base_dir(node: DocumentNode) -> str | None:
    path = node.file_info.path
    return str(Path(path).parent) if path else None


def _first_block_source(document: Document) -> str | None:
    """Source of the first child of the first top-level block, if any."""
    if not document.blocks or not document.blocks[0].blocks:
        return None
    return document.blocks[0].blocks[0].get_source() or None


def _section_level(depth: int | HeadingLevel | str | None) -> int | None:
    if depth is None or isinstance(depth, int):
        return depth
    return HeadingLevel(depth).section_level


def _strip(value: str) -> str:
    return strip_tags(value).strip()
