"""Parsed AsciiDoc document."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from asciidoc_transformer.asciidoc.nodes import Block, DocumentTitle, Ref, RevisionInfo
from asciidoc_transformer.types import SafeMode

if TYPE_CHECKING:
    from asciidoc_transformer.asciidoc.converter import Html5Converter


class Document:
    """Root of a parsed document.

    Treated as read-only once it leaves the processor: it is shared between
    every artifact derived from the same source.
    """

    def __init__(
        self,
        source: str,
        attributes: dict[str, Any],
        blocks: list[Block],
        refs: dict[str, Ref],
        converter: Html5Converter,
        safe: SafeMode = SafeMode.SECURE,
        base_dir: Path | None = None,
        title: str | None = None,
        title_ref: Ref | None = None,
    ) -> None:
        self.source = source
        self.attributes = attributes
        self.blocks = blocks
        self.refs = refs
        self.safe = safe
        self.base_dir = base_dir
        self.title = title
        self.title_ref = title_ref
        self._converter = converter

    def get_document_title(self, partition: bool = False) -> DocumentTitle | str | None:
        if self.title is None:
            return None
        if partition:
            return DocumentTitle.partition(self.title)
        return self.title

    def get_revision_info(self) -> RevisionInfo:
        return RevisionInfo(
            number=self.attributes.get("revnumber"),
            date=self.attributes.get("revdate"),
            remark=self.attributes.get("revremark"),
        )

    def get_attributes(self) -> dict[str, Any]:
        return dict(self.attributes)

    def get_refs(self) -> dict[str, Ref]:
        """Referenceable nodes keyed by id, in document order."""
        return dict(self.refs)

    def get_outline(self) -> list[Ref]:
        """The document title (level 0), if any, followed by the refs catalog."""
        refs = list(self.refs.values())
        return [self.title_ref, *refs] if self.title_ref else refs

    def convert(self) -> str:
        return self._converter.convert(self)
