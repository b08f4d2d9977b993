"""HTML5 converter for parsed documents (embedded output, no header/footer)."""

from __future__ import annotations

import html
import logging
from typing import TYPE_CHECKING

from asciidoc_transformer.asciidoc.extensions import ExtensionRegistry, SyntaxHighlighter
from asciidoc_transformer.asciidoc.inline import apply_subs
from asciidoc_transformer.asciidoc.nodes import Block

if TYPE_CHECKING:
    from asciidoc_transformer.asciidoc.document import Document

logger = logging.getLogger(__name__)


class Html5Converter:
    """Converts a document tree block by block.

    Each block context maps to a ``_convert_<context>`` method.
    """

    def __init__(
        self,
        highlighter: SyntaxHighlighter | None = None,
        extensions: ExtensionRegistry | None = None,
    ) -> None:
        self._highlighter = highlighter or SyntaxHighlighter()
        self._extensions = extensions or ExtensionRegistry()

    def convert(self, document: Document) -> str:
        parts: list[str] = []
        if document.title is not None and "showtitle" in document.attributes:
            parts.append(f"<h1>{self._subs(document.title, document)}</h1>")
        parts.extend(self.convert_block(block, document) for block in document.blocks)
        output = "\n".join(part for part in parts if part)
        return self._extensions.postprocess(document, output)

    def convert_block(self, block: Block, document: Document) -> str:
        handler = getattr(self, f"_convert_{block.context}", None)
        if handler is None:
            logger.warning("No converter for block context '%s', skipping", block.context)
            return ""
        return handler(block, document)

    # ── Structure ──

    def _convert_preamble(self, block: Block, document: Document) -> str:
        return (
            '<div id="preamble">\n<div class="sectionbody">\n'
            f"{self._content(block, document)}\n</div>\n</div>"
        )

    def _convert_section(self, block: Block, document: Document) -> str:
        content = self._content(block, document)
        if block.level == 0:
            return f'<h1 id="{block.id}" class="sect0">{block.title}</h1>\n{content}'
        tag = f"h{block.level + 1}"
        heading = f'<{tag} id="{block.id}">{block.title}</{tag}>'
        if block.level == 1:
            content = f'<div class="sectionbody">\n{content}\n</div>'
        return f'<div class="sect{block.level}">\n{heading}\n{content}\n</div>'

    # ── Paragraph-like ──

    def _convert_paragraph(self, block: Block, document: Document) -> str:
        text = self._subs(block.get_source(), document)
        return f"<div{self._id(block)} class=\"paragraph\">\n{self._title(block, document)}<p>{text}</p>\n</div>"

    def _convert_admonition(self, block: Block, document: Document) -> str:
        style = (block.style or "NOTE").upper()
        if block.blocks:
            content = self._content(block, document)
        else:
            content = self._subs(block.get_source(), document)
        return (
            f'<div{self._id(block)} class="admonitionblock {style.lower()}">\n<table>\n<tr>\n'
            f'<td class="icon">\n<div class="title">{style.capitalize()}</div>\n</td>\n'
            f'<td class="content">\n{self._title(block, document)}{content}\n</td>\n'
            "</tr>\n</table>\n</div>"
        )

    # ── Verbatim ──

    def _convert_listing(self, block: Block, document: Document) -> str:
        code = html.escape(block.get_source(), quote=False)
        if block.style == "source":
            pre = self._highlighter.format(
                code, block.attributes.get("language"), document.attributes
            )
        else:
            pre = f"<pre>{code}</pre>"
        return (
            f'<div{self._id(block)} class="listingblock">\n{self._title(block, document)}'
            f'<div class="content">\n{pre}\n</div>\n</div>'
        )

    def _convert_literal(self, block: Block, document: Document) -> str:
        code = html.escape(block.get_source(), quote=False)
        return (
            f'<div{self._id(block)} class="literalblock">\n{self._title(block, document)}'
            f'<div class="content">\n<pre>{code}</pre>\n</div>\n</div>'
        )

    def _convert_pass(self, block: Block, document: Document) -> str:
        return block.get_source()

    # ── Compound ──

    def _convert_example(self, block: Block, document: Document) -> str:
        if (block.style or "").upper() in {"NOTE", "TIP", "IMPORTANT", "WARNING", "CAUTION"}:
            return self._convert_admonition(block, document)
        return (
            f'<div{self._id(block)} class="exampleblock">\n{self._title(block, document)}'
            f'<div class="content">\n{self._content(block, document)}\n</div>\n</div>'
        )

    def _convert_sidebar(self, block: Block, document: Document) -> str:
        return (
            f'<div{self._id(block)} class="sidebarblock">\n<div class="content">\n'
            f"{self._title(block, document)}{self._content(block, document)}\n</div>\n</div>"
        )

    def _convert_quote(self, block: Block, document: Document) -> str:
        attribution = block.attributes.get("2")
        footer = ""
        if attribution:
            footer = (
                f'\n<div class="attribution">\n&#8212; {self._subs(attribution, document)}\n</div>'
            )
        return (
            f'<div{self._id(block)} class="quoteblock">\n{self._title(block, document)}'
            f"<blockquote>\n{self._content(block, document)}\n</blockquote>{footer}\n</div>"
        )

    # ── Lists ──

    def _convert_ulist(self, block: Block, document: Document) -> str:
        items = "\n".join(self._list_item(item, document) for item in block.blocks)
        return (
            f'<div{self._id(block)} class="ulist">\n{self._title(block, document)}'
            f"<ul>\n{items}\n</ul>\n</div>"
        )

    def _convert_olist(self, block: Block, document: Document) -> str:
        items = "\n".join(self._list_item(item, document) for item in block.blocks)
        return (
            f'<div{self._id(block)} class="olist arabic">\n{self._title(block, document)}'
            f'<ol class="arabic">\n{items}\n</ol>\n</div>'
        )

    def _list_item(self, item: Block, document: Document) -> str:
        nested = "".join(f"\n{self.convert_block(child, document)}" for child in item.blocks)
        return f"<li>\n<p>{self._subs(item.get_source(), document)}</p>{nested}\n</li>"

    # ── Breaks ──

    def _convert_thematic_break(self, block: Block, document: Document) -> str:
        return "<hr>"

    def _convert_page_break(self, block: Block, document: Document) -> str:
        return '<div style="page-break-after: always;"></div>'

    # ── Helpers ──

    def _content(self, block: Block, document: Document) -> str:
        return "\n".join(
            part for part in (self.convert_block(child, document) for child in block.blocks) if part
        )

    def _subs(self, text: str, document: Document) -> str:
        return apply_subs(text, document.attributes, document.refs)

    def _title(self, block: Block, document: Document) -> str:
        if not block.title:
            return ""
        return f'<div class="title">{self._subs(block.title, document)}</div>\n'

    @staticmethod
    def _id(block: Block) -> str:
        return f' id="{block.id}"' if block.id else ""
