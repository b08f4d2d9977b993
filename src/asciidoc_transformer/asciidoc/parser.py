"""Line-oriented parser for the AsciiDoc subset the transformer supports.

Handles the document header (title, author and revision lines, attribute
entries), sections, paragraphs, admonitions, lists, delimited blocks, block
metadata (anchors, attribute lists, titles) and the include directive.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from asciidoc_transformer.asciidoc.inline import apply_subs, generate_id, substitute_attributes
from asciidoc_transformer.asciidoc.nodes import Block, Ref
from asciidoc_transformer.types import SafeMode

logger = logging.getLogger(__name__)

_MAX_INCLUDE_DEPTH = 64

_SECTION_RX = re.compile(r"^(={1,6})[ \t]+(\S.*?)[ \t]*$")
_ATTRIBUTE_ENTRY_RX = re.compile(r"^:(!?)(\w[\w-]*)(!?):(?:[ \t]+(.*?))?[ \t]*$")
_BLOCK_ANCHOR_RX = re.compile(r"^\[\[([A-Za-z_:][\w:.-]*)(?:,\s*(.+))?\]\]$")
_BLOCK_ATTRIBUTE_RX = re.compile(r"^\[([^\[\]]*)\]$")
_BLOCK_TITLE_RX = re.compile(r"^\.([^\s.].*)$")
_INCLUDE_RX = re.compile(r"^include::([^\[\s]+)\[(.*)\]$")
_ULIST_RX = re.compile(r"^[ \t]*(\*{1,5}|-)[ \t]+(\S.*)$")
_OLIST_RX = re.compile(r"^[ \t]*(\.{1,5})[ \t]+(\S.*)$")
_ADMONITION_RX = re.compile(r"^(NOTE|TIP|IMPORTANT|WARNING|CAUTION):[ \t]+(.*)$")
_AUTHOR_RX = re.compile(
    r"^(\w[\w\-'.]*)(?:[ \t]+(\w[\w\-'.]*))?(?:[ \t]+(\w[\w\-'.]*))?(?:[ \t]+<([^>]+)>)?$"
)
_REVISION_RX = re.compile(
    r"^(?:[^\d{]*(?P<number>.*?),)?[ \t]*(?!:)(?P<date>.*?)(?:[ \t]*(?!^),?:[ \t]*(?P<remark>.*))?$"
)

_DELIMITERS = {
    "----": "listing",
    "....": "literal",
    "====": "example",
    "****": "sidebar",
    "____": "quote",
    "++++": "pass",
    "////": "comment",
}
_COMPOUND_CONTEXTS = {"example", "sidebar", "quote"}
ADMONITION_STYLES = {"NOTE", "TIP", "IMPORTANT", "WARNING", "CAUTION"}


@dataclass
class _BlockMetadata:
    id: str | None = None
    reftext: str | None = None
    title: str | None = None
    style: str | None = None
    attributes: dict[str, str] = field(default_factory=dict)


class Parser:
    """Parses one source into a title and a block tree.

    ``attributes`` and ``refs`` are filled in place. Keys in ``locked`` were
    set through the API and cannot be changed by the document.
    """

    def __init__(
        self,
        source: str,
        attributes: dict[str, Any],
        locked: set[str] | None = None,
        safe: SafeMode = SafeMode.SECURE,
        base_dir: Path | None = None,
        refs: dict[str, Ref] | None = None,
    ) -> None:
        self.attributes = attributes
        self.refs: dict[str, Ref] = refs if refs is not None else {}
        self.title_ref: Ref | None = None
        self._locked = locked or set()
        self._safe = safe
        self._base_dir = base_dir
        self._lines = self._expand_includes(source.splitlines(), base_dir)
        self._pos = 0
        self._level = 0
        self._list_markers: list[str] = []

    def parse(self) -> tuple[str | None, list[Block]]:
        title = self._parse_header()
        if title is not None:
            # Outline entry only; the title emits no anchor.
            converted = apply_subs(title, self.attributes, self.refs)
            self.title_ref = Ref(generate_id(converted, self.attributes, {}), converted, 0)
        return title, self._parse_body()

    # ── Header ──

    def _parse_header(self) -> str | None:
        self._skip_blank_and_comments()
        title = None
        line = self._peek()
        match = _SECTION_RX.match(line) if line is not None else None
        if match and len(match.group(1)) == 1:
            self._pos += 1
            title = match.group(2)
            self._set_attribute("doctitle", title)
            if self._is_header_detail(self._peek()):
                self._parse_author_line(self._next_line())
                if self._is_header_detail(self._peek()):
                    self._parse_revision_line(self._next_line())

        while (line := self._peek()) is not None and line.strip():
            if _is_line_comment(line):
                self._pos += 1
                continue
            if not self._apply_attribute_entry(line):
                break
            self._pos += 1
        return title

    def _is_header_detail(self, line: str | None) -> bool:
        return bool(
            line
            and line.strip()
            and not _ATTRIBUTE_ENTRY_RX.match(line)
            and not _is_line_comment(line)
        )

    def _parse_author_line(self, line: str) -> None:
        authors = [raw.strip() for raw in line.split(";") if raw.strip()]
        for index, raw in enumerate(authors, 1):
            info = _parse_author(raw)
            if index == 1:
                for key, value in info.items():
                    self._set_attribute(key, value)
            if len(authors) > 1:
                for key, value in info.items():
                    self._set_attribute(f"{key}_{index}", value)
        self._set_attribute("authorcount", str(len(authors)))

    def _parse_revision_line(self, line: str) -> None:
        match = _REVISION_RX.match(line.strip())
        if not match:
            return
        number = (match.group("number") or "").strip() or None
        date = (match.group("date") or "").strip() or None
        remark = (match.group("remark") or "").strip() or None
        if number is None and date and re.match(r"^[vV]\d", date):
            number, date = date[1:], None
        if number:
            self._set_attribute("revnumber", number.lstrip("vV"))
        if date:
            self._set_attribute("revdate", date)
        if remark:
            self._set_attribute("revremark", remark)

    # ── Body ──

    def _parse_body(self) -> list[Block]:
        root: list[Block] = []
        stack: list[Block] = []
        while (block := self._next_block()) is not None:
            if block.context == "section":
                while stack and stack[-1].level >= block.level:
                    stack.pop()
                (stack[-1].blocks if stack else root).append(block)
                stack.append(block)
            else:
                (stack[-1].blocks if stack else root).append(block)
        return root

    def _next_block(self) -> Block | None:
        meta = _BlockMetadata()
        while (line := self._peek()) is not None:
            stripped = line.strip()
            if not stripped or _is_line_comment(stripped):
                self._pos += 1
                continue
            if _delimiter_context(stripped) == "comment":
                self._read_delimited(stripped)
                continue
            if match := _BLOCK_ANCHOR_RX.match(stripped):
                meta.id, meta.reftext = match.group(1), match.group(2)
                self._pos += 1
                continue
            if match := _BLOCK_ATTRIBUTE_RX.match(stripped):
                _parse_attrlist(match.group(1), meta)
                self._pos += 1
                continue
            if (match := _BLOCK_TITLE_RX.match(stripped)) and _delimiter_context(stripped) is None:
                meta.title = match.group(1)
                self._pos += 1
                continue
            if self._apply_attribute_entry(line):
                self._pos += 1
                continue
            return self._parse_block(meta)
        return None

    def _parse_block(self, meta: _BlockMetadata) -> Block:
        line = self._lines[self._pos]
        stripped = line.strip()

        if match := _SECTION_RX.match(line):
            self._pos += 1
            return self._make_section(len(match.group(1)) - 1, match.group(2), meta)

        context = _delimiter_context(stripped)
        if context is not None:
            content = self._read_delimited(stripped)
            if context in _COMPOUND_CONTEXTS:
                block = Block(context, blocks=self._parse_nested(content))
            else:
                block = Block(context, lines=content)
                if context == "listing" and (meta.style == "source" or "language" in meta.attributes):
                    block.style = "source"
            return self._finish(block, meta)

        if stripped in ("'''", "<<<"):
            self._pos += 1
            return self._finish(Block("thematic_break" if stripped == "'''" else "page_break"), meta)

        if _ULIST_RX.match(line) or _OLIST_RX.match(line):
            return self._finish(self._parse_list(), meta)

        if line[0] in " \t":
            lines = self._read_paragraph_lines()
            indent = min(len(ln) - len(ln.lstrip()) for ln in lines if ln.strip())
            return self._finish(Block("literal", lines=[ln[indent:] for ln in lines]), meta)

        lines = self._read_paragraph_lines()
        if meta.style in ADMONITION_STYLES:
            return self._finish(Block("admonition", lines=lines), meta)
        if match := _ADMONITION_RX.match(lines[0]):
            block = Block("admonition", lines=[match.group(2), *lines[1:]], style=match.group(1))
            return self._finish(block, meta)
        return self._finish(Block("paragraph", lines=lines), meta)

    def _make_section(self, level: int, raw_title: str, meta: _BlockMetadata) -> Block:
        title = apply_subs(raw_title, self.attributes, self.refs)
        section_id = meta.id or generate_id(title, self.attributes, self.refs)
        section = Block(
            "section",
            id=section_id,
            title=title,
            level=level,
            style=meta.style,
            attributes=meta.attributes,
        )
        self._level = level
        self._register_ref(Ref(section_id, meta.reftext or title, level))
        return section

    def _finish(self, block: Block, meta: _BlockMetadata) -> Block:
        block.id = meta.id
        block.title = meta.title
        block.style = block.style or meta.style
        block.attributes.update(meta.attributes)
        block.level = self._level
        if block.id:
            reftext = meta.reftext or meta.title
            title = apply_subs(reftext, self.attributes, self.refs) if reftext else None
            self._register_ref(Ref(block.id, title, self._level, context=block.context))
        return block

    def _parse_nested(self, lines: list[str]) -> list[Block]:
        # Includes are already expanded, so the nested parser only sees plain lines
        nested = Parser(
            "\n".join(lines),
            self.attributes,
            locked=self._locked,
            safe=self._safe,
            base_dir=self._base_dir,
            refs=self.refs,
        )
        nested._level = self._level
        return nested._parse_body()

    def _parse_list(self) -> Block:
        first, _ = _list_item(self._lines[self._pos]) or ("*", "")
        block = Block("olist" if first.startswith(".") else "ulist")
        self._list_markers.append(first)
        try:
            while (line := self._peek()) is not None:
                item = _list_item(line)
                if item is None:
                    if not line.strip():
                        lookahead = self._pos
                        while lookahead < len(self._lines) and not self._lines[lookahead].strip():
                            lookahead += 1
                        if lookahead < len(self._lines) and _list_item(self._lines[lookahead]):
                            self._pos = lookahead
                            continue
                        break
                    if _delimiter_context(line.strip()) is not None or not block.blocks:
                        break
                    block.blocks[-1].lines.append(line.strip())
                    self._pos += 1
                    continue
                marker, text = item
                if marker == first:
                    block.blocks.append(Block("list_item", lines=[text]))
                    self._pos += 1
                elif marker in self._list_markers or not block.blocks:
                    break
                else:
                    block.blocks[-1].blocks.append(self._parse_list())
        finally:
            self._list_markers.pop()
        return block

    # ── Reader helpers ──

    def _peek(self) -> str | None:
        return self._lines[self._pos] if self._pos < len(self._lines) else None

    def _next_line(self) -> str:
        line = self._lines[self._pos]
        self._pos += 1
        return line

    def _skip_blank_and_comments(self) -> None:
        while (line := self._peek()) is not None:
            stripped = line.strip()
            if stripped and not _is_line_comment(stripped):
                if _delimiter_context(stripped) != "comment":
                    return
                self._read_delimited(stripped)
                continue
            self._pos += 1

    def _read_delimited(self, delimiter: str) -> list[str]:
        self._pos += 1
        content: list[str] = []
        while (line := self._peek()) is not None:
            self._pos += 1
            if line.rstrip() == delimiter:
                return content
            content.append(line)
        logger.warning("Unterminated %s block", _delimiter_context(delimiter))
        return content

    def _read_paragraph_lines(self) -> list[str]:
        lines: list[str] = []
        while (line := self._peek()) is not None and line.strip():
            if lines and _delimiter_context(line.strip()) is not None:
                break
            lines.append(line.rstrip())
            self._pos += 1
        return lines

    # ── Attributes & refs ──

    def _apply_attribute_entry(self, line: str) -> bool:
        match = _ATTRIBUTE_ENTRY_RX.match(line)
        if not match:
            return False
        name = match.group(2).lower()
        if match.group(1) or match.group(3):
            if name not in self._locked:
                self.attributes.pop(name, None)
            return True
        value = substitute_attributes(match.group(4) or "", self.attributes)
        self._set_attribute(name, value)
        return True

    def _set_attribute(self, name: str, value: str) -> None:
        if name in self._locked:
            return
        self.attributes[name] = value

    def _register_ref(self, ref: Ref) -> None:
        if ref.id in self.refs:
            logger.warning("Duplicate id '%s', keeping the first definition", ref.id)
            return
        self.refs[ref.id] = ref

    def _expand_includes(
        self, lines: list[str], base_dir: Path | None, depth: int = 0
    ) -> list[str]:
        expanded: list[str] = []
        for line in lines:
            match = _INCLUDE_RX.match(line)
            if not match:
                expanded.append(line)
                continue
            target = substitute_attributes(match.group(1), self.attributes)
            if self._safe.level >= SafeMode.SECURE.level or base_dir is None:
                expanded.append(f"link:{target}[]")
                continue
            if depth >= _MAX_INCLUDE_DEPTH:
                logger.warning("Maximum include depth reached at %s", target)
                expanded.append(line)
                continue
            path = (base_dir / target).resolve()
            if self._safe.level >= SafeMode.SAFE.level and not path.is_relative_to(
                (self._base_dir or base_dir).resolve()
            ):
                logger.warning("Include target outside of base directory: %s", target)
                expanded.append(f"Unresolved directive - include::{target}[]")
                continue
            try:
                text = path.read_text(encoding="utf-8")
            except OSError as e:
                logger.warning("Include file not found or unreadable: %s (%s)", path, e)
                expanded.append(f"Unresolved directive - include::{target}[]")
                continue
            expanded.extend(self._expand_includes(text.splitlines(), path.parent, depth + 1))
        return expanded


def _is_line_comment(line: str) -> bool:
    return line.startswith("//") and not line.startswith("///")


def _delimiter_context(line: str) -> str | None:
    if len(line) < 4 or len(set(line)) != 1:
        return None
    return _DELIMITERS.get(line[:4])


def _list_item(line: str) -> tuple[str, str] | None:
    match = _ULIST_RX.match(line) or _OLIST_RX.match(line)
    return (match.group(1), match.group(2)) if match else None


def _parse_attrlist(text: str, meta: _BlockMetadata) -> None:
    positional = 0
    for raw in text.split(","):
        item = raw.strip()
        if not item:
            positional += 1
            continue
        if "=" in item:
            key, _, value = item.partition("=")
            meta.attributes[key.strip()] = value.strip().strip('"')
            continue
        positional += 1
        if positional == 1:
            style, _, anchor = item.partition("#")
            if anchor:
                meta.id = anchor.split(".")[0]
            meta.style = style.split(".")[0] or meta.style
        elif positional == 2 and meta.style == "source":
            meta.attributes["language"] = item
        else:
            meta.attributes[str(positional)] = item


def _parse_author(raw: str) -> dict[str, str]:
    match = _AUTHOR_RX.match(raw)
    if not match:
        return {"author": raw, "firstname": raw, "authorinitials": raw[:1]}

    names = [part.replace("_", " ") for part in match.group(1, 2, 3) if part]
    info = {"firstname": names[0]}
    if len(names) == 3:
        info["middlename"], info["lastname"] = names[1], names[2]
    elif len(names) == 2:
        info["lastname"] = names[1]
    info["author"] = " ".join(names)
    info["authorinitials"] = "".join(name[0] for name in names)
    if match.group(4):
        info["email"] = match.group(4)
    return info
