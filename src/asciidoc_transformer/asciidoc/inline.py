"""Inline substitutions: special characters, quotes, attribute references and macros."""

from __future__ import annotations

import html
import logging
import re
from collections.abc import Mapping

from asciidoc_transformer.asciidoc.nodes import Ref

logger = logging.getLogger(__name__)

_ATTRIBUTE_REF_RX = re.compile(r"(\\)?\{([A-Za-z0-9_][\w-]*)\}")

# (pattern, open tag, close tag) — unconstrained pairs run before constrained ones
_QUOTE_RULES: list[tuple[re.Pattern[str], str, str]] = [
    (re.compile(r"\*\*(.+?)\*\*"), "<strong>", "</strong>"),
    (re.compile(r"(?<![\w;:}*])\*(?!\s)(.+?)(?<!\s)\*(?![\w*])"), "<strong>", "</strong>"),
    (re.compile(r"__(.+?)__"), "<em>", "</em>"),
    (re.compile(r"(?<![\w;:}_])_(?!\s)(.+?)(?<!\s)_(?![\w_])"), "<em>", "</em>"),
    (re.compile(r"``(.+?)``"), "<code>", "</code>"),
    (re.compile(r"(?<![\w;:}`])`(?!\s)(.+?)(?<!\s)`(?![\w`])"), "<code>", "</code>"),
    (re.compile(r"(?<![\w;:}&#])#(?!\s)(.+?)(?<!\s)#(?![\w#])"), "<mark>", "</mark>"),
]

_XREF_SHORTHAND_RX = re.compile(r"&lt;&lt;([\w:.#-]+)(?:,\s*(.+?))?&gt;&gt;")
_XREF_MACRO_RX = re.compile(r"xref:([\w:.#-]+)\[(.*?)\]")
_URL_RX = re.compile(r"(?<![\w\"'=/>])(https?://[^\s\[\]<>\"]+)(?:\[([^\]]*)\])?")
_LINK_MACRO_RX = re.compile(r"link:([^\s\[]+)\[([^\]]*)\]")

_INVALID_ID_CHARS_RX = re.compile(
    r"<[^>]+>|&(?:[a-z][a-z]+\d{0,2}|#\d\d\d{0,4}|#x[\da-f][\da-f][\da-f]{0,3});|[^ \w\-.]+"
)
_ID_SEPARATOR_RX = re.compile(r"[ .-]+")


def substitute_attributes(text: str, attributes: Mapping[str, object]) -> str:
    """Replace ``{name}`` references; unknown and escaped references are kept."""

    def _replace(match: re.Match[str]) -> str:
        escaped, name = match.group(1), match.group(2).lower()
        if escaped:
            return match.group(0)[1:]
        value = attributes.get(name)
        if value is None:
            return match.group(0)
        return str(value)

    return _ATTRIBUTE_REF_RX.sub(_replace, text)


def apply_quotes(text: str) -> str:
    for pattern, open_tag, close_tag in _QUOTE_RULES:
        text = pattern.sub(lambda m, o=open_tag, c=close_tag: f"{o}{m.group(1)}{c}", text)
    return text


def apply_macros(text: str, refs: Mapping[str, Ref]) -> str:
    text = _XREF_SHORTHAND_RX.sub(lambda m: _xref(m.group(1), m.group(2), refs), text)
    text = _XREF_MACRO_RX.sub(lambda m: _xref(m.group(1), m.group(2) or None, refs), text)
    text = _LINK_MACRO_RX.sub(lambda m: _anchor(m.group(1), m.group(2) or m.group(1)), text)
    text = _URL_RX.sub(lambda m: _anchor(m.group(1), m.group(2) or m.group(1)), text)
    return text


def apply_subs(
    text: str,
    attributes: Mapping[str, object],
    refs: Mapping[str, Ref] | None = None,
) -> str:
    """Run the normal substitution group over a run of inline text."""
    text = html.escape(text, quote=False)
    text = apply_quotes(text)
    text = substitute_attributes(text, attributes)
    return apply_macros(text, refs or {})


def generate_id(title: str, attributes: Mapping[str, object], taken: Mapping[str, object]) -> str:
    """Derive a section id from its (converted) title, unique within ``taken``."""
    prefix = str(attributes.get("idprefix", "_"))
    separator = str(attributes.get("idseparator", "_"))

    base = _INVALID_ID_CHARS_RX.sub("", title.lower())
    base = _ID_SEPARATOR_RX.sub(separator, base)
    if separator:
        base = base.strip(separator)
    candidate = base = f"{prefix}{base}"

    counter = 2
    while candidate in taken:
        candidate = f"{base}{separator}{counter}"
        counter += 1
    return candidate


def _xref(target: str, text: str | None, refs: Mapping[str, Ref]) -> str:
    ref_id = target.lstrip("#")
    ref = refs.get(ref_id)
    if ref is None:
        logger.warning("Possible invalid reference: %s", ref_id)
    label = text or (ref.title if ref and ref.title else f"[{ref_id}]")
    return f'<a href="#{ref_id}">{label}</a>'


def _anchor(href: str, text: str) -> str:
    return f'<a href="{href}">{text}</a>'
