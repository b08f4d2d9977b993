"""Structured document nodes produced by the AsciiDoc parser."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Block:
    """A block in the document tree.

    ``lines`` holds the raw source lines of leaf blocks; compound blocks
    (sections, preamble, lists, delimited example/sidebar/quote blocks)
    keep their children in ``blocks``.
    """

    context: str
    lines: list[str] = field(default_factory=list)
    blocks: list[Block] = field(default_factory=list)
    id: str | None = None
    title: str | None = None
    style: str | None = None
    level: int = 0
    attributes: dict[str, str] = field(default_factory=dict)

    def get_source(self) -> str:
        return "\n".join(self.lines)


@dataclass
class Ref:
    """A referenceable node (section or anchored block)."""

    id: str
    title: str | None
    level: int
    context: str = "section"


@dataclass
class DocumentTitle:
    main: str
    subtitle: str | None = None

    @classmethod
    def partition(cls, title: str, separator: str = ":") -> DocumentTitle:
        """Split ``Main: Subtitle`` on the last separator followed by a space."""
        main, sep, subtitle = title.rpartition(f"{separator} ")
        if not sep:
            return cls(main=title)
        return cls(main=main, subtitle=subtitle)


@dataclass
class RevisionInfo:
    number: str | None = None
    date: str | None = None
    remark: str | None = None
