"""Shared Pydantic models for asciidoc_transformer."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# ── Enums ──


class SafeMode(StrEnum):
    UNSAFE = "unsafe"
    SAFE = "safe"
    SERVER = "server"
    SECURE = "secure"

    @property
    def level(self) -> int:
        return _SAFE_MODE_LEVELS[self]


_SAFE_MODE_LEVELS = {
    SafeMode.UNSAFE: 0,
    SafeMode.SAFE: 1,
    SafeMode.SERVER: 10,
    SafeMode.SECURE: 20,
}


class HeadingLevel(StrEnum):
    H1 = "h1"
    H2 = "h2"
    H3 = "h3"
    H4 = "h4"
    H5 = "h5"
    H6 = "h6"

    @property
    def section_level(self) -> int:
        """Section level rendered with this tag (``==`` is level 1, an ``<h2>``)."""
        return int(self.value[1:]) - 1


# ── Input node (owned by the host content graph) ──


class NodeInternal(BaseModel):
    origin: str | None = None
    timestamp: float | None = None


class FileInfo(BaseModel):
    path: str | None = None


class DocumentNode(BaseModel):
    """A content node handed over by the host. The transformer only reads it."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content: str | None = None
    internal: NodeInternal = Field(default_factory=NodeInternal)
    file_info: FileInfo = Field(default_factory=FileInfo, alias="fileInfo")
    stem: str | None = None

    @property
    def source(self) -> str:
        return self.content or ""


# ── Derived artifacts ──


class Heading(BaseModel):
    depth: int
    value: str = ""
    anchor: str | None = None


class Author(BaseModel):
    author: str = ""
    email: str = ""
    firstname: str = ""
    lastname: str = ""
    middlename: str = ""
    authorinitials: str = ""


class ParsedDocument(BaseModel):
    """Excerpt and metadata extracted when a source file is loaded."""

    source: str
    excerpt: str = ""
    title: str | None = None
    subtitle: str | None = None
    preamble: str | None = None
    revnumber: float | None = None
    revdate: datetime | None = None
    authorlist: list[Author] = Field(default_factory=list)
    attributes: dict[str, Any] = Field(default_factory=dict)


# ── Host integration ──


class TransformerContext(BaseModel):
    """What the host hands the transformer besides its options."""

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    local_options: dict[str, Any] = Field(default_factory=dict, alias="localOptions")
    resolve_node_file_path: Callable[..., Any] | None = Field(
        default=None, alias="resolveNodeFilePath"
    )
    assets: Any = None


class QueryArg(BaseModel):
    type: str
    default: Any = None
    description: str = ""


class QueryField(BaseModel):
    """A field the transformer adds to the host's node type."""

    type: str
    args: dict[str, QueryArg] = Field(default_factory=dict)
    resolver: Callable[[DocumentNode, dict[str, Any]], Awaitable[Any]]

    async def resolve(self, node: DocumentNode, args: Mapping[str, Any] | None = None) -> Any:
        """Resolve for ``node``, filling unspecified arguments with their defaults."""
        unknown = set(args or {}) - set(self.args)
        if unknown:
            raise ValueError(f"Unknown argument(s): {', '.join(sorted(unknown))}")
        values = {name: arg.default for name, arg in self.args.items()}
        values.update(args or {})
        return await self.resolver(node, values)
