import pytest

from asciidoc_transformer.transformer import AsciidocTransformer
from asciidoc_transformer.types import DocumentNode, FileInfo, NodeInternal

SAMPLE_SOURCE = """\
= User Guide: Getting Started
Jane Doe <jane@example.com>
v1.2, 2024-01-15: First public draft
:description: A short guide.
:toc:

This guide walks through the *basics*.

== Installation

Install the package with pip.

[source,python]
----
import asciidoc_transformer
----

=== From source

Clone the repository.

== Usage

See <<_installation>> first.
"""


def make_node(
    content: str | None = "= Title\n\nHello world.",
    origin: str | None = "/docs/page.adoc",
    timestamp: float | None = 1.0,
    path: str | None = None,
    stem: str | None = "page",
) -> DocumentNode:
    return DocumentNode(
        content=content,
        internal=NodeInternal(origin=origin, timestamp=timestamp),
        file_info=FileInfo(path=path),
        stem=stem,
    )


@pytest.fixture
def node_factory():
    return make_node


@pytest.fixture
def sample_source():
    return SAMPLE_SOURCE


@pytest.fixture
def sample_node():
    return make_node(SAMPLE_SOURCE, origin="/docs/guide.adoc", stem="guide")


@pytest.fixture
def transformer():
    return AsciidocTransformer()


@pytest.fixture
def sample_adoc_file(tmp_path):
    """Write the sample document to disk and return its path."""
    path = tmp_path / "guide.adoc"
    path.write_text(SAMPLE_SOURCE)
    return path
