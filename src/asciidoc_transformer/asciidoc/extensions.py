"""Processor extensions: pre/tree/post processors and syntax highlighters."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from asciidoc_transformer.asciidoc.document import Document

logger = logging.getLogger(__name__)

Preprocessor = Callable[[str], str]
TreeProcessor = Callable[["Document"], None]
Postprocessor = Callable[["Document", str], str]


class ExtensionRegistry:
    """Extensions bound to one processor instance.

    Plugins receive the registry in their ``register(registry)`` hook and
    use the decorators below::

        def register(registry):
            @registry.preprocessor
            def strip_todo(source):
                return source.replace("TODO", "")
    """

    def __init__(self) -> None:
        self.preprocessors: list[Preprocessor] = []
        self.tree_processors: list[TreeProcessor] = []
        self.postprocessors: list[Postprocessor] = []

    def preprocessor(self, fn: Preprocessor) -> Preprocessor:
        self.preprocessors.append(fn)
        return fn

    def tree_processor(self, fn: TreeProcessor) -> TreeProcessor:
        self.tree_processors.append(fn)
        return fn

    def postprocessor(self, fn: Postprocessor) -> Postprocessor:
        self.postprocessors.append(fn)
        return fn

    def preprocess(self, source: str) -> str:
        for fn in self.preprocessors:
            source = fn(source)
        return source

    def process_tree(self, document: Document) -> None:
        for fn in self.tree_processors:
            fn(document)

    def postprocess(self, document: Document, output: str) -> str:
        for fn in self.postprocessors:
            output = fn(document, output)
        return output

    def __len__(self) -> int:
        return len(self.preprocessors) + len(self.tree_processors) + len(self.postprocessors)


class SyntaxHighlighter:
    """Formats the (already escaped) body of a source block."""

    name = "default"

    def format(self, code: str, lang: str | None, attributes: Mapping[str, object]) -> str:
        if not lang:
            return f'<pre class="highlight"><code>{code}</code></pre>'
        return (
            f'<pre class="highlight"><code class="language-{lang}" data-lang="{lang}">'
            f"{code}</code></pre>"
        )


class PrismSyntaxHighlighter(SyntaxHighlighter):
    """Emits the markup Prism.js highlights client-side."""

    name = "prism"

    def format(self, code: str, lang: str | None, attributes: Mapping[str, object]) -> str:
        languages = _split_languages(attributes.get("prism-languages"))
        if lang and languages and lang not in languages:
            logger.debug("Language '%s' not in prism-languages, rendering as plain text", lang)
            lang = None
        language = lang or "none"
        data_lang = f' data-lang="{lang}"' if lang else ""
        return (
            f'<pre class="prism highlight"><code class="language-{language}"{data_lang}>'
            f"{code}</code></pre>"
        )


class SyntaxHighlighterRegistry:
    def __init__(self) -> None:
        self._highlighters: dict[str, type[SyntaxHighlighter]] = {}

    def register(self, name: str, highlighter: type[SyntaxHighlighter]) -> None:
        self._highlighters[name] = highlighter
        logger.debug("Registered syntax highlighter '%s'", name)

    def get(self, name: str | None) -> SyntaxHighlighter | None:
        if not name:
            return None
        highlighter = self._highlighters.get(name)
        return highlighter() if highlighter else None

    def __contains__(self, name: object) -> bool:
        return name in self._highlighters


def _split_languages(value: object) -> set[str]:
    if not value:
        return set()
    return {lang.strip() for lang in str(value).split(",") if lang.strip()}
