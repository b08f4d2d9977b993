"""Plain-text helpers for derived views: markup stripping, word counts, reading time."""

from __future__ import annotations

import math
import re

from bs4 import BeautifulSoup

# Elements whose text never reaches the reader
_NON_TEXT_TAGS = ("script", "style", "textarea", "option", "noscript")

_WORD_RX = re.compile(r"[^\W_]+(?:['’][^\W_]+)*")
_TAG_RX = re.compile(r"<[^>]+>")


def strip_markup(markup: str) -> str:
    """Reduce HTML to its visible text."""
    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup(_NON_TEXT_TAGS):
        tag.decompose()
    return soup.get_text(separator=" ")


def strip_tags(text: str) -> str:
    """Drop inline tags from a short fragment such as a heading title."""
    return _TAG_RX.sub("", text)


def count_words(text: str) -> int:
    return len(_WORD_RX.findall(text))


def reading_time(word_count: int, words_per_minute: int) -> int:
    """Minutes to read, rounded half up and never below one."""
    if words_per_minute < 1:
        raise ValueError(f"words_per_minute must be positive, got {words_per_minute}")
    return max(1, math.floor(word_count / words_per_minute + 0.5))
