"""Configuration — defaults, option schema and layered merging."""

from asciidoc_transformer.config.hierarchy import (
    load_config_hierarchy,
    merge_options,
    merge_with_defaults,
)
from asciidoc_transformer.config.schema import SUPPORTED_BACKENDS, TransformerOptions

__all__ = [
    "SUPPORTED_BACKENDS",
    "TransformerOptions",
    "load_config_hierarchy",
    "merge_options",
    "merge_with_defaults",
]
