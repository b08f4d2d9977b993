"""Pydantic model for transformer options."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from asciidoc_transformer.errors.exceptions import ConfigurationError
from asciidoc_transformer.types import SafeMode

SUPPORTED_BACKENDS = ("html5", "html")


class TransformerOptions(BaseModel):
    """Merged transformer options.

    Unknown keys are kept and handed to the processor verbatim.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    backend: str = "html5"
    parse: bool = True
    safe: SafeMode = SafeMode.SAFE
    prism: bool = True
    attributes: dict[str, Any] = Field(default_factory=dict)
    plugins: list[str] = Field(default_factory=list)
    use_built_ins: bool = Field(default=True, alias="useBuiltIns")
    cache_max_entries: int = Field(default=1000, ge=1)

    @field_validator("backend")
    @classmethod
    def _known_backend(cls, value: str) -> str:
        if value not in SUPPORTED_BACKENDS:
            raise ValueError(
                f"unsupported backend '{value}' (expected one of: {', '.join(SUPPORTED_BACKENDS)})"
            )
        return value

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> TransformerOptions:
        """Validate merged options, failing fast with a ConfigurationError."""
        try:
            return cls.model_validate(dict(raw))
        except ValidationError as exc:
            first = exc.errors()[0]
            option = ".".join(str(part) for part in first["loc"]) or None
            raise ConfigurationError(
                f"Invalid option '{option}': {first['msg']}", option=option
            ) from exc

    @property
    def extensions(self) -> list[str]:
        """Plugin modules to register, honouring ``use_built_ins``."""
        return [] if not self.use_built_ins else list(self.plugins)

    def processor_options(self, **overrides: Any) -> dict[str, Any]:
        """Options as handed to the processor, including pass-through keys."""
        options = self.model_dump(exclude={"plugins", "use_built_ins", "cache_max_entries"})
        options.update(overrides)
        return options
