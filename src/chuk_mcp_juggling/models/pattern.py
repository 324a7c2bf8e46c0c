"""
Pattern models - compile configuration and library documents.

- PatternConfig: everything one compile needs (pattern text, hand siteswap
  options, dwell, body and hand motion)
- PatternDocument: a YAML library entry wrapping a PatternConfig, with named
  variants in the style of preset parameter combinations
- PatternMetadata: lightweight listing entry
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from chuk_mcp_juggling.constants import (
    DEFAULT_DWELL,
    ErrorMessages,
    PatternCategory,
    SchemaVersion,
)
from chuk_mcp_juggling.errors import JuggleUserError


class PatternConfig(BaseModel):
    """
    Compile configuration for one pattern.

    With `hss` set, `pattern` is the object siteswap and `hss` the hand
    siteswap; the two are converted to a passing siteswap before compiling.
    """

    pattern: str = Field(..., description="Siteswap, or object siteswap when hss is set")
    hss: str | None = Field(None, description="Hand siteswap")
    hold: bool = Field(False, description="Mark hand-siteswap holds with 'H'")
    dwellmax: bool = Field(True, description="Stretch hand-siteswap dwells to the full gap")
    handspec: str | None = Field(None, description="Hand assignment '(L,R)(L,R)...'")
    dwell: float = Field(DEFAULT_DWELL, description="Dwell time in beats (0 < dwell < 2)")
    body: str | None = Field(None, description="Body motion string")
    hands: str | None = Field(None, description="Hand motion string")
    title: str | None = Field(None, description="Display title")

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        """Require non-blank pattern text."""
        if not v or not v.strip():
            raise ValueError(ErrorMessages.NO_PATTERN)
        return v.strip()

    @field_validator("dwell")
    @classmethod
    def validate_dwell(cls, v: float) -> float:
        if not 0 < v < 2:
            raise ValueError(ErrorMessages.DWELL_RANGE.format(dwell=v))
        return v

    @field_validator("hss", "handspec", "body", "hands", "title")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat empty strings as absent."""
        if v is not None and not v.strip():
            return None
        return v

    @classmethod
    def from_values(cls, values: dict[str, Any]) -> PatternConfig:
        """
        Build a config, reporting validation failures as JuggleUserError.

        Raises:
            JuggleUserError: Missing pattern, dwell out of range, unknown
                or badly typed fields
        """
        unknown = sorted(set(values) - set(cls.model_fields))
        if unknown:
            raise JuggleUserError(ErrorMessages.UNKNOWN_PARAMETER.format(names=", ".join(unknown)))
        if not values.get("pattern"):
            raise JuggleUserError(ErrorMessages.NO_PATTERN)
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            raise JuggleUserError(_validation_message(e)) from e

    @classmethod
    def from_parameter_string(cls, text: str) -> PatternConfig:
        """
        Parse the "name=value;name=value" parameter form.

        A string without any '=' is taken as the pattern itself. Names are
        case-insensitive; a later value for the same name wins.

        Examples:
            "3"                          -> pattern "3"
            "pattern=531;dwell=1.0"      -> pattern "531", dwell 1.0
            "pattern=3;hss=2;hold=true"  -> hand siteswap with holds
        """
        if "=" not in text:
            return cls.from_values({"pattern": text})

        values: dict[str, Any] = {}
        for item in text.split(";"):
            if not item.strip():
                continue
            name, sep, value = item.partition("=")
            if not sep:
                raise JuggleUserError(
                    ErrorMessages.BAD_PARAMETER_VALUE.format(name=item.strip(), value="")
                )
            values[name.strip().lower()] = value.strip()
        return cls.from_values(values)

    def to_parameter_string(self) -> str:
        """Render back to the "name=value;..." form, omitting defaults."""
        defaults = PatternConfig(pattern=self.pattern)
        parts = []
        for name in type(self).model_fields:
            value = getattr(self, name)
            if name != "pattern" and value == getattr(defaults, name):
                continue
            if isinstance(value, bool):
                value = str(value).lower()
            parts.append(f"{name}={value}")
        return ";".join(parts)


def _validation_message(error: ValidationError) -> str:
    """First validation error as a user-facing message."""
    first = error.errors()[0]
    name = ".".join(str(part) for part in first["loc"])
    if first["type"] == "value_error":
        return str(first["ctx"]["error"])
    if first["type"] == "missing" and name == "pattern":
        return ErrorMessages.NO_PATTERN
    return ErrorMessages.BAD_PARAMETER_VALUE.format(name=name, value=first.get("input"))


class PatternVariant(BaseModel):
    """
    A variant is a preset override of a pattern's config.

    Variants allow quick selection of common configurations.
    """

    name: str = Field(..., description="Variant name")
    description: str = Field("", description="Variant description")
    config: dict[str, Any] = Field(default_factory=dict, description="Config overrides")


class PatternDocument(BaseModel):
    """A pattern library file."""

    schema_version: SchemaVersion = Field(
        "pattern/v1", alias="schema", description="Schema version"
    )
    name: str = Field(..., description="Pattern name")
    category: PatternCategory = Field(..., description="Library category")
    description: str = Field("", description="Human-readable description")
    version: str = Field("1.0.0", description="Pattern version")
    config: PatternConfig = Field(..., description="Compile configuration")
    variants: dict[str, PatternVariant] = Field(default_factory=dict, description="Named variants")

    model_config = {"populate_by_name": True}

    def resolve_config(
        self, variant: str | None = None, overrides: dict[str, Any] | None = None
    ) -> PatternConfig:
        """
        Get the config to compile.

        Resolution order:
        1. Document config
        2. Variant overrides
        3. Explicit overrides

        Raises:
            JuggleUserError: Unknown variant or invalid resulting config
        """
        values = self.config.model_dump(exclude_none=True)
        if variant is not None:
            if variant not in self.variants:
                raise JuggleUserError(f"Unknown variant '{variant}' for pattern '{self.name}'.")
            values.update(self.variants[variant].config)
        if overrides:
            values.update(overrides)
        return PatternConfig.from_values(values)


class PatternMetadata(BaseModel):
    """
    Lightweight pattern metadata for listing/discovery.
    """

    name: str = Field(..., description="Pattern name")
    category: PatternCategory = Field(..., description="Library category")
    description: str = Field("", description="Human-readable description")
    version: str = Field("1.0.0", description="Pattern version")
    pattern: str = Field(..., description="Pattern text")
    variants: list[str] = Field(default_factory=list, description="Available variants")
    path: str | None = Field(None, description="Path to pattern file")

    @classmethod
    def from_document(cls, doc: PatternDocument, path: str | None = None) -> PatternMetadata:
        """Create metadata from a full document."""
        return cls(
            name=doc.name,
            category=doc.category,
            description=doc.description,
            version=doc.version,
            pattern=doc.config.pattern,
            variants=list(doc.variants.keys()),
            path=path,
        )
