"""Pydantic models for compile configuration and the pattern library."""

from chuk_mcp_juggling.models.pattern import (
    PatternConfig,
    PatternDocument,
    PatternMetadata,
    PatternVariant,
)

__all__ = [
    "PatternConfig",
    "PatternDocument",
    "PatternMetadata",
    "PatternVariant",
]
