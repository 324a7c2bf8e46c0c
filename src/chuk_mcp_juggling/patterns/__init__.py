"""
Pattern library - copyable, ownable juggling patterns.

Library patterns ship with the package; copying one into a project makes it
yours to edit.
"""

from chuk_mcp_juggling.patterns.registry import (
    PatternLibrary,
    document_from_yaml_dict,
    document_to_yaml_dict,
)

__all__ = [
    "PatternLibrary",
    "document_from_yaml_dict",
    "document_to_yaml_dict",
]
