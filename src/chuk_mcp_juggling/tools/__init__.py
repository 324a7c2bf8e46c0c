"""
MCP tool implementations.

Tools are organized by domain:
- compilation - Compiling, validating and converting patterns
- library - Pattern discovery and customization
"""

from chuk_mcp_juggling.tools.compilation import register_compilation_tools
from chuk_mcp_juggling.tools.library import register_library_tools

__all__ = [
    "register_compilation_tools",
    "register_library_tools",
]
