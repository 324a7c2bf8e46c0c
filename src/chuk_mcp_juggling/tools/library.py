"""
Library tools - MCP tools for pattern discovery.

Tools for listing, describing, compiling and copying library patterns.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_juggling.compiler import PatternCompiler, to_ir
from chuk_mcp_juggling.constants import ErrorMessages, PatternCategory, SuccessMessages
from chuk_mcp_juggling.patterns import PatternLibrary
from chuk_mcp_juggling.tools.compilation import error_response

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def register_library_tools(
    mcp: ChukMCPServer,
    library: PatternLibrary,
    compiler: PatternCompiler,
) -> dict[str, Any]:
    """
    Register pattern library tools with the MCP server.

    Args:
        mcp: The MCP server instance
        library: The pattern library
        compiler: The pattern compiler

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    def _not_found(pattern_id: str) -> str:
        return json.dumps(
            {
                "status": "error",
                "message": ErrorMessages.PATTERN_NOT_FOUND.format(pattern_id=pattern_id),
                "error_type": "user",
            }
        )

    @mcp.tool  # type: ignore[arg-type]
    async def juggle_list_patterns(category: str | None = None) -> str:
        """
        List available patterns.

        Args:
            category: Optional filter ('solo', 'passing', 'hss')

        Returns:
            JSON string with list of pattern summaries

        Example:
            juggle_list_patterns(category="passing")
        """
        try:
            category_enum = PatternCategory(category) if category else None
            patterns = library.list_patterns(category=category_enum)
            return json.dumps(
                {
                    "status": "success",
                    "patterns": [
                        {
                            "id": f"{p.category.value}/{p.name}",
                            "name": p.name,
                            "category": p.category.value,
                            "description": p.description,
                            "pattern": p.pattern,
                            "variants": p.variants,
                        }
                        for p in patterns
                    ],
                    "count": len(patterns),
                }
            )
        except ValueError:
            return json.dumps(
                {
                    "status": "error",
                    "message": f"Unknown category: {category}",
                    "error_type": "user",
                }
            )
        except Exception as e:
            return error_response(e, "list patterns")

    tools["juggle_list_patterns"] = juggle_list_patterns

    @mcp.tool  # type: ignore[arg-type]
    async def juggle_describe_pattern(pattern_id: str) -> str:
        """
        Get detailed information about a pattern.

        Args:
            pattern_id: Pattern identifier (e.g., 'solo/cascade')

        Returns:
            JSON string with the pattern's config and variants

        Example:
            juggle_describe_pattern(pattern_id="solo/cascade")
        """
        try:
            doc = library.get_pattern(pattern_id)
            if doc is None:
                return _not_found(pattern_id)

            return json.dumps(
                {
                    "status": "success",
                    "pattern": {
                        "id": pattern_id,
                        "name": doc.name,
                        "category": doc.category.value,
                        "description": doc.description,
                        "version": doc.version,
                        "config": doc.config.model_dump(exclude_none=True),
                        "parameters": doc.config.to_parameter_string(),
                        "variants": {
                            name: {"description": v.description, "config": v.config}
                            for name, v in doc.variants.items()
                        },
                    },
                }
            )
        except Exception as e:
            return error_response(e, "describe pattern")

    tools["juggle_describe_pattern"] = juggle_describe_pattern

    @mcp.tool  # type: ignore[arg-type]
    async def juggle_compile_library_pattern(
        pattern_id: str,
        variant: str | None = None,
        overrides: dict[str, Any] | None = None,
        include_throws: bool = True,
    ) -> str:
        """
        Compile a library pattern, optionally with a variant or overrides.

        Args:
            pattern_id: Pattern identifier (e.g., 'passing/four-count')
            variant: Optional variant name
            overrides: Optional config overrides (e.g., {"dwell": 1.0})
            include_throws: Include the full throw listing (default True)

        Returns:
            JSON string with the compiled pattern

        Example:
            juggle_compile_library_pattern(pattern_id="solo/cascade", variant="slow")
        """
        try:
            doc = library.get_pattern(pattern_id)
            if doc is None:
                return _not_found(pattern_id)

            logger.debug("Compiling %s (variant=%s)", pattern_id, variant)
            config = doc.resolve_config(variant=variant, overrides=overrides)
            ir = to_ir(compiler.compile(config))
            data = ir.to_dict()
            if not include_throws:
                data.pop("throws")
            return json.dumps(
                {
                    "status": "success",
                    "pattern_id": pattern_id,
                    "variant": variant,
                    "compiled": data,
                    "summary": ir.summary(),
                }
            )
        except Exception as e:
            return error_response(e, "compile library pattern")

    tools["juggle_compile_library_pattern"] = juggle_compile_library_pattern

    @mcp.tool  # type: ignore[arg-type]
    async def juggle_copy_pattern_to_project(pattern_id: str) -> str:
        """
        Copy a library pattern into the project for customization.

        After copying, the project version takes precedence over the library
        version and can be edited freely.

        Args:
            pattern_id: Pattern identifier (e.g., 'solo/cascade')

        Returns:
            JSON string with path to copied pattern

        Example:
            juggle_copy_pattern_to_project(pattern_id="solo/cascade")
        """
        try:
            path = library.copy_to_project(pattern_id)
            if path is None:
                return _not_found(pattern_id)
            return json.dumps(
                {
                    "status": "success",
                    "message": SuccessMessages.PATTERN_COPIED.format(
                        pattern_id=pattern_id, path=path
                    ),
                    "path": str(path),
                }
            )
        except Exception as e:
            return error_response(e, "copy pattern")

    tools["juggle_copy_pattern_to_project"] = juggle_copy_pattern_to_project

    return tools
