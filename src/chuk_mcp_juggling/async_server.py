#!/usr/bin/env python3
"""
Async Juggling MCP Server using chuk-mcp-server

This server provides MCP tools for compiling juggling notation. Patterns
live in a library you can copy from and customize - you own your patterns.

The server provides tools for:
- Compiling siteswaps (solo, synchronous, multiplex, passing) to throw listings
- Validating patterns with column/beat-accurate errors
- Converting object + hand siteswaps to passing siteswaps
- Parsing body motion
- Pattern discovery and customization
"""

import logging
import os
from pathlib import Path

from chuk_mcp_server import ChukMCPServer

from chuk_mcp_juggling.compiler import PatternCompiler
from chuk_mcp_juggling.constants import PROJECT_DIR_ENV
from chuk_mcp_juggling.patterns import PatternLibrary
from chuk_mcp_juggling.tools import register_compilation_tools, register_library_tools

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create the MCP server instance
mcp = ChukMCPServer("chuk-mcp-juggling")

# Paths - user patterns default to ./patterns, overridable from the CLI
BASE_PATH = Path.cwd()
PATTERNS_DIR = Path(os.environ.get(PROJECT_DIR_ENV, BASE_PATH / "patterns"))
LIBRARY_PATH = Path(__file__).parent / "patterns" / "library"

# Create managers
pattern_library = PatternLibrary(
    library_path=LIBRARY_PATH,
    project_path=PATTERNS_DIR,
)
pattern_compiler = PatternCompiler()

# Register all tools
compilation_tools = register_compilation_tools(mcp, pattern_compiler)
library_tools = register_library_tools(mcp, pattern_library, pattern_compiler)

# Export tool functions for direct access
juggle_compile = compilation_tools["juggle_compile"]
juggle_validate = compilation_tools["juggle_validate"]
juggle_convert_hss = compilation_tools["juggle_convert_hss"]
juggle_parse_body = compilation_tools["juggle_parse_body"]

juggle_list_patterns = library_tools["juggle_list_patterns"]
juggle_describe_pattern = library_tools["juggle_describe_pattern"]
juggle_compile_library_pattern = library_tools["juggle_compile_library_pattern"]
juggle_copy_pattern_to_project = library_tools["juggle_copy_pattern_to_project"]

logger.info("CHUK Juggling MCP Server initialized")
logger.info(f"  Library path: {LIBRARY_PATH}")
logger.info(f"  Project patterns dir: {PATTERNS_DIR}")
