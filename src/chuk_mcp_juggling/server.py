#!/usr/bin/env python3
"""
Entry point for the CHUK Juggling MCP Server.

Runs the MCP server over stdio or http, or compiles a single pattern from
the command line with --check:

    chuk-mcp-juggling                          # stdio server
    chuk-mcp-juggling --transport http --port 8000
    chuk-mcp-juggling --check "pattern=3;hss=3"
"""

import argparse
import asyncio
import json
import logging
import os
import sys

from chuk_mcp_juggling.constants import PROJECT_DIR_ENV

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="CHUK Juggling MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport mode (default: stdio)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="HTTP port (only for http transport)",
    )
    parser.add_argument(
        "--project-dir",
        help="Directory of user-owned patterns (default: ./patterns)",
    )
    parser.add_argument(
        "--check",
        metavar="PATTERN",
        help="Compile one pattern or parameter string, print its summary and exit",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def check_pattern(text: str) -> int:
    """Compile `text` and print the IR summary; returns the exit status."""
    from chuk_mcp_juggling.compiler import compile_pattern, to_ir
    from chuk_mcp_juggling.errors import JuggleError, JuggleUserError

    try:
        ir = to_ir(compile_pattern(text))
    except JuggleError as e:
        where = ""
        if isinstance(e, JuggleUserError) and e.beat is not None:
            where = f" (beat {e.beat})"
        print(f"error: {e.message}{where}", file=sys.stderr)
        return 1
    print(json.dumps(ir.summary(), indent=2))
    return 0


def main() -> None:
    """Main entry point with transport detection."""
    args = build_parser().parse_args()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.check is not None:
        sys.exit(check_pattern(args.check))

    if args.project_dir:
        os.environ[PROJECT_DIR_ENV] = args.project_dir

    # Import after argument parsing so the project dir and --debug apply to server setup
    from chuk_mcp_juggling.async_server import mcp

    if args.transport == "stdio":
        logger.info("Starting CHUK Juggling MCP Server (stdio)")
        asyncio.run(mcp.run_stdio())
    else:
        logger.info(f"Starting CHUK Juggling MCP Server (http:{args.port})")
        asyncio.run(mcp.run_http(port=args.port))


if __name__ == "__main__":
    main()
