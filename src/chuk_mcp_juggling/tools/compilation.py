"""
Compilation tools - MCP tools for compiling and checking patterns.

Tools for compiling siteswaps to throw listings, converting hand
siteswaps, and parsing body motion.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_juggling.compiler import PatternCompiler, to_ir
from chuk_mcp_juggling.constants import DEFAULT_DWELL, SuccessMessages
from chuk_mcp_juggling.errors import JuggleInternalError, JuggleUserError
from chuk_mcp_juggling.models.pattern import PatternConfig
from chuk_mcp_juggling.motion import BodyMotionParser
from chuk_mcp_juggling.siteswap import HandSiteswapConverter

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def error_response(e: Exception, action: str) -> str:
    """JSON error result; user errors are expected, anything else is logged."""
    if isinstance(e, JuggleUserError):
        return json.dumps({"status": "error", **e.to_dict()})
    logger.exception("Failed to %s", action)
    if isinstance(e, JuggleInternalError):
        return json.dumps({"status": "error", **e.to_dict()})
    return json.dumps({"status": "error", "message": str(e), "error_type": "internal"})


def build_config(
    pattern: str,
    hss: str | None = None,
    hold: bool = False,
    dwellmax: bool = True,
    handspec: str | None = None,
    dwell: float = DEFAULT_DWELL,
    body: str | None = None,
    hands: str | None = None,
    title: str | None = None,
) -> PatternConfig:
    """
    Build a PatternConfig from tool arguments.

    A pattern containing '=' is read as a "name=value;..." parameter string
    and the other arguments are ignored.
    """
    if "=" in pattern:
        return PatternConfig.from_parameter_string(pattern)
    values: dict[str, Any] = {"pattern": pattern, "hold": hold, "dwellmax": dwellmax, "dwell": dwell}
    optional = {"hss": hss, "handspec": handspec, "body": body, "hands": hands, "title": title}
    values.update({k: v for k, v in optional.items() if v is not None})
    return PatternConfig.from_values(values)


def register_compilation_tools(
    mcp: ChukMCPServer,
    compiler: PatternCompiler,
) -> dict[str, Any]:
    """
    Register compilation tools with the MCP server.

    Args:
        mcp: The MCP server instance
        compiler: The pattern compiler

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def juggle_compile(
        pattern: str,
        hss: str | None = None,
        hold: bool = False,
        dwellmax: bool = True,
        handspec: str | None = None,
        dwell: float = DEFAULT_DWELL,
        body: str | None = None,
        hands: str | None = None,
        title: str | None = None,
        include_throws: bool = True,
    ) -> str:
        """
        Compile a juggling pattern.

        Resolves every throw over one period: which juggler and hand throws,
        where it lands, and whether it is a throw or a hold.

        Args:
            pattern: Siteswap (e.g. '531', '(4,2x)*', '<3p|3p>'), the object
                siteswap when hss is given, or a parameter string such as
                'pattern=3;dwell=1.0'
            hss: Optional hand siteswap (e.g. '2')
            hold: Mark hand-siteswap holds explicitly
            dwellmax: Stretch hand-siteswap dwells to the full gap
            handspec: Optional hand assignment for hand siteswaps, '(L,R)(L,R)'
            dwell: Dwell time in beats, 0 < dwell < 2
            body: Optional body motion, e.g. '(0,0,0).(0,0,30).'
            hands: Optional hand motion, e.g. '(10)(32.5).(-10)(-32.5).'
            title: Optional display title
            include_throws: Include the full throw listing (default True)

        Returns:
            JSON string with the compiled pattern

        Example:
            juggle_compile(pattern="531")
        """
        try:
            config = build_config(pattern, hss, hold, dwellmax, handspec, dwell, body, hands, title)
            result = compiler.compile(config)
            ir = to_ir(result)
            data = ir.to_dict()
            if not include_throws:
                data.pop("throws")

            return json.dumps(
                {
                    "status": "success",
                    "message": SuccessMessages.PATTERN_COMPILED.format(
                        pattern=result.title,
                        jugglers=ir.jugglers,
                        paths=ir.num_paths,
                        period=ir.period,
                    ),
                    "compiled": data,
                    "summary": ir.summary(),
                }
            )
        except Exception as e:
            return error_response(e, "compile pattern")

    tools["juggle_compile"] = juggle_compile

    @mcp.tool  # type: ignore[arg-type]
    async def juggle_validate(
        pattern: str,
        hss: str | None = None,
        handspec: str | None = None,
        body: str | None = None,
        hands: str | None = None,
    ) -> str:
        """
        Check whether a pattern is valid.

        Args:
            pattern: Siteswap, object siteswap, or parameter string
            hss: Optional hand siteswap
            handspec: Optional hand assignment for hand siteswaps
            body: Optional body motion
            hands: Optional hand motion

        Returns:
            JSON string with 'valid' and, when invalid, the error and its
            column or beat

        Example:
            juggle_validate(pattern="532")
        """
        try:
            config = build_config(pattern, hss=hss, handspec=handspec, body=body, hands=hands)
            result = compiler.compile(config)
            compiled = result.compiled
            return json.dumps(
                {
                    "status": "success",
                    "valid": True,
                    "jugglers": compiled.jugglers,
                    "objects": compiled.num_paths,
                    "period": compiled.period,
                }
            )
        except JuggleUserError as e:
            return json.dumps({"status": "success", "valid": False, "error": e.to_dict()})
        except Exception as e:
            return error_response(e, "validate pattern")

    tools["juggle_validate"] = juggle_validate

    @mcp.tool  # type: ignore[arg-type]
    async def juggle_convert_hss(
        objects: str,
        hands: str,
        hold: bool = False,
        dwellmax: bool = True,
        handspec: str | None = None,
        dwell: float = DEFAULT_DWELL,
    ) -> str:
        """
        Convert an object siteswap and hand siteswap to a passing siteswap.

        Args:
            objects: Object siteswap, e.g. '3' or '[34]1'
            hands: Hand siteswap, e.g. '2' for two alternating hands
            hold: Mark holds explicitly
            dwellmax: Stretch dwells to the full gap
            handspec: Optional hand assignment '(L,R)(L,R)...'
            dwell: Default dwell when dwellmax is off

        Returns:
            JSON string with the converted pattern, hand map and dwell
            schedule

        Example:
            juggle_convert_hss(objects="3", hands="3")
        """
        try:
            # validates dwell the same way a compile would
            config = build_config(objects, hss=hands, dwell=dwell)
            converter = HandSiteswapConverter(
                hold=hold, dwellmax=dwellmax, dwell=config.dwell, handspec=handspec
            )
            conversion = converter.convert(objects, hands)
            return json.dumps(
                {
                    "status": "success",
                    "message": SuccessMessages.HSS_CONVERTED.format(pattern=conversion.pattern),
                    "conversion": conversion.to_dict(),
                }
            )
        except Exception as e:
            return error_response(e, "convert hand siteswap")

    tools["juggle_convert_hss"] = juggle_convert_hss

    @mcp.tool  # type: ignore[arg-type]
    async def juggle_parse_body(body: str) -> str:
        """
        Parse a body motion string.

        Args:
            body: Body motion, juggler sections separated by '|', beats
                ending in '.', samples '(angle,x,y,z)' or '-'

        Returns:
            JSON string with per-juggler periods and positions

        Example:
            juggle_parse_body(body="<(90,-100).|(270,100).>")
        """
        try:
            path = BodyMotionParser().parse(body)
            return json.dumps({"status": "success", "body": path.to_dict()})
        except Exception as e:
            return error_response(e, "parse body motion")

    tools["juggle_parse_body"] = juggle_parse_body

    return tools
