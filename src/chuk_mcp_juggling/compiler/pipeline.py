"""
Pattern compiler - the central compilation pipeline.

    PatternConfig → (hand siteswap conversion) → SyntaxTree
    → CompiledPattern → period reconciliation → (optimizer) → PatternResult

The compiler:
1. Converts object + hand siteswaps into a passing siteswap when `hss` is set
2. Parses and compiles the pattern
3. Parses body and hand motion, and repeats the pattern until its period is
   a common multiple of every juggler's motion periods
4. Hands the compiled pattern to an optional optimizer
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from chuk_mcp_juggling.constants import ErrorMessages
from chuk_mcp_juggling.core.permutation import lcm
from chuk_mcp_juggling.errors import JuggleUserError
from chuk_mcp_juggling.models.pattern import PatternConfig
from chuk_mcp_juggling.motion.body import BodyMotionParser, BodyPath
from chuk_mcp_juggling.motion.hands import HandMotionParser, HandPath
from chuk_mcp_juggling.siteswap.compiler import CompiledPattern, ThrowCompiler
from chuk_mcp_juggling.siteswap.hand_siteswap import HandSiteswapConverter, HssConversion
from chuk_mcp_juggling.siteswap.parser import SiteswapParser

logger = logging.getLogger(__name__)


class Optimizer(Protocol):
    """Post-compile transformation of a pattern (e.g. throw-position tuning)."""

    def optimize(self, pattern: CompiledPattern) -> CompiledPattern: ...


@dataclass
class PatternResult:
    """Result of compiling a PatternConfig."""

    config: PatternConfig
    compiled: CompiledPattern
    conversion: HssConversion | None = None
    body: BodyPath | None = None
    hands: HandPath | None = None
    repeats: int = 1

    @property
    def title(self) -> str:
        return self.config.title or self.config.pattern

    def dwell_at(self, beat: int) -> float:
        """Dwell for a beat: the hand-siteswap schedule if any, else the config dwell."""
        if self.conversion is None:
            return self.config.dwell
        return self.conversion.dwell_beats[beat % self.conversion.period]


class PatternCompiler:
    """
    Compiles a PatternConfig into a PatternResult.

    Stateless between calls; the parsers and compiler it holds keep no
    per-compile state.
    """

    def __init__(self, optimizer: Optimizer | None = None):
        """
        Initialize the compiler.

        Args:
            optimizer: Optional post-compile step; may raise JuggleUserError
        """
        self.optimizer = optimizer
        self.parser = SiteswapParser()
        self.compiler = ThrowCompiler()

    def compile(self, config: PatternConfig) -> PatternResult:
        """
        Compile a pattern configuration.

        Args:
            config: The pattern and its options

        Returns:
            PatternResult with the compiled pattern and parsed motion

        Raises:
            JuggleUserError: Malformed pattern, motion or hand siteswap
            JuggleInternalError: Violated compiler invariant
        """
        text = config.pattern
        conversion = None
        if config.hss is not None:
            converter = HandSiteswapConverter(
                hold=config.hold,
                dwellmax=config.dwellmax,
                dwell=config.dwell,
                handspec=config.handspec,
            )
            conversion = converter.convert(config.pattern, config.hss)
            text = conversion.pattern

        body = BodyMotionParser().parse(config.body) if config.body else None
        hands = HandMotionParser().parse(config.hands) if config.hands else None
        hand_period: Callable[[int], int] | None = hands.period if hands else None

        compiled = self.compiler.compile(self.parser.parse(text), hand_period)

        repeats = 1
        if body is not None or hands is not None:
            if body is not None and body.jugglers < compiled.jugglers:
                raise JuggleUserError(ErrorMessages.JUGGLERS_BODY)
            if hands is not None and hands.jugglers < compiled.jugglers:
                raise JuggleUserError(ErrorMessages.JUGGLERS_HANDS)

            nominal = compiled.nominal_period
            periods = [nominal]
            for j in range(1, compiled.jugglers + 1):
                if body is not None:
                    periods.append(body.period(j))
                if hands is not None:
                    periods.append(hands.period(j))
            total = lcm(*periods)
            if total != nominal:
                repeats = total // nominal
                logger.debug("Repeating %r %d times to reach period %d", text, repeats, total)
                compiled = self.compiler.compile(
                    self.parser.parse(f"({text}^{repeats})"), hand_period
                )

        if self.optimizer is not None:
            compiled = self.optimizer.optimize(compiled)

        logger.debug(
            "Compiled %r: jugglers=%d paths=%d period=%d",
            config.pattern,
            compiled.jugglers,
            compiled.num_paths,
            compiled.period,
        )
        return PatternResult(
            config=config,
            compiled=compiled,
            conversion=conversion,
            body=body,
            hands=hands,
            repeats=repeats,
        )


def compile_pattern(
    config: PatternConfig | str, optimizer: Optimizer | None = None
) -> PatternResult:
    """
    Convenience function to compile a pattern.

    Args:
        config: PatternConfig, or a "name=value;..." parameter string
        optimizer: Optional post-compile step

    Returns:
        PatternResult
    """
    if isinstance(config, str):
        config = PatternConfig.from_parameter_string(config)
    return PatternCompiler(optimizer).compile(config)
