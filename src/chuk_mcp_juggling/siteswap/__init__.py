"""
Siteswap notation - parsing, compilation and hand siteswap conversion.

- SiteswapParser: pattern text -> immutable SyntaxTree
- ThrowCompiler: SyntaxTree -> CompiledPattern (throw matrix + symmetries)
- SymmetryRegistry: delay and switch-delay symmetries of a pattern
- HandSiteswapConverter: object + hand siteswap -> passing siteswap
"""

from chuk_mcp_juggling.siteswap.compiler import (
    CompiledPattern,
    CompiledThrow,
    ThrowCompiler,
    ThrowMatrix,
    compile_siteswap,
    resolve_modifiers,
)
from chuk_mcp_juggling.siteswap.hand_siteswap import (
    HandSiteswapConverter,
    HssConversion,
    convert_hss,
)
from chuk_mcp_juggling.siteswap.parser import SiteswapParser, parse_siteswap
from chuk_mcp_juggling.siteswap.symmetry import Symmetry, SymmetryRegistry
from chuk_mcp_juggling.siteswap.tree import SyntaxTree

__all__ = [
    # Parsing
    "SiteswapParser",
    "SyntaxTree",
    "parse_siteswap",
    # Compilation
    "ThrowCompiler",
    "ThrowMatrix",
    "CompiledThrow",
    "CompiledPattern",
    "compile_siteswap",
    "resolve_modifiers",
    # Symmetry
    "Symmetry",
    "SymmetryRegistry",
    # Hand siteswap
    "HandSiteswapConverter",
    "HssConversion",
    "convert_hss",
]
