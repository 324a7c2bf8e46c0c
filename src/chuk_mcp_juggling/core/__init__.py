"""
Core primitives - pure helpers the notation parsers compose on.

- Permutation: juggler/object permutations with optional hand reverses
- lcm: least common multiple for period reconciliation
- expand_repeats, split_outside_parens, parse_finite_float: text helpers
"""

from chuk_mcp_juggling.core.permutation import Permutation, lcm
from chuk_mcp_juggling.core.text import expand_repeats, parse_finite_float, split_outside_parens

__all__ = [
    "Permutation",
    "lcm",
    "expand_repeats",
    "parse_finite_float",
    "split_outside_parens",
]
