"""
Text helpers shared by the notation parsers.

- expand_repeats: textual expansion of the "(stuff)^n" shorthand
- split_outside_parens: split on a delimiter at parenthesis depth zero
- parse_finite_float: float parsing that rejects inf/nan
"""

from __future__ import annotations

import math
import re

_REPEAT_SUFFIX = re.compile(r"\s*\^\s*(\d+)")


def expand_repeats(text: str) -> str:
    """
    Expand "(stuff)^n" into n copies of stuff, recursively.

    A parenthesized group not followed by '^n' is left as-is. Parentheses
    inside a repeated group must be balanced.

    Examples:
        "he(l)^2o"           -> "hello"
        "((ab)^2c)^2"        -> "ababcababc"
        "(x)^0y"             -> "y"
        "(1,2)"              -> "(1,2)"
    """
    out: list[str] = []
    _expand_into(text, out)
    return "".join(out)


def _expand_into(text: str, out: list[str]) -> None:
    pos = 0
    while pos < len(text):
        ch = text[pos]
        if ch == "(":
            found = _find_repeat(text, pos)
            if found is not None:
                close, repeats, resume = found
                inner = text[pos + 1 : close]
                for _ in range(repeats):
                    _expand_into(inner, out)
                pos = resume
                continue
        out.append(ch)
        pos += 1


def _find_repeat(text: str, start: int) -> tuple[int, int, int] | None:
    """Return (close paren position, repeats, resume position) for a repeat at `start`."""
    depth = 0
    for pos in range(start, len(text)):
        if text[pos] == "(":
            depth += 1
        elif text[pos] == ")":
            depth -= 1
            if depth == 0:
                match = _REPEAT_SUFFIX.match(text, pos + 1)
                if match is None:
                    return None
                return pos, int(match.group(1)), match.end()
    return None


def split_outside_parens(text: str, delimiter: str) -> list[str]:
    """Split on `delimiter` where it is not nested inside parentheses."""
    parts: list[str] = []
    depth = 0
    last = 0
    for i, ch in enumerate(text):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif ch == delimiter and depth == 0:
            parts.append(text[last:i])
            last = i + 1
    parts.append(text[last:])
    return parts


def parse_finite_float(text: str) -> float:
    """
    Parse a finite float.

    Raises:
        ValueError: On malformed, infinite or NaN input
    """
    value = float(text.strip())
    if not math.isfinite(value):
        raise ValueError(f"Value must be finite, got '{text}'")
    return value
