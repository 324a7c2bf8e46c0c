"""
Motion notation - body positions and hand paths per beat.

- BodyMotionParser / BodyPath: where each juggler stands and faces
- HandMotionParser / HandPath: the path each hand traces between throw and catch
"""

from chuk_mcp_juggling.motion.body import BodyMotionParser, BodyPath, BodyPosition, parse_body
from chuk_mcp_juggling.motion.hands import (
    HandCoordinate,
    HandMotionParser,
    HandPath,
    parse_hands,
)

__all__ = [
    "BodyMotionParser",
    "BodyPath",
    "BodyPosition",
    "parse_body",
    "HandMotionParser",
    "HandPath",
    "HandCoordinate",
    "parse_hands",
]
