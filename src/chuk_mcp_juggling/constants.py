"""
Constants and enums for the juggling notation system.

No magic strings - use enums and Literal types for constrained values.
"""

from enum import Enum, IntEnum
from typing import Literal


class Hand(IntEnum):
    """Hand index used as the second key of the throw matrix."""

    RIGHT = 0
    LEFT = 1

    @property
    def other(self) -> "Hand":
        """The opposite hand."""
        return Hand.LEFT if self is Hand.RIGHT else Hand.RIGHT


class PatternCategory(str, Enum):
    """Directory categories in the pattern library."""

    SOLO = "solo"  # One juggler
    PASSING = "passing"  # Two or more jugglers
    HSS = "hss"  # Object/hand siteswap pairs


class SymmetryType(str, Enum):
    """Kinds of pattern symmetry."""

    DELAY = "delay"  # Plain time shift
    SWITCH = "switch"  # Hand relabeling with no time shift
    SWITCHDELAY = "switchdelay"  # Time shift plus hand relabeling


# Throw modifiers
MOD_THROW = "T"
MOD_HOLD = "H"
MOD_AMBIGUOUS = "?"

# Siteswap modifier grammar: uppercase letters except L and R (hand specifiers),
# with B optionally followed by F, L, H, HF or HL
MODIFIER_PATTERN = r"(?:B(?:HF|HL|F|L|H)?|[A-KM-QS-Z])+"

# Dwell defaults (in beats)
DEFAULT_DWELL = 1.3
HSS_DWELL_DEFAULT = 0.3
HSS_DWELL_CLASH_MAX_ROUNDS = 100

# Body motion default elevation (cm)
DEFAULT_BODY_Z = 100.0

# Environment variable naming the user pattern directory
PROJECT_DIR_ENV = "CHUK_JUGGLING_PROJECT_DIR"

# Schema versions - frozen for v1
SchemaVersion = Literal[
    "pattern/v1",
    "compiled/v1",
]


class ErrorMessages:
    """Standardized error messages."""

    # Siteswap syntax and compile
    PATTERN_SYNTAX = "Syntax error at '{token}' (column {column})."
    PATTERN_UNEXPECTED_END = "Unexpected end of pattern, expected {expected}."
    PATTERN_EMPTY = "Pattern is empty."
    INCONSISTENT_JUGGLERS = "Inconsistent number of jugglers."
    INCONSISTENT_BEATS = "Inconsistent number of beats between jugglers."
    BAD_REPEAT = "Repeat count must be a positive integer, got '{value}'."
    BAD_AVERAGE = "Bad average: throw values do not average to a whole number of objects."
    ZERO_PERIOD = "Pattern has no beats."
    WILDCARD_UNRESOLVED = "Wildcard not resolved"
    CELL_OCCUPIED = "Throw slot already filled: juggler {juggler}, hand {hand}, index {index}, slot {slot}."

    # Hand siteswap
    HSS_OBJECT_SYNTAX_AT = "Syntax error in object siteswap at column {column}."
    HSS_OBJECT_SYNTAX = "Syntax error in object siteswap."
    HSS_HAND_SYNTAX_AT = "Syntax error in hand siteswap at column {column}."
    HSS_HAND_SYNTAX = "Syntax error in hand siteswap."
    HSS_BAD_AVERAGE_OBJECT = "Object siteswap fails the average test."
    HSS_BAD_AVERAGE_HAND = "Hand siteswap fails the average test."
    HSS_OBJECT_INVALID = "Object siteswap fails the permutation test."
    HSS_HAND_INVALID = "Hand siteswap fails the permutation test."
    HSS_NO_HANDS = "Hand siteswap must describe at least one hand."
    HSS_HANDSPEC_SYNTAX_AT = "Syntax error in hand specification at column {column}."
    HSS_HANDSPEC_SYNTAX = "Syntax error in hand specification."
    HSS_HAND_TWICE = "Hand {hand} is assigned more than once."
    HSS_HAND_OUT_OF_RANGE = "Hand number {hand} is out of range."
    HSS_ONE_HAND_PER_JUGGLER = "Each juggler must be assigned at least one hand."
    HSS_TOO_MANY_JUGGLERS = "Too many jugglers for {hands} hands."
    HSS_HAND_UNASSIGNED = "Hand {hand} is not assigned to any juggler."
    HSS_NO_HAND_AT_BEAT = "No hand to throw at beat {beat}."

    # Body and hand motion
    BODY_NO_PAREN = "Body motion: missing closing parenthesis."
    BODY_COORDINATE = "Body motion: bad coordinate '{text}'."
    BODY_CHARACTER = "Body motion: unexpected character '{char}'."
    BODY_BAD_ENDING = "Body motion: each beat must end with '.'."
    HANDS_NO_PAREN = "Hand motion: missing closing parenthesis."
    HANDS_COORDINATE = "Hand motion: bad coordinate '{text}'."
    HANDS_CHARACTER = "Hand motion: unexpected character '{char}'."
    HANDS_T_NOT_START = "Hand motion: 'T' must come before the first coordinate."
    HANDS_TOO_MANY_THROWS = "Hand motion: more than one 'T' in a beat."
    HANDS_C_AT_START = "Hand motion: 'C' cannot come before the first coordinate."
    HANDS_TOO_MANY_CATCHES = "Hand motion: more than one 'C' in a beat."
    HANDS_TOO_FEW_COORDS = "Hand motion: each beat needs at least two coordinates."
    HANDS_NO_THROW = "Hand motion: throw coordinate cannot be '-'."
    HANDS_NO_CATCH = "Hand motion: catch coordinate cannot be '-'."

    # Pipeline and configuration
    NO_PATTERN = "No pattern given."
    DWELL_RANGE = "Dwell must be strictly between 0 and 2, got {dwell}."
    JUGGLERS_BODY = "Body motion describes fewer jugglers than the pattern."
    JUGGLERS_HANDS = "Hand motion describes fewer jugglers than the pattern."
    UNKNOWN_PARAMETER = "Unknown parameter(s): {names}."
    BAD_PARAMETER_VALUE = "Bad value for parameter '{name}': '{value}'."
    PATTERN_NOT_FOUND = "Pattern '{pattern_id}' not found."


class SuccessMessages:
    """Standardized success messages."""

    PATTERN_COMPILED = "Compiled '{pattern}': {jugglers} juggler(s), {paths} object(s), period {period}."
    HSS_CONVERTED = "Converted hand siteswap to '{pattern}'."
    PATTERN_COPIED = "Copied pattern '{pattern_id}' to {path}."
