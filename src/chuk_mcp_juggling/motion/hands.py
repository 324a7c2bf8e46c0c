"""
Hand motion notation.

A hands string describes the path each hand traces during one beat:

    "(10)(32.5).(-10)(-32.5)."     throw at 10, catch at 32.5, then mirrored
    "T(0)-C(20)(30)."              explicit throw and catch markers

Juggler sections are separated by '|' or '!', beats by '.'. Coordinates are
written "(x,z,y)" (height second) with missing fields 0; '-' is a
placeholder to interpolate. The throw happens at coordinate 0 ('T' may mark
it explicitly); 'C' marks the catch coordinate, which otherwise is the last.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from chuk_mcp_juggling.constants import ErrorMessages
from chuk_mcp_juggling.core.text import expand_repeats, parse_finite_float, split_outside_parens
from chuk_mcp_juggling.errors import JuggleUserError

logger = logging.getLogger(__name__)

_IGNORED = "<>{}"


@dataclass(frozen=True)
class HandCoordinate:
    """A hand position in juggler-local space."""

    x: float
    y: float
    z: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}


@dataclass(frozen=True)
class HandBeat:
    """Coordinates of one beat; the throw is at index 0."""

    coordinates: tuple[HandCoordinate | None, ...]
    catch_index: int

    def __post_init__(self) -> None:
        if len(self.coordinates) < 2:
            raise JuggleUserError(ErrorMessages.HANDS_TOO_FEW_COORDS)
        if self.coordinates[0] is None:
            raise JuggleUserError(ErrorMessages.HANDS_NO_THROW)
        if self.coordinates[self.catch_index] is None:
            raise JuggleUserError(ErrorMessages.HANDS_NO_CATCH)


@dataclass(frozen=True)
class HandPath:
    """Parsed hand motion; juggler numbers are 1-based and wrap around."""

    text: str
    beats: tuple[tuple[HandBeat, ...], ...]

    @property
    def jugglers(self) -> int:
        return len(self.beats)

    def _section(self, juggler: int) -> tuple[HandBeat, ...]:
        return self.beats[(juggler - 1) % self.jugglers]

    def period(self, juggler: int) -> int:
        return len(self._section(juggler))

    def _beat(self, juggler: int, beat: int) -> HandBeat:
        section = self._section(juggler)
        return section[beat % len(section)]

    def coordinate_count(self, juggler: int, beat: int) -> int:
        return len(self._beat(juggler, beat).coordinates)

    def catch_index(self, juggler: int, beat: int) -> int:
        """Index of the coordinate where the catch is made."""
        return self._beat(juggler, beat).catch_index

    def coordinate(self, juggler: int, beat: int, index: int) -> HandCoordinate | None:
        """Coordinate `index` of `beat` (both from 0); None if out of range or '-'."""
        if not 0 <= beat < self.period(juggler):
            return None
        coordinates = self._beat(juggler, beat).coordinates
        if not 0 <= index < len(coordinates):
            return None
        return coordinates[index]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "hands": self.text,
            "jugglers": self.jugglers,
            "periods": [len(section) for section in self.beats],
            "beats": [
                [
                    {
                        "coordinates": [c.to_dict() if c else None for c in beat.coordinates],
                        "catch_index": beat.catch_index,
                    }
                    for beat in section
                ]
                for section in self.beats
            ],
        }


class HandMotionParser:
    """Parses hand motion strings into HandPath objects."""

    def parse(self, text: str) -> HandPath:
        """
        Parse a hand motion string.

        Raises:
            JuggleUserError: On syntax errors or beats with a missing throw
                or catch coordinate
        """
        clean = "".join(ch for ch in expand_repeats(text) if ch not in _IGNORED)
        sections = []
        for section in clean.replace("!", "|").split("|"):
            beats = [b for b in split_outside_parens(section.strip(), ".") if b.strip()]
            if not beats:
                raise JuggleUserError(ErrorMessages.HANDS_TOO_FEW_COORDS)
            sections.append(tuple(_parse_beat(b) for b in beats))
        logger.debug("Hand motion %r: periods %s", text, [len(s) for s in sections])
        return HandPath(text=text, beats=tuple(sections))


def parse_hands(text: str) -> HandPath:
    """Convenience function to parse a hand motion string."""
    return HandMotionParser().parse(text)


def _parse_beat(text: str) -> HandBeat:
    coordinates: list[HandCoordinate | None] = []
    catch_index: int | None = None
    got_throw = False
    pos = 0
    while pos < len(text):
        ch = text[pos]
        if ch.isspace():
            pos += 1
        elif ch == "-":
            coordinates.append(None)
            pos += 1
        elif ch in "Tt":
            if coordinates:
                raise JuggleUserError(ErrorMessages.HANDS_T_NOT_START)
            if got_throw:
                raise JuggleUserError(ErrorMessages.HANDS_TOO_MANY_THROWS)
            got_throw = True
            pos += 1
        elif ch in "Cc":
            if not coordinates:
                raise JuggleUserError(ErrorMessages.HANDS_C_AT_START)
            if catch_index is not None:
                raise JuggleUserError(ErrorMessages.HANDS_TOO_MANY_CATCHES)
            catch_index = len(coordinates)
            pos += 1
        elif ch == "(":
            close = text.find(")", pos + 1)
            if close < 0:
                raise JuggleUserError(ErrorMessages.HANDS_NO_PAREN)
            coordinates.append(_parse_coordinate(text[pos + 1 : close]))
            pos = close + 1
        else:
            raise JuggleUserError(ErrorMessages.HANDS_CHARACTER.format(char=ch))

    if len(coordinates) < 2:
        raise JuggleUserError(ErrorMessages.HANDS_TOO_FEW_COORDS)
    if catch_index is None or catch_index >= len(coordinates):
        catch_index = len(coordinates) - 1
    return HandBeat(coordinates=tuple(coordinates), catch_index=catch_index)


def _parse_coordinate(text: str) -> HandCoordinate:
    parts = text.split(",")
    if len(parts) > 3:
        raise JuggleUserError(ErrorMessages.HANDS_COORDINATE.format(text=text))
    try:
        values = [parse_finite_float(p) for p in parts]
    except ValueError as e:
        raise JuggleUserError(ErrorMessages.HANDS_COORDINATE.format(text=text)) from e
    values += [0.0] * (3 - len(values))
    # written (x, z, y): height comes second
    return HandCoordinate(x=values[0], y=values[2], z=values[1])
