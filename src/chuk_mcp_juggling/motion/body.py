"""
Body motion notation.

A body string describes where each juggler stands and faces, beat by beat:

    "(10,0,0).-."              one juggler, two beats
    "<(90,-50).|(270,50).>"    two jugglers facing each other

Juggler sections are separated by '|' or '!', beats end with '.', and each
beat holds samples: "(angle,x,y,z)" with trailing fields defaulting to
0, 0, 0, 100, or '-' for "hold the previous position". A beat with no
samples still reserves one null sample. "(stuff)^n" repeats are expanded
before parsing; '<', '>', '{', '}' are ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from chuk_mcp_juggling.constants import DEFAULT_BODY_Z, ErrorMessages
from chuk_mcp_juggling.core.text import expand_repeats, parse_finite_float
from chuk_mcp_juggling.errors import JuggleUserError

logger = logging.getLogger(__name__)

_IGNORED = "<>{}"


@dataclass(frozen=True)
class BodyPosition:
    """One body sample: facing angle (degrees) and location."""

    angle: float
    x: float
    y: float
    z: float = DEFAULT_BODY_Z

    def to_dict(self) -> dict[str, float]:
        return {"angle": self.angle, "x": self.x, "y": self.y, "z": self.z}


BodyBeat = tuple[BodyPosition | None, ...]


@dataclass(frozen=True)
class BodyPath:
    """
    Parsed body motion for all jugglers.

    Juggler numbers are 1-based and wrap around modulo the number of
    sections, so a single section applies to every juggler.
    """

    text: str
    beats: tuple[tuple[BodyBeat, ...], ...]

    @property
    def jugglers(self) -> int:
        return len(self.beats)

    def _section(self, juggler: int) -> tuple[BodyBeat, ...]:
        return self.beats[(juggler - 1) % self.jugglers]

    def period(self, juggler: int) -> int:
        """Number of beats in this juggler's motion."""
        return len(self._section(juggler))

    def samples(self, juggler: int, beat: int) -> int:
        """Number of samples on a beat (0 when the beat is out of range)."""
        section = self._section(juggler)
        return len(section[beat]) if 0 <= beat < len(section) else 0

    def position(self, juggler: int, beat: int, sample: int) -> BodyPosition | None:
        """
        Sample `sample` of beat `beat` (both from 0) for `juggler`.

        Returns None for an out-of-range beat or sample, or a '-' sample.
        """
        if not 0 <= sample < self.samples(juggler, beat):
            return None
        return self._section(juggler)[beat][sample]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "body": self.text,
            "jugglers": self.jugglers,
            "periods": [len(section) for section in self.beats],
            "beats": [
                [[p.to_dict() if p else None for p in beat] for beat in section]
                for section in self.beats
            ],
        }


class BodyMotionParser:
    """Parses body motion strings into BodyPath objects."""

    def parse(self, text: str) -> BodyPath:
        """
        Parse a body motion string.

        Raises:
            JuggleUserError: On an unterminated '(', a bad coordinate, an
                unexpected character, or samples not closed by '.'
        """
        clean = "".join(ch for ch in expand_repeats(text) if ch not in _IGNORED)
        sections = [_parse_section(s) for s in clean.replace("!", "|").split("|")]
        logger.debug("Body motion %r: periods %s", text, [len(s) for s in sections])
        return BodyPath(text=text, beats=tuple(sections))


def parse_body(text: str) -> BodyPath:
    """Convenience function to parse a body motion string."""
    return BodyMotionParser().parse(text)


def _parse_section(text: str) -> tuple[BodyBeat, ...]:
    beats: list[BodyBeat] = []
    pending: list[BodyPosition | None] = []
    pos = 0
    while pos < len(text):
        ch = text[pos]
        if ch.isspace():
            pos += 1
        elif ch == ".":
            beats.append(tuple(pending) if pending else (None,))
            pending = []
            pos += 1
        elif ch == "-":
            pending.append(None)
            pos += 1
        elif ch == "(":
            close = text.find(")", pos + 1)
            if close < 0:
                raise JuggleUserError(ErrorMessages.BODY_NO_PAREN, column=pos + 1)
            pending.append(_parse_sample(text[pos + 1 : close]))
            pos = close + 1
        else:
            raise JuggleUserError(ErrorMessages.BODY_CHARACTER.format(char=ch), column=pos + 1)

    if pending or not beats:
        raise JuggleUserError(ErrorMessages.BODY_BAD_ENDING)
    return tuple(beats)


def _parse_sample(text: str) -> BodyPosition:
    parts = text.split(",")
    if len(parts) > 4:
        raise JuggleUserError(ErrorMessages.BODY_COORDINATE.format(text=text))
    values = [0.0, 0.0, 0.0, DEFAULT_BODY_Z]
    try:
        for i, part in enumerate(parts):
            values[i] = parse_finite_float(part)
    except ValueError as e:
        raise JuggleUserError(ErrorMessages.BODY_COORDINATE.format(text=text)) from e
    return BodyPosition(angle=values[0], x=values[1], y=values[2], z=values[3])
