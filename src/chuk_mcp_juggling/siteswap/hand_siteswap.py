"""
Hand siteswap (HSS) conversion.

Takes an object siteswap (what the props do) and a hand siteswap (what the
hands do), validates both, works out which juggler and hand makes every
throw, and emits an equivalent synchronous passing pattern plus a per-beat
dwell schedule. The emitted pattern goes through the ordinary siteswap
parser and compiler.

Object alphabet: 0-9 a-z (values 0-35), '[...]' multiplex, bounce suffixes
B, BF, BL, BH, BHF, BHL. Hand alphabet: 0-9 a-z only. Whitespace is ignored
in both.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any

from chuk_mcp_juggling.constants import (
    DEFAULT_DWELL,
    HSS_DWELL_CLASH_MAX_ROUNDS,
    HSS_DWELL_DEFAULT,
    ErrorMessages,
)
from chuk_mcp_juggling.core.permutation import lcm
from chuk_mcp_juggling.errors import JuggleInternalError, JuggleUserError

logger = logging.getLogger(__name__)

_VALUE_CHARS = "0123456789abcdefghijklmnopqrstuvwxyz"

# (juggler, is_right_hand); juggler 0 means "no hand" on that beat
HandAssignment = tuple[int, bool]
_NO_HAND: HandAssignment = (0, False)


@dataclass(frozen=True)
class ObjectSiteswap:
    """Lexed object siteswap: throw values and bounce suffix per beat."""

    beats: tuple[tuple[int, ...], ...]
    bounces: tuple[tuple[str, ...], ...]

    @property
    def period(self) -> int:
        return len(self.beats)

    @property
    def objects(self) -> int:
        return sum(sum(b) for b in self.beats) // self.period


@dataclass(frozen=True)
class HandSiteswap:
    """Lexed hand siteswap plus its orbit structure."""

    values: tuple[int, ...]
    orbit_period: int = 0

    @property
    def period(self) -> int:
        return len(self.values)

    @property
    def hands(self) -> int:
        return sum(self.values) // self.period


@dataclass(frozen=True)
class HssConversion:
    """Result of an HSS conversion."""

    pattern: str
    dwell_beats: tuple[float, ...]
    jugglers: int
    objects: int
    hands: int
    hand_map: tuple[HandAssignment, ...]
    hand_orbit_period: int
    assignments: tuple[HandAssignment, ...] = field(repr=False)

    @property
    def period(self) -> int:
        return len(self.dwell_beats)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "pattern": self.pattern,
            "period": self.period,
            "jugglers": self.jugglers,
            "objects": self.objects,
            "hands": self.hands,
            "hand_orbit_period": self.hand_orbit_period,
            "dwell_beats": [round(d, 6) for d in self.dwell_beats],
            "hand_map": [
                {"hand": i + 1, "juggler": j, "side": "right" if right else "left"}
                for i, (j, right) in enumerate(self.hand_map)
            ],
        }


class HandSiteswapConverter:
    """
    Converts object + hand siteswaps into a passing siteswap.

    Options:
        hold: Mark same-hand throws matching the hand digit as holds ('H')
        dwellmax: Stretch each dwell to the full gap since the hand's
            previous throw
        dwell: Default dwell (beats) when dwellmax is off
        handspec: Explicit hand assignment "(L,R)(L,R)...", one pair per
            juggler; defaults to right hands first, then left hands
    """

    def __init__(
        self,
        hold: bool = False,
        dwellmax: bool = True,
        dwell: float = DEFAULT_DWELL,
        handspec: str | None = None,
    ):
        self.hold = hold
        self.dwellmax = dwellmax
        self.dwell = dwell
        self.handspec = handspec

    def convert(self, objects: str, hands: str) -> HssConversion:
        """
        Convert an object/hand siteswap pair.

        Raises:
            JuggleUserError: On any syntax error or failed validation
        """
        oss = lex_object_siteswap(objects)
        check_object_permutation(oss)
        hss = hand_orbits(lex_hand_siteswap(hands))

        if self.handspec is not None:
            hand_map = parse_handspec(self.handspec, hss.hands)
        else:
            hand_map = default_handspec(hss.hands)
        jugglers = max([1] + [j for j, _ in hand_map])

        result = _convert(oss, hss, hand_map, jugglers, self.hold, self.dwellmax, self.dwell)
        logger.debug("HSS %r / %r -> %r", objects, hands, result.pattern)
        return result


def convert_hss(
    objects: str,
    hands: str,
    hold: bool = False,
    dwellmax: bool = True,
    dwell: float = DEFAULT_DWELL,
    handspec: str | None = None,
) -> HssConversion:
    """Convenience function for a one-off conversion."""
    return HandSiteswapConverter(hold, dwellmax, dwell, handspec).convert(objects, hands)


# -- lexing and validation ----------------------------------------------------


def lex_object_siteswap(text: str) -> ObjectSiteswap:
    """
    Lex an object siteswap and run the average test.

    Raises:
        JuggleUserError: Bad character (with column), empty or unclosed
            input, or a failed average test
    """
    beats: list[list[int]] = []
    bounces: list[list[str]] = []
    in_mux = False
    mux_filled = False
    # which bounce character may come next: B after a throw, then F/L/H, then F/L after H
    after_throw = after_b = after_bh = False

    for i, ch in enumerate(text):
        column = i + 1
        if ch.isspace():
            after_throw = after_b = after_bh = False
        elif ch in _VALUE_CHARS:
            if in_mux:
                beats[-1].append(int(ch, 36))
                bounces[-1].append("")
                mux_filled = True
            else:
                beats.append([int(ch, 36)])
                bounces.append([""])
            after_throw, after_b, after_bh = True, False, False
        elif ch == "[" and not in_mux:
            in_mux = True
            beats.append([])
            bounces.append([])
            after_throw = after_b = after_bh = False
        elif ch == "]" and in_mux and mux_filled:
            in_mux = mux_filled = False
            after_throw = after_b = after_bh = False
        elif ch == "B" and after_throw:
            bounces[-1][-1] = "B"
            after_throw, after_b = False, True
        elif ch in "FL" and after_b:
            bounces[-1][-1] = "B" + ch
            after_b = False
        elif ch in "FL" and after_bh:
            bounces[-1][-1] = "BH" + ch
            after_bh = False
        elif ch == "H" and after_b:
            bounces[-1][-1] = "BH"
            after_b, after_bh = False, True
        else:
            raise JuggleUserError(
                ErrorMessages.HSS_OBJECT_SYNTAX_AT.format(column=column), column=column
            )

    if in_mux or not beats:
        raise JuggleUserError(ErrorMessages.HSS_OBJECT_SYNTAX)
    if sum(sum(b) for b in beats) % len(beats) != 0:
        raise JuggleUserError(ErrorMessages.HSS_BAD_AVERAGE_OBJECT)

    return ObjectSiteswap(
        beats=tuple(tuple(b) for b in beats),
        bounces=tuple(tuple(b) for b in bounces),
    )


def check_object_permutation(oss: ObjectSiteswap) -> None:
    """
    Permutation test: every beat catches exactly as many objects as it throws.

    Raises:
        JuggleUserError: If some beat's landings and throws disagree
    """
    period = oss.period
    landings = [0] * period
    for i, throws in enumerate(oss.beats):
        for v in throws:
            landings[(i + v) % period] += 1
    for i, throws in enumerate(oss.beats):
        if landings[i] != len(throws):
            raise JuggleUserError(ErrorMessages.HSS_OBJECT_INVALID, beat=i + 1)


def lex_hand_siteswap(text: str) -> HandSiteswap:
    """
    Lex a hand siteswap (no multiplex, no bounces) and run the average test.

    Raises:
        JuggleUserError: Bad character (with column), empty input, failed
            average test, or zero hands
    """
    values: list[int] = []
    for i, ch in enumerate(text):
        if ch in _VALUE_CHARS:
            values.append(int(ch, 36))
        elif not ch.isspace():
            raise JuggleUserError(
                ErrorMessages.HSS_HAND_SYNTAX_AT.format(column=i + 1), column=i + 1
            )
    if not values:
        raise JuggleUserError(ErrorMessages.HSS_HAND_SYNTAX)
    if sum(values) % len(values) != 0:
        raise JuggleUserError(ErrorMessages.HSS_BAD_AVERAGE_HAND)
    if sum(values) == 0:
        raise JuggleUserError(ErrorMessages.HSS_NO_HANDS)
    return HandSiteswap(values=tuple(values))


def hand_orbits(hss: HandSiteswap) -> HandSiteswap:
    """
    Permutation test for the hand siteswap, and its overall orbit period.

    The orbit period is the lcm over cycles of (i -> i + value mod period)
    of each cycle's total value, or of its length when that total is 0.

    Raises:
        JuggleUserError: If two beats hand off to the same beat
    """
    period = hss.period
    nxt = [(i + v) % period for i, v in enumerate(hss.values)]
    hits = [0] * period
    for target in nxt:
        hits[target] += 1
    for i, count in enumerate(hits):
        if count != 1:
            raise JuggleUserError(ErrorMessages.HSS_HAND_INVALID, beat=i + 1)

    seen = [False] * period
    totals: list[int] = []
    for start in range(period):
        if seen[start]:
            continue
        total = 0
        length = 0
        i = start
        while not seen[i]:
            seen[i] = True
            total += hss.values[i]
            length += 1
            i = nxt[i]
        totals.append(total if total > 0 else length)
    return HandSiteswap(values=hss.values, orbit_period=lcm(*totals))


def parse_handspec(text: str, hands: int) -> tuple[HandAssignment, ...]:
    """
    Parse an explicit hand specification "(L,R)(L,R)...".

    Pair k assigns hand numbers to juggler k's left and right hands; either
    side may be blank but not both. Every hand 1..hands must be used exactly
    once.

    Raises:
        JuggleUserError: On syntax errors (with column), out-of-range or
            repeated hand numbers, or unassigned hands
    """
    assigned: list[HandAssignment | None] = [None] * hands
    juggler = 0
    pos = 0
    completed = False

    def syntax_error(at: int) -> JuggleUserError:
        return JuggleUserError(
            ErrorMessages.HSS_HANDSPEC_SYNTAX_AT.format(column=at + 1), column=at + 1
        )

    def read_hand(pos: int, closer: str) -> tuple[int | None, int]:
        """Read an optional hand number up to `closer`; return (number, index after closer)."""
        digits = ""
        number_done = False
        while pos < len(text):
            ch = text[pos]
            if ch.isdigit():
                if number_done:
                    raise syntax_error(pos)
                digits += ch
            elif ch.isspace():
                number_done = bool(digits)
            elif ch == closer:
                return (int(digits) if digits else None), pos + 1
            else:
                raise syntax_error(pos)
            pos += 1
        raise JuggleUserError(ErrorMessages.HSS_HANDSPEC_SYNTAX)

    def assign(number: int, right: bool) -> None:
        if not 1 <= number <= hands:
            raise JuggleUserError(ErrorMessages.HSS_HAND_OUT_OF_RANGE.format(hand=number))
        if assigned[number - 1] is not None:
            raise JuggleUserError(ErrorMessages.HSS_HAND_TWICE.format(hand=number))
        assigned[number - 1] = (juggler, right)

    while pos < len(text):
        ch = text[pos]
        if ch.isspace():
            pos += 1
            continue
        if ch != "(":
            raise syntax_error(pos)
        juggler += 1
        left, pos = read_hand(pos + 1, ",")
        if left is not None:
            assign(left, right=False)
        right, pos = read_hand(pos, ")")
        if right is not None:
            assign(right, right=True)
        if left is None and right is None:
            raise JuggleUserError(ErrorMessages.HSS_ONE_HAND_PER_JUGGLER)
        completed = True

    if juggler > hands:
        raise JuggleUserError(ErrorMessages.HSS_TOO_MANY_JUGGLERS.format(hands=hands))
    if not completed:
        raise JuggleUserError(ErrorMessages.HSS_HANDSPEC_SYNTAX)

    result: list[HandAssignment] = []
    for i, a in enumerate(assigned):
        if a is None:
            raise JuggleUserError(ErrorMessages.HSS_HAND_UNASSIGNED.format(hand=i + 1))
        result.append(a)
    return tuple(result)


def default_handspec(hands: int) -> tuple[HandAssignment, ...]:
    """
    Default hand assignment: ceil(hands/2) jugglers.

    Hands 1..n become the right hands of jugglers 1..n, the remaining hands
    become their left hands in the same order.
    """
    jugglers = (hands + 1) // 2
    return tuple(
        (i + 1, True) if i < jugglers else (i + 1 - jugglers, False) for i in range(hands)
    )


# -- conversion ---------------------------------------------------------------


def _convert(
    oss: ObjectSiteswap,
    hss: HandSiteswap,
    hand_map: tuple[HandAssignment, ...],
    jugglers: int,
    hold: bool,
    dwellmax: bool,
    dwell: float,
) -> HssConversion:
    period = lcm(oss.period, hss.orbit_period)
    objects = [oss.beats[i % oss.period] for i in range(period)]
    bounces = [oss.bounces[i % oss.period] for i in range(period)]
    hands = [hss.values[i % hss.period] for i in range(period)]

    who = _assign_hands(objects, hands, hand_map, period)
    dwell_beats = _dwell_schedule(objects, who, period, dwellmax, dwell)
    _remove_dwell_clashes(dwell_beats, period)

    parts: list[str] = []
    for i in range(period):
        thrower, right = who[i]
        parts.append("<")
        for j in range(1, jugglers + 1):
            throws = "0"
            if thrower == j:
                throws = _format_throws(i, objects, bounces, hands, who, period, hold)
            if thrower != 0 and not right:
                parts.append(f"({throws},0)!")
            else:
                parts.append(f"(0,{throws})!")
            parts.append(">" if j == jugglers else "|")

    return HssConversion(
        pattern="".join(parts),
        dwell_beats=tuple(dwell_beats),
        jugglers=jugglers,
        objects=oss.objects,
        hands=hss.hands,
        hand_map=hand_map,
        hand_orbit_period=hss.orbit_period,
        assignments=tuple(who),
    )


def _assign_hands(
    objects: list[tuple[int, ...]],
    hands: list[int],
    hand_map: tuple[HandAssignment, ...],
    period: int,
) -> list[HandAssignment]:
    """Follow each hand orbit and give every beat its (juggler, side)."""
    hand_of = [0] * period
    current = 0
    for i in range(period):
        if hands[i] == 0 or hand_of[i]:
            continue
        current += 1
        j = i
        while True:
            hand_of[j] = current
            j = (j + hands[j]) % period
            if j == i:
                break

    who: list[HandAssignment] = []
    for i in range(period):
        if hands[i] == 0:
            if any(v != 0 for v in objects[i]):
                raise JuggleUserError(
                    ErrorMessages.HSS_NO_HAND_AT_BEAT.format(beat=i + 1), beat=i + 1
                )
            who.append(_NO_HAND)
            continue
        if hand_of[i] > len(hand_map):
            raise JuggleInternalError(f"Hand orbit {hand_of[i]} has no hand assignment")
        who.append(hand_map[hand_of[i] - 1])
    return who


def _dwell_schedule(
    objects: list[tuple[int, ...]],
    who: list[HandAssignment],
    period: int,
    dwellmax: bool,
    dwell: float,
) -> list[float]:
    """Per-beat dwell, clipped below the smallest throw landing on that beat."""
    min_caught = [0] * period
    for i, throws in enumerate(objects):
        for v in throws:
            if v > 0:
                t = (i + v) % period
                min_caught[t] = v if min_caught[t] == 0 else min(min_caught[t], v)

    margin = 1 - HSS_DWELL_DEFAULT
    dwell_beats = [0.0] * period

    if not dwellmax:
        consecutive = any(
            who[i][0] != 0 and who[i] == who[(i + 1) % period] for i in range(period)
        )
        for i in range(period):
            d = HSS_DWELL_DEFAULT if consecutive else dwell
            if min_caught[i] > 0 and d >= min_caught[i]:
                d = min_caught[i] - margin
            dwell_beats[i] = d
        return dwell_beats

    # full gap from each throw to the same hand's next throw
    for i in range(period):
        j = (i + 1) % period
        gap = 1
        while who[j] != who[i]:
            j = (j + 1) % period
            gap += 1
        dwell_beats[j] = gap - margin
    for i in range(period):
        if min_caught[i] > 0 and dwell_beats[i] >= min_caught[i]:
            dwell_beats[i] = min_caught[i] - margin
        elif dwell_beats[i] <= 0:
            dwell_beats[i] = HSS_DWELL_DEFAULT
    return dwell_beats


def _coincide(a: float, b: float, period: int) -> bool:
    """True if instants a and b are equal modulo the period."""
    r = (a - b) % period
    return math.isclose(r, 0.0, abs_tol=1e-9) or math.isclose(r, period, abs_tol=1e-9)


def _remove_dwell_clashes(dwell_beats: list[float], period: int) -> None:
    """
    Make the catch instants (beat - dwell) pairwise distinct modulo the period.

    Colliding beats are nudged by shrinking fractions of the default dwell.
    If that has not settled after a fixed number of rounds, remaining clashes
    are broken in beat order by small fixed steps.
    """
    for _ in range(HSS_DWELL_CLASH_MAX_ROUNDS):
        clashed = False
        for i in range(period):
            clashes = [
                k
                for k in range(period)
                if k != i and _coincide(k - dwell_beats[k], i - dwell_beats[i], period)
            ]
            count = len(clashes)
            for k in clashes:
                dwell_beats[k] += HSS_DWELL_DEFAULT / count
                count -= 1
            clashed = clashed or bool(clashes)
        if not clashed:
            return

    logger.warning("Dwell clash removal did not settle; breaking ties by beat order")
    step = HSS_DWELL_DEFAULT / (period + 1)
    kept: list[float] = []
    for k in range(period):
        for _ in range(period + 1):
            if not any(_coincide(k - dwell_beats[k], e, period) for e in kept):
                break
            dwell_beats[k] += step
        else:
            raise JuggleInternalError("Could not separate dwell instants")
        kept.append(k - dwell_beats[k])


def _format_throws(
    beat: int,
    objects: list[tuple[int, ...]],
    bounces: list[tuple[str, ...]],
    hands: list[int],
    who: list[HandAssignment],
    period: int,
    hold: bool,
) -> str:
    """Throws of one beat with crossing, pass and hold markers."""
    source = who[beat]
    written = []
    for v, bounce in zip(objects[beat], bounces[beat]):
        target = who[(beat + v) % period]
        same_side = source[1] == target[1]
        marker = "x" if (v % 2 == 0) != same_side else ""
        if source[0] != target[0]:
            marker += f"p{target[0]}"
        elif hold and v == hands[beat]:
            marker += "H"
        written.append(_VALUE_CHARS[v] + marker + bounce + " ")
    if len(written) > 1:
        return "[" + "".join(written) + "]"
    return written[0]
