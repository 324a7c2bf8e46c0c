"""
Siteswap parser - pattern text to an immutable SyntaxTree.

Grammar (whitespace between items is ignored):

    pattern  := item+ with an optional '*' anywhere (switch-repeat)
    item     := '(' pattern '^' n ')' | solo | passing | '?'+
    passing  := ('<' lane ('|' lane)* '>')+
    lane     := (hand | multi | paired)+          ; solo is a single lane
    hand     := 'R' | 'L'
    paired   := '(' multi ',' multi ')' ['!']
    multi    := single | '[' single+ ']'
    single   := value ['x'] ['p' [n]] [modifier] ['/']
    value    := 0-9 | a-z | '{' n '}'

'p' (pass) is only recognized inside passing groups. A '(' opens a grouped
pattern when a '^' appears at its top nesting level, and a paired throw when a
',' does.
"""

from __future__ import annotations

import logging
import re
from typing import NoReturn

from chuk_mcp_juggling.constants import MODIFIER_PATTERN, ErrorMessages
from chuk_mcp_juggling.errors import JuggleUserError
from chuk_mcp_juggling.siteswap.tree import (
    GroupedPattern,
    HandSpecifier,
    MultiThrow,
    PairedThrow,
    PassingGroup,
    PassingSequence,
    Pattern,
    PatternItem,
    SequenceItem,
    SingleThrow,
    SyntaxTree,
    ThrowSequence,
    Wildcard,
)

logger = logging.getLogger(__name__)

_MODIFIER = re.compile(MODIFIER_PATTERN)
_VALUE_CHARS = "0123456789abcdefghijklmnopqrstuvwxyz"


class SiteswapParser:
    """
    Recursive descent parser for siteswap notation.

    Each call to `parse` uses fresh state, so one parser may be shared.
    """

    def parse(self, text: str) -> SyntaxTree:
        """
        Parse pattern text.

        Args:
            text: Siteswap pattern, e.g. "531", "(4,2x)*", "<3p|3p>"

        Returns:
            SyntaxTree with the juggler count resolved

        Raises:
            JuggleUserError: On syntax errors (with 1-based column) or
                inconsistent juggler/beat counts
        """
        return _ParseRun(text).run()


def parse_siteswap(text: str) -> SyntaxTree:
    """Convenience function to parse a siteswap string."""
    return SiteswapParser().parse(text)


class _ParseRun:
    """State for a single parse."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.jugglers = -1

    def run(self) -> SyntaxTree:
        root = self._pattern(terminators="")
        self._skip_ws()
        if not self._at_end():
            self._fail()
        jugglers = max(self.jugglers, 1)
        logger.debug("Parsed '%s': %d juggler(s), %d item(s)", self.text, jugglers, len(root.items))
        return SyntaxTree(root=root, jugglers=jugglers, text=self.text)

    # -- cursor helpers ------------------------------------------------------

    def _at_end(self) -> bool:
        return self.pos >= len(self.text)

    def _peek(self) -> str:
        return "" if self._at_end() else self.text[self.pos]

    def _skip_ws(self) -> None:
        while not self._at_end() and self.text[self.pos].isspace():
            self.pos += 1

    def _expect(self, ch: str) -> None:
        self._skip_ws()
        if self._peek() != ch:
            self._fail(expected=f"'{ch}'")
        self.pos += 1

    def _fail(self, expected: str = "more input") -> NoReturn:
        if self._at_end():
            raise JuggleUserError(
                ErrorMessages.PATTERN_UNEXPECTED_END.format(expected=expected),
                column=len(self.text) + 1,
            )
        raise JuggleUserError(
            ErrorMessages.PATTERN_SYNTAX.format(token=self._peek(), column=self.pos + 1),
            column=self.pos + 1,
        )

    def _number(self) -> int | None:
        start = self.pos
        while not self._at_end() and self.text[self.pos].isdigit():
            self.pos += 1
        return int(self.text[start : self.pos]) if self.pos > start else None

    def _note_jugglers(self, count: int) -> None:
        if self.jugglers == -1:
            self.jugglers = count
        elif self.jugglers != count:
            raise JuggleUserError(ErrorMessages.INCONSISTENT_JUGGLERS, column=self.pos + 1)

    # -- pattern level -------------------------------------------------------

    def _pattern(self, terminators: str) -> Pattern:
        items: list[PatternItem] = []
        switch_repeat = False

        while True:
            self._skip_ws()
            ch = self._peek()
            if not ch or ch in terminators:
                break
            if ch == "*":
                switch_repeat = True
                self.pos += 1
            elif ch == "?":
                items.append(self._wildcard())
            elif ch == "<":
                items.append(self._passing_sequence())
            elif ch == "(" and self._paren_kind() == "grouped":
                items.append(self._grouped())
            elif self._at_lane_item(passing=False):
                items.append(self._lane(juggler=1, passing=False))
                self._note_jugglers(1)
            else:
                self._fail()

        if not items:
            if self._at_end() and not self.text.strip():
                raise JuggleUserError(ErrorMessages.PATTERN_EMPTY, column=1)
            self._fail()
        return Pattern(items=tuple(items), switch_repeat=switch_repeat)

    def _paren_kind(self) -> str | None:
        """Classify the '(' at the cursor as 'grouped' or 'paired'."""
        depth = 0
        for i in range(self.pos, len(self.text)):
            ch = self.text[i]
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
                if depth == 0:
                    return None
            elif depth == 1 and ch == ",":
                return "paired"
            elif depth == 1 and ch == "^":
                return "grouped"
        return None

    def _wildcard(self) -> Wildcard:
        beats = 0
        while self._peek() == "?":
            beats += 1
            self.pos += 1
            self._skip_ws()
        return Wildcard(beats=beats)

    def _grouped(self) -> GroupedPattern:
        self.pos += 1  # '('
        inner = self._pattern(terminators="^)")
        self._expect("^")
        self._skip_ws()
        start = self.pos
        repeats = self._number()
        if repeats is None:
            self._fail(expected="repeat count")
        if repeats < 1:
            raise JuggleUserError(
                ErrorMessages.BAD_REPEAT.format(value=self.text[start : self.pos]),
                column=start + 1,
            )
        self._expect(")")
        return GroupedPattern(pattern=inner, repeats=repeats)

    def _passing_sequence(self) -> PassingSequence:
        groups: list[PassingGroup] = []
        beat = 0
        while True:
            self._skip_ws()
            if self._peek() != "<":
                break
            group = self._passing_group(seq_beat=beat)
            groups.append(group)
            beat += group.beats
        return PassingSequence(groups=tuple(groups))

    def _passing_group(self, seq_beat: int) -> PassingGroup:
        self.pos += 1  # '<'
        lanes = [self._lane(juggler=1, passing=True)]
        while True:
            self._skip_ws()
            if self._peek() == "|":
                self.pos += 1
                lane = self._lane(juggler=len(lanes) + 1, passing=True)
                if lane.beats != lanes[0].beats:
                    raise JuggleUserError(ErrorMessages.INCONSISTENT_BEATS, column=self.pos + 1)
                lanes.append(lane)
            elif self._peek() == ">":
                self.pos += 1
                break
            else:
                self._fail(expected="'|' or '>'")
        self._note_jugglers(len(lanes))
        return PassingGroup(sequences=tuple(lanes), seq_beat=seq_beat)

    # -- throw level ---------------------------------------------------------

    def _at_lane_item(self, passing: bool) -> bool:
        ch = self._peek()
        if not ch:
            return False
        if ch in "RL[{" or ch in _VALUE_CHARS:
            return True
        return ch == "(" and (passing or self._paren_kind() == "paired")

    def _lane(self, juggler: int, passing: bool) -> ThrowSequence:
        items: list[SequenceItem] = []
        beat = 0
        while True:
            self._skip_ws()
            if not self._at_lane_item(passing):
                break
            ch = self._peek()
            if ch in "RL":
                items.append(HandSpecifier(left=(ch == "L"), juggler=juggler, seq_beat=beat))
                self.pos += 1
            elif ch == "(":
                paired = self._paired(juggler, passing, beat)
                items.append(paired)
                beat += paired.beats
            else:
                items.append(self._multi(juggler, passing, beat))
                beat += 1
        if not items:
            self._fail()
        return ThrowSequence(juggler=juggler, items=tuple(items), beats=beat)

    def _paired(self, juggler: int, passing: bool, beat: int) -> PairedThrow:
        self.pos += 1  # '('
        left = self._multi(juggler, passing, beat)
        self._expect(",")
        right = self._multi(juggler, passing, beat)
        self._expect(")")
        self._skip_ws()
        one_beat = self._peek() == "!"
        if one_beat:
            self.pos += 1
        return PairedThrow(left=left, right=right, juggler=juggler, seq_beat=beat, one_beat=one_beat)

    def _multi(self, juggler: int, passing: bool, beat: int) -> MultiThrow:
        self._skip_ws()
        if self._peek() != "[":
            throws = (self._single(juggler, passing),)
            return MultiThrow(throws=throws, juggler=juggler, seq_beat=beat)

        self.pos += 1
        collected: list[SingleThrow] = []
        while True:
            self._skip_ws()
            if self._peek() == "]":
                if not collected:
                    self._fail()
                self.pos += 1
                break
            collected.append(self._single(juggler, passing))
        return MultiThrow(throws=tuple(collected), juggler=juggler, seq_beat=beat)

    def _single(self, juggler: int, passing: bool) -> SingleThrow:
        self._skip_ws()
        column = self.pos + 1
        ch = self._peek()
        if ch == "{":
            self.pos += 1
            self._skip_ws()
            value = self._number()
            if value is None:
                self._fail(expected="throw value")
            self._expect("}")
        elif ch and ch in _VALUE_CHARS:
            value = int(ch, 36)
            self.pos += 1
        else:
            self._fail(expected="throw value")

        crossed = self._peek() == "x"
        if crossed:
            self.pos += 1

        dest = juggler
        if passing and self._peek() == "p":
            self.pos += 1
            target = self._number()
            if target == 0:
                raise JuggleUserError(
                    ErrorMessages.PATTERN_SYNTAX.format(token="p0", column=self.pos),
                    column=self.pos,
                )
            dest = juggler + 1 if target is None else target

        modifier = None
        match = _MODIFIER.match(self.text, self.pos)
        if match:
            modifier = match.group(0)
            self.pos = match.end()

        if self._peek() == "/":
            self.pos += 1

        return SingleThrow(
            value=value,
            source_juggler=juggler,
            dest_juggler=dest,
            crossed=crossed,
            modifier=modifier,
            column=column,
        )
