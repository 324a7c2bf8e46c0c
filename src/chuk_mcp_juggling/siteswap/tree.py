"""
Siteswap syntax tree - immutable nodes produced by SiteswapParser.

The tree is built once per compile call and never mutated; the compiler
writes everything it derives (absolute beats, hands, the throw matrix) into
separate structures. Beat positions stored here are relative to the
enclosing sequence.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union


class NodeKind(str, Enum):
    """Kind tag for syntax tree nodes."""

    PATTERN = "pattern"
    GROUPED_PATTERN = "grouped_pattern"
    SOLO_SEQUENCE = "solo_sequence"
    PASSING_SEQUENCE = "passing_sequence"
    PASSING_GROUP = "passing_group"
    PAIRED_THROW = "paired_throw"
    MULTI_THROW = "multi_throw"
    SINGLE_THROW = "single_throw"
    HAND_SPECIFIER = "hand_specifier"
    WILDCARD = "wildcard"


@dataclass(frozen=True)
class SingleThrow:
    """One object thrown: value, crossing flag, destination and modifier."""

    kind: ClassVar[NodeKind] = NodeKind.SINGLE_THROW

    value: int
    source_juggler: int
    dest_juggler: int
    crossed: bool = False
    modifier: str | None = None
    column: int = 0  # 1-based position in the pattern text


@dataclass(frozen=True)
class MultiThrow:
    """All throws one hand makes on one beat (more than one = multiplex)."""

    kind: ClassVar[NodeKind] = NodeKind.MULTI_THROW

    throws: tuple[SingleThrow, ...]
    juggler: int
    seq_beat: int


@dataclass(frozen=True)
class PairedThrow:
    """Synchronous (left, right) throw pair; `one_beat` is the '!' form."""

    kind: ClassVar[NodeKind] = NodeKind.PAIRED_THROW

    left: MultiThrow
    right: MultiThrow
    juggler: int
    seq_beat: int
    one_beat: bool = False

    @property
    def beats(self) -> int:
        return 1 if self.one_beat else 2


@dataclass(frozen=True)
class HandSpecifier:
    """'R' or 'L': the next throw is made by this hand."""

    kind: ClassVar[NodeKind] = NodeKind.HAND_SPECIFIER

    left: bool
    juggler: int
    seq_beat: int


SequenceItem = Union[MultiThrow, PairedThrow, HandSpecifier]


@dataclass(frozen=True)
class ThrowSequence:
    """One juggler's run of throws (a solo sequence, or one lane of a passing group)."""

    kind: ClassVar[NodeKind] = NodeKind.SOLO_SEQUENCE

    juggler: int
    items: tuple[SequenceItem, ...]
    beats: int


@dataclass(frozen=True)
class PassingGroup:
    """'<a|b|...>': one ThrowSequence per juggler, all the same length."""

    kind: ClassVar[NodeKind] = NodeKind.PASSING_GROUP

    sequences: tuple[ThrowSequence, ...]
    seq_beat: int

    @property
    def beats(self) -> int:
        return self.sequences[0].beats if self.sequences else 0


@dataclass(frozen=True)
class PassingSequence:
    """Consecutive passing groups."""

    kind: ClassVar[NodeKind] = NodeKind.PASSING_SEQUENCE

    groups: tuple[PassingGroup, ...]

    @property
    def beats(self) -> int:
        return sum(g.beats for g in self.groups)


@dataclass(frozen=True)
class Wildcard:
    """Run of '?' placeholders for an unresolved transition."""

    kind: ClassVar[NodeKind] = NodeKind.WILDCARD

    beats: int


@dataclass(frozen=True)
class GroupedPattern:
    """'(pattern^n)': a sub-pattern repeated n times."""

    kind: ClassVar[NodeKind] = NodeKind.GROUPED_PATTERN

    pattern: Pattern
    repeats: int


PatternItem = Union[GroupedPattern, ThrowSequence, PassingSequence, Wildcard]


@dataclass(frozen=True)
class Pattern:
    """Sequence of pattern items; `switch_repeat` is set by a '*'."""

    kind: ClassVar[NodeKind] = NodeKind.PATTERN

    items: tuple[PatternItem, ...]
    switch_repeat: bool = False


@dataclass(frozen=True)
class SyntaxTree:
    """Parsed pattern plus its juggler count."""

    root: Pattern
    jugglers: int
    text: str
