"""
Throw compiler - SyntaxTree to a fully resolved throw matrix.

Compilation runs in three steps over an immutable tree:
1. First pass: beat counts, throw sums, hand assignment from the per-juggler
   hand parity, max throw and max multiplex occupancy. Produces a placed
   tree (absolute beats and hands) rather than annotating the syntax tree.
2. Second pass: every placed throw is written into the matrix at each index
   congruent to its beat modulo the period; switch-repeat patterns are walked
   a second time with hands swapped half a period later.
3. Ambiguous '?' modifiers are resolved to hold or throw by looking one beat
   ahead.

All mutable state lives in a per-call `_CompileRun`, so one ThrowCompiler can
serve any number of concurrent compiles.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any, Union

from chuk_mcp_juggling.constants import (
    MOD_AMBIGUOUS,
    MOD_HOLD,
    MOD_THROW,
    ErrorMessages,
    Hand,
)
from chuk_mcp_juggling.errors import JuggleInternalError, JuggleUserError
from chuk_mcp_juggling.siteswap.parser import SiteswapParser
from chuk_mcp_juggling.siteswap.symmetry import Symmetry, SymmetryRegistry
from chuk_mcp_juggling.siteswap.tree import (
    GroupedPattern,
    HandSpecifier,
    MultiThrow,
    PairedThrow,
    PassingSequence,
    Pattern,
    PatternItem,
    SingleThrow,
    SyntaxTree,
    ThrowSequence,
    Wildcard,
)

logger = logging.getLogger(__name__)

CellKey = tuple[int, Hand, int, int]


@dataclass(frozen=True, order=True)
class CompiledThrow:
    """
    One throw in the matrix.

    Ordered by: (index, juggler, hand, slot) for deterministic listings.
    """

    index: int
    juggler: int
    hand: Hand
    slot: int
    target_juggler: int = field(compare=False)
    target_hand: Hand = field(compare=False)
    target_index: int = field(compare=False)
    modifier: str = field(compare=False)
    hands_index: int | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.target_index < self.index:
            raise ValueError(
                f"Throw lands before it is thrown ({self.target_index} < {self.index})"
            )

    @property
    def value(self) -> int:
        return self.target_index - self.index

    @property
    def key(self) -> CellKey:
        return (self.juggler, self.hand, self.index, self.slot)

    @property
    def is_pass(self) -> bool:
        return self.target_juggler != self.juggler

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        d: dict[str, Any] = {
            "juggler": self.juggler,
            "hand": self.hand.name.lower(),
            "index": self.index,
            "slot": self.slot,
            "value": self.value,
            "target_juggler": self.target_juggler,
            "target_hand": self.target_hand.name.lower(),
            "target_index": self.target_index,
            "modifier": self.modifier,
        }
        if self.hands_index is not None:
            d["hands_index"] = self.hands_index
        return d


class ThrowMatrix:
    """
    Throws keyed by (juggler, hand, index, slot).

    Index ranges over [0, indexes) where indexes = max_throw + period + 1, so
    every landing beat and one lookahead period are addressable without
    wraparound. Slot ranges over [0, max_occupancy).
    """

    def __init__(self, jugglers: int, indexes: int, max_occupancy: int):
        self.jugglers = jugglers
        self.indexes = indexes
        self.max_occupancy = max_occupancy
        self._cells: dict[CellKey, CompiledThrow] = {}
        self._frozen = False

    def place(self, throw: CompiledThrow) -> None:
        """
        Store a throw in its cell.

        Raises:
            JuggleInternalError: If the matrix is frozen, the cell is out of
                bounds, or the cell is already occupied
        """
        if self._frozen:
            raise JuggleInternalError("Throw matrix is frozen")
        if not (
            1 <= throw.juggler <= self.jugglers
            and 0 <= throw.index < self.indexes
            and 0 <= throw.slot < self.max_occupancy
        ):
            raise JuggleInternalError(f"Throw outside matrix bounds: {throw.key}")
        if throw.key in self._cells:
            raise JuggleInternalError(
                ErrorMessages.CELL_OCCUPIED.format(
                    juggler=throw.juggler,
                    hand=throw.hand.name.lower(),
                    index=throw.index,
                    slot=throw.slot,
                )
            )
        self._cells[throw.key] = throw

    def replace(self, throw: CompiledThrow) -> None:
        """Overwrite an occupied cell (used while resolving modifiers)."""
        if self._frozen:
            raise JuggleInternalError("Throw matrix is frozen")
        if throw.key not in self._cells:
            raise JuggleInternalError(f"No throw to replace at {throw.key}")
        self._cells[throw.key] = throw

    def freeze(self) -> None:
        self._frozen = True

    def get(self, juggler: int, hand: Hand, index: int, slot: int) -> CompiledThrow | None:
        return self._cells.get((juggler, hand, index, slot))

    def slots(self, juggler: int, hand: Hand, index: int) -> list[CompiledThrow]:
        """All throws a hand makes at one index, in slot order."""
        found = (self.get(juggler, hand, index, s) for s in range(self.max_occupancy))
        return [t for t in found if t is not None]

    def in_period(self, period: int) -> list[CompiledThrow]:
        """Throws with index in [0, period), in canonical order."""
        return sorted(t for t in self._cells.values() if t.index < period)

    def __iter__(self) -> Iterator[CompiledThrow]:
        return iter(sorted(self._cells.values()))

    def __len__(self) -> int:
        return len(self._cells)


@dataclass(frozen=True)
class CompiledPattern:
    """Result of compiling one siteswap pattern."""

    text: str
    jugglers: int
    period: int
    num_paths: int
    max_throw: int
    max_occupancy: int
    indexes: int
    switch_repeat: bool
    odd_period: bool
    has_hands_specifier: bool
    matrix: ThrowMatrix
    symmetries: tuple[Symmetry, ...]

    @property
    def nominal_period(self) -> int:
        """Period as written, before odd-period doubling."""
        return self.period // 2 if self.odd_period else self.period

    def throws_at(self, juggler: int, hand: Hand, index: int) -> list[CompiledThrow]:
        return self.matrix.slots(juggler, hand, index)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "pattern": self.text,
            "jugglers": self.jugglers,
            "period": self.period,
            "nominal_period": self.nominal_period,
            "num_paths": self.num_paths,
            "max_throw": self.max_throw,
            "max_occupancy": self.max_occupancy,
            "indexes": self.indexes,
            "switch_repeat": self.switch_repeat,
            "odd_period": self.odd_period,
            "has_hands_specifier": self.has_hands_specifier,
            "symmetries": [s.to_dict() for s in self.symmetries],
            "throws": [t.to_dict() for t in self.matrix.in_period(self.period)],
        }


# -- placed tree produced by the first pass -----------------------------------


@dataclass(frozen=True)
class _PlacedThrows:
    beat: int
    juggler: int
    left: bool
    sync: bool
    throws: tuple[SingleThrow, ...]


@dataclass(frozen=True)
class _PlacedBlock:
    children: tuple[_Placed, ...]


@dataclass(frozen=True)
class _PlacedPattern:
    children: tuple[_Placed, ...]
    beats: int
    switch_repeat: bool


_Placed = Union[_PlacedThrows, _PlacedBlock, _PlacedPattern]


@dataclass(frozen=True)
class _Pass:
    beats: int
    throw_sum: int
    vanilla_async: bool
    placed: _Placed


class ThrowCompiler:
    """
    Compiles a SyntaxTree into a CompiledPattern.

    Stateless between calls.
    """

    def compile(
        self,
        tree: SyntaxTree,
        hand_period: Callable[[int], int] | None = None,
    ) -> CompiledPattern:
        """
        Compile a syntax tree.

        Args:
            tree: Parsed pattern
            hand_period: Optional juggler -> hand-motion period lookup; when
                given, each throw records its index into that period

        Returns:
            CompiledPattern with matrix and symmetries

        Raises:
            JuggleUserError: Bad average or zero-length pattern
            JuggleInternalError: Unresolved wildcard or a violated invariant
        """
        return _CompileRun(tree, hand_period).run()

    def compile_text(self, text: str) -> CompiledPattern:
        """Parse and compile pattern text."""
        return self.compile(SiteswapParser().parse(text))


def compile_siteswap(text: str) -> CompiledPattern:
    """Convenience function to parse and compile a siteswap string."""
    return ThrowCompiler().compile_text(text)


class _CompileRun:
    """State for a single compile."""

    def __init__(self, tree: SyntaxTree, hand_period: Callable[[int], int] | None):
        self.tree = tree
        self.hand_period = hand_period
        self.jugglers = tree.jugglers
        # async throws on even beats are made with the right hand?
        self.right_on_even = [True] * self.jugglers
        self.max_throw = 0
        self.max_occupancy = 0
        self.has_hands_specifier = False
        self.period = 0
        self.indexes = 0

    def run(self) -> CompiledPattern:
        root, placed = self._first_pattern(self.tree.root, 0)
        beats, throw_sum = root.beats, root.throw_sum

        odd_period = False
        if not placed.switch_repeat and root.vanilla_async and beats % 2 == 1:
            beats *= 2
            throw_sum *= 2
            odd_period = True
            placed = dataclasses.replace(placed, beats=beats, switch_repeat=True)
            logger.debug("Vanilla async pattern with odd period; applying switch-delay")

        if beats == 0:
            raise JuggleUserError(ErrorMessages.ZERO_PERIOD)
        if throw_sum % beats != 0:
            raise JuggleUserError(ErrorMessages.BAD_AVERAGE)

        self.period = beats
        num_paths = throw_sum // beats
        self.indexes = self.max_throw + self.period + 1
        matrix = ThrowMatrix(self.jugglers, self.indexes, self.max_occupancy)
        logger.debug(
            "period=%d paths=%d max_throw=%d max_occupancy=%d",
            self.period,
            num_paths,
            self.max_throw,
            self.max_occupancy,
        )

        self._second(matrix, placed, switched=False, offset=0)
        resolve_modifiers(matrix)
        matrix.freeze()

        registry = SymmetryRegistry.for_pattern(self.jugglers, self.period, placed.switch_repeat)
        return CompiledPattern(
            text=self.tree.text,
            jugglers=self.jugglers,
            period=self.period,
            num_paths=num_paths,
            max_throw=self.max_throw,
            max_occupancy=self.max_occupancy,
            indexes=self.indexes,
            switch_repeat=placed.switch_repeat,
            odd_period=odd_period,
            has_hands_specifier=self.has_hands_specifier,
            matrix=matrix,
            symmetries=registry.symmetries,
        )

    # -- first pass ----------------------------------------------------------

    def _first_pattern(self, node: Pattern, beat: int) -> tuple[_Pass, _PlacedPattern]:
        beats = 0
        throw_sum = 0
        vanilla = True
        children: list[_Placed] = []
        for item in node.items:
            result = self._first_item(item, beat + beats)
            beats += result.beats
            throw_sum += result.throw_sum
            vanilla = vanilla and result.vanilla_async
            children.append(result.placed)
        if node.switch_repeat:
            beats *= 2
            throw_sum *= 2
        placed = _PlacedPattern(tuple(children), beats, node.switch_repeat)
        return _Pass(beats, throw_sum, vanilla, placed), placed

    def _first_item(self, item: PatternItem, beat: int) -> _Pass:
        if isinstance(item, GroupedPattern):
            first, placed = self._first_pattern(item.pattern, beat)
            children: list[_Placed] = [placed]
            for i in range(1, item.repeats):
                children.append(self._first_pattern(item.pattern, beat + i * first.beats)[1])
            return _Pass(
                first.beats * item.repeats,
                first.throw_sum * item.repeats,
                first.vanilla_async,
                _PlacedBlock(tuple(children)),
            )

        if isinstance(item, ThrowSequence):
            return self._first_sequence(item, beat)

        if isinstance(item, PassingSequence):
            throw_sum = 0
            vanilla = True
            children = []
            for group in item.groups:
                for lane in group.sequences:
                    result = self._first_sequence(lane, beat + group.seq_beat)
                    throw_sum += result.throw_sum
                    vanilla = vanilla and result.vanilla_async
                    children.append(result.placed)
            return _Pass(item.beats, throw_sum, vanilla, _PlacedBlock(tuple(children)))

        if isinstance(item, Wildcard):
            raise JuggleInternalError(ErrorMessages.WILDCARD_UNRESOLVED)

        raise JuggleInternalError(f"Unexpected pattern item: {item!r}")

    def _first_sequence(self, seq: ThrowSequence, beat: int) -> _Pass:
        throw_sum = 0
        vanilla = True
        children: list[_Placed] = []
        for item in seq.items:
            item_beat = beat + item.seq_beat
            if isinstance(item, HandSpecifier):
                self._apply_hand_specifier(item, item_beat)
                if item_beat > 0:
                    vanilla = False
            elif isinstance(item, PairedThrow):
                left = self._first_multi(item.left, item_beat, left=True, sync=True)
                right = self._first_multi(item.right, item_beat, left=False, sync=True)
                throw_sum += left.throw_sum + right.throw_sum
                vanilla = False
                children.extend((left.placed, right.placed))
            else:
                result = self._first_multi(item, item_beat)
                throw_sum += result.throw_sum
                vanilla = vanilla and result.vanilla_async
                children.append(result.placed)
        return _Pass(seq.beats, throw_sum, vanilla, _PlacedBlock(tuple(children)))

    def _apply_hand_specifier(self, spec: HandSpecifier, beat: int) -> None:
        j = spec.juggler - 1
        self.right_on_even[j] = (not spec.left) if beat % 2 == 0 else spec.left
        self.has_hands_specifier = True

    def _first_multi(
        self,
        node: MultiThrow,
        beat: int,
        left: bool | None = None,
        sync: bool = False,
    ) -> _Pass:
        throw_sum = 0
        vanilla = True
        for t in node.throws:
            self.max_throw = max(self.max_throw, t.value)
            throw_sum += t.value
            vanilla = vanilla and not t.crossed
        if left is None:
            roe = self.right_on_even[node.juggler - 1]
            left = (not roe) if beat % 2 == 0 else roe
        self.max_occupancy = max(self.max_occupancy, len(node.throws))
        placed = _PlacedThrows(beat, node.juggler, left, sync, node.throws)
        return _Pass(1, throw_sum, vanilla, placed)

    # -- second pass ---------------------------------------------------------

    def _second(self, matrix: ThrowMatrix, node: _Placed, switched: bool, offset: int) -> None:
        if isinstance(node, _PlacedThrows):
            self._place_throws(matrix, node, switched, offset)
            return
        for child in node.children:
            self._second(matrix, child, switched, offset)
        if isinstance(node, _PlacedPattern) and node.switch_repeat:
            for child in node.children:
                self._second(matrix, child, not switched, offset + node.beats // 2)

    def _place_throws(
        self, matrix: ThrowMatrix, node: _PlacedThrows, switched: bool, offset: int
    ) -> None:
        source_hand = Hand.LEFT if node.left != switched else Hand.RIGHT

        index = node.beat + offset
        while index < self.indexes:
            for slot, t in enumerate(node.throws):
                dest_hand = source_hand if t.value % 2 == 0 else source_hand.other
                if t.crossed:
                    dest_hand = dest_hand.other

                modifier = t.modifier
                if modifier is None:
                    modifier = MOD_THROW
                    if t.source_juggler == t.dest_juggler and source_hand == dest_hand:
                        if t.value <= 1:
                            modifier = MOD_HOLD
                        elif t.value == 2:
                            modifier = MOD_AMBIGUOUS

                dest_juggler = t.dest_juggler
                if dest_juggler > self.jugglers:
                    dest_juggler = 1 + (dest_juggler - 1) % self.jugglers

                hands_index = None
                if self.hand_period is not None:
                    hi = index + (1 if node.sync and source_hand == Hand.RIGHT else 0)
                    hands_index = hi % self.hand_period(t.source_juggler)

                # zero throws are stored too, as placeholders for patterns like 24[504]
                matrix.place(
                    CompiledThrow(
                        index=index,
                        juggler=t.source_juggler,
                        hand=source_hand,
                        slot=slot,
                        target_juggler=dest_juggler,
                        target_hand=dest_hand,
                        target_index=index + t.value,
                        modifier=modifier,
                        hands_index=hands_index,
                    )
                )
            index += self.period


def resolve_modifiers(matrix: ThrowMatrix) -> None:
    """
    Resolve every ambiguous '?' modifier in place.

    A '?' at (juggler, hand, i) becomes a throw if some other throw from the
    same hand at i+1 lands somewhere other than i+1 (something fresh must be
    caught and released there); otherwise it becomes a hold.
    """
    for throw in list(matrix):
        if throw.modifier != MOD_AMBIGUOUS:
            continue
        nxt = throw.index + 1
        busy = nxt < matrix.indexes and any(
            t.target_index != nxt for t in matrix.slots(throw.juggler, throw.hand, nxt)
        )
        matrix.replace(dataclasses.replace(throw, modifier=MOD_THROW if busy else MOD_HOLD))
