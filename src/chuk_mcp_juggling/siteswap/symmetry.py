"""
Pattern symmetries - the group a compiled pattern is invariant under.

Every compiled pattern has a base DELAY symmetry (identity permutation,
delay = period). A switch-repeat pattern also has a SWITCHDELAY symmetry:
every juggler's hands swap, delay = period / 2.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from chuk_mcp_juggling.constants import SymmetryType
from chuk_mcp_juggling.core.permutation import Permutation


@dataclass(frozen=True)
class Symmetry:
    """A time shift, optionally combined with a juggler/hand relabeling."""

    type: SymmetryType
    permutation: Permutation
    delay: int

    def __post_init__(self) -> None:
        if self.delay < 0:
            raise ValueError(f"Symmetry delay must be >= 0, got {self.delay}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.type.value,
            "permutation": self.permutation.to_cycle_string(),
            "delay": self.delay,
        }


class SymmetryRegistry:
    """
    The symmetries of one compiled pattern.

    Built once by the compiler and read by whatever lays the pattern out in
    time, typically through `fold`.
    """

    def __init__(self, jugglers: int):
        self.jugglers = jugglers
        self._symmetries: list[Symmetry] = []

    @classmethod
    def for_pattern(cls, jugglers: int, period: int, switch_repeat: bool) -> SymmetryRegistry:
        """
        Build the symmetry set for a compiled pattern.

        Args:
            jugglers: Number of jugglers
            period: Effective period (after any odd-period doubling)
            switch_repeat: Whether the pattern repeats with hands swapped
        """
        registry = cls(jugglers)
        registry.add(Symmetry(SymmetryType.DELAY, Permutation.identity(jugglers), period))
        if switch_repeat:
            swap = "".join(f"({j},{j}*)" for j in range(1, jugglers + 1))
            registry.add(
                Symmetry(
                    SymmetryType.SWITCHDELAY,
                    Permutation.parse(jugglers, swap, reverses=True),
                    period // 2,
                )
            )
        return registry

    def add(self, symmetry: Symmetry) -> None:
        if symmetry.permutation.size != self.jugglers:
            raise ValueError(
                f"Symmetry permutes {symmetry.permutation.size} jugglers, pattern has {self.jugglers}"
            )
        self._symmetries.append(symmetry)

    @property
    def symmetries(self) -> tuple[Symmetry, ...]:
        return tuple(self._symmetries)

    def of_type(self, type_: SymmetryType) -> list[Symmetry]:
        return [s for s in self._symmetries if s.type == type_]

    def fold(self, index: int) -> tuple[int, Permutation]:
        """
        Map any beat index back into the shortest symmetry window.

        Uses the symmetry with the smallest positive delay. Returns the folded
        index and the juggler permutation accumulated on the way (identity
        for plain delays; hand swaps for each half period crossed in a
        switch-delay pattern).

        Raises:
            ValueError: If no symmetry with a positive delay is registered
        """
        candidates = [s for s in self._symmetries if s.delay > 0]
        if not candidates:
            raise ValueError("No symmetry with a positive delay to fold with")
        step = min(candidates, key=lambda s: s.delay)

        shifts, folded = divmod(index, step.delay)
        perm = step.permutation
        result = Permutation.identity(self.jugglers, reverses=perm.reverses)
        for _ in range(shifts % perm.order):
            result = result.then(perm)
        return folded, result

    def to_list(self) -> list[dict[str, Any]]:
        return [s.to_dict() for s in self._symmetries]

    def __len__(self) -> int:
        return len(self._symmetries)

    def __iter__(self):
        return iter(self._symmetries)
