"""
Permutation primitives - Permutation and lcm.

Permutations of jugglers (or objects), optionally with "reverses": an element
can map onto the mirror image of another, written with a trailing '*' in cycle
notation. "(1,1*)" swaps juggler 1's hands; "(1,2)(3)" exchanges jugglers 1
and 2.

Everything here is a pure function of its integer arguments.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import reduce


def lcm(*values: int) -> int:
    """Least common multiple of one or more positive integers."""
    if not values:
        raise ValueError("lcm() needs at least one value")
    for v in values:
        if v <= 0:
            raise ValueError(f"lcm() arguments must be positive, got {v}")
    return reduce(math.lcm, values)


@dataclass(frozen=True)
class Permutation:
    """
    A permutation of the elements 1..size.

    Without reverses, `mapping[i]` is the image of element i+1.
    With reverses, the mapping covers -size..size and `mapping[e + size]` is
    the image of element e; -e is the reverse of e and 0 maps to 0.

    Immutable and hashable.
    """

    size: int
    mapping: tuple[int, ...]
    reverses: bool = False

    def __post_init__(self) -> None:
        expected = 2 * self.size + 1 if self.reverses else self.size
        if len(self.mapping) != expected:
            raise ValueError(f"Mapping must have {expected} entries, got {len(self.mapping)}")

    @classmethod
    def identity(cls, size: int, reverses: bool = False) -> Permutation:
        """Identity permutation on `size` elements."""
        if reverses:
            return cls(size, tuple(range(-size, size + 1)), True)
        return cls(size, tuple(range(1, size + 1)), False)

    @classmethod
    def parse(cls, size: int, text: str, reverses: bool = False) -> Permutation:
        """
        Parse a permutation from text.

        Two forms are accepted: an explicit comma-separated mapping
        ("2,1,3") or cycle notation ("(1,2)(3)"). Cycle notation may mark
        reversed elements with '*' when `reverses` is set; elements not
        mentioned map to themselves (or to 0, meaning unused, with reverses).

        Raises:
            ValueError: If the text is malformed or not one-to-one
        """
        if "(" not in text:
            return cls._parse_explicit(size, text)
        return cls._parse_cycles(size, text, reverses)

    @classmethod
    def _parse_explicit(cls, size: int, text: str) -> Permutation:
        parts = [p.strip() for p in text.split(",") if p.strip()]
        if len(parts) != size:
            raise ValueError(f"Permutation must have {size} elements in mapping")
        used = [False] * size
        mapping = []
        for part in parts:
            try:
                num = int(part)
            except ValueError:
                raise ValueError(f"Bad number in permutation: '{part}'") from None
            if not 1 <= num <= size:
                raise ValueError(f"Permutation element out of range: {num}")
            if used[num - 1]:
                raise ValueError("Permutation is not one-to-one")
            used[num - 1] = True
            mapping.append(num)
        return cls(size, tuple(mapping), False)

    @classmethod
    def _parse_cycles(cls, size: int, text: str, reverses: bool) -> Permutation:
        offset = size if reverses else -1
        length = 2 * size + 1 if reverses else size
        mapping = [0] * length
        used = [False] * length

        for chunk in text.split(")"):
            chunk = chunk.strip()
            if not chunk:
                continue
            if not chunk.startswith("("):
                raise ValueError("Permutation cycles must be grouped in parentheses")
            last: int | None = None
            for token in chunk[1:].split(","):
                token = token.strip()
                negate = reverses and token.endswith("*")
                if negate:
                    token = token[:-1].strip()
                try:
                    num = -int(token) if negate else int(token)
                except ValueError:
                    raise ValueError(f"Bad number in permutation: '{token}'") from None

                if reverses:
                    if num == 0 or not -size <= num <= size:
                        raise ValueError(f"Permutation element out of range: {num}")
                elif not 1 <= num <= size:
                    raise ValueError(f"Permutation element out of range: {num}")
                if used[num + offset]:
                    raise ValueError("Permutation is not one-to-one")
                used[num + offset] = True

                if last is None:
                    mapping[num + offset] = num
                else:
                    # splice num into the cycle right after `last`
                    mapping[num + offset] = mapping[last + offset]
                    mapping[last + offset] = num
                    if reverses and used[-last + offset] and mapping[-last + offset] != -num:
                        raise ValueError("Permutation is not reversible")
                last = num

        if reverses:
            for i in range(1, size + 1):
                pos, neg = i + size, -i + size
                if used[pos] and not used[neg]:
                    mapping[neg] = -mapping[pos]
                elif used[neg] and not used[pos]:
                    mapping[pos] = -mapping[neg]
                elif not used[pos] and not used[neg]:
                    mapping[pos] = mapping[neg] = 0
        else:
            for i in range(size):
                if not used[i]:
                    mapping[i] = i + 1

        return cls(size, tuple(mapping), reverses)

    def _index(self, elem: int) -> int:
        return elem + self.size if self.reverses else elem - 1

    def map(self, elem: int, power: int = 1) -> int:
        """
        Apply the permutation to `elem`, `power` times.

        A negative power applies the inverse abs(power) times.
        """
        for _ in range(abs(power)):
            elem = self.mapping[self._index(elem)] if power > 0 else self.inverse_map(elem)
        return elem

    def inverse_map(self, elem: int) -> int:
        """Return the element that maps onto `elem`, or 0 if none does."""
        for i, image in enumerate(self.mapping):
            if image == elem:
                return i - self.size if self.reverses else i + 1
        return 0

    @property
    def inverse(self) -> Permutation:
        """The inverse permutation."""
        inv = [0] * len(self.mapping)
        for i, image in enumerate(self.mapping):
            inv[self._index(image)] = i - self.size if self.reverses else i + 1
        return Permutation(self.size, tuple(inv), self.reverses)

    def then(self, other: Permutation) -> Permutation:
        """
        Compose: this permutation followed by `other`.

        Raises:
            ValueError: If sizes or reverse modes differ
        """
        if self.size != other.size or self.reverses != other.reverses:
            raise ValueError("Cannot compose permutations of different shape")
        if self.reverses:
            mapping = tuple(
                0 if e == 0 else other.map(self.map(e)) for e in range(-self.size, self.size + 1)
            )
        else:
            mapping = tuple(other.map(self.map(e)) for e in range(1, self.size + 1))
        return Permutation(self.size, mapping, self.reverses)

    def order_of(self, elem: int) -> int:
        """Cycle length of `elem`."""
        order = 1
        current = self.map(elem)
        while current != elem:
            order += 1
            current = self.map(current)
        return order

    @property
    def order(self) -> int:
        """How many applications bring every element back to itself."""
        orders = [self.order_of(e) for e in range(1, self.size + 1) if self.map(e) != 0]
        return lcm(*orders) if orders else 1

    def cycle(self, elem: int) -> list[int]:
        """The cycle containing `elem`, starting at `elem`."""
        result = [elem]
        current = self.map(elem)
        while current != elem:
            result.append(current)
            current = self.map(current)
        return result

    @property
    def is_identity(self) -> bool:
        return self == Permutation.identity(self.size, self.reverses)

    def to_mapping_string(self) -> str:
        """Explicit form, e.g. '2,1,3'."""
        return ",".join(_format_elem(self.map(e)) for e in range(1, self.size + 1))

    def to_cycle_string(self) -> str:
        """Cycle notation, e.g. '(1,2)(3)' or '(1,1*)'."""
        printed = [False] * (self.size + 1)
        parts = []
        for start in range(1, self.size + 1):
            if printed[start]:
                continue
            printed[start] = True
            if self.map(start) == 0:
                continue
            elems = self.cycle(start)
            for e in elems:
                printed[abs(e)] = True
            parts.append("(" + ",".join(_format_elem(e) for e in elems) + ")")
        return "".join(parts)

    def __str__(self) -> str:
        return self.to_cycle_string()


def _format_elem(num: int) -> str:
    return str(num) if num >= 0 else f"{-num}*"
