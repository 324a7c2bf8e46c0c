"""
Tests for the throw compiler and symmetries.

Tests cover:
- Juggler and object counts over a table of known patterns
- Odd-period doubling and the switch-delay symmetry
- Hand assignment and throw targets
- Ambiguous modifier resolution
- Bad average and wildcard errors
"""

from collections import Counter

import pytest

from chuk_mcp_juggling.constants import ErrorMessages, Hand, SymmetryType
from chuk_mcp_juggling.errors import JuggleInternalError, JuggleUserError
from chuk_mcp_juggling.siteswap import (
    SymmetryRegistry,
    ThrowCompiler,
    compile_siteswap,
    parse_siteswap,
)

KNOWN_PATTERNS = [
    # (pattern, jugglers, objects)
    ("868671", 1, 6),
    ("(4,3x)!(2,0)!(3x,0)!", 1, 4),
    ("4x1(4x,3x)*", 1, 3),
    ("([42],4x)*", 1, 5),
    ("{49}1", 1, 25),
    ("3BB", 1, 3),
    ("R3R3xL3L3x", 1, 3),
    ("(4,5x)(4,1x)!R5x41x", 1, 4),
    ("(645^2)65x6x1x((6x,4)*^2)(7,5x)(4,1x)!", 1, 5),
    ("<R|L><4xp|3><3|4xp>", 2, 7),
    ("<([2xp/2x],[2xp/2])|(2,[2/2xp])><(2,[2p/2])|([2/2p],[2/2p])>", 2, 7),
    ("0", 1, 0),
    ("<0|0>", 2, 0),
]


class TestKnownPatterns:
    """Juggler and object counts for a range of notations."""

    @pytest.mark.parametrize("pattern,jugglers,objects", KNOWN_PATTERNS)
    def test_counts(self, pattern: str, jugglers: int, objects: int) -> None:
        """Each pattern compiles to the expected jugglers and objects."""
        compiled = compile_siteswap(pattern)
        assert compiled.jugglers == jugglers
        assert compiled.num_paths == objects

    @pytest.mark.parametrize("pattern,jugglers,objects", KNOWN_PATTERNS)
    def test_throws_land_after_thrown(self, pattern: str, jugglers: int, objects: int) -> None:
        """Every throw's target is its index plus its value."""
        compiled = compile_siteswap(pattern)
        for throw in compiled.matrix:
            assert throw.target_index - throw.index == throw.value
            assert 1 <= throw.target_juggler <= compiled.jugglers

    @pytest.mark.parametrize(
        "pattern",
        ["3", "868671", "(4,2x)(2x,4)", "([42],4x)*", "<3p|3p>", "<R|L><4xp|3><3|4xp>"],
    )
    def test_landings_match_throws(self, pattern: str) -> None:
        """Each hand catches as many objects per beat as it throws."""
        compiled = compile_siteswap(pattern)
        p = compiled.period
        thrown: Counter = Counter()
        caught: Counter = Counter()
        for t in compiled.matrix.in_period(p):
            if t.value == 0:
                continue
            thrown[(t.juggler, t.hand, t.index)] += 1
            caught[(t.target_juggler, t.target_hand, t.target_index % p)] += 1
        assert thrown == caught

    def test_multiplex_occupancy(self) -> None:
        """max_occupancy is the largest multiplex."""
        compiled = compile_siteswap(
            "<([2xp/2x],[2xp/2])|(2,[2/2xp])><(2,[2p/2])|([2/2p],[2/2p])>"
        )
        assert compiled.max_occupancy == 2
        assert compiled.period == 4

    def test_hand_specifier_flag(self) -> None:
        """Hand specifiers are recorded."""
        assert compile_siteswap("R3R3xL3L3x").has_hands_specifier
        assert not compile_siteswap("3").has_hands_specifier


class TestPeriod:
    """Tests for period computation and odd-period doubling."""

    def test_cascade_doubles(self) -> None:
        """'3' is compiled over two beats so both hands appear."""
        compiled = compile_siteswap("3")
        assert compiled.period == 2
        assert compiled.nominal_period == 1
        assert compiled.odd_period
        assert compiled.switch_repeat
        assert compiled.num_paths == 3
        assert all(t.modifier == "T" for t in compiled.matrix)
        types = [(s.type, s.delay) for s in compiled.symmetries]
        assert types == [(SymmetryType.DELAY, 2), (SymmetryType.SWITCHDELAY, 1)]

    def test_five_doubles(self) -> None:
        """'5' has period 2 and a switch-delay of one beat."""
        compiled = compile_siteswap("5")
        assert compiled.period == 2
        assert compiled.num_paths == 5
        types = [s.type for s in compiled.symmetries]
        assert types == [SymmetryType.DELAY, SymmetryType.SWITCHDELAY]
        assert compiled.symmetries[1].delay == 1
        assert compiled.throws_at(1, Hand.RIGHT, 0)
        assert compiled.throws_at(1, Hand.LEFT, 1)
        assert compiled.throws_at(1, Hand.RIGHT, 1) == []

    def test_even_period_not_doubled(self) -> None:
        """Odd vanilla periods double; even ones are kept."""
        compiled = compile_siteswap("441")
        assert compiled.period == 6
        compiled = compile_siteswap("51")
        assert compiled.period == 2
        assert not compiled.odd_period
        assert len(compiled.symmetries) == 1

    def test_crossed_not_doubled(self) -> None:
        """Patterns with crossing sync throws are not vanilla."""
        compiled = compile_siteswap("(4,2x)(2x,4)")
        assert compiled.period == 4
        assert not compiled.switch_repeat

    def test_switch_repeat_doubles(self) -> None:
        """'*' repeats the pattern with hands swapped."""
        compiled = compile_siteswap("(4,2x)*")
        assert compiled.period == 4
        assert compiled.switch_repeat
        assert compiled.symmetries[1].delay == 2

    def test_indexes(self) -> None:
        """The matrix covers max throw plus one period plus one."""
        compiled = compile_siteswap("531")
        assert compiled.max_throw == 5
        assert compiled.indexes == 5 + 6 + 1


class TestHands:
    """Tests for hand assignment and throw targets."""

    def test_cascade_alternates(self) -> None:
        """Async throws alternate hands, starting with the right."""
        compiled = compile_siteswap("3")
        (first,) = compiled.throws_at(1, Hand.RIGHT, 0)
        (second,) = compiled.throws_at(1, Hand.LEFT, 1)
        assert first.target_hand == Hand.LEFT
        assert first.target_index == 3
        assert second.target_hand == Hand.RIGHT
        assert compiled.throws_at(1, Hand.LEFT, 0) == []

    def test_even_throw_same_hand(self) -> None:
        """Even throws return to the throwing hand unless crossed."""
        compiled = compile_siteswap("(4,2x)(2x,4)")
        (left,) = compiled.throws_at(1, Hand.LEFT, 0)
        (right,) = compiled.throws_at(1, Hand.RIGHT, 0)
        assert left.target_hand == Hand.LEFT
        assert right.target_hand == Hand.LEFT

    def test_left_hand_specifier(self) -> None:
        """'L' starts the juggler on the left hand."""
        compiled = compile_siteswap("L3")
        assert len(compiled.throws_at(1, Hand.LEFT, 0)) == 1
        assert compiled.throws_at(1, Hand.RIGHT, 0) == []

    def test_pass_targets(self) -> None:
        """Passes land on the other juggler; 'p' past the last wraps to 1."""
        compiled = compile_siteswap("<3p|3p>")
        (from_first,) = compiled.throws_at(1, Hand.RIGHT, 0)
        (from_second,) = compiled.throws_at(2, Hand.RIGHT, 0)
        assert from_first.target_juggler == 2
        assert from_second.target_juggler == 1
        assert from_first.is_pass

    def test_zero_throws_stored(self) -> None:
        """Zero throws occupy their cell and land where they start."""
        compiled = compile_siteswap("(2,0)!(0,2)!")
        (empty,) = compiled.throws_at(1, Hand.RIGHT, 0)
        assert empty.value == 0
        assert empty.target_index == 0

    def test_matrix_is_frozen(self) -> None:
        """Compiled matrices cannot be modified."""
        compiled = compile_siteswap("3")
        throw = compiled.throws_at(1, Hand.RIGHT, 0)[0]
        with pytest.raises(JuggleInternalError):
            compiled.matrix.replace(throw)


class TestModifiers:
    """Tests for throw/hold modifiers."""

    def test_one_is_hold(self) -> None:
        """A crossing 2 is a throw; a same-hand 0 is a hold."""
        compiled = compile_siteswap("(2x,2x)")
        assert all(t.modifier == "T" for t in compiled.matrix)
        compiled = compile_siteswap("(2,0)!(0,2)!")
        (zero,) = compiled.throws_at(1, Hand.RIGHT, 0)
        assert zero.modifier == "H"

    def test_ambiguous_two_becomes_throw(self) -> None:
        """A 2 is thrown when the hand throws something else next beat."""
        compiled = compile_siteswap("(2,0)!(2,0)!")
        (two,) = compiled.throws_at(1, Hand.LEFT, 0)
        assert two.value == 2
        assert two.modifier == "T"

    def test_ambiguous_two_becomes_hold(self) -> None:
        """A 2 is held when the hand is empty next beat."""
        compiled = compile_siteswap("(2,0)!(0,2)!")
        (two,) = compiled.throws_at(1, Hand.LEFT, 0)
        assert two.value == 2
        assert two.modifier == "H"

    def test_no_ambiguous_left(self) -> None:
        """No '?' survives compilation."""
        for pattern, _, _ in KNOWN_PATTERNS:
            compiled = compile_siteswap(pattern)
            assert all(t.modifier != "?" for t in compiled.matrix)

    def test_explicit_modifier_kept(self) -> None:
        """Explicit modifiers override the default."""
        compiled = compile_siteswap("3BB")
        assert {t.modifier for t in compiled.matrix} == {"BB"}


class TestCompileErrors:
    """Tests for rejected patterns."""

    def test_bad_average(self) -> None:
        """Throw values must average to a whole number."""
        with pytest.raises(JuggleUserError, match=ErrorMessages.BAD_AVERAGE):
            compile_siteswap("43")

    def test_bad_average_odd(self) -> None:
        """Odd-period patterns are checked after doubling."""
        with pytest.raises(JuggleUserError):
            compile_siteswap("532")

    def test_wildcard_is_internal(self) -> None:
        """Unresolved wildcards indicate a defect upstream."""
        with pytest.raises(JuggleInternalError, match=ErrorMessages.WILDCARD_UNRESOLVED):
            compile_siteswap("3?")

    def test_compiler_is_reusable(self) -> None:
        """One compiler serves independent compiles."""
        compiler = ThrowCompiler()
        a = compiler.compile(parse_siteswap("3"))
        b = compiler.compile(parse_siteswap("<3p|3p>"))
        assert a.jugglers == 1
        assert b.jugglers == 2


class TestSymmetryRegistry:
    """Tests for symmetry construction and folding."""

    def test_delay_only(self) -> None:
        """Plain patterns get just the period delay."""
        registry = SymmetryRegistry.for_pattern(jugglers=2, period=4, switch_repeat=False)
        assert len(registry) == 1
        (delay,) = registry.of_type(SymmetryType.DELAY)
        assert delay.delay == 4
        assert delay.permutation.is_identity

    def test_switch_delay(self) -> None:
        """Switch-repeat adds a hand swap at half the period."""
        registry = SymmetryRegistry.for_pattern(jugglers=2, period=6, switch_repeat=True)
        (switch,) = registry.of_type(SymmetryType.SWITCHDELAY)
        assert switch.delay == 3
        assert str(switch.permutation) == "(1,1*)(2,2*)"

    def test_fold(self) -> None:
        """Folding crosses half periods, swapping hands each time."""
        registry = SymmetryRegistry.for_pattern(jugglers=1, period=2, switch_repeat=True)
        index, perm = registry.fold(3)
        assert index == 0
        assert perm.map(1) == -1
        index, perm = registry.fold(4)
        assert index == 0
        assert perm.is_identity

    def test_to_list(self) -> None:
        """Symmetries serialize to dictionaries."""
        registry = SymmetryRegistry.for_pattern(jugglers=1, period=2, switch_repeat=True)
        data = registry.to_list()
        assert data[0]["type"] == "delay"
        assert data[1]["type"] == "switchdelay"
