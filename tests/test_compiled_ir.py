"""
Tests for the compiled pattern IR.

Tests cover:
- Canonical throw ordering
- JSON round-trips
- Summaries and diffs
"""

import json

from chuk_mcp_juggling.compiler import (
    SCHEMA_VERSION,
    CompiledIR,
    IRThrow,
    compile_pattern,
    to_ir,
)


def _throw(index: int, juggler: int = 1, hand: str = "right", value: int = 3) -> IRThrow:
    return IRThrow(
        index=index,
        juggler=juggler,
        hand=hand,
        slot=0,
        value=value,
        target_juggler=juggler,
        target_hand="left",
        modifier="T",
    )


class TestIRThrow:
    """Tests for IRThrow."""

    def test_ordering(self) -> None:
        """Throws sort by index, juggler, hand, slot."""
        throws = [_throw(2), _throw(0, juggler=2), _throw(0)]
        assert [(t.index, t.juggler) for t in sorted(throws)] == [(0, 1), (0, 2), (2, 1)]

    def test_dict_round_trip(self) -> None:
        """from_dict inverts to_dict."""
        throw = _throw(1)
        assert IRThrow.from_dict(throw.to_dict()) == throw

    def test_is_pass(self) -> None:
        """Throws to another juggler are passes."""
        assert not _throw(0).is_pass


class TestCompiledIR:
    """Tests for CompiledIR."""

    def test_canonicalize(self) -> None:
        """Canonical form sorts throws."""
        ir = CompiledIR(throws=[_throw(3), _throw(1)])
        assert [t.index for t in ir.canonicalize().throws] == [1, 3]

    def test_schema_version(self) -> None:
        """IRs carry the schema version."""
        ir = to_ir(compile_pattern("3"))
        assert ir.to_dict()["schema"] == SCHEMA_VERSION

    def test_json_round_trip(self) -> None:
        """A compiled IR survives JSON serialization."""
        ir = to_ir(compile_pattern("pattern=3;hss=2;body=(0).(20).;hands=(10)(30)."))
        restored = CompiledIR.from_json(ir.to_json())
        assert restored.to_dict() == ir.to_dict()

    def test_deterministic(self) -> None:
        """Compiling twice gives identical JSON."""
        first = to_ir(compile_pattern("<R|L><4xp|3><3|4xp>")).to_json()
        second = to_ir(compile_pattern("<R|L><4xp|3><3|4xp>")).to_json()
        assert first == second
        assert json.loads(first)["jugglers"] == 2

    def test_one_period_of_throws(self) -> None:
        """Only throws inside the period are listed."""
        ir = to_ir(compile_pattern("531"))
        assert ir.period == 6
        assert len(ir.throws) == 6
        assert all(t.index < 6 for t in ir.throws)

    def test_dwell_beats_only_for_hss(self) -> None:
        """Dwell schedules appear for hand siteswaps."""
        assert "dwell_beats" not in to_ir(compile_pattern("3")).to_dict()
        assert to_ir(compile_pattern("pattern=3;hss=2")).dwell_beats == [1.3, 1.3]

    def test_summary(self) -> None:
        """Summary counts throws and passes."""
        summary = to_ir(compile_pattern("<3p|3p>")).summary()
        assert summary["jugglers"] == 2
        assert summary["objects"] == 6
        assert summary["throws"] == 4
        assert summary["passes"] == 4
        assert summary["throws_per_juggler"] == {1: 2, 2: 2}

    def test_summary_holds(self) -> None:
        """Holds are counted separately."""
        summary = to_ir(compile_pattern("(2,0)!(0,2)!")).summary()
        assert summary["holds"] == 2
        assert summary["passes"] == 0

    def test_diff_identical(self) -> None:
        """An IR does not differ from itself."""
        ir = to_ir(compile_pattern("531"))
        diff = ir.diff_summary(ir)
        assert diff["throws_added"] == 0
        assert diff["throws_removed"] == 0
        assert diff["throws_unchanged"] == 6

    def test_diff_changed(self) -> None:
        """Diffs report changed throws and periods."""
        a = to_ir(compile_pattern("531"))
        b = to_ir(compile_pattern("441"))
        diff = a.diff_summary(b)
        assert diff["throws_added"] > 0
        assert not diff["period_changed"]
        assert not diff["paths_changed"]
