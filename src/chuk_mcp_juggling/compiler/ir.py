"""
Compiled pattern IR - the serializable form of a compile result.

This is the stable, inspectable, diffable representation of a compiled
pattern, consumed by layout and animation stages:
- Deterministic: same config → same IR
- Serializable: JSON for inspection and golden-file testing
- Diffable: throws in canonical (index, juggler, hand, slot) order
- Extensible: version field allows schema evolution

Schema version: compiled/v1
"""

from __future__ import annotations

import json
from dataclasses import astuple, dataclass, field
from typing import Any

from chuk_mcp_juggling.compiler.pipeline import PatternResult

# Current schema version
SCHEMA_VERSION = "compiled/v1"


@dataclass(frozen=True, order=True)
class IRThrow:
    """
    A single throw in the IR.

    Ordered by: (index, juggler, hand, slot) for deterministic sorting.
    """

    index: int
    juggler: int
    hand: str
    slot: int
    value: int = field(compare=False)
    target_juggler: int = field(compare=False)
    target_hand: str = field(compare=False)
    modifier: str = field(compare=False)
    hands_index: int | None = field(default=None, compare=False)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "index": self.index,
            "juggler": self.juggler,
            "hand": self.hand,
            "slot": self.slot,
            "value": self.value,
            "target_juggler": self.target_juggler,
            "target_hand": self.target_hand,
            "modifier": self.modifier,
        }
        if self.hands_index is not None:
            d["hands_index"] = self.hands_index
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> IRThrow:
        return cls(
            index=d["index"],
            juggler=d["juggler"],
            hand=d["hand"],
            slot=d.get("slot", 0),
            value=d["value"],
            target_juggler=d["target_juggler"],
            target_hand=d["target_hand"],
            modifier=d["modifier"],
            hands_index=d.get("hands_index"),
        )

    @property
    def is_pass(self) -> bool:
        return self.target_juggler != self.juggler


@dataclass
class CompiledIR:
    """The complete compiled-pattern representation."""

    # Schema version for forward compatibility
    schema: str = SCHEMA_VERSION

    title: str = ""
    pattern: str = ""
    jugglers: int = 1
    period: int = 0
    nominal_period: int = 0
    num_paths: int = 0
    max_throw: int = 0
    max_occupancy: int = 1
    switch_repeat: bool = False
    repeats: int = 1

    throws: list[IRThrow] = field(default_factory=list)
    symmetries: list[dict[str, Any]] = field(default_factory=list)
    dwell_beats: list[float] = field(default_factory=list)
    body: dict[str, Any] | None = None
    hands: dict[str, Any] | None = None

    def canonicalize(self) -> CompiledIR:
        """Return a copy with throws in canonical order."""
        return CompiledIR(
            schema=self.schema,
            title=self.title,
            pattern=self.pattern,
            jugglers=self.jugglers,
            period=self.period,
            nominal_period=self.nominal_period,
            num_paths=self.num_paths,
            max_throw=self.max_throw,
            max_occupancy=self.max_occupancy,
            switch_repeat=self.switch_repeat,
            repeats=self.repeats,
            throws=sorted(self.throws),
            symmetries=list(self.symmetries),
            dwell_beats=list(self.dwell_beats),
            body=self.body,
            hands=self.hands,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary; always canonicalized."""
        ir = self.canonicalize()
        d: dict[str, Any] = {
            "schema": ir.schema,
            "title": ir.title,
            "pattern": ir.pattern,
            "jugglers": ir.jugglers,
            "period": ir.period,
            "nominal_period": ir.nominal_period,
            "num_paths": ir.num_paths,
            "max_throw": ir.max_throw,
            "max_occupancy": ir.max_occupancy,
            "switch_repeat": ir.switch_repeat,
            "repeats": ir.repeats,
            "throws": [t.to_dict() for t in ir.throws],
            "symmetries": ir.symmetries,
        }
        if ir.dwell_beats:
            d["dwell_beats"] = ir.dwell_beats
        if ir.body is not None:
            d["body"] = ir.body
        if ir.hands is not None:
            d["hands"] = ir.hands
        return d

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> CompiledIR:
        return cls(
            schema=d.get("schema", SCHEMA_VERSION),
            title=d.get("title", ""),
            pattern=d.get("pattern", ""),
            jugglers=d.get("jugglers", 1),
            period=d.get("period", 0),
            nominal_period=d.get("nominal_period", 0),
            num_paths=d.get("num_paths", 0),
            max_throw=d.get("max_throw", 0),
            max_occupancy=d.get("max_occupancy", 1),
            switch_repeat=d.get("switch_repeat", False),
            repeats=d.get("repeats", 1),
            throws=[IRThrow.from_dict(t) for t in d.get("throws", [])],
            symmetries=d.get("symmetries", []),
            dwell_beats=d.get("dwell_beats", []),
            body=d.get("body"),
            hands=d.get("hands"),
        )

    @classmethod
    def from_json(cls, json_str: str) -> CompiledIR:
        return cls.from_dict(json.loads(json_str))

    def summary(self) -> dict[str, Any]:
        """Counts for quick inspection."""
        per_juggler: dict[int, int] = {}
        for t in self.throws:
            if t.value > 0:
                per_juggler[t.juggler] = per_juggler.get(t.juggler, 0) + 1
        return {
            "title": self.title,
            "pattern": self.pattern,
            "jugglers": self.jugglers,
            "objects": self.num_paths,
            "period": self.period,
            "throws": sum(1 for t in self.throws if t.value > 0),
            "passes": sum(1 for t in self.throws if t.is_pass),
            "holds": sum(1 for t in self.throws if t.modifier == "H" and t.value > 0),
            "throws_per_juggler": dict(sorted(per_juggler.items())),
        }

    def diff_summary(self, other: CompiledIR) -> dict[str, Any]:
        """Differences between two IRs, e.g. before and after an edit."""
        mine = {astuple(t) for t in self.throws}
        theirs = {astuple(t) for t in other.throws}
        return {
            "throws_added": len(theirs - mine),
            "throws_removed": len(mine - theirs),
            "throws_unchanged": len(mine & theirs),
            "period_changed": self.period != other.period,
            "paths_changed": self.num_paths != other.num_paths,
            "jugglers_changed": self.jugglers != other.jugglers,
        }


def to_ir(result: PatternResult) -> CompiledIR:
    """Build the IR for one period of a compile result."""
    compiled = result.compiled
    throws = [
        IRThrow(
            index=t.index,
            juggler=t.juggler,
            hand=t.hand.name.lower(),
            slot=t.slot,
            value=t.value,
            target_juggler=t.target_juggler,
            target_hand=t.target_hand.name.lower(),
            modifier=t.modifier,
            hands_index=t.hands_index,
        )
        for t in compiled.matrix.in_period(compiled.period)
    ]
    dwell_beats: list[float] = []
    if result.conversion is not None:
        dwell_beats = [round(d, 6) for d in result.conversion.dwell_beats]
    return CompiledIR(
        title=result.title,
        pattern=compiled.text,
        jugglers=compiled.jugglers,
        period=compiled.period,
        nominal_period=compiled.nominal_period,
        num_paths=compiled.num_paths,
        max_throw=compiled.max_throw,
        max_occupancy=compiled.max_occupancy,
        switch_repeat=compiled.switch_repeat,
        repeats=result.repeats,
        throws=throws,
        symmetries=[s.to_dict() for s in compiled.symmetries],
        dwell_beats=dwell_beats,
        body=result.body.to_dict() if result.body else None,
        hands=result.hands.to_dict() if result.hands else None,
    )
