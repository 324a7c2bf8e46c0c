#!/usr/bin/env python3
"""
Example: Compiled IR Round-Trip Workflow.

Usage:
    python examples/compiled_ir_roundtrip.py

This example shows:
1. Compiling a pattern with body motion to the compiled IR
2. Saving the IR as JSON (for inspection and golden-file testing)
3. Loading it back and checking nothing changed
4. Diffing two related patterns

    PatternConfig → CompiledIR (diffable, versioned) → layout / animation
"""

from pathlib import Path

from chuk_mcp_juggling.compiler import CompiledIR, compile_pattern, to_ir


def main() -> None:
    """Demonstrate the compiled IR round trip."""
    output_dir = Path(__file__).parent / "output"
    output_dir.mkdir(exist_ok=True)

    print("CHUK Juggling Compiled IR Demo")
    print("=" * 40)
    print()

    print("1. Compiling 4-count passing with body motion...")
    four_count = to_ir(
        compile_pattern("pattern=<3p|3p><3|3><3|3><3|3>;body=<(90,-100).|(270,100).>")
    )
    summary = four_count.summary()
    print(f"   Schema: {four_count.schema}")
    print(f"   Jugglers: {summary['jugglers']}, objects: {summary['objects']}")
    print(f"   Period: {summary['period']}, passes: {summary['passes']}")
    print()

    print("2. Saving IR as JSON...")
    ir_path = output_dir / "four_count_ir.json"
    ir_path.write_text(four_count.to_json())
    print(f"   Saved to: {ir_path}")
    print()

    print("3. Loading it back...")
    restored = CompiledIR.from_json(ir_path.read_text())
    print(f"   Identical: {restored.to_dict() == four_count.to_dict()}")
    print()

    print("4. Diffing 4-count against 2-count...")
    two_count = to_ir(compile_pattern("pattern=<3p|3p><3|3>;body=<(90,-100).|(270,100).>"))
    diff = four_count.diff_summary(two_count)
    print(f"   Throws unchanged: {diff['throws_unchanged']}")
    print(f"   Throws removed: {diff['throws_removed']}")
    print(f"   Period changed: {diff['period_changed']}")
    print()
    print("Done!")


if __name__ == "__main__":
    main()
