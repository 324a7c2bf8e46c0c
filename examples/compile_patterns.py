#!/usr/bin/env python3
"""
Example: Compile library patterns to throw listings.

Usage:
    python examples/compile_patterns.py

This walks the built-in pattern library and, for every pattern:
1. Resolves its config (and each variant)
2. Compiles it
3. Prints the jugglers, objects and period, then the throws of one period
"""

from pathlib import Path

from chuk_mcp_juggling.compiler import PatternCompiler, to_ir
from chuk_mcp_juggling.errors import JuggleError
from chuk_mcp_juggling.patterns import PatternLibrary


def main() -> None:
    """Compile every library pattern."""
    library_path = Path(__file__).parent.parent / "src/chuk_mcp_juggling/patterns/library"
    library = PatternLibrary(library_path=library_path)
    compiler = PatternCompiler()

    print("CHUK Juggling Pattern Compiler")
    print("=" * 40)
    print(f"Pattern library: {library_path}")
    print()

    for meta in library.list_patterns():
        pattern_id = f"{meta.category.value}/{meta.name}"
        doc = library.get_pattern(pattern_id)
        if doc is None:
            continue

        for variant in [None, *doc.variants]:
            label = pattern_id if variant is None else f"{pattern_id} [{variant}]"
            try:
                result = compiler.compile(doc.resolve_config(variant))
            except JuggleError as e:
                print(f"{label}: FAILED - {e}")
                continue

            ir = to_ir(result)
            summary = ir.summary()
            print(
                f"{label}: {ir.pattern}  "
                f"jugglers={ir.jugglers} objects={ir.num_paths} period={ir.period} "
                f"passes={summary['passes']}"
            )
            for t in ir.throws:
                if t.value == 0:
                    continue
                target = f"J{t.target_juggler} {t.target_hand}"
                print(
                    f"    beat {t.index:2d}  J{t.juggler} {t.hand:5s} "
                    f"{t.value:2d}{t.modifier:2s} -> {target}"
                )
        print()


if __name__ == "__main__":
    main()
