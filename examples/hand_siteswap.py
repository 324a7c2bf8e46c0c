#!/usr/bin/env python3
"""
Example: Hand siteswap conversion.

Usage:
    python examples/hand_siteswap.py

Converts a few object siteswap / hand siteswap pairs into passing
siteswaps and shows the hand assignment and dwell schedule for each.
"""

from chuk_mcp_juggling.siteswap import compile_siteswap, convert_hss

PAIRS = [
    # (objects, hands, handspec)
    ("3", "2", None),
    ("3", "3", None),
    ("3", "3", "(3,1)(,2)"),
    ("4", "3", None),
    ("531", "2", None),
    ("[43]1", "2", None),
]


def main() -> None:
    """Convert and compile each pair."""
    print("CHUK Juggling Hand Siteswap Demo")
    print("=" * 40)
    print()

    for objects, hands, handspec in PAIRS:
        conversion = convert_hss(objects, hands, handspec=handspec)
        compiled = compile_siteswap(conversion.pattern)

        print(f"objects={objects} hands={hands}" + (f" handspec={handspec}" if handspec else ""))
        print(f"  pattern:  {conversion.pattern}")
        print(f"  jugglers: {conversion.jugglers}  hands: {conversion.hands}")
        for i, (juggler, right) in enumerate(conversion.hand_map):
            side = "right" if right else "left"
            print(f"    hand {i + 1} -> juggler {juggler} {side}")
        dwell = ", ".join(f"{d:.2f}" for d in conversion.dwell_beats)
        print(f"  dwell:    {dwell}")
        print(f"  compiles: {compiled.num_paths} objects over {compiled.period} beats")
        print()


if __name__ == "__main__":
    main()
