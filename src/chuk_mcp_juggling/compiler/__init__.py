"""
Compilation pipeline - pattern configs to serializable compile results.

The pipeline:
    PatternConfig → (HSS conversion) → CompiledPattern
    → period reconciliation with body/hand motion → CompiledIR (JSON)
"""

from chuk_mcp_juggling.compiler.ir import SCHEMA_VERSION, CompiledIR, IRThrow, to_ir
from chuk_mcp_juggling.compiler.pipeline import (
    Optimizer,
    PatternCompiler,
    PatternResult,
    compile_pattern,
)

__all__ = [
    # Pipeline
    "PatternCompiler",
    "PatternResult",
    "Optimizer",
    "compile_pattern",
    # IR
    "SCHEMA_VERSION",
    "CompiledIR",
    "IRThrow",
    "to_ir",
]
