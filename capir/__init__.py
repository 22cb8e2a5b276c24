"""HIR nodes, rewriting passes, name resolution and diagnostics for a capability-based language."""

__version__ = "0.18.1"

__all__ = [
    "types",
    "hir",
    "desugar",
    "const_fold",
    "dce",
    "scope",
    "diagnostics",
    "name_resolver",
]