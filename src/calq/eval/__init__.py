"""Evaluator helper modules for the calq runtime."""

__all__ = [
    "common",
    "expr",
    "fn",
]
