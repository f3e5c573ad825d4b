"""Evaluator helper modules for the Lox runtime."""

__all__ = [
    "blocks",
    "chains",
    "common",
    "control",
    "expr",
    "fn",
    "helpers",
    "loops",
]
