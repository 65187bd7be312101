"""Simulated heap allocation, mark-and-sweep collection and reference counting."""

__version__ = "0.1.0"
__all__ = ["demo", "heap", "refcount", "snek", "vm"]