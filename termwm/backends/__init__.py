"""Rendering and input backends for termwm."""

from .memory import MemoryDisplay

__all__ = ["MemoryDisplay"]
