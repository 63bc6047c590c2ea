"""Core utilities shared by the parser package.

Exports:
    DepthGuard: Recursion depth tracker for Lazy delegations
    depth_clamp: Clamp a depth limit against the interpreter recursion limit

Python 3.13+.
"""

from .depth_guard import DepthGuard, depth_clamp

__all__ = ["DepthGuard", "depth_clamp"]
