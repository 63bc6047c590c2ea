"""Shared constants for combiparse.

This module provides centralized configuration defaults used across the
parser and core packages. Placing constants here avoids circular imports
and provides a single source of truth.

Constants are grouped by domain:
- Depth limits: Recursion protection for deferred (Lazy) grammar rules
- Input limits: DoS prevention via size constraints

Python 3.13+.
"""

__all__ = [
    "MAX_DEPTH",
    "MAX_SOURCE_SIZE",
]

# ============================================================================
# DEPTH LIMITS
# ============================================================================
#
# Recursion in a combinator grammar only happens through Lazy references:
# every other combinator is a finite composition of parsers that already
# exist. The depth guard therefore counts nested Lazy delegations.
#
# The value 64 stays below Python's default recursion limit
# (1000) even though each Lazy level costs roughly a dozen interpreter frames
# (Lazy -> between -> seq -> or_ -> ...).
#
# ============================================================================

# Maximum nested Lazy delegations during one run.
MAX_DEPTH: int = 64

# ============================================================================
# INPUT LIMITS
# ============================================================================

# Default maximum source size in characters (10 MB).
# Prevents unbounded work from extremely large inputs.
MAX_SOURCE_SIZE: int = 10 * 1024 * 1024
