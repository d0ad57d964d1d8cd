"""Exceptions for the abuse-mitigation layer.

Expected rejections (rate limits, blocks, spam, duplicates) are returned
as values, never raised.  These exceptions signal broken internal state.
"""

from __future__ import annotations


class SecurityStateError(RuntimeError):
    """Raised when rate-limit bookkeeping violates its own invariants."""
