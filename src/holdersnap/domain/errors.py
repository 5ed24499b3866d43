"""Domain error definitions."""

from __future__ import annotations


class SnapshotError(RuntimeError):
    """Raised when a snapshot run cannot proceed."""


class TransientLookupError(RuntimeError):
    """Base for lookup failures that the retry path may absorb.

    Adapters wrap transport and payload problems in subclasses of this error so
    the batch resolver can downgrade them to "not found" without knowing about
    HTTP.
    """


class RateLimitedError(TransientLookupError):
    """Raised when an upstream answered HTTP 429."""
