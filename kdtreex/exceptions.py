from __future__ import annotations


class KDTreeError(Exception):
    """Base class for errors raised by kdtreex."""


class PreconditionError(KDTreeError, ValueError):
    """A caller supplied arguments that violate an operation's contract.

    Raised at the call that introduced the problem (for example an ordering
    with fewer than one dimension, or an axis outside ``[0, dimensions)``).
    """


class InvariantViolationError(KDTreeError, RuntimeError):
    """Traversal reached a state the tree structure should make impossible.

    This signals either a broken ordering/metric contract or a bookkeeping bug
    and is never converted into an empty or "not found" result.
    """


__all__ = [
    "KDTreeError",
    "PreconditionError",
    "InvariantViolationError",
]
