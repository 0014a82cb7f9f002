from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Tuple

from kdtreex.core.metrics import Metric
from kdtreex.core.tree import KDTreeInnerNode, TreeNode
from kdtreex.diagnostics import log_operation
from kdtreex.exceptions import InvariantViolationError
from kdtreex.logging import get_logger

LOGGER = get_logger("queries.knn")

Candidate = Tuple[Any, Any, Any]


def _by_distance(candidate: Candidate) -> Any:
    return candidate[2]


def find_minimal_parent(root: KDTreeInnerNode[Any, Any], query: Any, size: int) -> KDTreeInnerNode[Any, Any]:
    """Smallest subtree on the path towards ``query`` holding at least ``size`` points.

    The walk also stops at a node whose key equals ``query``. If the whole
    tree is smaller than ``size`` the root is returned.
    """

    node = root
    while True:
        if node.is_below(query):
            if node.below.size < size:
                return node
            node = node.below  # type: ignore[assignment]
        elif node.is_above(query):
            if node.above.size < size:
                return node
            node = node.above  # type: ignore[assignment]
        else:
            return node


@dataclass
class _SearchState:
    query: Any
    n: int
    metric: Metric[Any, Any]
    seed: KDTreeInnerNode[Any, Any]
    candidates: List[Candidate]
    visited: int = 0

    @property
    def worst(self) -> Any:
        return self.candidates[-1][2]

    def offer(self, key: Any, value: Any, distance: Any) -> None:
        if distance < self.worst:
            self.candidates.append((key, value, distance))
            self.candidates.sort(key=_by_distance)
            del self.candidates[self.n :]


def _seed_candidates(
    seed: KDTreeInnerNode[Any, Any], query: Any, n: int, metric: Metric[Any, Any]
) -> List[Candidate]:
    scored = [(key, value, metric.distance(query, key)) for key, value in seed.iter_items()]
    scored.sort(key=_by_distance)
    return scored[:n]


def _branch_and_bound(node: TreeNode, state: _SearchState) -> None:
    if not isinstance(node, KDTreeInnerNode) or node is state.seed:
        return
    state.visited += 1
    query = state.query
    state.offer(node.key, node.value, state.metric.distance(query, node.key))

    planar = state.metric.planar_distance(node.axis, query, node.key)
    if planar < state.worst:
        _branch_and_bound(node.above, state)
        _branch_and_bound(node.below, state)
    elif node.is_above(query):
        _branch_and_bound(node.above, state)
    elif node.is_below(query):
        _branch_and_bound(node.below, state)
    else:
        LOGGER.error(
            "Query %r ties with key %r on axis %d outside the seed subtree.",
            query,
            node.key,
            node.axis,
        )
        raise InvariantViolationError(
            f"Query {query!r} is neither above nor below key {node.key!r} "
            "although the node is not the seed boundary; the ordering or metric "
            "contract is broken."
        )


def find_nearest(
    root: TreeNode,
    query: Any,
    n: int,
    metric: Metric[Any, Any],
) -> List[Candidate]:
    """Return up to ``n`` ``(key, value, distance)`` triples nearest to ``query``.

    The result is sorted by ascending distance and holds ``min(n, size)``
    entries; ``n <= 0`` and empty trees yield an empty list.
    """

    if n <= 0 or not isinstance(root, KDTreeInnerNode):
        return []
    with log_operation(LOGGER, "knn_query") as op_log:
        seed = find_minimal_parent(root, query, n)
        candidates = _seed_candidates(seed, query, n, metric)
        LOGGER.debug(
            "Seeded %d candidates from subtree of size %d (axis=%d).",
            len(candidates),
            seed.size,
            seed.axis,
        )
        state = _SearchState(
            query=query,
            n=n,
            metric=metric,
            seed=seed,
            candidates=candidates,
        )
        _branch_and_bound(root, state)
        op_log.add_metadata(
            n=n,
            returned=len(state.candidates),
            seed_size=seed.size,
            visited=state.visited,
        )
    return state.candidates


__all__ = ["find_minimal_parent", "find_nearest"]
