from typing import List, Sequence

import numpy as np

from .heap import LazyPriorityQueue
from .types import Edge, PathResult


def dijkstra(adjacency: Sequence[Sequence[Edge]], source: int, destination: int) -> PathResult:
    """
    Single-source shortest paths over an adjacency-list snapshot.

    The queue has no decrease-key, so improved distances are pushed as new
    entries and popped entries whose key exceeds the recorded best are skipped.
    Weights are assumed nonnegative.
    """
    n = len(adjacency)
    dist = np.full(n, np.inf, dtype=float)
    prev = np.full(n, -1, dtype=np.int64)

    dist[source] = 0.0
    pq = LazyPriorityQueue(capacity=max(1, n))
    pq.insert(source, 0.0)

    while not pq.is_empty():
        cur, d = pq.extract_min()
        if d > dist[cur]:
            continue
        for edge in adjacency[cur]:
            nd = d + edge.weight
            if nd < dist[edge.to]:
                dist[edge.to] = nd
                prev[edge.to] = cur
                pq.insert(edge.to, nd)

    return PathResult(distances=dist, path=_reconstruct(prev, dist, source, destination))


def _reconstruct(prev: np.ndarray, dist: np.ndarray, source: int, destination: int) -> List[int]:
    if not np.isfinite(dist[destination]):
        return []
    out = [destination]
    cur = destination
    while cur != source:
        cur = int(prev[cur])
        out.append(cur)
    out.reverse()
    return out
