import logging
from typing import Container, Iterable, List, Optional

import numpy as np

from .dijkstra import dijkstra
from .types import BLOCKED, HIDDEN_MIN, NO_OPTION, PASSABLE, Edge, GridPos, Node


logger = logging.getLogger(__name__)


class GridGraph:
    """
    Fixed-size grid of nodes with two adjacency lists.

    - adjacency: live edges, shrunk by reveals of hidden nodes and restored by unlocks
    - original_adjacency: snapshot of every edge ever added, never mutated afterwards

    Node ids are linear indices `y + x * height`. Live adjacency is always a
    subset of the original one.
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid size must be positive, got {width}x{height}.")
        self.width = width
        self.height = height
        n = width * height
        self.nodes: List[Optional[Node]] = [None] * n
        self.adjacency: List[List[Edge]] = [[] for _ in range(n)]
        self.original_adjacency: List[List[Edge]] = [[] for _ in range(n)]
        self.unrevealed = n
        self.has_hidden_nodes = False

    def __len__(self) -> int:
        return self.width * self.height

    # ---------- indexing ----------
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def index_of(self, x: int, y: int) -> int:
        return y + x * self.height

    def coordinates_of(self, index: int) -> GridPos:
        return (index // self.height, index % self.height)

    def node_at(self, x: int, y: int) -> Optional[Node]:
        return self.nodes[self.index_of(x, y)]

    def _checked_index(self, pos: GridPos) -> int:
        x, y = pos
        if not self.in_bounds(x, y):
            raise ValueError(f"Position {pos} is outside the {self.width}x{self.height} grid.")
        return self.index_of(x, y)

    @property
    def is_fully_revealed(self) -> bool:
        return self.unrevealed == 0

    # ---------- construction ----------
    def add_node(self, x: int, y: int, node_type: int) -> Node:
        idx = self._checked_index((x, y))
        node = Node(x, y, int(node_type))
        self.nodes[idx] = node
        if node.baseline_type >= HIDDEN_MIN:
            self.has_hidden_nodes = True
        return node

    def add_edge(self, a: GridPos, b: GridPos, weight: float):
        if weight < 0:
            raise ValueError(f"Edge {a}-{b} has negative weight {weight}.")
        ia = self._checked_index(a)
        ib = self._checked_index(b)
        w = float(weight)
        self.adjacency[ia].append(Edge(ib, w))
        self.adjacency[ib].append(Edge(ia, w))
        self.original_adjacency[ia].append(Edge(ib, w))
        self.original_adjacency[ib].append(Edge(ia, w))

    def mark_impassable_edge(self, a: GridPos, b: GridPos):
        # Live list only; the original snapshot keeps the edge.
        ia = self._checked_index(a)
        ib = self._checked_index(b)
        self.adjacency[ia] = [e for e in self.adjacency[ia] if e.to != ib]
        self.adjacency[ib] = [e for e in self.adjacency[ib] if e.to != ia]

    def connect(self, a: GridPos, b: GridPos, weight: float):
        """Add an edge as an input source would: edges touching blocked cells stay out of live adjacency."""
        self.add_edge(a, b, weight)
        if self._baseline(a) == BLOCKED or self._baseline(b) == BLOCKED:
            self.mark_impassable_edge(a, b)

    def _baseline(self, pos: GridPos) -> int:
        node = self.nodes[self._checked_index(pos)]
        return PASSABLE if node is None else node.baseline_type

    # ---------- reveal ----------
    def reveal_node(self, index: int) -> bool:
        """Reveal one node; returns False when it was already revealed."""
        node = self.nodes[index]
        if node is None or node.revealed:
            return False
        node.revealed = True
        self.unrevealed -= 1
        if node.baseline_type >= HIDDEN_MIN:
            self.adjacency[index] = []
        return True

    def within_circle(self, cx: int, cy: int, x: int, y: int, radius: int) -> bool:
        return (x - cx) * (x - cx) + (y - cy) * (y - cy) <= radius * radius

    def reveal_within(
        self,
        cx: int,
        cy: int,
        radius: int,
        xs: Iterable[int],
        ys: Iterable[int],
    ) -> List[int]:
        ys = list(ys)
        revealed = []
        for x in xs:
            for y in ys:
                if not self.in_bounds(x, y):
                    continue
                if not self.within_circle(cx, cy, x, y, radius):
                    continue
                idx = self.index_of(x, y)
                if self.reveal_node(idx):
                    revealed.append(idx)
        return revealed

    def reveal_in_circle(self, cx: int, cy: int, radius: int) -> List[int]:
        return self.reveal_within(
            cx,
            cy,
            radius,
            range(cx - radius, cx + radius + 1),
            range(cy - radius, cy + radius + 1),
        )

    # ---------- unlock ----------
    def unlock_type(self, code: int) -> List[int]:
        # Any code is accepted; NO_OPTION matches no node.
        unlocked = []
        for idx, node in enumerate(self.nodes):
            if node is None or node.baseline_type != code:
                continue
            node.baseline_type = PASSABLE
            self.adjacency[idx] = list(self.original_adjacency[idx])
            unlocked.append(idx)
        if unlocked:
            logger.debug("Unlocked code %d: %d nodes restored.", code, len(unlocked))
        return unlocked

    def evaluate_unlock_options(
        self,
        candidates: Iterable[int],
        source: int,
        destination: int,
        already_applied: Container[int] = (),
    ) -> int:
        """
        Score each unapplied candidate on a disposable clone and return the one
        giving the shortest source->destination distance. Ties keep the first
        candidate; NO_OPTION when nothing makes the destination reachable.
        """
        best = NO_OPTION
        best_dist = np.inf
        for code in candidates:
            if code in already_applied:
                continue
            trial = self.clone()
            trial.unlock_type(code)
            d = float(dijkstra(trial.adjacency, source, destination).distances[destination])
            logger.debug("Unlock option %d scores %s.", code, d)
            if d < best_dist:
                best_dist = d
                best = code
        return best

    def clone(self) -> "GridGraph":
        out = GridGraph(self.width, self.height)
        for node in self.nodes:
            if node is not None:
                out.add_node(node.x, node.y, node.baseline_type)
        out.adjacency = [list(edges) for edges in self.adjacency]
        out.original_adjacency = [list(edges) for edges in self.original_adjacency]
        return out

    # ---------- views ----------
    def baseline_grid(self) -> np.ndarray:
        grid = np.zeros((self.height, self.width), dtype=int)
        for node in self.nodes:
            if node is not None:
                grid[node.y, node.x] = node.baseline_type
        return grid

    def revealed_mask(self) -> np.ndarray:
        mask = np.zeros((self.height, self.width), dtype=bool)
        for node in self.nodes:
            if node is not None:
                mask[node.y, node.x] = node.revealed
        return mask

    def __repr__(self) -> str:
        return (
            f"GridGraph({self.width}x{self.height}, unrevealed={self.unrevealed}, "
            f"hidden={self.has_hidden_nodes})"
        )
