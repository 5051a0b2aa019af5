from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np


GridPos = Tuple[int, int]

# Baseline terrain codes: 0 passable, 1 blocked, >= 2 hidden and gated by that code.
PASSABLE = 0
BLOCKED = 1
HIDDEN_MIN = 2

# Returned by unlock evaluation when no candidate improves reachability.
NO_OPTION = -1


def visible_type(baseline_type: int, revealed: bool) -> int:
    """Type reported to observers: blocked always shows, hidden shows only once revealed."""
    if baseline_type == BLOCKED:
        return BLOCKED
    if not revealed:
        return PASSABLE
    return baseline_type


@dataclass
class Node:
    x: int
    y: int
    baseline_type: int
    revealed: bool = False

    @property
    def pos(self) -> GridPos:
        return (self.x, self.y)

    @property
    def visible_type(self) -> int:
        return visible_type(self.baseline_type, self.revealed)

    @property
    def is_hidden(self) -> bool:
        return self.baseline_type >= HIDDEN_MIN


@dataclass(frozen=True)
class Edge:
    to: int
    weight: float


@dataclass(frozen=True)
class Mission:
    target: GridPos
    radius: int
    unlock_options: Tuple[int, ...] = ()

    def __post_init__(self):
        if self.radius < 0:
            raise ValueError(f"Mission radius must be nonnegative, got {self.radius}.")
        object.__setattr__(self, "unlock_options", tuple(self.unlock_options))

    @property
    def has_unlock_options(self) -> bool:
        return len(self.unlock_options) > 0


@dataclass
class PathResult:
    """
    Output of a single-source shortest path query.
    - distances: float array indexed by node id, inf where unreachable
    - path: node ids from source to destination inclusive, empty if unreachable
    """

    distances: np.ndarray
    path: List[int] = field(default_factory=list)

    @property
    def reachable(self) -> bool:
        return len(self.path) > 0
