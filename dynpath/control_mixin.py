import logging
from typing import List, Sequence

from .graph import GridGraph
from .types import BLOCKED, GridPos


logger = logging.getLogger(__name__)


class MissionControlMixin:
    graph: GridGraph

    def _can_reveal(self) -> bool:
        return self.graph.has_hidden_nodes and not self.graph.is_fully_revealed

    def _reveal_full(self, pos: GridPos, radius: int) -> List[int]:
        return self.graph.reveal_in_circle(pos[0], pos[1], radius)

    def _reveal_after_move(self, prev: GridPos, cur: GridPos, radius: int) -> List[int]:
        # After a unit step only the leading half of the new circle can hold
        # unrevealed cells, so the scan on the movement axis starts at the
        # previous coordinate.
        px, py = prev
        cx, cy = cur
        dx, dy = cx - px, cy - py
        if abs(dx) + abs(dy) != 1:
            return self._reveal_full(cur, radius)

        xs = range(cx - radius, cx + radius + 1)
        ys = range(cy - radius, cy + radius + 1)
        if dx == 1:
            xs = range(px, cx + radius + 1)
        elif dx == -1:
            xs = range(cx - radius, px + 1)
        elif dy == 1:
            ys = range(py, cy + radius + 1)
        else:
            ys = range(cy - radius, py + 1)
        return self.graph.reveal_within(cx, cy, radius, xs, ys)

    def _plan_invalidated(self, revealed: Sequence[int], remaining: Sequence[int]) -> bool:
        if not revealed:
            return False
        ahead = set(remaining)
        for idx in revealed:
            if idx not in ahead:
                continue
            node = self.graph.nodes[idx]
            if node is not None and node.baseline_type >= BLOCKED:
                logger.debug("Revealed node %s (type %d) blocks the plan.", node.pos, node.baseline_type)
                return True
        return False
