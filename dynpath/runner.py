import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from .control_mixin import MissionControlMixin
from .dijkstra import dijkstra
from .events import Event, EventLog, Move, ObjectiveReached, PathImpassable, WizardChoice
from .graph import GridGraph
from .memo import UnlockMemo
from .types import NO_OPTION, GridPos, Mission


logger = logging.getLogger(__name__)

EventSink = Callable[[Event], None]


class UnreachableTargetError(RuntimeError):
    def __init__(self, ordinal: int, target: GridPos, attempts: int):
        super().__init__(
            f"Mission {ordinal} target {target} stayed unreachable after {attempts} attempts."
        )
        self.ordinal = ordinal
        self.target = target
        self.attempts = attempts


@dataclass(frozen=True)
class MissionRunnerConfig:
    incremental_reveal: bool = True
    # Consecutive empty plans tolerated per mission; None retries forever.
    max_impassable_retries: Optional[int] = 8
    abort_on_unreachable: bool = False


class MissionRunner(MissionControlMixin):
    """
    Drives a mission sequence over a live GridGraph.

    Per mission: reveal around the current cell, plan with Dijkstra, walk the
    plan while revealing newly visible cells, and replan whenever a revealed
    blocked or gated cell lies on the remaining plan. After a reached mission
    that offers unlock codes, every unapplied code is scored on a graph clone
    against the next target and the best one is committed.

    The first mission only fixes the start position.
    """

    def __init__(
        self,
        graph: GridGraph,
        missions: Sequence[Mission],
        sink: Optional[EventSink] = None,
        memo: Optional[UnlockMemo] = None,
        config: Optional[MissionRunnerConfig] = None,
    ):
        if not missions:
            raise ValueError("At least the starting mission is required.")
        self.graph = graph
        self.missions = list(missions)
        self.sink: EventSink = sink if sink is not None else EventLog()
        self.memo = memo if memo is not None else UnlockMemo()
        self.config = config or MissionRunnerConfig()

        self.current_node: GridPos = self.missions[0].target
        self.path: List[GridPos] = [self.current_node]
        self.events: List[Event] = []
        self.wizard_choices: List[int] = []
        self.impassable_events = 0
        self.objectives_reached = 0
        self.missions_abandoned = 0

    @property
    def objectives(self) -> List[Mission]:
        return self.missions[1:]

    def _emit(self, event: Event):
        self.events.append(event)
        self.sink(event)

    def _move_to(self, pos: GridPos):
        self.current_node = pos
        self.path.append(pos)
        self._emit(Move(pos[0], pos[1]))

    def _impassable(self):
        self.impassable_events += 1
        self._emit(PathImpassable())

    def _reach(self, ordinal: int):
        self.objectives_reached += 1
        self._emit(ObjectiveReached(ordinal))

    # ---------- per-mission control ----------
    def _follow_plan(self, plan: List[int], mission: Mission, ordinal: int) -> Optional[bool]:
        """
        Walk a plan. Returns True when the target is reached, None when the
        plan was invalidated by a reveal and must be recomputed.
        """
        first_step = True
        prev = self.current_node
        for step, idx in enumerate(plan):
            pos = self.graph.coordinates_of(idx)
            if pos == self.current_node:
                continue

            self._move_to(pos)

            revealed: List[int] = []
            if self._can_reveal():
                if first_step or not self.config.incremental_reveal:
                    revealed = self._reveal_full(pos, mission.radius)
                else:
                    revealed = self._reveal_after_move(prev, pos, mission.radius)
                first_step = False

            if self._plan_invalidated(revealed, plan[step:]):
                self._impassable()
                return None

            if pos == mission.target:
                self._reach(ordinal)
                return True
            prev = pos
        return None

    def _run_mission(self, ordinal: int, mission: Mission) -> bool:
        target_idx = self.graph.index_of(*mission.target)
        limit = self.config.max_impassable_retries
        failures = 0

        while True:
            if self._can_reveal():
                self._reveal_full(self.current_node, mission.radius)

            if self.current_node == mission.target:
                self._reach(ordinal)
                return True

            source_idx = self.graph.index_of(*self.current_node)
            plan = dijkstra(self.graph.adjacency, source_idx, target_idx).path
            if not plan:
                self._impassable()
                failures += 1
                if limit is not None and failures > limit:
                    return self._abandon(ordinal, mission, failures)
                continue

            failures = 0
            if self._follow_plan(plan, mission, ordinal):
                return True

    def _abandon(self, ordinal: int, mission: Mission, attempts: int) -> bool:
        if self.config.abort_on_unreachable:
            raise UnreachableTargetError(ordinal, mission.target, attempts)
        logger.warning(
            "Mission %d target %s unreachable after %d attempts; moving on.",
            ordinal,
            mission.target,
            attempts,
        )
        self.missions_abandoned += 1
        return False

    def _choose_unlock(self, mission: Mission, next_mission: Mission) -> int:
        source = self.graph.index_of(*self.current_node)
        destination = self.graph.index_of(*next_mission.target)
        best = self.graph.evaluate_unlock_options(
            mission.unlock_options,
            source,
            destination,
            self.memo,
        )
        self.wizard_choices.append(best)
        self._emit(WizardChoice(best))
        if best != NO_OPTION:
            self.graph.unlock_type(best)
            self.memo.add(best)
            logger.debug("Committed unlock %d towards %s.", best, next_mission.target)
        return best

    # ---------- public ----------
    def run(self) -> List[GridPos]:
        objectives = self.objectives
        for i, mission in enumerate(objectives):
            reached = self._run_mission(i + 1, mission)
            if not reached:
                continue
            if mission.has_unlock_options and i < len(objectives) - 1:
                self._choose_unlock(mission, objectives[i + 1])
        return self.path

    def stats(self) -> Dict[str, int]:
        return {
            "moves": len(self.path) - 1,
            "impassable_events": self.impassable_events,
            "objectives_reached": self.objectives_reached,
            "missions_abandoned": self.missions_abandoned,
            "wizard_choices": len(self.wizard_choices),
            "unlocked_codes": len(self.memo),
            "unrevealed_nodes": self.graph.unrevealed,
        }
