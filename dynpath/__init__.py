"""Dynamic shortest-path missions on progressively revealed grids."""

from .dijkstra import dijkstra
from .events import EventLog, Move, ObjectiveReached, PathImpassable, WizardChoice, format_event
from .graph import GridGraph
from .heap import LazyPriorityQueue
from .memo import UnlockMemo
from .parsing import graph_from_type_grid, parse_files, parse_type_grid
from .runner import MissionRunner, MissionRunnerConfig, UnreachableTargetError
from .types import BLOCKED, HIDDEN_MIN, NO_OPTION, PASSABLE, Edge, GridPos, Mission, Node, PathResult

__all__ = [
    "dijkstra",
    "EventLog",
    "Move",
    "ObjectiveReached",
    "PathImpassable",
    "WizardChoice",
    "format_event",
    "GridGraph",
    "LazyPriorityQueue",
    "UnlockMemo",
    "graph_from_type_grid",
    "parse_files",
    "parse_type_grid",
    "MissionRunner",
    "MissionRunnerConfig",
    "UnreachableTargetError",
    "BLOCKED",
    "HIDDEN_MIN",
    "NO_OPTION",
    "PASSABLE",
    "Edge",
    "GridPos",
    "Mission",
    "Node",
    "PathResult",
    "show_path_plot",
]


def __getattr__(name: str):
    if name == "show_path_plot":
        from .visualization import show_path_plot

        globals()["show_path_plot"] = show_path_plot
        return show_path_plot
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
