"""
Text formats for scenarios.

- land file:    "width height", then one "x y type" line per cell
- travel file:  one "x1-y1,x2-y2 weight" line per edge
- mission file: radius, then "x y" of the start, then "x y [code ...]" per objective
"""

from pathlib import Path
from typing import Iterable, Iterator, List, Sequence, Tuple, Union

import numpy as np

from .graph import GridGraph
from .types import GridPos, Mission


PathLike = Union[str, Path]
TravelEdge = Tuple[GridPos, GridPos, float]


def _lines(path: PathLike) -> Iterator[Tuple[int, List[str]]]:
    text = Path(path).read_text(encoding="utf-8")
    for lineno, raw in enumerate(text.splitlines(), start=1):
        parts = raw.split()
        if parts:
            yield lineno, parts


def _ints(path: PathLike, lineno: int, parts: Sequence[str]) -> List[int]:
    try:
        return [int(p) for p in parts]
    except ValueError:
        raise ValueError(f"{path}:{lineno}: expected integers, got {' '.join(parts)!r}") from None


def _parse_pos(path: PathLike, lineno: int, token: str) -> GridPos:
    bits = token.split("-")
    if len(bits) != 2:
        raise ValueError(f"{path}:{lineno}: bad coordinate {token!r}, expected x-y")
    x, y = _ints(path, lineno, bits)
    return (x, y)


def parse_land_file(path: PathLike) -> GridGraph:
    rows = _lines(path)
    try:
        lineno, header = next(rows)
    except StopIteration:
        raise ValueError(f"{path}: land file is empty") from None
    if len(header) != 2:
        raise ValueError(f"{path}:{lineno}: expected 'width height'")
    width, height = _ints(path, lineno, header)
    graph = GridGraph(width, height)

    for lineno, parts in rows:
        if len(parts) != 3:
            raise ValueError(f"{path}:{lineno}: expected 'x y type'")
        x, y, node_type = _ints(path, lineno, parts)
        if not graph.in_bounds(x, y):
            raise ValueError(f"{path}:{lineno}: cell ({x}, {y}) is outside {width}x{height}")
        if node_type < 0:
            raise ValueError(f"{path}:{lineno}: negative type code {node_type}")
        graph.add_node(x, y, node_type)
    return graph


def parse_travel_file(path: PathLike, graph: GridGraph) -> GridGraph:
    for lineno, parts in _lines(path):
        if len(parts) != 2 or "," not in parts[0]:
            raise ValueError(f"{path}:{lineno}: expected 'x1-y1,x2-y2 weight'")
        left, right = parts[0].split(",", 1)
        a = _parse_pos(path, lineno, left)
        b = _parse_pos(path, lineno, right)
        try:
            weight = float(parts[1])
        except ValueError:
            raise ValueError(f"{path}:{lineno}: bad weight {parts[1]!r}") from None
        for pos in (a, b):
            if not graph.in_bounds(*pos):
                raise ValueError(f"{path}:{lineno}: endpoint {pos} is outside the grid")
        if weight < 0:
            raise ValueError(f"{path}:{lineno}: negative weight {weight}")
        graph.connect(a, b, weight)
    return graph


def parse_mission_file(path: PathLike) -> List[Mission]:
    rows = _lines(path)
    try:
        lineno, head = next(rows)
        if len(head) != 1:
            raise ValueError(f"{path}:{lineno}: expected a single radius")
        (radius,) = _ints(path, lineno, head)
        lineno, start = next(rows)
    except StopIteration:
        raise ValueError(f"{path}: mission file needs a radius and a start line") from None
    if len(start) != 2:
        raise ValueError(f"{path}:{lineno}: expected start 'x y'")
    sx, sy = _ints(path, lineno, start)

    missions = [Mission((sx, sy), radius)]
    for lineno, parts in rows:
        if len(parts) < 2:
            raise ValueError(f"{path}:{lineno}: expected 'x y [code ...]'")
        values = _ints(path, lineno, parts)
        missions.append(Mission((values[0], values[1]), radius, tuple(values[2:])))
    return missions


def parse_files(
    land_file: PathLike,
    travel_file: PathLike,
    mission_file: PathLike,
) -> Tuple[GridGraph, List[Mission]]:
    graph = parse_land_file(land_file)
    parse_travel_file(travel_file, graph)
    missions = parse_mission_file(mission_file)
    for m in missions:
        if not graph.in_bounds(*m.target):
            raise ValueError(f"{mission_file}: target {m.target} is outside the grid")
    return graph, missions


# ---------- writers ----------
def write_land_file(path: PathLike, grid: np.ndarray) -> Path:
    """Write a (height, width) type grid; rows are y, columns are x."""
    height, width = grid.shape
    lines = [f"{width} {height}"]
    for x in range(width):
        for y in range(height):
            lines.append(f"{x} {y} {int(grid[y, x])}")
    p = Path(path)
    p.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return p


def write_travel_file(path: PathLike, edges: Iterable[TravelEdge]) -> Path:
    lines = [f"{a[0]}-{a[1]},{b[0]}-{b[1]} {w:g}" for a, b, w in edges]
    p = Path(path)
    p.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return p


def write_mission_file(path: PathLike, missions: Sequence[Mission]) -> Path:
    if not missions:
        raise ValueError("Cannot write an empty mission list.")
    start = missions[0]
    lines = [str(start.radius), f"{start.target[0]} {start.target[1]}"]
    for m in missions[1:]:
        fields = [str(m.target[0]), str(m.target[1])] + [str(c) for c in m.unlock_options]
        lines.append(" ".join(fields))
    p = Path(path)
    p.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return p


# ---------- type grids ----------
def parse_type_grid(text: str) -> np.ndarray:
    rows = [list(map(int, line.split())) for line in text.strip().splitlines() if line.strip()]
    if not rows:
        raise ValueError("Type grid is empty.")

    widths = {len(r) for r in rows}
    if len(widths) != 1:
        raise ValueError(f"Type grid rows have inconsistent widths: {sorted(widths)}")

    grid = np.array(rows, dtype=int)
    if (grid < 0).any():
        raise ValueError("Type grid codes must be nonnegative.")
    return grid


def grid_edges(grid: np.ndarray, weight: float = 1.0) -> List[TravelEdge]:
    """4-connected edges between every pair of horizontally or vertically adjacent cells."""
    height, width = grid.shape
    edges: List[TravelEdge] = []
    for x in range(width):
        for y in range(height):
            if x + 1 < width:
                edges.append(((x, y), (x + 1, y), weight))
            if y + 1 < height:
                edges.append(((x, y), (x, y + 1), weight))
    return edges


def graph_from_type_grid(grid: np.ndarray, weight: float = 1.0) -> GridGraph:
    grid = np.asarray(grid, dtype=int)
    if grid.ndim != 2:
        raise ValueError("Type grid must be 2D")
    if (grid < 0).any():
        raise ValueError("Type grid codes must be nonnegative.")

    height, width = grid.shape
    graph = GridGraph(width, height)
    for x in range(width):
        for y in range(height):
            graph.add_node(x, y, int(grid[y, x]))
    for a, b, w in grid_edges(grid, weight):
        graph.connect(a, b, w)
    return graph
