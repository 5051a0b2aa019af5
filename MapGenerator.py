import random
from typing import Dict, List, Optional, Tuple

import numpy as np

from dynpath.types import BLOCKED, HIDDEN_MIN, PASSABLE, GridPos, Mission


class MapGenerator:
    def __init__(self, height, width, seed=None):
        """
        :param height: map height (rows, Y)
        :param width: map width (columns, X)
        :param seed: random seed
        """
        self.height = height
        self.width = width
        self.seed = seed
        self.rng = random.Random(seed)

        self.obstacle_types = ["rect", "u_shape"]
        self.overlap_prob = 0.3

    def generate_map(self, num_obstacles=None, num_gates=2, return_metadata=False):
        """
        Builds a (height, width) type grid.
        :param num_obstacles: blocked obstacles to place (None scales with area)
        :param num_gates: gated wall segments, coded HIDDEN_MIN, HIDDEN_MIN + 1, ...
        :param return_metadata: also return placement records
        """
        max_global_retries = 20

        for _ in range(max_global_retries):
            grid, metadata = self._try_generate_map(num_obstacles, num_gates)
            free_ratio = np.sum(grid == PASSABLE) / (self.height * self.width)
            if free_ratio >= 0.5:
                break
        else:
            print("Warning: Failed to generate a map with enough free space. Returning last result.")

        if return_metadata:
            return grid, metadata
        return grid

    def generate_missions(self, grid, count=3, radius=2, offer_options=True) -> List[Mission]:
        """
        Picks a start and `count` passable targets. When offer_options is set,
        every objective but the last offers the gate codes in random order.
        """
        free = [(int(x), int(y)) for y, x in np.argwhere(grid == PASSABLE)]
        if len(free) < count + 1:
            raise ValueError(f"Need {count + 1} free cells, map has {len(free)}.")
        picks = self.rng.sample(free, count + 1)
        codes = sorted(int(c) for c in np.unique(grid) if c >= HIDDEN_MIN)

        missions = [Mission(picks[0], radius)]
        for i, target in enumerate(picks[1:]):
            options: Tuple[int, ...] = ()
            if offer_options and codes and i < count - 1:
                options = tuple(self.rng.sample(codes, len(codes)))
            missions.append(Mission(target, radius, options))
        return missions

    def _try_generate_map(self, num_obstacles, num_gates):
        grid = np.zeros((self.height, self.width), dtype=int)
        metadata: List[Dict] = []

        if num_obstacles is None:
            area = self.height * self.width
            min_obs = max(2, int(area / 150))
            max_obs = max(3, int(area / 60))
            target_obs = self.rng.randint(min_obs, max_obs)
        else:
            target_obs = num_obstacles

        count = 0
        attempts = 0
        max_attempts = target_obs * 50

        while count < target_obs and attempts < max_attempts:
            attempts += 1

            o_type = self.rng.choice(self.obstacle_types)

            min_len = 2
            max_h = max(min_len, int(self.height * 0.25))
            max_w = max(min_len, int(self.width * 0.25))
            h = self.rng.randint(min_len, max_h)
            w = self.rng.randint(min_len, max_w)

            thickness = 1
            if min(h, w) > 4:
                thickness = self.rng.randint(1, min(h, w) // 3)

            if o_type == "rect":
                cells = self._get_rect_cells(h, w)
            else:
                cells = self._get_u_shape_cells(h, w, thickness)

            angle = self.rng.choice([0, 90, 180, 270])
            cells = self._rotate_cells(cells, angle)

            abs_cells = self._place(cells, margin=1)
            if abs_cells is None:
                continue

            intersection = sum(1 for r, c in abs_cells if grid[r, c] != PASSABLE)
            overlap_ratio = intersection / len(abs_cells)
            allow_overlap = self.rng.random() < self.overlap_prob
            if intersection and not (allow_overlap and overlap_ratio < 0.3):
                continue

            for r, c in abs_cells:
                grid[r, c] = BLOCKED
            count += 1
            metadata.append({"id": count, "type": o_type, "size": (h, w), "angle": angle})

        for g in range(num_gates):
            code = HIDDEN_MIN + g
            placed = self._place_gate(grid, code)
            if placed:
                metadata.append({"id": count + g + 1, "type": "gate", "code": code, "cells": placed})

        return grid, metadata

    def _place(self, cells, margin=1) -> Optional[List[GridPos]]:
        rs = [r for r, c in cells]
        cs = [c for r, c in cells]
        r_min_bound = margin - min(rs)
        r_max_bound = self.height - 1 - margin - max(rs)
        c_min_bound = margin - min(cs)
        c_max_bound = self.width - 1 - margin - max(cs)
        if r_min_bound > r_max_bound or c_min_bound > c_max_bound:
            return None
        offset_r = self.rng.randint(r_min_bound, r_max_bound)
        offset_c = self.rng.randint(c_min_bound, c_max_bound)
        return [(r + offset_r, c + offset_c) for r, c in cells]

    def _place_gate(self, grid, code, max_attempts=50) -> List[GridPos]:
        # A gate is a short straight segment laid over free cells only.
        for _ in range(max_attempts):
            length = self.rng.randint(1, max(1, min(self.height, self.width) // 4))
            cells = [(0, c) for c in range(length)]
            cells = self._rotate_cells(cells, self.rng.choice([0, 90]))
            abs_cells = self._place(cells, margin=0)
            if abs_cells is None:
                continue
            if any(grid[r, c] != PASSABLE for r, c in abs_cells):
                continue
            for r, c in abs_cells:
                grid[r, c] = code
            return abs_cells
        return []

    def _get_rect_cells(self, h, w):
        return [(r, c) for r in range(h) for c in range(w)]

    def _get_u_shape_cells(self, h, w, t):
        """
        U-shape open at the top: bottom wall plus left and right walls.
        """
        cells = set(self._get_rect_cells(h, w))
        inner_r_min, inner_r_max = 0, h - t
        inner_c_min, inner_c_max = t, w - t
        if inner_r_max > inner_r_min and inner_c_max > inner_c_min:
            for r in range(inner_r_min, inner_r_max):
                for c in range(inner_c_min, inner_c_max):
                    cells.discard((r, c))
        return sorted(cells)

    def _rotate_cells(self, cells, angle):
        """
        Quarter-turn coordinate transform; 90 maps (r, c) -> (c, -r).
        """
        if angle == 0:
            return cells

        new_cells = []
        for r, c in cells:
            if angle == 90:
                new_cells.append((c, -r))
            elif angle == 180:
                new_cells.append((-r, -c))
            elif angle == 270:
                new_cells.append((-c, r))
        return new_cells


def visualize_map(grid):
    rows, cols = grid.shape
    print(f"Map Preview ({rows}x{cols}):")
    print("-" * (cols + 2))
    for r in range(rows):
        line = "|"
        for c in range(cols):
            v = int(grid[r][c])
            if v == PASSABLE:
                line += "."
            elif v == BLOCKED:
                line += "#"
            else:
                line += chr(ord("a") + (v - HIDDEN_MIN) % 26)
        line += "|"
        print(line)
    print("-" * (cols + 2))


if __name__ == "__main__":
    gen = MapGenerator(height=20, width=30, seed=42)
    grid, meta = gen.generate_map(num_gates=3, return_metadata=True)
    visualize_map(grid)
    print(f"Placed: {len(meta)} features")
    for m in gen.generate_missions(grid, count=3, radius=2):
        print(m)
