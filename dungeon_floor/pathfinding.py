"""
Pathfinding for agents moving around a dungeon floor.

A* over the tile grid, tuned for the many short "where do I step next"
queries a turn-based game makes. Each query is bounded:

- Targets more than MAX_PATH_DISTANCE tiles away (Manhattan) are refused
  outright; the caller falls back to simpler movement.
- A cheap 4-way flood fill rejects unreachable targets before the real
  search, for targets up to CONNECTIVITY_CHECK_MAX_DISTANCE away.
- Far targets (more than EIGHT_WAY_MAX_DISTANCE) are searched with the
  4 cardinal directions only; near targets also use diagonals.
- The search stops after min(MAX_ITERATIONS, distance * ITERATIONS_PER_TILE)
  expansions.

Every failure, including running out of budget, comes back as an empty path.
"""

import heapq
import sys
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Optional, Sequence, Set, Tuple

from .grid import Coordinate, Grid

# A path is a list of tile coordinates (x, y), ordered from start to goal
Path = List[Tuple[int, int]]

STRAIGHT_COST: int = 10
DIAGONAL_COST: int = 14  # ~10 * sqrt(2)

MAX_PATH_DISTANCE: int = 30
EIGHT_WAY_MAX_DISTANCE: int = 10
CONNECTIVITY_CHECK_MAX_DISTANCE: int = 20
CONNECTIVITY_MAX_VISITED: int = 100
MAX_ITERATIONS: int = 1000
ITERATIONS_PER_TILE: int = 50

# (dx, dy) offsets: Right, Left, Up, Down
CARDINAL_DIRECTIONS: Tuple[Tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))

# Cardinals, then Up-Right, Down-Right, Up-Left, Down-Left
ALL_DIRECTIONS: Tuple[Tuple[int, int], ...] = CARDINAL_DIRECTIONS + (
    (1, 1),
    (1, -1),
    (-1, 1),
    (-1, -1),
)


def manhattan_distance(a: Coordinate, b: Coordinate) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def chebyshev_distance(a: Coordinate, b: Coordinate) -> int:
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


@dataclass(eq=False)
class PathNode:
    """A search node. Only lives for the duration of one find_path call."""

    position: Coordinate
    parent: Optional["PathNode"] = None
    g_cost: int = 0  # cost from start
    h_cost: int = 0  # estimated cost to goal

    @property
    def f_cost(self) -> int:
        return self.g_cost + self.h_cost


class Pathfinder:
    """
    A* pathfinding over one Grid.

    The pathfinder keeps no state between calls, so it can be created once
    per floor and queried every turn. Tile occupancy is read live from the
    grid, which means callers must not move entities while a query runs.
    """

    def __init__(self, grid: Grid, debug: bool = False) -> None:
        self.grid: Grid = grid
        self.debug: bool = debug

    def _log(self, message: str) -> None:
        if self.debug:
            print(f"[A*] {message}", file=sys.stderr)

    def is_walkable(self, position: Coordinate, target: Coordinate) -> bool:
        """
        Can a searching agent step onto `position`?

        The target is always allowed, so an agent can path up to an occupied
        tile (to attack or talk to whoever stands there). Other tiles must be
        in bounds, of a walkable type, and free of blocking occupants.
        """
        if position == target:
            return True

        x, y = position
        if not self.grid.in_bounds(x, y):
            return False

        return self.grid.tiles[x][y].is_passable

    def is_valid_diagonal_move(
        self, from_pos: Coordinate, to_pos: Coordinate, target: Coordinate
    ) -> bool:
        """
        A diagonal step may not cut a corner: both orthogonal tiles it passes
        between must be walkable (or be the target).
        """
        dx = to_pos[0] - from_pos[0]
        dy = to_pos[1] - from_pos[1]
        if dx == 0 or dy == 0:
            return True

        horizontal = (from_pos[0] + dx, from_pos[1])
        vertical = (from_pos[0], from_pos[1] + dy)
        return self.is_walkable(horizontal, target) and self.is_walkable(vertical, target)

    def is_connected(self, start: Coordinate, end: Coordinate) -> bool:
        """
        Quick reachability check with a bounded 4-way flood fill.

        Only tile types are considered, not occupants. Adjacent pairs and
        pairs further apart than CONNECTIVITY_CHECK_MAX_DISTANCE are assumed
        connected. Returns False if the fill gives up before reaching `end`,
        so this is an approximation, not a guarantee.
        """
        distance = manhattan_distance(start, end)
        if distance == 1:
            return True
        if distance > CONNECTIVITY_CHECK_MAX_DISTANCE:
            return True

        visited: Set[Coordinate] = {start}
        queue: Deque[Coordinate] = deque([start])
        visited_count = 0

        while queue and visited_count < CONNECTIVITY_MAX_VISITED:
            current = queue.popleft()
            visited_count += 1

            if current == end:
                return True

            for dx, dy in CARDINAL_DIRECTIONS:
                neighbor = (current[0] + dx, current[1] + dy)
                if neighbor in visited:
                    continue
                if not self.grid.in_bounds(*neighbor):
                    continue
                if neighbor == end or self.grid.tiles[neighbor[0]][neighbor[1]].walkable:
                    visited.add(neighbor)
                    queue.append(neighbor)

        return False

    def _heuristic(self, position: Coordinate, end: Coordinate) -> int:
        return chebyshev_distance(position, end) * STRAIGHT_COST

    def _is_approachable(self, end: Coordinate) -> bool:
        """The goal must be a walkable tile, but may be occupied."""
        x, y = end
        return self.grid.in_bounds(x, y) and self.grid.tiles[x][y].walkable

    def find_path(self, start: Sequence[int], end: Sequence[int]) -> Path:
        """
        Find a path from start to end.

        Args:
            start: (x, y) the agent stands on
            end: (x, y) to reach

        Returns:
            List of (x, y) from start to end, both included. Empty if
            start == end, if end can't be reached, or if the search ran out
            of budget.
        """
        start_pos: Coordinate = (int(start[0]), int(start[1]))
        end_pos: Coordinate = (int(end[0]), int(end[1]))

        if start_pos == end_pos:
            self._log("start equals end, returning empty path")
            return []

        if not self._is_approachable(end_pos):
            self._log(f"end position {end_pos} is not walkable")
            return []

        distance = manhattan_distance(start_pos, end_pos)
        if distance > MAX_PATH_DISTANCE:
            self._log(f"path too long ({distance} tiles), caller should use simple movement")
            return []

        if not self.is_connected(start_pos, end_pos):
            self._log(f"no connection between {start_pos} and {end_pos}")
            return []

        directions = CARDINAL_DIRECTIONS if distance > EIGHT_WAY_MAX_DISTANCE else ALL_DIRECTIONS
        max_iterations = min(MAX_ITERATIONS, distance * ITERATIONS_PER_TILE)

        start_node = PathNode(position=start_pos, h_cost=self._heuristic(start_pos, end_pos))

        # Open set: nodes by position, plus a heap ordered by (f, h, insertion).
        # Improved nodes are pushed again; stale heap entries are skipped.
        open_nodes: Dict[Coordinate, PathNode] = {start_pos: start_node}
        open_heap: List[Tuple[int, int, int, Coordinate]] = [
            (start_node.f_cost, start_node.h_cost, 0, start_pos)
        ]
        closed: Set[Coordinate] = set()
        pushed = 1
        iterations = 0

        while open_heap and iterations < max_iterations:
            f_cost, _, _, position = heapq.heappop(open_heap)
            node = open_nodes.get(position)
            if node is None or node.f_cost != f_cost:
                continue

            iterations += 1
            del open_nodes[position]
            closed.add(position)

            if position == end_pos:
                path = self._reconstruct_path(node)
                self._log(f"path found in {iterations} iterations: {path}")
                return path

            for dx, dy in directions:
                neighbor = (position[0] + dx, position[1] + dy)
                if neighbor in closed:
                    continue
                if not self.is_walkable(neighbor, end_pos):
                    continue

                diagonal = dx != 0 and dy != 0
                if diagonal and not self.is_valid_diagonal_move(position, neighbor, end_pos):
                    continue

                new_g_cost = node.g_cost + (DIAGONAL_COST if diagonal else STRAIGHT_COST)
                neighbor_node = open_nodes.get(neighbor)
                if neighbor_node is None:
                    neighbor_node = PathNode(
                        position=neighbor,
                        parent=node,
                        g_cost=new_g_cost,
                        h_cost=self._heuristic(neighbor, end_pos),
                    )
                    open_nodes[neighbor] = neighbor_node
                elif new_g_cost < neighbor_node.g_cost:
                    neighbor_node.g_cost = new_g_cost
                    neighbor_node.parent = node
                else:
                    continue

                heapq.heappush(
                    open_heap,
                    (neighbor_node.f_cost, neighbor_node.h_cost, pushed, neighbor),
                )
                pushed += 1

        self._log(f"no path found after {iterations} iterations")
        return []

    def _reconstruct_path(self, end_node: PathNode) -> Path:
        path: Path = []
        node: Optional[PathNode] = end_node
        while node is not None:
            path.append(node.position)
            node = node.parent
        path.reverse()
        return path

    def get_next_step(self, start: Sequence[int], end: Sequence[int]) -> Optional[Coordinate]:
        """
        The tile to move to next when heading from start to end.

        Returns end itself when already adjacent (diagonals included), the
        second tile of the path otherwise, or None if there is no path.
        """
        start_pos: Coordinate = (int(start[0]), int(start[1]))
        end_pos: Coordinate = (int(end[0]), int(end[1]))

        if chebyshev_distance(start_pos, end_pos) == 1:
            return end_pos

        path = self.find_path(start_pos, end_pos)
        if len(path) > 1:
            return path[1]
        return None
