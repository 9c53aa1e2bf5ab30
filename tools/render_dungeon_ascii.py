#!/usr/bin/env python3
"""
Render a generated dungeon floor as ASCII art for debugging.

Usage:
    uv run tools/render_dungeon_ascii.py [--width N] [--height N] [--seed S] [--path]

Legend:
    .  floor     #  wall     ~  effect     >  stairs     @  spawn     *  path
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

# Add parent directory to path so we can import dungeon_floor
sys.path.insert(0, str(Path(__file__).parent.parent))

from dungeon_floor.dungeon_gen import GeneratorConfig, generate_floor
from dungeon_floor.grid import Grid
from dungeon_floor.pathfinding import Pathfinder
from dungeon_floor.tiles import TileType

PATH_CHAR = "*"
SPAWN_CHAR = "@"


def render_dungeon_ascii(
    grid: Grid,
    path: Optional[Sequence[Tuple[int, int]]] = None,
    spawn: Optional[Tuple[int, int]] = None,
) -> str:
    """Convert a grid to an ASCII string, top row (highest y) first."""
    rows = [list(line) for line in grid.to_ascii()]

    def mark(position: Sequence[int], char: str) -> None:
        x, y = int(position[0]), int(position[1])
        if grid.in_bounds(x, y):
            # Row 0 of the text is the top of the map
            rows[grid.height - 1 - y][x] = char

    for position in path or []:
        mark(position, PATH_CHAR)
    if spawn is not None:
        mark(spawn, SPAWN_CHAR)

    return "\n".join("".join(row) for row in rows)


def find_stairs(grid: Grid) -> Optional[Tuple[int, int]]:
    for x in range(grid.width):
        for y in range(grid.height):
            if grid.tiles[x][y].type == TileType.STAIRS:
                return (x, y)
    return None


def main(argv: Optional[Sequence[str]] = None) -> None:
    defaults = GeneratorConfig()
    parser = argparse.ArgumentParser(description="Render a dungeon floor as ASCII art")
    parser.add_argument("--width", type=int, default=defaults.width, help="Floor width in tiles")
    parser.add_argument("--height", type=int, default=defaults.height, help="Floor height in tiles")
    parser.add_argument(
        "--room-attempts", type=int, default=defaults.room_attempts, help="Room placement attempts"
    )
    parser.add_argument("--min-room-size", type=int, default=defaults.min_room_size)
    parser.add_argument("--max-room-size", type=int, default=defaults.max_room_size)
    parser.add_argument("--seed", type=int, help="Random seed for reproducible generation")
    parser.add_argument(
        "--path",
        action="store_true",
        help="Overlay the A* path from the spawn point to the stairs",
    )
    parser.add_argument("--debug", action="store_true", help="Print generator/pathfinder diagnostics")
    args = parser.parse_args(argv)

    config = GeneratorConfig(
        width=args.width,
        height=args.height,
        room_attempts=args.room_attempts,
        min_room_size=args.min_room_size,
        max_room_size=args.max_room_size,
        seed=args.seed,
        debug=args.debug,
    )
    grid = generate_floor(config)
    spawn = grid.get_spawn_point()
    stairs = find_stairs(grid)

    path: List[Tuple[int, int]] = []
    if args.path and stairs is not None:
        path = Pathfinder(grid, debug=args.debug).find_path(spawn, stairs)

    print(render_dungeon_ascii(grid, path=path, spawn=spawn))

    # Print some debug info
    print(f"\n--- Debug Info ---")
    print(f"Map size: {grid.width}x{grid.height} tiles")
    print(f"Spawn point: {spawn}")
    print(f"Stairs: {stairs}")
    print(f"Rooms generated: {len(grid.get_rooms())}")
    for index, room in enumerate(grid.get_rooms()):
        print(f"  Room {index}: at ({room.x}, {room.y}), size {room.width}x{room.height}")
    counts = grid.tile_counts()
    print("Tiles: " + ", ".join(f"{tile.name.lower()}={count}" for tile, count in counts.items()))
    if args.path:
        if path:
            print(f"Path length: {len(path)} tiles")
        else:
            print("Path: none (unreachable or beyond search limits)")


if __name__ == "__main__":
    main()
