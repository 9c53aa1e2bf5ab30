"""
Dungeon Floor Generation
========================

Rooms are dropped at random and joined up in the order they were placed.

1. Start with a grid that is solid wall
2. For each room attempt:
   a. Pick a random width and height between the min and max room size
   b. Pick a random top-left corner that keeps a 1-tile wall border
   c. If the room would overlap a room we already have, skip it (no retry)
   d. Otherwise register the room and carve its interior to floor
3. Connect each room to the one placed before it with an L-shaped corridor
   (horizontal leg first, then vertical)
4. Turn the center of the last room into the stairs
5. Scatter effect tiles onto random floor tiles

Every random draw comes from one numpy Generator, so the same seed and
config always give the same floor. Bad size settings never raise, they just
produce fewer rooms (possibly none).
"""

import sys
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from .effects import EffectProvider
from .grid import Coordinate, Grid, Room
from .tiles import TileType

# Upper bound on random probes when scattering special tiles
MAX_SCATTER_TRIES: int = 1000

# Minimum number of effect tiles per floor
MIN_EFFECT_TILES: int = 3


def _log(message: str) -> None:
    print(f"[dungeon_gen] {message}", file=sys.stderr)


@dataclass
class GeneratorConfig:
    """Parameters for one floor. Defaults match the original game's floors."""

    width: int = 64
    height: int = 40
    room_attempts: int = 30
    min_room_size: int = 4
    max_room_size: int = 10
    seed: Optional[int] = None
    debug: bool = False

    def room_size_range(self) -> Tuple[int, int]:
        """Inclusive (min, max) room side; sizes below 1 are raised to 1."""
        return max(1, self.min_room_size), self.max_room_size

    def has_valid_room_sizes(self) -> bool:
        low, high = self.room_size_range()
        return low <= high


def _sample_room(grid: Grid, config: GeneratorConfig, rng: np.random.Generator) -> Optional[Room]:
    """
    Draw a candidate room, or None if the drawn size can't fit on the grid.
    """
    low, high = config.room_size_range()
    width = int(rng.integers(low, high, endpoint=True))
    height = int(rng.integers(low, high, endpoint=True))

    # Top-left corner range that leaves one wall tile on every side
    max_x = grid.width - width - 1
    max_y = grid.height - height - 1
    if max_x < 1 or max_y < 1:
        return None

    x = int(rng.integers(1, max_x, endpoint=True))
    y = int(rng.integers(1, max_y, endpoint=True))
    return Room(x=x, y=y, width=width, height=height)


def _carve_room(grid: Grid, room: Room) -> None:
    for x, y in room.tiles():
        grid.tiles[x][y].type = TileType.FLOOR


def carve_corridor(grid: Grid, start: Coordinate, end: Coordinate) -> None:
    """
    Carve an L-shaped corridor of FLOOR from start to end.

    Walks along x until it matches end, then along y. Both endpoints are
    carved. Tiles outside the grid are skipped.
    """
    x, y = start
    end_x, end_y = end

    while x != end_x:
        if grid.in_bounds(x, y):
            grid.tiles[x][y].type = TileType.FLOOR
        x += 1 if end_x > x else -1

    while y != end_y:
        if grid.in_bounds(x, y):
            grid.tiles[x][y].type = TileType.FLOOR
        y += 1 if end_y > y else -1

    if grid.in_bounds(end_x, end_y):
        grid.tiles[end_x][end_y].type = TileType.FLOOR


def scatter_tiles(
    grid: Grid,
    tile_type: TileType,
    count: int,
    rng: np.random.Generator,
    effect_provider: Optional[EffectProvider] = None,
) -> int:
    """
    Convert up to `count` random FLOOR tiles to `tile_type`.

    Probes interior positions at random and gives up after MAX_SCATTER_TRIES,
    so a floor with little or no open space just gets fewer tiles.
    EFFECT tiles get an effect from the provider, if one is given.

    Returns:
        Number of tiles actually converted.
    """
    if grid.width < 3 or grid.height < 3:
        return 0

    placed = 0
    tries = 0
    while placed < count and tries < MAX_SCATTER_TRIES:
        tries += 1
        x = int(rng.integers(1, grid.width - 1))
        y = int(rng.integers(1, grid.height - 1))

        tile = grid.tiles[x][y]
        if tile.type != TileType.FLOOR:
            continue

        tile.type = tile_type
        if tile_type == TileType.EFFECT and effect_provider is not None:
            effect = effect_provider.random_effect(rng)
            if effect is not None:
                tile.effect = effect
        placed += 1

    return placed


def generate_floor(
    config: Optional[GeneratorConfig] = None,
    rng: Optional[np.random.Generator] = None,
    effect_provider: Optional[EffectProvider] = None,
) -> Grid:
    """
    Generate one dungeon floor.

    Parameters:
        config: Floor size and room parameters (defaults to GeneratorConfig())
        rng: Random source. If omitted, one is seeded from config.seed
             (an unseeded generator when seed is None).
        effect_provider: Supplies the effect attached to each EFFECT tile.
                         Without one, EFFECT tiles carry no effect.

    Returns:
        A fully populated Grid. Its room registry is in placement order; the
        first room is the spawn room and the last one holds the stairs.

    Raises:
        ValueError: If config.width or config.height is not positive. Every
            other degenerate config (no room fits, inverted sizes) still
            yields a grid.
    """
    if config is None:
        config = GeneratorConfig()
    if rng is None:
        rng = np.random.default_rng(config.seed)

    grid = Grid(config.width, config.height, fill=TileType.WALL)

    rooms: List[Room] = []
    if config.has_valid_room_sizes():
        for _ in range(config.room_attempts):
            room = _sample_room(grid, config, rng)
            if room is None:
                continue
            if any(existing.overlaps(room) for existing in rooms):
                continue

            rooms.append(room)
            grid.add_room(room)
            _carve_room(grid, room)
    elif config.debug:
        _log(
            f"room sizes {config.min_room_size}..{config.max_room_size} are invalid, "
            "placing no rooms"
        )

    for previous, current in zip(rooms, rooms[1:]):
        carve_corridor(grid, previous.center_tile, current.center_tile)

    if rooms:
        stairs_x, stairs_y = rooms[-1].center_tile
        grid.tiles[stairs_x][stairs_y].type = TileType.STAIRS

    effects_placed = scatter_tiles(
        grid,
        TileType.EFFECT,
        max(MIN_EFFECT_TILES, len(rooms)),
        rng,
        effect_provider,
    )

    if config.debug:
        _log(
            f"Generated {len(rooms)} rooms from {config.room_attempts} attempts, "
            f"{effects_placed} effect tiles on a {grid.width}x{grid.height} floor"
        )

    return grid
