"""
The tile grid for a single dungeon floor, plus its room registry.

Coordinates are (x, y), zero-based, with x growing right and y growing up.
Tiles are indexed grid[x, y]. Array exports (type_map, walkable_mask) follow
numpy's row-major convention and are indexed [y, x].
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .tiles import ASCII_TO_TILE, TILE_TO_ASCII, WALKABLE_TILES, Tile, TileType

Coordinate = Tuple[int, int]

# Neighbor bits for neighbor_mask, in (dx, dy, bit) form.
# Layout is UL U UR L R DL D DR, low bit first.
_MASK_BITS: Tuple[Tuple[int, int, int], ...] = (
    (-1, 1, 1),
    (0, 1, 2),
    (1, 1, 4),
    (-1, 0, 8),
    (1, 0, 16),
    (-1, -1, 32),
    (0, -1, 64),
    (1, -1, 128),
)


@dataclass(frozen=True)
class Room:
    """An axis-aligned rectangle of carved floor, in tiles."""

    x: int
    y: int
    width: int
    height: int

    @property
    def x_max(self) -> int:
        """One past the rightmost column."""
        return self.x + self.width

    @property
    def y_max(self) -> int:
        """One past the topmost row."""
        return self.y + self.height

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def center_tile(self) -> Coordinate:
        """The center rounded to a tile (halves round to even), kept inside the room."""
        cx, cy = self.center
        return (min(int(round(cx)), self.x_max - 1), min(int(round(cy)), self.y_max - 1))

    def overlaps(self, other: "Room") -> bool:
        """True if the interiors intersect. Rooms that only touch do not overlap."""
        return (
            self.x < other.x_max
            and other.x < self.x_max
            and self.y < other.y_max
            and other.y < self.y_max
        )

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.x_max and self.y <= y < self.y_max

    def tiles(self) -> Iterator[Coordinate]:
        """Yield every (x, y) inside the room."""
        for x in range(self.x, self.x_max):
            for y in range(self.y, self.y_max):
                yield (x, y)


class Grid:
    """
    Fixed-size 2D container of Tiles with an ordered room registry.

    The generator populates the grid once. Afterwards only the occupant,
    effect and item fields of tiles are expected to change, and that is done
    by the caller's movement code.
    """

    def __init__(self, width: int, height: int, fill: TileType = TileType.EMPTY) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self.width: int = width
        self.height: int = height
        # tiles[x][y]
        self.tiles: List[List[Tile]] = [
            [Tile(fill) for _ in range(height)] for _ in range(width)
        ]
        self._rooms: List[Room] = []

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def tile(self, x: int, y: int) -> Tile:
        """
        Return the tile at (x, y).

        Raises IndexError for out-of-range coordinates. Callers are expected
        to check in_bounds first; hitting this is a bug in the caller.
        """
        if not self.in_bounds(x, y):
            raise IndexError(
                f"Coordinates out of bounds: ({x}, {y}) for grid {self.width}x{self.height}"
            )
        return self.tiles[x][y]

    def __getitem__(self, position: Coordinate) -> Tile:
        x, y = position
        return self.tile(x, y)

    def set_type(self, x: int, y: int, tile_type: TileType) -> None:
        self.tile(x, y).type = tile_type

    def add_room(self, room: Room) -> None:
        """
        Register a room.

        No overlap validation happens here; the generator only adds rooms it
        has already checked against the registry.
        """
        self._rooms.append(room)

    def get_rooms(self) -> List[Room]:
        """Return a copy of the room registry, in placement order."""
        return list(self._rooms)

    def get_room_at(self, x: int, y: int) -> Optional[Room]:
        """Return the first room containing (x, y), or None for corridors and walls."""
        for room in self._rooms:
            if room.contains(x, y):
                return room
        return None

    def center(self) -> Coordinate:
        return (self.width // 2, self.height // 2)

    def get_spawn_point(self) -> Coordinate:
        """Center of the first room, or the grid center when there are no rooms."""
        if self._rooms:
            return self._rooms[0].center_tile
        return self.center()

    def get_random_floor_position(self, rng: Optional[np.random.Generator] = None) -> Coordinate:
        """
        Pick an unoccupied FLOOR tile uniformly at random.

        Candidates are collected before sampling so this always terminates.
        Falls back to the grid center when no candidate exists.
        """
        candidates: List[Coordinate] = [
            (x, y)
            for x in range(self.width)
            for y in range(self.height)
            if self.tiles[x][y].type == TileType.FLOOR and self.tiles[x][y].occupant is None
        ]
        if not candidates:
            return self.center()

        if rng is None:
            rng = np.random.default_rng()
        return candidates[int(rng.integers(len(candidates)))]

    def neighbor_mask(self, x: int, y: int) -> int:
        """
        8-bit mask of walkable neighbors, used to pick wall sprites.

        Bits: UL=1, U=2, UR=4, L=8, R=16, DL=32, D=64, DR=128.
        Out-of-bounds neighbors count as not walkable.
        """
        mask = 0
        for dx, dy, bit in _MASK_BITS:
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny) and self.tiles[nx][ny].walkable:
                mask |= bit
        return mask

    def type_map(self) -> np.ndarray:
        """Tile codes as an int array of shape (height, width), indexed [y, x]."""
        return np.array(
            [[int(self.tiles[x][y].type) for x in range(self.width)] for y in range(self.height)],
            dtype=int,
        )

    def walkable_mask(self) -> np.ndarray:
        """Boolean array of shape (height, width), True where the tile type is walkable."""
        return np.isin(self.type_map(), [int(t) for t in WALKABLE_TILES])

    def tile_counts(self) -> Dict[TileType, int]:
        """Count tiles of each type (every type is present, possibly with 0)."""
        codes, counts = np.unique(self.type_map(), return_counts=True)
        found = {TileType(int(code)): int(count) for code, count in zip(codes, counts)}
        return {tile_type: found.get(tile_type, 0) for tile_type in TileType}

    @classmethod
    def from_ascii(cls, lines: Sequence[str]) -> "Grid":
        """
        Build a grid from ASCII art (see tiles.ASCII_TO_TILE).

        The first line is the top row, i.e. the highest y. Unknown characters
        become EMPTY. No rooms are registered.
        """
        if not lines:
            raise ValueError("lines must not be empty")
        width = len(lines[0])
        for i, line in enumerate(lines):
            if len(line) != width:
                raise ValueError(
                    f"All rows must have equal width; row 0 has {width}, row {i} has {len(line)}"
                )

        height = len(lines)
        grid = cls(width, height)
        for row, line in enumerate(lines):
            y = height - 1 - row
            for x, char in enumerate(line):
                grid.tiles[x][y].type = ASCII_TO_TILE.get(char, TileType.EMPTY)
        return grid

    def to_ascii(self) -> List[str]:
        """Inverse of from_ascii: one string per row, top row first."""
        return [
            "".join(TILE_TO_ASCII[self.tiles[x][y].type] for x in range(self.width))
            for y in reversed(range(self.height))
        ]

    def __repr__(self) -> str:
        return f"Grid(width={self.width}, height={self.height}, rooms={len(self._rooms)})"
