"""
Tile types and per-cell state for a dungeon floor.
"""

import weakref
from enum import IntEnum
from typing import Any, Dict, Optional, Protocol, Set


class TileType(IntEnum):
    """
    Tile types for a dungeon floor.

    EMPTY is the pre-generation default. A finished floor only contains it
    in regions nothing can reach.
    """

    FLOOR = 0
    WALL = 1
    EFFECT = 2  # floor with a trap / spring attached (walkable)
    STAIRS = 3
    EMPTY = 4


# Tiles an agent may stand on
WALKABLE_TILES: Set[TileType] = {TileType.FLOOR, TileType.STAIRS, TileType.EFFECT}


def is_walkable_tile(tile_type: TileType) -> bool:
    """Return True if the tile type can be walked on."""
    return tile_type in WALKABLE_TILES


# ASCII conventions used by Grid.from_ascii / Grid.to_ascii and the tools
ASCII_TO_TILE: Dict[str, TileType] = {
    ".": TileType.FLOOR,
    "#": TileType.WALL,
    "~": TileType.EFFECT,
    ">": TileType.STAIRS,
    " ": TileType.EMPTY,
}

TILE_TO_ASCII: Dict[TileType, str] = {tile: char for char, tile in ASCII_TO_TILE.items()}


class Occupant(Protocol):
    """
    Anything that can stand on a tile. Only movement blocking matters here.

    Tiles hold occupants by weak reference, so an occupant must support
    weakrefs (plain classes and regular dataclasses do; tuples, namedtuples
    and slotted dataclasses without __weakref__ do not) and must be kept
    alive by its owner.
    """

    blocks_movement: bool


class Tile:
    """
    A single grid cell.

    The tile never owns its occupant: it keeps a weak reference, so an entity
    that is dropped elsewhere simply disappears from the tile. Clearing the
    occupant when an entity moves or dies is the movement code's job.

    Assigning an occupant that can't be weakly referenced raises TypeError.
    Assigning a temporary (`tile.occupant = Monster()`) leaves the tile
    empty as soon as the temporary is collected.
    """

    __slots__ = ("type", "_occupant_ref", "effect", "item")

    def __init__(self, tile_type: TileType = TileType.EMPTY) -> None:
        self.type: TileType = tile_type
        self._occupant_ref: Optional["weakref.ReferenceType[Any]"] = None
        self.effect: Optional[Any] = None
        self.item: Optional[Any] = None

    @property
    def occupant(self) -> Optional[Occupant]:
        """The entity standing here, or None."""
        if self._occupant_ref is None:
            return None
        return self._occupant_ref()

    @occupant.setter
    def occupant(self, entity: Optional[Occupant]) -> None:
        self._occupant_ref = weakref.ref(entity) if entity is not None else None

    @property
    def walkable(self) -> bool:
        """Derived from the tile type only; occupants are ignored."""
        return self.type in WALKABLE_TILES

    @property
    def is_passable(self) -> bool:
        """Walkable and not blocked by whoever stands here."""
        if not self.walkable:
            return False
        occupant = self.occupant
        return occupant is None or not occupant.blocks_movement

    @property
    def is_stairs(self) -> bool:
        return self.type == TileType.STAIRS

    def clear(self) -> None:
        """Drop the occupant and the floor effect."""
        self._occupant_ref = None
        self.effect = None

    def __repr__(self) -> str:
        return f"Tile({self.type.name}, occupant={self.occupant!r}, effect={self.effect!r})"
