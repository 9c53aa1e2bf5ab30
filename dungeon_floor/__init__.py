"""Dungeon floor generation and pathfinding."""

from dungeon_floor.tiles import (
    TileType,
    Tile,
    Occupant,
    WALKABLE_TILES,
    ASCII_TO_TILE,
    TILE_TO_ASCII,
    is_walkable_tile,
)
from dungeon_floor.grid import Coordinate, Grid, Room
from dungeon_floor.effects import DEFAULT_EFFECT, EffectCatalog, EffectProvider, TileEffect
from dungeon_floor.dungeon_gen import (
    GeneratorConfig,
    generate_floor,
    carve_corridor,
    scatter_tiles,
)
from dungeon_floor.pathfinding import Path, PathNode, Pathfinder
