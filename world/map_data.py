"""
Map data loading.

Reads levels authored in the Tiled editor (JSON export). Only two layers
matter to the game:

- the ground tile layer, which decides which tiles block movement
- the object layer, whose objects are spawn points and grid events

Each object carries Tiled "custom properties"; `object-type` decides what
the object is (`pc-spawn`, `hostile-spawn`, `grid-event`).
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple, Union

from engine.error_handler import MapDataError, get_logger
from settings import GROUND_LAYER_NAME, UNIT_LAYER_NAME

log = get_logger("map_data")

# Tiled stores flip/rotation flags in the top bits of each gid.
_GID_MASK = 0x1FFFFFFF


class RecordKind(str, Enum):
    PC_SPAWN = "pc-spawn"
    HOSTILE_SPAWN = "hostile-spawn"
    GRID_EVENT = "grid-event"


@dataclass(frozen=True)
class MapRecord:
    """A spawn point or grid event placed on the map, in tile coordinates."""
    x: int
    y: int
    kind: RecordKind
    name: str = ""
    properties: Mapping[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.properties.get(key, default)


@dataclass
class MapData:
    """Parsed level: dimensions, blocked tiles and object records."""
    width: int
    height: int
    blocked: List[List[bool]]
    records: List[MapRecord] = field(default_factory=list)

    def collides(self, x: int, y: int) -> bool:
        """Terrain query for Grid construction."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            return True
        return self.blocked[y][x]

    def records_of(self, kind: RecordKind) -> List[MapRecord]:
        return [r for r in self.records if r.kind is kind]


# ----------------------------------------------------------------------
# Objects
# ----------------------------------------------------------------------

def parse_properties(properties: Union[Iterable[Mapping[str, Any]], Mapping[str, Any], None]) -> Dict[str, Any]:
    """
    Flatten Tiled custom properties into a dict.

    Accepts the Tiled list form ([{"name", "type", "value"}, ...]) or an
    already flat mapping.
    """
    if properties is None:
        return {}
    if isinstance(properties, Mapping):
        return dict(properties)
    return {p["name"]: p.get("value") for p in properties}


def object_tile_position(obj: Mapping[str, Any], tile_width: int, tile_height: int) -> Tuple[int, int]:
    """Tile containing the centre of a Tiled object."""
    width = float(obj.get("width", 0))
    height = float(obj.get("height", width))
    tx = math.floor((float(obj["x"]) - width / 2) / tile_width)
    ty = math.floor((float(obj["y"]) - height / 2) / tile_height)
    return tx, ty


def parse_object_layer(objects: Iterable[Mapping[str, Any]], tile_width: int, tile_height: int) -> List[MapRecord]:
    records: List[MapRecord] = []
    for obj in objects:
        props = parse_properties(obj.get("properties"))
        raw_kind = props.pop("object-type", None)
        try:
            kind = RecordKind(raw_kind)
        except ValueError:
            log.debug("Ignoring map object %r with object-type %r", obj.get("name"), raw_kind)
            continue
        try:
            x, y = object_tile_position(obj, tile_width, tile_height)
        except (KeyError, TypeError, ValueError) as e:
            raise MapDataError(f"Map object {obj.get('name')!r} has no usable position") from e
        records.append(MapRecord(x=x, y=y, kind=kind, name=str(obj.get("name", "")), properties=props))
    return records


# ----------------------------------------------------------------------
# Tiles
# ----------------------------------------------------------------------

def _colliding_gids(tilesets: Iterable[Mapping[str, Any]]) -> Set[int]:
    gids: Set[int] = set()
    for tileset in tilesets:
        first_gid = int(tileset.get("firstgid", 1))
        for tile in tileset.get("tiles", []):
            props = parse_properties(tile.get("properties"))
            if props.get("collides"):
                gids.add(first_gid + int(tile["id"]))
    return gids


def _find_layer(layers: List[Mapping[str, Any]], layer_type: str, name: str) -> Optional[Mapping[str, Any]]:
    typed = [layer for layer in layers if layer.get("type") == layer_type]
    for layer in typed:
        if layer.get("name") == name:
            return layer
    # Ground falls back to the first tile layer; objects must be named.
    if layer_type == "tilelayer" and typed:
        return typed[0]
    return None


def parse_tiled_map(data: Mapping[str, Any]) -> MapData:
    """Build MapData from a decoded Tiled JSON map."""
    try:
        width = int(data["width"])
        height = int(data["height"])
        tile_width = int(data["tilewidth"])
        tile_height = int(data["tileheight"])
    except (KeyError, TypeError, ValueError) as e:
        raise MapDataError("Map is missing its dimensions") from e

    layers = list(data.get("layers", []))

    ground = _find_layer(layers, "tilelayer", GROUND_LAYER_NAME)
    if ground is None:
        raise MapDataError("Map has no ground tile layer")
    tiles = ground.get("data")
    if not isinstance(tiles, list):
        raise MapDataError("Ground layer data must be an uncompressed list of gids")
    if len(tiles) != width * height:
        raise MapDataError(f"Ground layer has {len(tiles)} tiles, expected {width * height}")

    colliding = _colliding_gids(data.get("tilesets", []))
    blocked: List[List[bool]] = []
    for y in range(height):
        row = []
        for x in range(width):
            gid = int(tiles[x + y * width]) & _GID_MASK
            # Blank tiles count as walls.
            row.append(gid == 0 or gid in colliding)
        blocked.append(row)

    object_layer = _find_layer(layers, "objectgroup", UNIT_LAYER_NAME)
    if object_layer is None:
        raise MapDataError(f"Map has no '{UNIT_LAYER_NAME}' object layer")
    records = parse_object_layer(object_layer.get("objects", []), tile_width, tile_height)

    if not any(r.kind is RecordKind.PC_SPAWN for r in records):
        raise MapDataError("Map has no pc-spawn", user_message="This level has nobody to command.")

    log.debug("Parsed %dx%d map with %d records", width, height, len(records))
    return MapData(width=width, height=height, blocked=blocked, records=records)


def load_map(path: Union[str, Path]) -> MapData:
    """Read and parse a Tiled JSON map file."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise MapDataError(f"Cannot read map {path}: {e}") from e
    return parse_tiled_map(data)
