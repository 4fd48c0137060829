"""Uniform grid bucketing zones by the cells their footprint overlaps."""

from __future__ import annotations

import math
from collections import defaultdict
from typing import Iterable

from zonespawn.core.models import Vector3, Zone


class ZoneSpatialIndex:
    """Grid-based spatial index mapping cell keys to zone names.

    A zone is inserted into every cell its footprint square
    (``trigger_radius + despawn_distance``) touches; queries read the
    observer's cell plus the 8 neighbours.
    """

    __slots__ = ("_cell_size", "_cells", "_zones")

    def __init__(self, cell_size: float = 250.0) -> None:
        if cell_size <= 0:
            raise ValueError("cell_size must be > 0")
        self._cell_size = float(cell_size)
        self._cells: dict[tuple[int, int], set[str]] = defaultdict(set)
        self._zones: dict[str, Zone] = {}

    @property
    def cell_size(self) -> float:
        return self._cell_size

    def key(self, x: float, z: float) -> tuple[int, int]:
        return math.floor(x / self._cell_size), math.floor(z / self._cell_size)

    def cell_range(self, zone: Zone) -> tuple[range, range]:
        """Cell columns and rows covered by *zone*'s footprint."""
        r = zone.footprint_radius
        cx, cz = zone.center.x, zone.center.z
        x0, z0 = self.key(cx - r, cz - r)
        x1, z1 = self.key(cx + r, cz + r)
        return range(x0, x1 + 1), range(z0, z1 + 1)

    def build(self, zones: Iterable[Zone]) -> None:
        """Clear and repopulate every cell. Disabled zones are left out."""
        self.clear()
        for zone in zones:
            if not zone.enabled:
                continue
            self._zones[zone.name] = zone
            xs, zs = self.cell_range(zone)
            for gx in xs:
                for gz in zs:
                    self._cells[(gx, gz)].add(zone.name)

    def query(self, pos: Vector3) -> list[Zone]:
        """Zones bucketed in the 3x3 block of cells around *pos*, deduplicated."""
        cx, cz = self.key(pos.x, pos.z)
        names: set[str] = set()
        for dx in (-1, 0, 1):
            for dz in (-1, 0, 1):
                bucket = self._cells.get((cx + dx, cz + dz))
                if bucket:
                    names.update(bucket)
        zones = [self._zones[n] for n in names]
        zones.sort(key=lambda z: z.zone_id)
        return zones

    def query_cell(self, pos: Vector3) -> set[str]:
        """Return zone names bucketed in the same cell as *pos*."""
        return set(self._cells.get(self.key(pos.x, pos.z), set()))

    def cells_for(self, name: str) -> list[tuple[int, int]]:
        return sorted(k for k, bucket in self._cells.items() if name in bucket)

    @property
    def cell_count(self) -> int:
        return len(self._cells)

    def __len__(self) -> int:
        return len(self._zones)

    def clear(self) -> None:
        self._cells.clear()
        self._zones.clear()
