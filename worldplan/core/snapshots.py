"""
Build region snapshots from flat spawn-point rows.

This is the shape a caller gets out of a spawn store (or a SimWorld):
one row per spawn point. The planners want one snapshot per region with
spawns and settlements already grouped.
"""

from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

import structlog

from pydantic import BaseModel, Field

from .resource_baseline import RegionSnapshot, RegionSpawnSnapshot, SettlementSnapshot
from .sim_grid import (
    Bounds,
    Cell,
    cell_for_position,
    contains_cell,
    iter_cells,
    make_region_id,
    parse_region_id,
)
from .tiers import tier_for_cell

logger = structlog.get_logger()

# spawn types that anchor resource baselines
SETTLEMENT_TYPES: FrozenSet[str] = frozenset(
    {"town", "outpost", "hub", "village", "city", "settlement", "camp"}
)


class SpawnRow(BaseModel):
    """One spawn point as read from storage."""

    shard_id: str = Field(description="Shard id")
    spawn_id: str = Field(description="Spawn id")
    type: str = Field(description="Coarse spawn category")
    archetype: Optional[str] = Field(default=None, description="Specific node type")
    proto_id: Optional[str] = Field(default=None, description="Prototype id")
    variant_id: Optional[str] = Field(default=None, description="Variant id")
    x: Optional[float] = Field(default=None, description="World X, if placed")
    z: Optional[float] = Field(default=None, description="World Z, if placed")
    region_id: Optional[str] = Field(default=None, description="Stored region id")


def _resolve_cell(row, shard_id: str, bounds: Bounds, cell_size: float) -> Optional[Cell]:
    region_id = getattr(row, "region_id", None)
    if region_id:
        parsed = parse_region_id(region_id)
        if parsed is not None:
            row_shard, cell = parsed
            if row_shard == shard_id and contains_cell(bounds, cell):
                return cell

    cell = cell_for_position(row.x, row.z, cell_size)
    if not contains_cell(bounds, cell):
        return None
    return cell


def build_region_snapshots(
    shard_id: str,
    bounds: Bounds,
    cell_size: float,
    spawns: Iterable,
    *,
    settlement_types: FrozenSet[str] = SETTLEMENT_TYPES,
    base_tier: int = 1,
    tier_center: Optional[Tuple[float, float]] = None,
    min_tier: int = 1,
    max_tier: int = 5,
) -> List[RegionSnapshot]:
    """
    Group spawn rows into one snapshot per cell in bounds.

    A stored region id that names a cell in bounds decides the region;
    otherwise the row's position does. Rows from other shards, rows without
    a position, and rows outside bounds are skipped.

    Args:
        shard_id: Shard to build snapshots for
        bounds: Cells to include
        cell_size: World cell size
        spawns: SpawnRow, SpawnDescriptor or any object with the same fields
        settlement_types: Spawn types that also count as settlements
        base_tier: Base tier for every region when tier_center is not given
        tier_center: World (x, z) to derive base tiers by distance from
        min_tier: Lowest tier for distance tiering
        max_tier: Highest tier for distance tiering

    Returns:
        Region snapshots in row-major cell order
    """
    regions: Dict[Cell, Tuple[List[RegionSpawnSnapshot], List[SettlementSnapshot]]] = {
        cell: ([], []) for cell in iter_cells(bounds)
    }

    skipped = 0
    for row in spawns:
        if row.shard_id != shard_id or row.x is None or row.z is None:
            skipped += 1
            continue

        cell = _resolve_cell(row, shard_id, bounds, cell_size)
        if cell is None:
            skipped += 1
            continue

        region_spawns, region_settlements = regions[cell]
        region_spawns.append(
            RegionSpawnSnapshot(
                spawn_id=row.spawn_id,
                type=row.type,
                archetype=row.archetype,
                proto_id=row.proto_id,
                variant_id=row.variant_id,
                x=row.x,
                z=row.z,
            )
        )

        if row.type in settlement_types:
            region_settlements.append(
                SettlementSnapshot(id=row.spawn_id, kind=row.type, x=row.x, z=row.z)
            )

    snapshots = []
    for cell, (region_spawns, region_settlements) in regions.items():
        if tier_center is not None:
            tier = tier_for_cell(
                cell, bounds, cell_size, tier_center[0], tier_center[1], min_tier, max_tier
            )
        else:
            tier = base_tier

        snapshots.append(
            RegionSnapshot(
                region_id=make_region_id(shard_id, cell),
                shard_id=shard_id,
                cell_x=cell.cx,
                cell_z=cell.cz,
                base_tier=tier,
                danger_tier=tier,
                danger_score=0,
                spawns=region_spawns,
                settlements=region_settlements,
            )
        )

    logger.info(
        "Built region snapshots",
        shard_id=shard_id,
        regions=len(snapshots),
        skipped_spawns=skipped,
    )
    return snapshots
