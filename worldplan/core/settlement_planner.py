"""
Initial faction outpost placement.

Process:
1. Enumerate every cell in bounds and shuffle them with the seeded RNG
2. Flatten (faction, index) requests and shuffle them with the same RNG
3. Greedy farthest-point selection with a minimum cell spacing
4. Hash-jittered world positions inside each chosen cell
"""

import re
from typing import List, NamedTuple, Sequence, Union

import numpy as np
import structlog

from pydantic import BaseModel, Field, ConfigDict

from .actions import PlaceSpawnAction, SpawnDescriptor
from .sim_grid import Bounds, Cell, cell_bounds, cell_center, iter_cells, make_region_id
from .sim_rng import SimRng, hash32

logger = structlog.get_logger()

SETTLEMENT_KIND = "outpost"

_UNSAFE_ID_CHARS = re.compile(r"[^a-zA-Z0-9_]+")


class FactionSeedSpec(BaseModel):
    """How many outposts to place for one faction."""

    faction_id: str = Field(description="Faction identifier")
    count: int = Field(default=1, description="Number of outposts to place")


class SettlementPlanConfig(BaseModel):
    """Settlement planning options."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    seed: Union[int, str] = Field(description="Deterministic seed for this run")
    shard_id: str = Field(default="prime_shard", description="Shard to plan")
    bounds: Bounds = Field(description="Inclusive cell rectangle to plan over")

    # World geometry
    cell_size: float = Field(default=64, description="Cell size in world units")
    base_y: float = Field(default=0, description="Y coordinate for placed outposts")
    border_margin: float = Field(
        default=16, description="Minimum distance from cell edges"
    )

    # Spacing, in cell units
    min_cell_distance: float = Field(
        default=3, description="Minimum cell distance between outposts"
    )

    # Spawn typing
    spawn_type: str = Field(default="outpost", description="spawn type")
    proto_id: str = Field(default="outpost", description="spawn prototype id")
    archetype: str = Field(default="outpost", description="spawn archetype")


class _Placement(NamedTuple):
    cell: Cell
    faction_id: str
    index: int


def plan_initial_outposts(
    factions: Sequence[FactionSeedSpec], config: SettlementPlanConfig
) -> List[PlaceSpawnAction]:
    """
    Place outposts for every faction, spread as far apart as the grid allows.

    Fewer outposts than requested is a normal outcome when the spacing rule
    runs out of room; compare len(result) with the requested total to detect it.

    Args:
        factions: Placement requests
        config: Settlement planning options

    Returns:
        One place_spawn action per outpost, in placement order
    """
    rng = SimRng(config.seed)

    candidates = rng.shuffle(list(iter_cells(config.bounds)))

    queue = []
    for faction in factions:
        for index in range(max(0, int(faction.count))):
            queue.append((faction.faction_id, index))
    placement_order = rng.shuffle(queue)

    chosen: List[_Placement] = []
    if candidates:
        coords = np.array(candidates, dtype=np.float64)
        min_dist = np.full(len(candidates), np.inf)

        for faction_id, index in placement_order:
            best = _pick_best_candidate(min_dist, bool(chosen), config.min_cell_distance)
            if best is None:
                break

            cell = candidates[best]
            chosen.append(_Placement(cell, faction_id, index))

            dx = coords[:, 0] - cell.cx
            dz = coords[:, 1] - cell.cz
            dist = np.sqrt(dx * dx + dz * dz)
            np.minimum(min_dist, dist, out=min_dist)

    logger.info(
        "Planned outposts",
        shard_id=config.shard_id,
        requested=len(queue),
        placed=len(chosen),
        candidates=len(candidates),
    )

    return [_to_place_spawn_action(p, config) for p in chosen]


def _pick_best_candidate(min_dist: np.ndarray, has_chosen: bool, min_cell_distance: float):
    """
    Index of the candidate farthest from every chosen cell.

    Ties go to the earliest candidate. Once something is chosen, candidates
    closer than min_cell_distance are rejected.
    """
    if has_chosen:
        allowed = min_dist >= min_cell_distance
        if not allowed.any():
            return None
        scores = np.where(allowed, min_dist, -np.inf)
    else:
        scores = min_dist

    return int(np.argmax(scores))


def _to_place_spawn_action(placement: _Placement, config: SettlementPlanConfig) -> PlaceSpawnAction:
    cell = placement.cell
    center = cell_center(cell, config.cell_size)
    bounds = cell_bounds(cell, config.cell_size)

    max_jitter = max(0, int(np.floor(config.cell_size / 2 - config.border_margin)))

    key = f"{config.shard_id}:{placement.faction_id}:{placement.index}:{cell.cx},{cell.cz}"
    jx = _hash_jitter(f"sx:{key}", max_jitter)
    jz = _hash_jitter(f"sz:{key}", max_jitter)

    margin = config.border_margin
    x = _clamp(center.x + jx, bounds.min_x + margin, bounds.max_x - margin)
    z = _clamp(center.z + jz, bounds.min_z + margin, bounds.max_z - margin)

    spawn_id = f"outpost_{sanitize_id(placement.faction_id)}_{placement.index}_{cell.cx}_{cell.cz}"

    return PlaceSpawnAction(
        spawn=SpawnDescriptor(
            shard_id=config.shard_id,
            spawn_id=spawn_id,
            type=config.spawn_type,
            archetype=config.archetype,
            proto_id=config.proto_id,
            variant_id=None,
            x=x,
            y=config.base_y,
            z=z,
            region_id=make_region_id(config.shard_id, cell),
            meta={"factionId": placement.faction_id, "settlementKind": SETTLEMENT_KIND},
        )
    )


def _hash_jitter(key: str, max_jitter: int) -> int:
    """
    Jitter offset derived from a string hash, independent of RNG order.

    The remainder keeps the sign of the hash so positions match outposts
    placed by earlier tools with the same seeds.
    """
    if max_jitter == 0:
        return 0
    h = hash32(key)
    span = max_jitter * 2 + 1
    remainder = abs(h) % span
    if h < 0:
        remainder = -remainder
    return remainder - max_jitter


def _clamp(n: float, lo: float, hi: float) -> float:
    if n < lo:
        return lo
    if n > hi:
        return hi
    return n


def sanitize_id(value: str) -> str:
    """Collapse characters outside [a-zA-Z0-9_] to '_' and trim underscores."""
    return _UNSAFE_ID_CHARS.sub("_", value).strip("_")
