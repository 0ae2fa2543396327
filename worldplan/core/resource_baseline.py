"""
Baseline gathering-node planner.

For every region and every configured resource rule, work out how many
nodes the region should have and place the shortfall on a jittered ring
around the region centre. The planner only adds nodes; it never moves or
removes existing ones.

Density for one rule in one region:
    target = per_safe_region
           + per_town * settlements
           + per_danger_tier * (danger_tier - base_tier)
"""

import math
import re
from typing import Dict, List, Optional, Sequence, Union

import structlog

from pydantic import BaseModel, Field, ConfigDict

from .actions import PlaceSpawnAction, SpawnDescriptor
from .sim_grid import Point
from .sim_rng import SimRng

logger = structlog.get_logger()

# Angular offset per kind so different kinds fan out into different sectors
KIND_PHASE_OFFSETS: Dict[str, float] = {
    "herb": 0.0,
    "ore": math.pi / 3,
    "stone": (2 * math.pi) / 3,
    "wood": math.pi,
    "fish": (4 * math.pi) / 3,
    "grain": (5 * math.pi) / 3,
    "mana": math.pi / 2,
}
DEFAULT_PHASE_OFFSET = math.pi / 2

BASE_RADIUS_FACTOR = 0.25
JITTER_RADIUS_FACTOR = 0.15

_KIND_SLUG = re.compile(r"[^a-z0-9]+", re.IGNORECASE)


class RegionSpawnSnapshot(BaseModel):
    """An existing spawn point inside a region."""

    model_config = ConfigDict(frozen=True)

    spawn_id: str = Field(description="Spawn id")
    type: str = Field(description="Coarse spawn category")
    archetype: Optional[str] = Field(default=None, description="Specific node type")
    proto_id: Optional[str] = Field(default=None, description="Prototype id")
    variant_id: Optional[str] = Field(default=None, description="Variant id")
    x: float = Field(description="World X coordinate")
    z: float = Field(description="World Z coordinate")


class SettlementSnapshot(BaseModel):
    """A settlement (town, outpost, hub...) inside a region."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Settlement id")
    kind: str = Field(description="Free-form settlement kind")
    x: float = Field(description="World X coordinate")
    z: float = Field(description="World Z coordinate")


class RegionSnapshot(BaseModel):
    """Read-only view of one region at a single point in time."""

    model_config = ConfigDict(frozen=True)

    region_id: str = Field(description="Region id, e.g. 'prime_shard:0,0'")
    shard_id: str = Field(description="Shard id")
    cell_x: int = Field(description="Cell X coordinate")
    cell_z: int = Field(description="Cell Z coordinate")

    base_tier: int = Field(default=1, description="Static tier from region design")
    danger_tier: int = Field(
        default=1, description="Effective tier including dynamic danger"
    )
    danger_score: Optional[float] = Field(default=None, description="Debug score")

    spawns: List[RegionSpawnSnapshot] = Field(
        default_factory=list, description="Existing spawn points in the region"
    )
    settlements: List[SettlementSnapshot] = Field(
        default_factory=list, description="Settlements in the region"
    )


class ResourcePrototypeConfig(BaseModel):
    """Density rule for one kind of gatherable resource."""

    kind: str = Field(description="Logical kind: herb, ore, stone, wood, fish, grain, mana")
    type: str = Field(default="resource", description="spawn type")
    archetype: str = Field(description="spawn archetype, e.g. 'herb_node'")
    proto_id: str = Field(description="spawn prototype id")
    variant_id: str = Field(description="spawn variant id, used for matching")

    per_safe_region: int = Field(default=1, description="Baseline nodes per region")
    per_town: int = Field(default=0, description="Extra nodes per settlement")
    per_danger_tier: int = Field(
        default=0, description="Extra nodes per tier above base tier"
    )


class ResourceBaselineConfig(BaseModel):
    """Resource planning options."""

    cell_size: float = Field(default=64, description="World cell size")
    seed: Union[int, str] = Field(description="Deterministic seed for this run")
    resources: List[ResourcePrototypeConfig] = Field(
        default_factory=list, description="Per-resource rules"
    )


class RegionResourceSummary(BaseModel):
    kind: str
    target: int
    existing: int
    placed: int


class RegionBaselineSummary(BaseModel):
    region_id: str
    total_placed: int
    per_resource: List[RegionResourceSummary]


class RegionBaselinePlan(BaseModel):
    region: RegionSnapshot
    actions: List[PlaceSpawnAction]
    summary: RegionBaselineSummary


class WorldBaselinePlan(BaseModel):
    """Plans for every region, flattened."""

    actions: List[PlaceSpawnAction]
    regions: List[RegionBaselineSummary]

    @property
    def total_placed(self) -> int:
        return sum(r.total_placed for r in self.regions)


def compute_target_nodes_for_region(
    region: RegionSnapshot, res: ResourcePrototypeConfig
) -> int:
    """
    Number of nodes of this resource the region should have.

    Every term is clamped at zero, so a misconfigured negative knob
    contributes nothing rather than cancelling the other terms.
    """
    safe_base = max(0, res.per_safe_region)
    town_bonus = max(0, res.per_town) * len(region.settlements)
    tier_delta = max(0, region.danger_tier - region.base_tier)
    danger_bonus = max(0, res.per_danger_tier) * tier_delta

    return safe_base + town_bonus + danger_bonus


def count_existing_nodes(region: RegionSnapshot, res: ResourcePrototypeConfig) -> int:
    """
    Count existing nodes matching this resource.

    Identity is (type, variant_id), falling back to proto_id when a spawn
    has no variant. Archetype is not compared, so two rules sharing type
    and variant id count each other's nodes.
    """
    return sum(
        1
        for s in region.spawns
        if s.type == res.type
        and (s.variant_id if s.variant_id is not None else s.proto_id) == res.variant_id
    )


def kind_phase_offset(kind: str) -> float:
    return KIND_PHASE_OFFSETS.get(kind, DEFAULT_PHASE_OFFSET)


def make_resource_spawn_id(
    region: RegionSnapshot, res: ResourcePrototypeConfig, index: int
) -> str:
    """Deterministic spawn id, unique per region, kind and slot."""
    kind_slug = _KIND_SLUG.sub("_", res.kind).lower()
    return f"res_{kind_slug}_{region.cell_x}_{region.cell_z}_{index}"


def get_region_center(region: RegionSnapshot, cell_size: float) -> Point:
    """First settlement if the region has one, else the cell centre."""
    if region.settlements:
        first = region.settlements[0]
        return Point(first.x, first.z)

    return Point((region.cell_x + 0.5) * cell_size, (region.cell_z + 0.5) * cell_size)


def pick_resource_position(
    center: Point,
    cell_size: float,
    slot_index: int,
    total_slots_for_kind: int,
    res: ResourcePrototypeConfig,
    rng: SimRng,
) -> Point:
    """
    Position of one slot on a noisy ring around the region centre.

    Consumes one value from rng for the radius jitter.
    """
    angle = kind_phase_offset(res.kind) + (2 * math.pi * slot_index) / max(
        1, total_slots_for_kind
    )
    radius = cell_size * BASE_RADIUS_FACTOR + rng.next() * cell_size * JITTER_RADIUS_FACTOR

    return Point(center.x + math.cos(angle) * radius, center.z + math.sin(angle) * radius)


def plan_resource_baseline_for_region(
    region: RegionSnapshot, config: ResourceBaselineConfig
) -> RegionBaselinePlan:
    """
    Plan baseline resource nodes for a single region.

    Slots continue after the existing nodes (existing + i), so ids and
    angles stay stable as nodes accumulate over successive runs.

    Args:
        region: Region snapshot
        config: Resource planning options

    Returns:
        Actions for the shortfall and a per-kind summary
    """
    rng = SimRng(f"{config.seed}:{region.region_id}")
    center = get_region_center(region, config.cell_size)

    summaries: List[RegionResourceSummary] = []
    actions: List[PlaceSpawnAction] = []

    for res in config.resources:
        target = compute_target_nodes_for_region(region, res)
        existing = count_existing_nodes(region, res)
        to_place = max(0, target - existing)

        total_slots_for_kind = existing + to_place

        for i in range(to_place):
            slot_index = existing + i
            pos = pick_resource_position(
                center, config.cell_size, slot_index, total_slots_for_kind, res, rng
            )

            actions.append(
                PlaceSpawnAction(
                    spawn=SpawnDescriptor(
                        shard_id=region.shard_id,
                        spawn_id=make_resource_spawn_id(region, res, slot_index),
                        type=res.type,
                        archetype=res.archetype,
                        proto_id=res.proto_id,
                        variant_id=res.variant_id,
                        x=pos.x,
                        y=0,
                        z=pos.z,
                        region_id=region.region_id,
                    )
                )
            )

        summaries.append(
            RegionResourceSummary(
                kind=res.kind, target=target, existing=existing, placed=to_place
            )
        )

    total_placed = sum(s.placed for s in summaries)

    if total_placed:
        logger.debug(
            "Planned region resources",
            region_id=region.region_id,
            placed=total_placed,
        )

    return RegionBaselinePlan(
        region=region,
        actions=actions,
        summary=RegionBaselineSummary(
            region_id=region.region_id,
            total_placed=total_placed,
            per_resource=summaries,
        ),
    )


def plan_resource_baselines_for_world(
    regions: Sequence[RegionSnapshot], config: ResourceBaselineConfig
) -> WorldBaselinePlan:
    """
    Plan every region and flatten the actions.

    Regions are independent (each gets its own RNG keyed by region id), so
    callers may also plan them in parallel and concatenate.
    """
    logger.info("Planning resource baselines", regions=len(regions), rules=len(config.resources))

    region_summaries: List[RegionBaselineSummary] = []
    all_actions: List[PlaceSpawnAction] = []

    for region in regions:
        plan = plan_resource_baseline_for_region(region, config)
        region_summaries.append(plan.summary)
        all_actions.extend(plan.actions)

    world_plan = WorldBaselinePlan(actions=all_actions, regions=region_summaries)
    logger.info("Resource baselines planned", total_placed=world_plan.total_placed)
    return world_plan


def build_default_resource_config(seed: Union[int, str] = "RESOURCE_BASELINE_TEST") -> ResourceBaselineConfig:
    """Small default config with the canonical gathering resources."""
    resources = [
        ResourcePrototypeConfig(
            kind="herb", archetype="herb_node",
            proto_id="herb_peacebloom", variant_id="herb_peacebloom",
            per_safe_region=1, per_town=1, per_danger_tier=1,
        ),
        ResourcePrototypeConfig(
            kind="ore", archetype="ore_node",
            proto_id="ore_iron_hematite", variant_id="ore_iron_hematite",
            per_safe_region=1, per_town=1, per_danger_tier=1,
        ),
        ResourcePrototypeConfig(
            kind="stone", archetype="stone_node",
            proto_id="stone_granite", variant_id="stone_granite",
            per_safe_region=1, per_town=1, per_danger_tier=0,
        ),
        ResourcePrototypeConfig(
            kind="wood", archetype="wood_node",
            proto_id="wood_oak", variant_id="wood_oak",
            per_safe_region=1, per_town=1, per_danger_tier=0,
        ),
        ResourcePrototypeConfig(
            kind="fish", archetype="fish_node",
            proto_id="fish_river_trout", variant_id="fish_river_trout",
            per_safe_region=1, per_town=0, per_danger_tier=1,
        ),
        ResourcePrototypeConfig(
            kind="grain", archetype="grain_node",
            proto_id="grain_wheat", variant_id="grain_wheat",
            per_safe_region=1, per_town=1, per_danger_tier=0,
        ),
        ResourcePrototypeConfig(
            kind="mana", archetype="mana_node",
            proto_id="mana_spark_arcane", variant_id="mana_spark_arcane",
            per_safe_region=1, per_town=0, per_danger_tier=2,
        ),
    ]

    return ResourceBaselineConfig(cell_size=64, seed=seed, resources=resources)
