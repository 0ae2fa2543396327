"""
Planner actions and the in-memory world they apply to.

Planners never write to storage. They return declarative actions that a
caller applies, either to a real spawn store or to a SimWorld in tests and
previews.
"""

from typing import Any, Dict, Iterable, Iterator, List, Literal, NamedTuple, Optional

import structlog

from pydantic import BaseModel, Field, ConfigDict

logger = structlog.get_logger()

PLACE_SPAWN = "place_spawn"


class UnknownActionKindError(ValueError):
    """Raised when apply_actions meets an action kind it cannot handle."""

    def __init__(self, kind: Any):
        super().__init__(f"Unknown action kind: {kind!r}")
        self.kind = kind


class SpawnDescriptor(BaseModel):
    """Full description of a spawn point a planner wants to exist."""

    model_config = ConfigDict(frozen=True)

    shard_id: str = Field(description="Shard the spawn belongs to")
    spawn_id: str = Field(description="Unique, deterministic spawn id")
    type: str = Field(description="Coarse spawn category, e.g. 'resource'")
    archetype: Optional[str] = Field(default=None, description="Specific node type")
    proto_id: Optional[str] = Field(default=None, description="Prototype id")
    variant_id: Optional[str] = Field(default=None, description="Variant id")
    x: float = Field(description="World X coordinate")
    y: float = Field(default=0.0, description="World Y coordinate")
    z: float = Field(description="World Z coordinate")
    region_id: Optional[str] = Field(default=None, description="Owning region id")
    meta: Optional[Dict[str, Any]] = Field(default=None, description="Free-form metadata")


class PlaceSpawnAction(BaseModel):
    """Create or update the spawn point with the descriptor's spawn id."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["place_spawn"] = PLACE_SPAWN
    spawn: SpawnDescriptor


# Union of all action kinds; place_spawn is the only one so far.
BrainAction = PlaceSpawnAction


class ApplyResult(NamedTuple):
    inserted: int
    updated: int


class SimWorld:
    """Spawn points keyed by spawn id."""

    def __init__(self, spawns: Optional[Iterable[SpawnDescriptor]] = None) -> None:
        self._spawns: Dict[str, SpawnDescriptor] = {}
        for spawn in spawns or ():
            self.upsert(spawn)

    def upsert(self, spawn: SpawnDescriptor) -> bool:
        """
        Insert or replace a spawn point.

        Returns:
            True if the spawn id was new
        """
        is_new = spawn.spawn_id not in self._spawns
        self._spawns[spawn.spawn_id] = spawn
        return is_new

    def get(self, spawn_id: str) -> Optional[SpawnDescriptor]:
        return self._spawns.get(spawn_id)

    def spawns(self) -> List[SpawnDescriptor]:
        return list(self._spawns.values())

    def __contains__(self, spawn_id: object) -> bool:
        return spawn_id in self._spawns

    def __len__(self) -> int:
        return len(self._spawns)

    def __iter__(self) -> Iterator[SpawnDescriptor]:
        return iter(self._spawns.values())


def apply_actions(world: SimWorld, actions: Iterable[BrainAction]) -> ApplyResult:
    """
    Apply planner actions to a world.

    Placing is an upsert by spawn id, so applying the same list twice
    leaves the world unchanged.

    Raises:
        UnknownActionKindError: for any action kind other than place_spawn
    """
    inserted = 0
    updated = 0

    for action in actions:
        kind = getattr(action, "kind", None)
        if kind == PLACE_SPAWN:
            if world.upsert(action.spawn):
                inserted += 1
            else:
                updated += 1
        else:
            raise UnknownActionKindError(kind)

    logger.debug("Applied actions", inserted=inserted, updated=updated, total=len(world))
    return ApplyResult(inserted, updated)
