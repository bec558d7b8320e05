from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from .config import DEFAULT_CONFIG, EngineConfig
from .errors import LocationNotFoundError
from .normalize import new_id
from .turns import AUTHOR_NARRATOR
from .types import ActionSummary, Character, LocationNode, SessionEntry, World


def new_world(
    name: str = "",
    setting: str = "",
    atmosphere: str = "",
    genre: str = "",
    *,
    config: EngineConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
) -> World:
    """Create a world holding a single, undiscovered entry location."""
    now = now or datetime.utcnow()
    entry = LocationNode(id=new_id(), name=config.entry_location_name)
    return World(
        id=new_id(),
        name=name.strip() or config.default_world_name,
        setting=setting.strip(),
        atmosphere=atmosphere.strip(),
        genre=genre.strip(),
        entry_location_id=entry.id,
        graph={entry.id: entry},
        owner_character_ids=[],
        created_at=now,
        updated_at=now,
    )


def new_character(name: str, description: str = "", world_id: Optional[str] = None) -> Character:
    return Character(
        id=new_id(),
        name=name.strip(),
        description=description.strip(),
        current_world_id=world_id,
    )


def resolve_current_location(world: World, location_id: Optional[str]) -> LocationNode:
    if location_id and location_id in world.graph:
        return world.graph[location_id]
    if world.entry_location_id and world.entry_location_id in world.graph:
        return world.graph[world.entry_location_id]
    for node in world.graph.values():
        return node
    raise LocationNotFoundError(f"world {world.id} has no locations")


def find_last_action_reminder(
    entries: Iterable[SessionEntry],
    location_id: str,
) -> Optional[ActionSummary]:
    for entry in reversed(list(entries)):
        summary = entry.action_summary
        if entry.author == AUTHOR_NARRATOR and summary is not None and summary.location_id == location_id:
            return summary
    return None
