from __future__ import annotations

import copy
import logging
from datetime import datetime
from typing import Optional

from .config import DEFAULT_CONFIG, EngineConfig
from .connections import sync_exits
from .items import merge_items
from .locations import ensure_location
from .normalize import first_non_empty, new_id
from .types import (
    ActionSummary,
    ApplyTurnResult,
    Character,
    GameTurn,
    LocationNode,
    LocationPayload,
    SessionEntry,
    World,
)

logger = logging.getLogger(__name__)

AUTHOR_PLAYER = "player"
AUTHOR_NARRATOR = "gm"


def upsert_location_from_payload(
    world: World,
    payload: LocationPayload,
    *,
    discovered: bool,
    fallback_map_description: Optional[str] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> LocationNode:
    """Resolve ``payload`` to a node and merge its contents into it."""
    node = ensure_location(
        world,
        payload.name,
        first_non_empty(payload.map_description, fallback_map_description),
    )

    previous_map_description = node.map_description
    previous_description = node.description

    node.name = payload.name
    node.description = payload.description
    node.map_description = first_non_empty(
        payload.map_description,
        fallback_map_description,
        previous_map_description,
        previous_description,
    )
    node.discovered = node.discovered or discovered
    node.items = merge_items(node.items, payload.items, None)

    sync_exits(world, node, payload.exits, config)
    return node


def apply_game_turn(
    world: World,
    character: Character,
    turn: GameTurn,
    player_message: str = "",
    is_initial: bool = False,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
) -> ApplyTurnResult:
    """Fold one narrator turn into copies of ``world`` and ``character``.

    The inputs are never mutated. Returns the updated snapshots and the
    zero to two session entries produced by this turn.
    """
    now = now or datetime.utcnow()
    world = copy.deepcopy(world)
    character = copy.deepcopy(character)

    previous_location_id = character.current_location_id or world.entry_location_id or None

    player_node = upsert_location_from_payload(
        world,
        turn.player_location,
        discovered=True,
        fallback_map_description=turn.map_description,
        config=config,
    )
    for discovery in turn.discoveries:
        upsert_location_from_payload(world, discovery, discovered=False, config=config)

    character.current_world_id = world.id
    character.current_location_id = player_node.id
    character.inventory = merge_items(character.inventory, turn.inventory, character.id)

    if character.id not in world.owner_character_ids:
        world.owner_character_ids.append(character.id)
    world.updated_at = now

    entries: list[SessionEntry] = []
    message = (player_message or "").strip()
    if not is_initial and message:
        entries.append(
            SessionEntry(
                id=new_id(),
                world_id=world.id,
                location_id=previous_location_id,
                author=AUTHOR_PLAYER,
                message=message,
                created_at=now,
            )
        )

    narrator_entry = SessionEntry(
        id=new_id(),
        world_id=world.id,
        location_id=player_node.id,
        author=AUTHOR_NARRATOR,
        message=turn.narration,
        created_at=now,
    )
    stayed = previous_location_id == player_node.id
    if config.record_action_summaries and stayed and not is_initial and message:
        narrator_entry.action_summary = ActionSummary(
            location_id=player_node.id,
            player_message=message,
            narration=turn.narration,
            created_at=now,
        )
    entries.append(narrator_entry)

    character.history = (character.history + entries)[-config.history_limit:]

    logger.debug(
        "Applied turn for character %s in world %s: location=%s discoveries=%d nodes=%d",
        character.id,
        world.id,
        player_node.id,
        len(turn.discoveries),
        len(world.graph),
    )
    return ApplyTurnResult(world=world, character=character, new_entries=entries)
