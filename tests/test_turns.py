from __future__ import annotations

import copy
from datetime import datetime

import pytest

from world_map_engine.core.config import EngineConfig
from world_map_engine.core.errors import LocationNotFoundError
from world_map_engine.core.locations import ensure_location, find_by_name
from world_map_engine.core.normalize import parse_game_turn
from world_map_engine.core.turns import apply_game_turn, upsert_location_from_payload
from world_map_engine.core.types import Character, LocationNode, LocationPayload, World
from world_map_engine.core.worlds import new_world, resolve_current_location


NOW = datetime(2024, 5, 1, 12, 0, 0)


def _turn(**overrides):
    raw = {
        "narration": "You enter the old tavern.",
        "map_description": "Low-ceilinged tavern",
        "player_location": {
            "name": "Old Tavern",
            "description": "Smoke hangs under the beams.",
            "items": [{"name": "Mug", "description": "Chipped"}],
            "exits": [{"name": "Square", "label": "go out"}, {"name": "Cellar", "bidirectional": False}],
        },
        "discoveries": [
            {"name": "Square", "description": "A wide cobbled square.", "map_description": "Town square"},
        ],
        "inventory": {"items": [{"name": "Knife", "description": "Rusty"}]},
    }
    raw.update(overrides)
    return parse_game_turn(raw)


def _graph_shape(world: World) -> set[tuple[str, tuple[str, ...]]]:
    shape = set()
    for node in world.graph.values():
        targets = tuple(sorted(world.graph[c.target_id].name for c in node.connections))
        shape.add((node.name, targets))
    return shape


def test_apply_game_turn_does_not_mutate_inputs():
    world = new_world("Realm", now=NOW)
    character = Character(id="char-1", name="Ada")
    world_before = copy.deepcopy(world)
    character_before = copy.deepcopy(character)

    result = apply_game_turn(world, character, _turn(), "look around", now=NOW)

    assert world == world_before
    assert character == character_before
    assert result.world is not world
    assert result.world.id == world.id
    assert result.character.id == character.id


def test_apply_game_turn_builds_graph_and_moves_character():
    world = new_world("Realm", now=NOW)
    character = Character(id="char-1", name="Ada")

    result = apply_game_turn(world, character, _turn(), "enter the tavern", now=NOW)
    world_out = result.world

    tavern = find_by_name(world_out, "old tavern")
    square = find_by_name(world_out, "square")
    cellar = find_by_name(world_out, "cellar")
    assert tavern is not None and square is not None and cellar is not None

    assert tavern.discovered is True
    assert square.discovered is False
    assert tavern.map_description == "Low-ceilinged tavern"
    assert square.map_description == "Town square"
    assert [item.name for item in tavern.items] == ["Mug"]
    assert tavern.items[0].owner_character_id is None

    assert tavern.connection_to(square.id).label == "go out"
    assert square.connection_to(tavern.id) is not None
    assert tavern.connection_to(cellar.id).bidirectional is False
    assert cellar.connection_to(tavern.id) is None

    assert result.character.current_world_id == world_out.id
    assert result.character.current_location_id == tavern.id
    assert [item.name for item in result.character.inventory] == ["Knife"]
    assert result.character.inventory[0].owner_character_id == "char-1"
    assert world_out.owner_character_ids == ["char-1"]
    assert world_out.updated_at == NOW
    assert world_out.entry_location_id in world_out.graph


def test_log_entries_for_regular_and_initial_turns():
    world = new_world("Realm", now=NOW)
    character = Character(id="char-1")

    regular = apply_game_turn(world, character, _turn(), "  enter  ", now=NOW)
    assert [e.author for e in regular.new_entries] == ["player", "gm"]
    player_entry, gm_entry = regular.new_entries
    assert player_entry.message == "enter"
    assert player_entry.location_id == world.entry_location_id
    assert gm_entry.location_id == regular.character.current_location_id
    assert gm_entry.message == "You enter the old tavern."
    assert regular.character.history == regular.new_entries

    initial = apply_game_turn(world, character, _turn(), "enter", is_initial=True, now=NOW)
    assert [e.author for e in initial.new_entries] == ["gm"]

    blank = apply_game_turn(world, character, _turn(), "   ", now=NOW)
    assert [e.author for e in blank.new_entries] == ["gm"]


def test_reapplying_same_turn_is_idempotent_for_graph():
    world = new_world("Realm", now=NOW)
    character = Character(id="char-1")

    first = apply_game_turn(world, character, _turn(), "enter", now=NOW)
    second = apply_game_turn(first.world, first.character, _turn(), "enter", now=NOW)

    assert set(first.world.graph) == set(second.world.graph)
    assert _graph_shape(first.world) == _graph_shape(second.world)
    for node in second.world.graph.values():
        targets = [c.target_id for c in node.connections]
        assert len(targets) == len(set(targets))


def test_character_inventory_is_replaced_and_ids_kept():
    world = new_world("Realm", now=NOW)
    character = Character(id="char-1")

    first = apply_game_turn(world, character, _turn(), "", now=NOW)
    knife_id = first.character.inventory[0].id

    second = apply_game_turn(
        first.world,
        first.character,
        _turn(inventory={"items": [{"name": "knife", "description": "Sharpened"}, {"name": "Coin"}]}),
        "sharpen knife",
        now=NOW,
    )
    assert second.character.inventory[0].id == knife_id
    assert [i.name for i in second.character.inventory] == ["knife", "Coin"]

    third = apply_game_turn(second.world, second.character, _turn(inventory={"items": [{"name": "Coin"}]}), "", now=NOW)
    assert [i.name for i in third.character.inventory] == ["Coin"]


def test_action_summary_recorded_only_when_staying_put():
    world = new_world("Realm", now=NOW)
    character = Character(id="char-1")

    moved = apply_game_turn(world, character, _turn(), "enter", now=NOW)
    assert moved.new_entries[-1].action_summary is None

    stayed = apply_game_turn(
        moved.world,
        moved.character,
        _turn(narration="You order an ale."),
        "order ale",
        now=NOW,
    )
    summary = stayed.new_entries[-1].action_summary
    assert summary is not None
    assert summary.location_id == stayed.character.current_location_id
    assert summary.player_message == "order ale"
    assert summary.narration == "You order an ale."

    disabled = apply_game_turn(
        moved.world,
        moved.character,
        _turn(),
        "order ale",
        config=EngineConfig(record_action_summaries=False),
        now=NOW,
    )
    assert disabled.new_entries[-1].action_summary is None


def test_history_is_capped():
    world = new_world("Realm", now=NOW)
    character = Character(id="char-1")
    config = EngineConfig(history_limit=3)

    result = apply_game_turn(world, character, _turn(), "a", config=config, now=NOW)
    result = apply_game_turn(result.world, result.character, _turn(), "b", config=config, now=NOW)

    assert len(result.character.history) == 3
    assert result.character.history[-1].author == "gm"


def test_discovered_flag_never_reverts():
    world = new_world("Realm", now=NOW)
    character = Character(id="char-1")

    first = apply_game_turn(world, character, _turn(), "", now=NOW)
    square_as_player = _turn(
        player_location={"name": "Square", "description": "A wide cobbled square."},
        discoveries=[],
    )
    second = apply_game_turn(first.world, first.character, square_as_player, "", now=NOW)
    back_in_tavern = _turn(
        player_location={"name": "Old Tavern", "description": "Smoke."},
        discoveries=[{"name": "Square", "description": "A wide cobbled square."}],
    )
    third = apply_game_turn(second.world, second.character, back_in_tavern, "", now=NOW)

    assert find_by_name(third.world, "Square").discovered is True


def test_map_description_fallback_chain():
    world = World(id="w")
    node = LocationNode(id="n", name="Hall", description="Old long description", map_description=None)
    world.graph[node.id] = node

    payload = LocationPayload(name="Hall", description="New long description")
    resolved = upsert_location_from_payload(world, payload, discovered=False)
    assert resolved.map_description == "Old long description"
    assert resolved.description == "New long description"

    resolved = upsert_location_from_payload(world, payload, discovered=False, fallback_map_description=" Vaulted hall ")
    assert resolved.map_description == "Vaulted hall"

    resolved = upsert_location_from_payload(world, payload, discovered=False)
    assert resolved.map_description == "Vaulted hall"

    payload = LocationPayload(name="Hall", description="x", map_description="Great hall")
    assert upsert_location_from_payload(world, payload, discovered=False).map_description == "Great hall"


def test_renamed_location_merges_by_map_description():
    world = new_world("Realm", now=NOW)
    character = Character(id="char-1")

    first = apply_game_turn(world, character, _turn(), "", now=NOW)
    tavern_id = first.character.current_location_id

    renamed = _turn(
        player_location={
            "name": "The Smoky Tavern",
            "description": "Smoke hangs under the beams.",
            "map_description": "low-ceilinged TAVERN",
        },
        discoveries=[],
    )
    second = apply_game_turn(first.world, first.character, renamed, "", now=NOW)

    assert second.character.current_location_id == tavern_id
    assert len(second.world.graph) == len(first.world.graph)
    assert second.world.graph[tavern_id].name == "The Smoky Tavern"


def test_resolve_current_location_falls_back_to_entry_then_first_node():
    world = World(id="w")
    hall = LocationNode(id="hall", name="Hall")
    yard = LocationNode(id="yard", name="Yard")
    world.graph = {hall.id: hall, yard.id: yard}
    world.entry_location_id = "yard"

    assert resolve_current_location(world, "hall") is hall
    assert resolve_current_location(world, "gone") is yard
    assert resolve_current_location(world, None) is yard

    world.entry_location_id = "also-gone"
    assert resolve_current_location(world, "gone") is hall

    with pytest.raises(LocationNotFoundError):
        resolve_current_location(World(id="empty"), None)


def test_ensure_location_repairs_dangling_entry_location():
    world = World(id="w", entry_location_id="deleted")
    hall = LocationNode(id="hall", name="Hall")
    world.graph[hall.id] = hall

    assert ensure_location(world, "hall") is hall
    assert world.entry_location_id == "deleted"

    cellar = ensure_location(world, "Cellar")
    assert world.entry_location_id == cellar.id
    assert len(world.graph) == 2

    ensure_location(world, "Attic")
    assert world.entry_location_id == cellar.id
