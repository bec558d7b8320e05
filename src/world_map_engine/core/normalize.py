from __future__ import annotations

import json
import uuid
from typing import Any, Optional

from .errors import TurnPayloadError
from .types import ExitDescriptor, GameTurn, ItemDescriptor, LocationPayload


def normalize_text(value: str | None) -> str:
    return (value or "").strip().lower()


def new_id() -> str:
    return str(uuid.uuid4())


def first_non_empty(*candidates: Optional[str]) -> Optional[str]:
    for candidate in candidates:
        if not candidate:
            continue
        trimmed = candidate.strip()
        if trimmed:
            return trimmed
    return None


def parse_json_dict(text: str | None) -> dict[str, Any]:
    if not text:
        return {}
    try:
        data = json.loads(text)
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def parse_json_list(text: str | None) -> list[Any]:
    if not text:
        return []
    try:
        data = json.loads(text)
    except ValueError:
        return []
    return data if isinstance(data, list) else []


def dump_json(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


def _pick(raw: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw:
            return raw[key]
    return None


def _text(value: Any, path: str, issues: list[str]) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        issues.append(f"{path}: expected a string")
        return ""
    return value.strip()


def _flag(value: Any, default: bool, path: str, issues: list[str]) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        issues.append(f"{path}: expected a boolean")
        return default
    return value


def _list(value: Any, path: str, issues: list[str]) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        issues.append(f"{path}: expected a list")
        return []
    return value


def _required_text(value: Any, path: str, issues: list[str]) -> str:
    start = len(issues)
    text = _text(value, path, issues)
    if not text and len(issues) == start:
        issues.append(f"{path}: required")
    return text


def _parse_item(raw: Any, path: str, issues: list[str]) -> ItemDescriptor | None:
    if not isinstance(raw, dict):
        issues.append(f"{path}: expected an object")
        return None
    start = len(issues)
    name = _required_text(raw.get("name"), f"{path}.name", issues)
    description = _text(raw.get("description"), f"{path}.description", issues)
    portable = _flag(raw.get("portable"), True, f"{path}.portable", issues)
    if len(issues) != start:
        return None
    return ItemDescriptor(name=name, description=description, portable=portable)


def _parse_exit(raw: Any, path: str, issues: list[str]) -> ExitDescriptor | None:
    if not isinstance(raw, dict):
        issues.append(f"{path}: expected an object")
        return None
    start = len(issues)
    name = _required_text(raw.get("name"), f"{path}.name", issues)
    label = raw.get("label")
    label_text = _text(label, f"{path}.label", issues) if label is not None else None
    bidirectional = _flag(raw.get("bidirectional"), True, f"{path}.bidirectional", issues)
    if len(issues) != start:
        return None
    return ExitDescriptor(name=name, label=label_text, bidirectional=bidirectional)


def _parse_location(raw: Any, path: str, issues: list[str]) -> LocationPayload | None:
    if not isinstance(raw, dict):
        issues.append(f"{path}: expected an object")
        return None
    start = len(issues)
    name = _required_text(raw.get("name"), f"{path}.name", issues)
    description = _required_text(raw.get("description"), f"{path}.description", issues)
    map_description = _text(_pick(raw, "map_description", "mapDescription"), f"{path}.map_description", issues)

    items: list[ItemDescriptor] = []
    for idx, entry in enumerate(_list(raw.get("items"), f"{path}.items", issues)):
        item = _parse_item(entry, f"{path}.items[{idx}]", issues)
        if item is not None:
            items.append(item)
    exits: list[ExitDescriptor] = []
    for idx, entry in enumerate(_list(raw.get("exits"), f"{path}.exits", issues)):
        exit_descriptor = _parse_exit(entry, f"{path}.exits[{idx}]", issues)
        if exit_descriptor is not None:
            exits.append(exit_descriptor)
    if len(issues) != start:
        return None
    return LocationPayload(
        name=name,
        description=description,
        map_description=map_description,
        items=items,
        exits=exits,
    )


def parse_game_turn(raw: Any) -> GameTurn:
    """Coerce a raw narrator response into a :class:`GameTurn`.

    Accepts both ``snake_case`` and ``camelCase`` keys. Values of the wrong
    type are reported, never converted. All problems are collected and
    raised together as a :class:`TurnPayloadError`.
    """
    if isinstance(raw, GameTurn):
        return raw
    if not isinstance(raw, dict):
        raise TurnPayloadError(["turn: expected an object"])

    issues: list[str] = []
    narration = _required_text(raw.get("narration"), "narration", issues)
    map_description = _text(_pick(raw, "map_description", "mapDescription"), "map_description", issues)

    player_raw = _pick(raw, "player_location", "playerLocation")
    if player_raw is None:
        issues.append("player_location: required")
        player_location = None
    else:
        player_location = _parse_location(player_raw, "player_location", issues)

    discoveries = []
    for idx, entry in enumerate(_list(raw.get("discoveries"), "discoveries", issues)):
        location = _parse_location(entry, f"discoveries[{idx}]", issues)
        if location is not None:
            discoveries.append(location)

    suggestions = []
    for idx, entry in enumerate(_list(raw.get("suggestions"), "suggestions", issues)):
        suggestion = _text(entry, f"suggestions[{idx}]", issues)
        if suggestion:
            suggestions.append(suggestion)

    inventory_raw = raw.get("inventory")
    if isinstance(inventory_raw, dict):
        inventory_raw = inventory_raw.get("items")
    inventory = []
    for idx, entry in enumerate(_list(inventory_raw, "inventory.items", issues)):
        item = _parse_item(entry, f"inventory.items[{idx}]", issues)
        if item is not None:
            inventory.append(item)

    if issues or player_location is None:
        raise TurnPayloadError(issues)

    return GameTurn(
        narration=narration,
        player_location=player_location,
        map_description=map_description,
        suggestions=suggestions,
        discoveries=discoveries,
        inventory=inventory,
    )
