from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


def _dt_out(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _dt_in(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass
class Item:
    id: str
    name: str
    description: str = ""
    portable: bool = True
    owner_character_id: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "portable": self.portable,
            "owner_character_id": self.owner_character_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Item":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            description=str(data.get("description") or ""),
            portable=bool(data.get("portable", True)),
            owner_character_id=data.get("owner_character_id"),
        )


@dataclass
class Connection:
    id: str
    target_id: str
    label: Optional[str] = None
    bidirectional: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "target_id": self.target_id,
            "label": self.label,
            "bidirectional": self.bidirectional,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Connection":
        return cls(
            id=str(data["id"]),
            target_id=str(data["target_id"]),
            label=data.get("label"),
            bidirectional=bool(data.get("bidirectional", True)),
        )


@dataclass
class LocationNode:
    id: str
    name: str
    description: Optional[str] = None
    map_description: Optional[str] = None
    discovered: bool = False
    items: list[Item] = field(default_factory=list)
    connections: list[Connection] = field(default_factory=list)

    def summary_text(self) -> str:
        """Short description used in navigation results."""
        return self.map_description or self.description or ""

    def connection_to(self, target_id: str) -> Optional[Connection]:
        for connection in self.connections:
            if connection.target_id == target_id:
                return connection
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "map_description": self.map_description,
            "discovered": self.discovered,
            "items": [item.to_dict() for item in self.items],
            "connections": [conn.to_dict() for conn in self.connections],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LocationNode":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            description=data.get("description"),
            map_description=data.get("map_description"),
            discovered=bool(data.get("discovered", False)),
            items=[Item.from_dict(i) for i in data.get("items") or []],
            connections=[Connection.from_dict(c) for c in data.get("connections") or []],
        )


@dataclass
class World:
    id: str
    name: str = ""
    setting: str = ""
    atmosphere: str = ""
    genre: str = ""
    entry_location_id: Optional[str] = None
    graph: dict[str, LocationNode] = field(default_factory=dict)
    owner_character_ids: list[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def graph_to_dict(self) -> dict[str, Any]:
        return {location_id: node.to_dict() for location_id, node in self.graph.items()}

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "setting": self.setting,
            "atmosphere": self.atmosphere,
            "genre": self.genre,
            "entry_location_id": self.entry_location_id,
            "graph": self.graph_to_dict(),
            "owner_character_ids": list(self.owner_character_ids),
            "created_at": _dt_out(self.created_at),
            "updated_at": _dt_out(self.updated_at),
        }

    @staticmethod
    def graph_from_dict(data: dict[str, Any] | None) -> dict[str, LocationNode]:
        graph: dict[str, LocationNode] = {}
        for key, raw in (data or {}).items():
            if not isinstance(raw, dict):
                continue
            node = LocationNode.from_dict({"id": key, **raw})
            graph[node.id] = node
        return graph

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "World":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            setting=str(data.get("setting") or ""),
            atmosphere=str(data.get("atmosphere") or ""),
            genre=str(data.get("genre") or ""),
            entry_location_id=data.get("entry_location_id"),
            graph=cls.graph_from_dict(data.get("graph")),
            owner_character_ids=[str(x) for x in data.get("owner_character_ids") or []],
            created_at=_dt_in(data.get("created_at")),
            updated_at=_dt_in(data.get("updated_at")),
        )


@dataclass
class ActionSummary:
    location_id: str
    player_message: str
    narration: str
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "location_id": self.location_id,
            "player_message": self.player_message,
            "narration": self.narration,
            "created_at": _dt_out(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActionSummary":
        return cls(
            location_id=str(data["location_id"]),
            player_message=str(data.get("player_message") or ""),
            narration=str(data.get("narration") or ""),
            created_at=_dt_in(data.get("created_at")),
        )


@dataclass
class SessionEntry:
    id: str
    world_id: str
    location_id: Optional[str]
    author: str
    message: str
    created_at: Optional[datetime] = None
    action_summary: Optional[ActionSummary] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "world_id": self.world_id,
            "location_id": self.location_id,
            "author": self.author,
            "message": self.message,
            "created_at": _dt_out(self.created_at),
            "action_summary": self.action_summary.to_dict() if self.action_summary else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionEntry":
        summary = data.get("action_summary")
        return cls(
            id=str(data["id"]),
            world_id=str(data.get("world_id") or ""),
            location_id=data.get("location_id"),
            author=str(data.get("author") or "gm"),
            message=str(data.get("message") or ""),
            created_at=_dt_in(data.get("created_at")),
            action_summary=ActionSummary.from_dict(summary) if isinstance(summary, dict) else None,
        )


@dataclass
class Character:
    id: str
    name: str = ""
    description: str = ""
    inventory: list[Item] = field(default_factory=list)
    current_world_id: Optional[str] = None
    current_location_id: Optional[str] = None
    history: list[SessionEntry] = field(default_factory=list)
    last_session_id: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "inventory": [item.to_dict() for item in self.inventory],
            "current_world_id": self.current_world_id,
            "current_location_id": self.current_location_id,
            "history": [entry.to_dict() for entry in self.history],
            "last_session_id": self.last_session_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Character":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            description=str(data.get("description") or ""),
            inventory=[Item.from_dict(i) for i in data.get("inventory") or []],
            current_world_id=data.get("current_world_id"),
            current_location_id=data.get("current_location_id"),
            history=[SessionEntry.from_dict(e) for e in data.get("history") or []],
            last_session_id=data.get("last_session_id"),
        )


@dataclass
class ItemDescriptor:
    name: str
    description: str = ""
    portable: bool = True


@dataclass
class ExitDescriptor:
    name: str
    label: Optional[str] = None
    bidirectional: bool = True


@dataclass
class LocationPayload:
    name: str
    description: str
    map_description: str = ""
    items: list[ItemDescriptor] = field(default_factory=list)
    exits: list[ExitDescriptor] = field(default_factory=list)


@dataclass
class GameTurn:
    narration: str
    player_location: LocationPayload
    map_description: str = ""
    suggestions: list[str] = field(default_factory=list)
    discoveries: list[LocationPayload] = field(default_factory=list)
    inventory: list[ItemDescriptor] = field(default_factory=list)


@dataclass
class LocationInfo:
    id: str
    name: str
    map_description: str
    distance: Optional[int] = None


@dataclass
class LocationMatch:
    id: str
    name: str
    map_description: str
    similarity: float


@dataclass
class RouteInfo:
    exists: bool
    path: list[LocationInfo] = field(default_factory=list)
    distance: int = -1


@dataclass
class ApplyTurnResult:
    world: World
    character: Character
    new_entries: list[SessionEntry]


@dataclass
class NarratorContext:
    world: World
    character: Character
    player_message: str
    history: list[SessionEntry]
    current_location: LocationNode
    known_locations: list[LocationNode]
    last_action_reminder: Optional[ActionSummary]
    is_initial: bool
    tools: Any = None


@dataclass
class ResolveTurnInput:
    world_id: str
    character_id: str
    message: str = ""
    is_initial: bool = False


@dataclass
class ResolveTurnResult:
    status: str
    world: Optional[World] = None
    character: Optional[Character] = None
    entries: list[SessionEntry] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    reason: Optional[str] = None
    issues: list[str] = field(default_factory=list)
