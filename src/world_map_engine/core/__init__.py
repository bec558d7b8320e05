from .config import CONNECTION_POLICY_ALWAYS, CONNECTION_POLICY_MINIMAL, DEFAULT_CONFIG, EngineConfig
from .connections import sync_exits, upsert_connection
from .engine import GameEngine
from .errors import (
    CharacterNotFoundError,
    LocationNotFoundError,
    StaleWorldError,
    TurnPayloadError,
    WorldMapError,
    WorldNotFoundError,
)
from .finder import find_location_by_name
from .items import merge_items
from .locations import ensure_location
from .normalize import normalize_text, parse_game_turn
from .ports import NarratorPort
from .router import get_near_locations, get_route, has_path
from .tools import NavigationTools, format_location_info, format_route
from .turns import apply_game_turn, upsert_location_from_payload
from .types import (
    ActionSummary,
    ApplyTurnResult,
    Character,
    Connection,
    ExitDescriptor,
    GameTurn,
    Item,
    ItemDescriptor,
    LocationInfo,
    LocationMatch,
    LocationNode,
    LocationPayload,
    NarratorContext,
    ResolveTurnInput,
    ResolveTurnResult,
    RouteInfo,
    SessionEntry,
    World,
)
from .worlds import find_last_action_reminder, new_character, new_world, resolve_current_location

__all__ = [
    "CONNECTION_POLICY_ALWAYS",
    "CONNECTION_POLICY_MINIMAL",
    "DEFAULT_CONFIG",
    "EngineConfig",
    "GameEngine",
    "NarratorPort",
    "NavigationTools",
    "WorldMapError",
    "WorldNotFoundError",
    "CharacterNotFoundError",
    "LocationNotFoundError",
    "StaleWorldError",
    "TurnPayloadError",
    "normalize_text",
    "parse_game_turn",
    "ensure_location",
    "upsert_location_from_payload",
    "sync_exits",
    "upsert_connection",
    "merge_items",
    "apply_game_turn",
    "get_near_locations",
    "get_route",
    "has_path",
    "find_location_by_name",
    "format_location_info",
    "format_route",
    "new_world",
    "new_character",
    "resolve_current_location",
    "find_last_action_reminder",
    "ActionSummary",
    "ApplyTurnResult",
    "Character",
    "Connection",
    "ExitDescriptor",
    "GameTurn",
    "Item",
    "ItemDescriptor",
    "LocationInfo",
    "LocationMatch",
    "LocationNode",
    "LocationPayload",
    "NarratorContext",
    "ResolveTurnInput",
    "ResolveTurnResult",
    "RouteInfo",
    "SessionEntry",
    "World",
]
