from .core.config import EngineConfig
from .core.engine import GameEngine
from .core.finder import find_location_by_name
from .core.normalize import parse_game_turn
from .core.ports import NarratorPort
from .core.router import get_near_locations, get_route
from .core.tools import NavigationTools
from .core.turns import apply_game_turn
from .core.worlds import new_character, new_world

__all__ = [
    "GameEngine",
    "EngineConfig",
    "NarratorPort",
    "NavigationTools",
    "apply_game_turn",
    "parse_game_turn",
    "get_near_locations",
    "get_route",
    "find_location_by_name",
    "new_world",
    "new_character",
]
