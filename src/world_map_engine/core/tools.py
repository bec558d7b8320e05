from __future__ import annotations

import logging
from typing import Any, Optional

from .config import DEFAULT_CONFIG, EngineConfig
from .finder import find_location_by_name
from .router import get_near_locations, get_route
from .types import LocationNode, RouteInfo, World

logger = logging.getLogger(__name__)

TOOL_NEAR_LOCATIONS = "get_near_locations"
TOOL_FIND_LOCATION = "find_location_by_name"
TOOL_GET_ROUTE = "get_route"


def format_location_info(node: LocationNode) -> str:
    return f"{node.name}: {node.summary_text() or 'No description'}"


def format_route(route: RouteInfo) -> str:
    if not route.exists or not route.path:
        return "No route found"
    if len(route.path) == 1:
        return f"You are already at: {route.path[0].name}"

    lines = []
    last = len(route.path) - 1
    for idx, step in enumerate(route.path):
        if idx == 0:
            lines.append(f"Start: {step.name}")
        elif idx == last:
            lines.append(f"Destination: {step.name}")
        else:
            lines.append(f"-> {step.name}")
    return "\n".join(lines)


class NavigationTools:
    """Read-only graph queries the narrator may call while composing a turn.

    Every result is a plain dict; bad arguments and unknown tools come back
    as ``{"error": ...}`` instead of raising.
    """

    def __init__(self, world: World, current_location_id: str, config: EngineConfig = DEFAULT_CONFIG):
        self._world = world
        self._current_location_id = current_location_id
        self._config = config

    @staticmethod
    def declarations() -> list[dict[str, Any]]:
        return [
            {
                "name": TOOL_NEAR_LOCATIONS,
                "description": "List locations directly connected to the player's current location.",
                "parameters": {"type": "object", "properties": {}},
            },
            {
                "name": TOOL_FIND_LOCATION,
                "description": (
                    "Find a location anywhere on the world map by approximate name. "
                    "Returns candidates with a similarity score; pass the exact "
                    "'name' of the best candidate to get_route."
                ),
                "parameters": {
                    "type": "object",
                    "properties": {
                        "raw_name": {
                            "type": "string",
                            "description": "The place name as the player said it.",
                        },
                    },
                    "required": ["raw_name"],
                },
            },
            {
                "name": TOOL_GET_ROUTE,
                "description": "Build a route from the current location to the target location.",
                "parameters": {
                    "type": "object",
                    "properties": {
                        "target_location_name": {
                            "type": "string",
                            "description": "Exact name of the target location.",
                        },
                    },
                    "required": ["target_location_name"],
                },
            },
        ]

    def execute(self, name: str, args: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        args = args or {}
        logger.debug("Narrator tool call %s(%s)", name, args)
        if name == TOOL_NEAR_LOCATIONS:
            return self.near_locations()
        if name == TOOL_FIND_LOCATION:
            return self.find_location(str(args.get("raw_name") or ""))
        if name == TOOL_GET_ROUTE:
            return self.route_to(str(args.get("target_location_name") or ""))
        return {"error": f"Unknown tool: {name}"}

    def near_locations(self) -> dict[str, Any]:
        locations = get_near_locations(self._world.graph, self._current_location_id)
        return {
            "count": len(locations),
            "locations": [
                {"name": loc.name, "description": loc.map_description} for loc in locations
            ],
        }

    def find_location(self, raw_name: str) -> dict[str, Any]:
        if not raw_name.strip():
            return {"error": "No location name given"}
        matches = find_location_by_name(
            self._world.graph,
            raw_name,
            limit=self._config.fuzzy_limit,
            threshold=self._config.fuzzy_threshold,
        )
        return {
            "found": bool(matches),
            "matches": [
                {
                    "name": match.name,
                    "description": match.map_description,
                    "similarity": f"{round(match.similarity * 100)}%",
                }
                for match in matches
            ],
        }

    def route_to(self, target_name: str) -> dict[str, Any]:
        target_name = target_name.strip()
        if not target_name:
            return {"error": "No target location given"}

        target = None
        for node in self._world.graph.values():
            if node.name == target_name:
                target = node
                break
        if target is None:
            return {"error": f'Location "{target_name}" is not on the map'}

        route = get_route(
            self._world.graph,
            self._current_location_id,
            target.id,
            max_depth=self._config.max_route_depth,
        )
        if not route.exists:
            return {"exists": False, "error": "No route found"}
        return {
            "exists": True,
            "distance": route.distance,
            "path": [{"name": step.name, "description": step.map_description} for step in route.path],
            "formatted": format_route(route),
        }
