from __future__ import annotations

from world_map_engine.core.router import get_route
from world_map_engine.core.tools import NavigationTools, format_location_info, format_route
from world_map_engine.core.types import LocationNode


def test_declarations_cover_three_queries():
    names = [d["name"] for d in NavigationTools.declarations()]
    assert names == ["get_near_locations", "find_location_by_name", "get_route"]


def test_near_locations_tool(build_world):
    world = build_world({"A": ["B", "C"]})
    world.graph["B"].map_description = "Bakery"

    result = NavigationTools(world, "A").execute("get_near_locations", {})

    assert result["count"] == 2
    assert result["locations"][0] == {"name": "B", "description": "Bakery"}


def test_find_location_tool_formats_similarity(build_world):
    world = build_world({"Old Tavern": ["Tavern Cellar"]})
    tools = NavigationTools(world, "Old Tavern")

    exact = tools.execute("find_location_by_name", {"raw_name": "old tavern"})
    assert exact["found"] is True
    assert exact["matches"][0]["name"] == "Old Tavern"
    assert exact["matches"][0]["similarity"] == "100%"

    partial = tools.execute("find_location_by_name", {"raw_name": "tavern"})
    assert [m["name"] for m in partial["matches"]] == ["Tavern Cellar", "Old Tavern"]
    assert [m["similarity"] for m in partial["matches"]] == ["90%", "80%"]


def test_route_tool(build_world):
    world = build_world({"A": ["B"], "B": ["C"]})
    tools = NavigationTools(world, "A")

    result = tools.execute("get_route", {"target_location_name": "C"})
    assert result["exists"] is True
    assert result["distance"] == 2
    assert [step["name"] for step in result["path"]] == ["A", "B", "C"]
    assert result["formatted"] == "Start: A\n-> B\nDestination: C"


def test_route_tool_errors(build_world):
    world = build_world({"A": ["B"]})
    world.graph["Island"] = LocationNode(id="Island", name="Island")
    tools = NavigationTools(world, "A")

    assert "error" in tools.execute("get_route", {})
    assert "error" in tools.execute("get_route", {"target_location_name": "Atlantis"})
    assert tools.execute("get_route", {"target_location_name": "Island"})["exists"] is False
    assert "error" in tools.execute("find_location_by_name", {"raw_name": "  "})
    assert "error" in tools.execute("teleport", {})


def test_formatters(build_world):
    world = build_world({"A": ["B"]})

    assert format_route(get_route(world.graph, "A", "A")) == "You are already at: A"
    assert format_route(get_route(world.graph, "A", "nowhere")) == "No route found"
    assert format_location_info(LocationNode(id="x", name="Gate", description="Iron gate")) == "Gate: Iron gate"
    assert format_location_info(LocationNode(id="y", name="Void")) == "Void: No description"
