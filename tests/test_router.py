from __future__ import annotations

from world_map_engine.core.router import get_near_locations, get_route, has_path
from world_map_engine.core.types import LocationNode


def test_route_along_chain(build_world):
    world = build_world({"A": ["B"], "B": ["C"], "C": ["D"]})

    route = get_route(world.graph, "A", "D")

    assert route.exists is True
    assert route.distance == 3
    assert [step.id for step in route.path] == ["A", "B", "C", "D"]


def test_route_to_self_is_zero_length(build_world):
    world = build_world({"A": ["B"]})

    route = get_route(world.graph, "A", "A")

    assert route.exists is True
    assert route.distance == 0
    assert [step.id for step in route.path] == ["A"]


def test_route_to_isolated_or_unknown_node(build_world):
    world = build_world({"A": ["B"]})
    world.graph["Island"] = LocationNode(id="Island", name="Island")

    assert get_route(world.graph, "A", "Island").exists is False
    missing = get_route(world.graph, "A", "nowhere")
    assert missing.exists is False
    assert missing.path == []
    assert missing.distance == -1


def test_route_respects_edge_direction(build_world):
    world = build_world({"A": ["B"]}, bidirectional=False)

    assert get_route(world.graph, "A", "B").exists is True
    assert get_route(world.graph, "B", "A").exists is False


def test_route_depth_is_bounded(build_world):
    names = [f"N{i}" for i in range(10)]
    world = build_world({names[i]: [names[i + 1]] for i in range(9)})

    assert get_route(world.graph, "N0", "N7").distance == 7
    assert get_route(world.graph, "N0", "N8").exists is False
    assert get_route(world.graph, "N0", "N8", max_depth=8).distance == 8


def test_route_handles_cycles_and_is_deterministic(build_world):
    world = build_world({"A": ["B", "C"], "B": ["D"], "C": ["D"], "D": ["A"]})

    first = get_route(world.graph, "A", "D")
    second = get_route(world.graph, "A", "D")

    assert [s.id for s in first.path] == ["A", "D"]
    assert [s.id for s in first.path] == [s.id for s in second.path]


def test_shortest_route_prefers_earlier_edges_on_ties(build_world):
    world = build_world({"A": ["B", "C"], "B": ["D"], "C": ["D"]})

    route = get_route(world.graph, "A", "D")

    assert [s.id for s in route.path] == ["A", "B", "D"]


def test_near_locations_in_edge_order(build_world):
    world = build_world({"Hub": ["North", "East", "South"]})
    world.graph["East"].map_description = "Quiet lane"

    near = get_near_locations(world.graph, "Hub")

    assert [loc.name for loc in near] == ["North", "East", "South"]
    assert near[1].map_description == "Quiet lane"
    assert all(loc.distance == 1 for loc in near)
    assert get_near_locations(world.graph, "unknown") == []


def test_has_path_ignores_direct_edge(build_world):
    world = build_world({"A": ["B", "C"], "B": ["C"]})

    assert has_path(world.graph, "A", "C", min_depth=2) is True

    direct_only = build_world({"A": ["C"]})
    assert has_path(direct_only.graph, "A", "C", min_depth=2) is False
    assert has_path(direct_only.graph, "A", "C", min_depth=1) is True


def test_has_path_is_bounded(build_world):
    names = [f"N{i}" for i in range(10)]
    world = build_world({names[i]: [names[i + 1]] for i in range(9)})

    assert has_path(world.graph, "N0", "N7", max_depth=7) is True
    assert has_path(world.graph, "N0", "N9", max_depth=7) is False
