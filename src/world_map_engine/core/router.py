from __future__ import annotations

from collections import deque
from typing import Mapping

from .config import DEFAULT_CONFIG
from .types import LocationInfo, LocationNode, RouteInfo


def location_info(node: LocationNode, distance: int | None = None) -> LocationInfo:
    return LocationInfo(
        id=node.id,
        name=node.name,
        map_description=node.summary_text(),
        distance=distance,
    )


def get_near_locations(graph: Mapping[str, LocationNode], location_id: str) -> list[LocationInfo]:
    """Return the direct neighbours of ``location_id`` in edge order."""
    node = graph.get(location_id)
    if node is None:
        return []
    out: list[LocationInfo] = []
    for connection in node.connections:
        target = graph.get(connection.target_id)
        if target is not None:
            out.append(location_info(target, distance=1))
    return out


def get_route(
    graph: Mapping[str, LocationNode],
    from_id: str,
    to_id: str,
    max_depth: int = DEFAULT_CONFIG.max_route_depth,
) -> RouteInfo:
    """Breadth-first shortest route, at most ``max_depth`` hops long.

    Edges are followed in their stored order so identical graphs always
    yield the same path. A route from a location to itself exists with
    distance 0.
    """
    if from_id == to_id:
        node = graph.get(from_id)
        return RouteInfo(exists=True, path=[location_info(node)] if node else [], distance=0)
    if from_id not in graph or to_id not in graph:
        return RouteInfo(exists=False)

    parents: dict[str, str | None] = {from_id: None}
    queue: deque[tuple[str, int]] = deque([(from_id, 0)])
    while queue:
        current_id, depth = queue.popleft()
        if depth >= max_depth:
            continue
        for connection in graph[current_id].connections:
            target_id = connection.target_id
            if target_id in parents or target_id not in graph:
                continue
            parents[target_id] = current_id
            if target_id == to_id:
                return _build_route(graph, parents, to_id)
            queue.append((target_id, depth + 1))

    return RouteInfo(exists=False)


def _build_route(
    graph: Mapping[str, LocationNode],
    parents: dict[str, str | None],
    to_id: str,
) -> RouteInfo:
    ids: list[str] = []
    cursor: str | None = to_id
    while cursor is not None:
        ids.append(cursor)
        cursor = parents[cursor]
    ids.reverse()
    return RouteInfo(
        exists=True,
        path=[location_info(graph[location_id]) for location_id in ids],
        distance=len(ids) - 1,
    )


def has_path(
    graph: Mapping[str, LocationNode],
    from_id: str,
    to_id: str,
    min_depth: int = DEFAULT_CONFIG.min_indirect_depth,
    max_depth: int = DEFAULT_CONFIG.max_route_depth,
) -> bool:
    """Whether ``to_id`` is reachable in ``min_depth``..``max_depth`` hops.

    Arrivals shorter than ``min_depth`` (e.g. the direct edge under
    consideration) are ignored, the search keeps going past them.
    """
    if from_id not in graph or to_id not in graph:
        return False

    visited = {from_id}
    queue: deque[tuple[str, int]] = deque([(from_id, 0)])
    while queue:
        current_id, depth = queue.popleft()
        if depth >= max_depth:
            continue
        for connection in graph[current_id].connections:
            target_id = connection.target_id
            if target_id == to_id:
                if depth + 1 >= min_depth:
                    return True
                continue
            if target_id in visited or target_id not in graph:
                continue
            visited.add(target_id)
            queue.append((target_id, depth + 1))
    return False
