from __future__ import annotations

import pytest

from world_map_engine.core.connections import upsert_connection
from world_map_engine.core.types import LocationNode, World
from world_map_engine.persistence.sqlalchemy.db import build_engine, build_session_factory, create_schema
from world_map_engine.persistence.sqlalchemy.uow import SQLAlchemyUnitOfWork


@pytest.fixture()
def session_factory():
    engine = build_engine("sqlite+pysqlite:///:memory:")
    create_schema(engine)
    return build_session_factory(engine)


@pytest.fixture()
def uow_factory(session_factory):
    def _factory():
        return SQLAlchemyUnitOfWork(session_factory)

    return _factory


@pytest.fixture()
def build_world():
    """Build a world from ``{"A": ["B"], ...}`` using bidirectional edges.

    Node ids equal their names so assertions stay readable.
    """

    def _build(adjacency: dict[str, list[str]], bidirectional: bool = True, world_id: str = "world-1") -> World:
        world = World(id=world_id, name="Test world")
        for name, targets in adjacency.items():
            for node_name in [name, *targets]:
                if node_name not in world.graph:
                    world.graph[node_name] = LocationNode(id=node_name, name=node_name)
        for name, targets in adjacency.items():
            for target in targets:
                source_node = world.graph[name]
                target_node = world.graph[target]
                upsert_connection(source_node, target_node, "walk", bidirectional)
                if bidirectional:
                    upsert_connection(target_node, source_node, "walk", bidirectional)
        if world.graph:
            world.entry_location_id = next(iter(world.graph))
        return world

    return _build
