from __future__ import annotations

import asyncio

from world_map_engine.core.engine import GameEngine
from world_map_engine.core.router import get_route
from world_map_engine.core.types import ResolveTurnInput
from world_map_engine.persistence.sqlalchemy import (
    SQLAlchemyUnitOfWork,
    build_engine,
    build_session_factory,
    create_schema,
)


class DemoNarrator:
    async def generate_turn(self, context):
        near = context.tools.execute("get_near_locations")
        if context.is_initial or near["count"] == 0:
            return {
                "narration": "You wake on the pier. Gulls scream over the harbor.",
                "mapDescription": "Wooden pier at the harbor",
                "playerLocation": {
                    "name": "Pier",
                    "description": "Salt-bleached planks creak underfoot.",
                    "items": [{"name": "Coil of rope"}],
                    "exits": [
                        {"name": "Fish Market", "label": "walk up the ramp"},
                        {"name": "Lighthouse", "label": "follow the breakwater"},
                    ],
                },
                "discoveries": [
                    {
                        "name": "Fish Market",
                        "description": "Stalls heavy with the morning catch.",
                        "mapDescription": "Covered fish market",
                        "exits": [{"name": "Old Town Gate"}],
                    }
                ],
                "inventory": {"items": [{"name": "Brass compass", "description": "Needle twitches north"}]},
            }
        return {
            "narration": "The market smells of brine and smoke.",
            "playerLocation": {
                "name": "Fish Market",
                "description": "Stalls heavy with the morning catch.",
            },
            "inventory": {"items": [{"name": "Brass compass"}]},
        }


def make_uow_factory():
    engine = build_engine("sqlite+pysqlite:///:memory:")
    create_schema(engine)
    session_factory = build_session_factory(engine)

    def _uow_factory():
        return SQLAlchemyUnitOfWork(session_factory)

    return _uow_factory


async def main() -> None:
    game = GameEngine(uow_factory=make_uow_factory(), narrator=DemoNarrator())
    world = game.create_world("Saltmarsh", "A fog-bound harbor town", "uneasy", "mystery")
    character = game.create_character("Mara", "A cartographer", world.id)

    for message, is_initial in (("", True), ("head to the fish market", False)):
        result = await game.resolve_turn(
            ResolveTurnInput(world_id=world.id, character_id=character.id, message=message, is_initial=is_initial)
        )
        print("resolve_turn status:", result.status)
        for entry in result.entries:
            print(f"  [{entry.author}] {entry.message}")

    stored = game.get_world(world.id)
    for node in stored.graph.values():
        flag = "visited" if node.discovered else "seen"
        print(f"{node.name} ({flag}) -> {[stored.graph[c.target_id].name for c in node.connections]}")

    by_name = {node.name: node.id for node in stored.graph.values()}
    route = get_route(stored.graph, by_name["Lighthouse"], by_name["Old Town Gate"])
    print("route:", [step.name for step in route.path], "distance:", route.distance)


if __name__ == "__main__":
    asyncio.run(main())
