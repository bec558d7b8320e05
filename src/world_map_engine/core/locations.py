from __future__ import annotations

import logging
from typing import Optional

from .normalize import new_id, normalize_text
from .types import LocationNode, World

logger = logging.getLogger(__name__)


def find_by_name(world: World, name: str) -> Optional[LocationNode]:
    normalized = normalize_text(name)
    for node in world.graph.values():
        if normalize_text(node.name) == normalized:
            return node
    return None


def find_by_description(world: World, description: str) -> Optional[LocationNode]:
    normalized = normalize_text(description)
    if not normalized:
        return None
    for node in world.graph.values():
        if normalize_text(node.map_description) == normalized:
            return node
        if normalize_text(node.description) == normalized:
            return node
    return None


def ensure_location(
    world: World,
    name: str,
    map_description_hint: Optional[str] = None,
) -> LocationNode:
    """Return the node for ``name``, creating it when the place is new.

    Lookup order: normalized display name, then the hint against each
    node's map description or long description. Mutates ``world.graph``.
    """
    node = find_by_name(world, name)
    if node is not None:
        return node

    if map_description_hint and map_description_hint.strip():
        node = find_by_description(world, map_description_hint)
        if node is not None:
            logger.info(
                "Location %r matched existing node %s (%r) by description",
                name,
                node.id,
                node.name,
            )
            return node

    node = LocationNode(id=new_id(), name=name.strip())
    world.graph[node.id] = node
    if world.entry_location_id not in world.graph:
        world.entry_location_id = node.id
    logger.debug("Created location %s (%r) in world %s", node.id, node.name, world.id)
    return node
