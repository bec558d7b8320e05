from __future__ import annotations

import logging
from typing import Iterable, Optional

from .config import CONNECTION_POLICY_MINIMAL, DEFAULT_CONFIG, EngineConfig
from .locations import ensure_location
from .normalize import new_id
from .router import has_path
from .types import Connection, ExitDescriptor, LocationNode, World

logger = logging.getLogger(__name__)


def upsert_connection(
    source: LocationNode,
    target: LocationNode,
    label: Optional[str],
    bidirectional: bool,
    default_label: str = DEFAULT_CONFIG.default_exit_label,
) -> Connection:
    """Add or update the ``source -> target`` edge.

    A blank label keeps the existing one. The bidirectional flag is sticky.
    """
    label = (label or "").strip()
    existing = source.connection_to(target.id)
    if existing is not None:
        existing.label = label or existing.label or default_label
        existing.bidirectional = existing.bidirectional or bidirectional
        return existing

    connection = Connection(
        id=new_id(),
        target_id=target.id,
        label=label or default_label,
        bidirectional=bidirectional,
    )
    source.connections.append(connection)
    return connection


def _should_link(world: World, source: LocationNode, target: LocationNode, config: EngineConfig) -> bool:
    if config.connection_policy != CONNECTION_POLICY_MINIMAL:
        return True
    if source is target or source.connection_to(target.id) is not None:
        return True
    if has_path(
        world.graph,
        source.id,
        target.id,
        min_depth=config.min_indirect_depth,
        max_depth=config.max_route_depth,
    ):
        logger.info(
            "Skipping direct edge %r -> %r: already reachable through other locations",
            source.name,
            target.name,
        )
        return False
    return True


def sync_exits(
    world: World,
    source: LocationNode,
    exits: Iterable[ExitDescriptor],
    config: EngineConfig = DEFAULT_CONFIG,
) -> None:
    """Wire every exit of ``source`` into the graph.

    Targets are resolved through :func:`ensure_location`, so unseen exits
    create undiscovered nodes. Bidirectional exits get a mirrored edge on
    the target. Self-loops are not filtered.
    """
    for exit_descriptor in exits:
        target = ensure_location(world, exit_descriptor.name)
        bidirectional = exit_descriptor.bidirectional

        if not _should_link(world, source, target, config):
            continue

        upsert_connection(source, target, exit_descriptor.label, bidirectional, config.default_exit_label)
        if bidirectional:
            upsert_connection(target, source, exit_descriptor.label, bidirectional, config.default_exit_label)
