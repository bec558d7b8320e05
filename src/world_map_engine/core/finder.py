from __future__ import annotations

from typing import Mapping

from .config import DEFAULT_CONFIG
from .normalize import normalize_text
from .types import LocationMatch, LocationNode


def score_location(node: LocationNode, query: str) -> float:
    """Similarity of ``node`` to an already-normalized ``query``.

    The first matching rule wins: exact name 1.0, name prefix 0.9, name
    substring 0.8, description substring 0.6, otherwise half the share of
    query words found in the name or description.
    """
    name = normalize_text(node.name)
    description = normalize_text(node.summary_text())

    if name == query:
        return 1.0
    if name.startswith(query):
        return 0.9
    if query in name:
        return 0.8
    if query in description:
        return 0.6

    words = query.split()
    if not words:
        return 0.0
    matched = [word for word in words if word in name or word in description]
    return len(matched) / len(words) * 0.5


def find_location_by_name(
    graph: Mapping[str, LocationNode],
    raw_name: str,
    limit: int = DEFAULT_CONFIG.fuzzy_limit,
    threshold: float = DEFAULT_CONFIG.fuzzy_threshold,
) -> list[LocationMatch]:
    query = normalize_text(raw_name)
    if not query:
        return []

    matches: list[LocationMatch] = []
    for node in graph.values():
        similarity = score_location(node, query)
        if similarity > threshold:
            matches.append(
                LocationMatch(
                    id=node.id,
                    name=node.name,
                    map_description=node.summary_text(),
                    similarity=similarity,
                )
            )

    # sorted() is stable: ties keep graph insertion order.
    matches = sorted(matches, key=lambda match: match.similarity, reverse=True)
    return matches[:limit]
