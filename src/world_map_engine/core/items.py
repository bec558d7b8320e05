from __future__ import annotations

from typing import Iterable, Optional

from .normalize import new_id, normalize_text
from .types import Item, ItemDescriptor


def merge_items(
    existing_items: Iterable[Item],
    descriptors: Iterable[ItemDescriptor],
    owner_character_id: Optional[str],
) -> list[Item]:
    """Rebuild an item list from the narrator's descriptors.

    Items keep their id when an existing item has the same normalized name.
    Output order follows ``descriptors``; items not mentioned are dropped.
    """
    by_name: dict[str, Item] = {}
    for item in existing_items:
        by_name[normalize_text(item.name)] = item

    merged: list[Item] = []
    for descriptor in descriptors:
        existing = by_name.get(normalize_text(descriptor.name))
        merged.append(
            Item(
                id=existing.id if existing is not None else new_id(),
                name=descriptor.name,
                description=descriptor.description or "",
                portable=descriptor.portable,
                owner_character_id=owner_character_id,
            )
        )
    return merged
