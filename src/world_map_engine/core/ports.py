from __future__ import annotations

from typing import Any, Protocol

from .types import GameTurn, NarratorContext


class NarratorPort(Protocol):
    async def generate_turn(self, context: NarratorContext) -> GameTurn | dict[str, Any]:
        ...
