from __future__ import annotations


class WorldMapError(Exception):
    """Base class for errors raised by the world map engine."""


class WorldNotFoundError(WorldMapError):
    pass


class CharacterNotFoundError(WorldMapError):
    pass


class LocationNotFoundError(WorldMapError):
    pass


class StaleWorldError(WorldMapError):
    """The world row changed between load and save."""


class TurnPayloadError(WorldMapError):
    def __init__(self, issues: list[str]):
        self.issues = list(issues)
        super().__init__("invalid turn payload: " + "; ".join(self.issues))
