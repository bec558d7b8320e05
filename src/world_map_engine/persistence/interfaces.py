from __future__ import annotations

from datetime import datetime
from typing import Iterable, Protocol

from ..core.types import Character, SessionEntry, World


class WorldRepo(Protocol):
    def get(self, world_id: str): ...
    def load(self, world_id: str) -> World | None: ...
    def load_versioned(self, world_id: str) -> tuple[World, int] | None: ...
    def add(self, world: World): ...
    def cas_save(self, world: World, expected_row_version: int) -> bool: ...
    def delete(self, world_id: str) -> bool: ...


class CharacterRepo(Protocol):
    def get(self, character_id: str): ...
    def load(self, character_id: str) -> Character | None: ...
    def add(self, character: Character): ...
    def save(self, character: Character) -> bool: ...


class SessionLogRepo(Protocol):
    def get(self, session_id: str): ...
    def latest_for(self, character_id: str, world_id: str): ...
    def create(self, character_id: str, world_id: str, started_at: datetime): ...


class SessionEntryRepo(Protocol):
    def add_many(self, session_id: str, entries: Iterable[SessionEntry]) -> int: ...
    def recent(self, session_id: str, limit: int) -> list[SessionEntry]: ...
    def list_for_session(self, session_id: str) -> list[SessionEntry]: ...


class UnitOfWork(Protocol):
    worlds: WorldRepo
    characters: CharacterRepo
    session_logs: SessionLogRepo
    session_entries: SessionEntryRepo

    def commit(self) -> None: ...
    def rollback(self) -> None: ...

    def __enter__(self) -> "UnitOfWork": ...
    def __exit__(self, exc_type, exc, tb) -> None: ...
