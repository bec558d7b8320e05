from __future__ import annotations

from datetime import datetime
from typing import Iterable

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from ...core.normalize import dump_json, parse_json_dict, parse_json_list
from ...core.types import ActionSummary, Character, Item, SessionEntry, World
from .models import CharacterRecord, SessionLog, SessionLogEntry, WorldRecord


def world_from_record(row: WorldRecord) -> World:
    return World(
        id=row.id,
        name=row.name,
        setting=row.setting,
        atmosphere=row.atmosphere,
        genre=row.genre,
        entry_location_id=row.entry_location_id,
        graph=World.graph_from_dict(parse_json_dict(row.graph_json)),
        owner_character_ids=[str(x) for x in parse_json_list(row.owner_character_ids_json)],
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _world_values(world: World) -> dict[str, object]:
    return {
        "name": world.name,
        "setting": world.setting,
        "atmosphere": world.atmosphere,
        "genre": world.genre,
        "entry_location_id": world.entry_location_id,
        "graph_json": dump_json(world.graph_to_dict()),
        "owner_character_ids_json": dump_json(list(world.owner_character_ids)),
    }


def character_from_record(row: CharacterRecord) -> Character:
    return Character(
        id=row.id,
        name=row.name,
        description=row.description,
        inventory=[Item.from_dict(i) for i in parse_json_list(row.inventory_json) if isinstance(i, dict)],
        current_world_id=row.current_world_id,
        current_location_id=row.current_location_id,
        history=[SessionEntry.from_dict(e) for e in parse_json_list(row.history_json) if isinstance(e, dict)],
        last_session_id=row.last_session_id,
    )


def _character_values(character: Character) -> dict[str, object]:
    return {
        "name": character.name,
        "description": character.description,
        "current_world_id": character.current_world_id,
        "current_location_id": character.current_location_id,
        "inventory_json": dump_json([item.to_dict() for item in character.inventory]),
        "history_json": dump_json([entry.to_dict() for entry in character.history]),
        "last_session_id": character.last_session_id,
    }


def entry_from_record(row: SessionLogEntry) -> SessionEntry:
    summary = parse_json_dict(row.action_summary_json)
    return SessionEntry(
        id=row.entry_id,
        world_id=row.world_id,
        location_id=row.location_id,
        author=row.author,
        message=row.message,
        created_at=row.created_at,
        action_summary=ActionSummary.from_dict(summary) if summary else None,
    )


class WorldRepo:
    def __init__(self, session: Session):
        self.session = session

    def get(self, world_id: str) -> WorldRecord | None:
        return self.session.get(WorldRecord, world_id)

    def load(self, world_id: str) -> World | None:
        row = self.get(world_id)
        return world_from_record(row) if row is not None else None

    def load_versioned(self, world_id: str) -> tuple[World, int] | None:
        row = self.get(world_id)
        if row is None:
            return None
        return world_from_record(row), row.row_version

    def add(self, world: World) -> WorldRecord:
        row = WorldRecord(id=world.id, row_version=1, **_world_values(world))
        if world.created_at is not None:
            row.created_at = world.created_at
        if world.updated_at is not None:
            row.updated_at = world.updated_at
        self.session.add(row)
        self.session.flush()
        return row

    def cas_save(self, world: World, expected_row_version: int) -> bool:
        values = _world_values(world)
        values["row_version"] = WorldRecord.row_version + 1
        values["updated_at"] = world.updated_at or datetime.utcnow()
        stmt = (
            update(WorldRecord)
            .where(WorldRecord.id == world.id)
            .where(WorldRecord.row_version == expected_row_version)
            .values(**values)
        )
        result = self.session.execute(stmt)
        return result.rowcount == 1

    def delete(self, world_id: str) -> bool:
        self.session.execute(
            update(CharacterRecord)
            .where(CharacterRecord.current_world_id == world_id)
            .values(current_world_id=None, current_location_id=None, last_session_id=None)
        )
        session_ids = select(SessionLog.id).where(SessionLog.world_id == world_id)
        self.session.execute(delete(SessionLogEntry).where(SessionLogEntry.session_id.in_(session_ids)))
        self.session.execute(delete(SessionLog).where(SessionLog.world_id == world_id))
        result = self.session.execute(delete(WorldRecord).where(WorldRecord.id == world_id))
        return (result.rowcount or 0) == 1


class CharacterRepo:
    def __init__(self, session: Session):
        self.session = session

    def get(self, character_id: str) -> CharacterRecord | None:
        return self.session.get(CharacterRecord, character_id)

    def load(self, character_id: str) -> Character | None:
        row = self.get(character_id)
        return character_from_record(row) if row is not None else None

    def add(self, character: Character) -> CharacterRecord:
        row = CharacterRecord(id=character.id, **_character_values(character))
        self.session.add(row)
        self.session.flush()
        return row

    def save(self, character: Character) -> bool:
        stmt = (
            update(CharacterRecord)
            .where(CharacterRecord.id == character.id)
            .values(updated_at=datetime.utcnow(), **_character_values(character))
        )
        return self.session.execute(stmt).rowcount == 1


class SessionLogRepo:
    def __init__(self, session: Session):
        self.session = session

    def get(self, session_id: str) -> SessionLog | None:
        return self.session.get(SessionLog, session_id)

    def latest_for(self, character_id: str, world_id: str) -> SessionLog | None:
        stmt = (
            select(SessionLog)
            .where(SessionLog.character_id == character_id)
            .where(SessionLog.world_id == world_id)
            .order_by(SessionLog.started_at.desc())
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def create(self, character_id: str, world_id: str, started_at: datetime) -> SessionLog:
        row = SessionLog(character_id=character_id, world_id=world_id, started_at=started_at)
        self.session.add(row)
        self.session.flush()
        return row


class SessionEntryRepo:
    def __init__(self, session: Session):
        self.session = session

    def add_many(self, session_id: str, entries: Iterable[SessionEntry]) -> int:
        count = 0
        for entry in entries:
            row = SessionLogEntry(
                entry_id=entry.id,
                session_id=session_id,
                world_id=entry.world_id,
                location_id=entry.location_id,
                author=entry.author,
                message=entry.message,
                action_summary_json=dump_json(entry.action_summary.to_dict()) if entry.action_summary else None,
            )
            if entry.created_at is not None:
                row.created_at = entry.created_at
            self.session.add(row)
            count += 1
        self.session.flush()
        return count

    def recent(self, session_id: str, limit: int) -> list[SessionEntry]:
        stmt = (
            select(SessionLogEntry)
            .where(SessionLogEntry.session_id == session_id)
            .order_by(SessionLogEntry.id.desc())
            .limit(limit)
        )
        rows = list(self.session.execute(stmt).scalars().all())
        rows.reverse()
        return [entry_from_record(row) for row in rows]

    def list_for_session(self, session_id: str) -> list[SessionEntry]:
        stmt = (
            select(SessionLogEntry)
            .where(SessionLogEntry.session_id == session_id)
            .order_by(SessionLogEntry.id.asc())
        )
        return [entry_from_record(row) for row in self.session.execute(stmt).scalars().all()]
