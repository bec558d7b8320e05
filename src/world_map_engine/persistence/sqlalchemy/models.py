from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class WorldRecord(TimestampMixin, Base):
    __tablename__ = "wme_worlds"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    setting: Mapped[str] = mapped_column(Text, nullable=False, default="")
    atmosphere: Mapped[str] = mapped_column(Text, nullable=False, default="")
    genre: Mapped[str] = mapped_column(String(128), nullable=False, default="")

    entry_location_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    graph_json: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
    owner_character_ids_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")

    row_version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)


class CharacterRecord(TimestampMixin, Base):
    __tablename__ = "wme_characters"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    current_world_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("wme_worlds.id"), nullable=True)
    current_location_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    inventory_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    history_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    last_session_id: Mapped[str | None] = mapped_column(String(36), nullable=True)


class SessionLog(Base):
    __tablename__ = "wme_session_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    character_id: Mapped[str] = mapped_column(String(36), ForeignKey("wme_characters.id"), nullable=False)
    world_id: Mapped[str] = mapped_column(String(36), ForeignKey("wme_worlds.id"), nullable=False)
    started_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)


Index("ix_wme_session_log_character_world", SessionLog.character_id, SessionLog.world_id, SessionLog.started_at.desc())


class SessionLogEntry(Base):
    __tablename__ = "wme_session_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entry_id: Mapped[str] = mapped_column(String(36), nullable=False, unique=True)
    session_id: Mapped[str] = mapped_column(String(36), ForeignKey("wme_session_logs.id"), nullable=False)
    world_id: Mapped[str] = mapped_column(String(36), ForeignKey("wme_worlds.id"), nullable=False)
    location_id: Mapped[str | None] = mapped_column(String(36), nullable=True)

    author: Mapped[str] = mapped_column(String(16), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    action_summary_json: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)


Index("ix_wme_session_entry_session_id_desc", SessionLogEntry.session_id, SessionLogEntry.id.desc())
