from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Awaitable, Callable

from .config import DEFAULT_CONFIG, EngineConfig
from .errors import (
    CharacterNotFoundError,
    LocationNotFoundError,
    StaleWorldError,
    TurnPayloadError,
    WorldNotFoundError,
)
from .normalize import parse_game_turn
from .ports import NarratorPort
from .tools import NavigationTools
from .turns import apply_game_turn
from .types import (
    Character,
    NarratorContext,
    ResolveTurnInput,
    ResolveTurnResult,
    SessionEntry,
    World,
)
from .worlds import find_last_action_reminder, new_character, new_world, resolve_current_location

if TYPE_CHECKING:
    from ..persistence.interfaces import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass
class _PreparedTurn:
    world: World
    character: Character
    row_version: int
    session_id: str | None
    context: NarratorContext


class GameEngine:
    """Runs one player turn end to end against persisted state.

    Loads the world and character, asks the narrator for a turn, folds it
    into the graph with :func:`apply_game_turn` and saves the result with a
    compare-and-swap on the world's ``row_version``.
    """

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        narrator: NarratorPort,
        config: EngineConfig | None = None,
        clock: Callable[[], datetime] | None = None,
        max_conflict_retries: int = 1,
    ):
        self._uow_factory = uow_factory
        self._narrator = narrator
        self._config = config or DEFAULT_CONFIG
        self._clock = clock or datetime.utcnow
        self._max_conflict_retries = max_conflict_retries

    async def resolve_turn(
        self,
        turn_input: ResolveTurnInput,
        before_save: Callable[[NarratorContext, int], Awaitable[None] | None] | None = None,
    ) -> ResolveTurnResult:
        for attempt in range(self._max_conflict_retries + 1):
            try:
                prepared = self._prepare(turn_input)
            except WorldNotFoundError:
                return ResolveTurnResult(status="not_found", reason="world_not_found")
            except CharacterNotFoundError:
                return ResolveTurnResult(status="not_found", reason="character_not_found")
            except LocationNotFoundError:
                return ResolveTurnResult(status="not_found", reason="world_has_no_locations")

            try:
                raw_turn = await self._narrator.generate_turn(prepared.context)
            except Exception as exc:
                logger.exception("Narrator failed for world %s", turn_input.world_id)
                return ResolveTurnResult(status="error", reason=f"narrator_failed: {exc}")

            try:
                turn = parse_game_turn(raw_turn)
            except TurnPayloadError as exc:
                logger.warning("Rejected narrator payload for world %s: %s", turn_input.world_id, exc)
                return ResolveTurnResult(status="invalid_payload", reason="invalid_turn_payload", issues=exc.issues)

            applied = apply_game_turn(
                prepared.world,
                prepared.character,
                turn,
                turn_input.message,
                turn_input.is_initial,
                config=self._config,
                now=self._clock(),
            )

            if before_save is not None:
                maybe = before_save(prepared.context, attempt)
                if asyncio.iscoroutine(maybe):
                    await maybe

            try:
                self._save(prepared, applied.world, applied.character, applied.new_entries)
            except StaleWorldError:
                logger.info("World %s changed during turn, attempt %d", turn_input.world_id, attempt + 1)
                if attempt < self._max_conflict_retries:
                    continue
                return ResolveTurnResult(status="conflict", reason="row_version_conflict")

            return ResolveTurnResult(
                status="ok",
                world=applied.world,
                character=applied.character,
                entries=applied.new_entries,
                suggestions=list(turn.suggestions),
            )

        return ResolveTurnResult(status="conflict", reason="max_retries_exhausted")

    def create_world(self, name: str = "", setting: str = "", atmosphere: str = "", genre: str = "") -> World:
        world = new_world(name, setting, atmosphere, genre, config=self._config, now=self._clock())
        with self._uow_factory() as uow:
            uow.worlds.add(world)
            uow.commit()
        return world

    def create_character(self, name: str, description: str = "", world_id: str | None = None) -> Character:
        character = new_character(name, description, world_id)
        with self._uow_factory() as uow:
            uow.characters.add(character)
            uow.commit()
        return character

    def get_world(self, world_id: str) -> World | None:
        with self._uow_factory() as uow:
            return uow.worlds.load(world_id)

    def get_character(self, character_id: str) -> Character | None:
        with self._uow_factory() as uow:
            return uow.characters.load(character_id)

    def session_entries(self, character_id: str, world_id: str) -> list[SessionEntry]:
        with self._uow_factory() as uow:
            log = uow.session_logs.latest_for(character_id, world_id)
            if log is None:
                return []
            return uow.session_entries.list_for_session(log.id)

    def _prepare(self, turn_input: ResolveTurnInput) -> _PreparedTurn:
        with self._uow_factory() as uow:
            loaded = uow.worlds.load_versioned(turn_input.world_id)
            if loaded is None:
                raise WorldNotFoundError(turn_input.world_id)
            world, row_version = loaded

            character = uow.characters.load(turn_input.character_id)
            if character is None:
                raise CharacterNotFoundError(turn_input.character_id)

            current_location = resolve_current_location(world, character.current_location_id)
            session_id = self._find_session_log(uow, character, world.id)
            all_entries = uow.session_entries.list_for_session(session_id) if session_id else []

        window = self._config.narrator_history_window
        context = NarratorContext(
            world=world,
            character=character,
            player_message=turn_input.message,
            history=all_entries[-window:] if window > 0 else [],
            current_location=current_location,
            known_locations=list(world.graph.values()),
            last_action_reminder=find_last_action_reminder(all_entries, current_location.id),
            is_initial=turn_input.is_initial,
            tools=NavigationTools(world, current_location.id, self._config),
        )
        return _PreparedTurn(
            world=world,
            character=character,
            row_version=row_version,
            session_id=session_id,
            context=context,
        )

    def _find_session_log(self, uow: UnitOfWork, character: Character, world_id: str) -> str | None:
        if character.last_session_id:
            log = uow.session_logs.get(character.last_session_id)
            if log is not None and log.world_id == world_id and log.character_id == character.id:
                return log.id

        log = uow.session_logs.latest_for(character.id, world_id)
        return log.id if log is not None else None

    def _save(
        self,
        prepared: _PreparedTurn,
        world: World,
        character: Character,
        entries: list[SessionEntry],
    ) -> None:
        # The session log is only opened once a turn is actually stored.
        with self._uow_factory() as uow:
            if not uow.worlds.cas_save(world, prepared.row_version):
                uow.rollback()
                raise StaleWorldError(world.id)

            session_id = prepared.session_id
            if session_id is None:
                session_id = uow.session_logs.create(character.id, world.id, self._clock()).id
            uow.session_entries.add_many(session_id, entries)
            character.last_session_id = session_id
            uow.characters.save(character)
            uow.commit()
