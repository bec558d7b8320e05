from .db import IN_MEMORY_URL, build_engine, build_session_factory, create_schema
from .repos import character_from_record, world_from_record
from .uow import SQLAlchemyUnitOfWork

__all__ = [
    "IN_MEMORY_URL",
    "build_engine",
    "build_session_factory",
    "create_schema",
    "SQLAlchemyUnitOfWork",
    "world_from_record",
    "character_from_record",
]
