from __future__ import annotations

from dataclasses import dataclass

CONNECTION_POLICY_ALWAYS = "always"
CONNECTION_POLICY_MINIMAL = "minimal"


@dataclass(frozen=True)
class EngineConfig:
    default_exit_label: str = "go to"
    # "always" adds a direct edge for every exit; "minimal" skips it when the
    # target is already reachable through other locations.
    connection_policy: str = CONNECTION_POLICY_ALWAYS
    max_route_depth: int = 7
    min_indirect_depth: int = 2
    fuzzy_limit: int = 5
    fuzzy_threshold: float = 0.3
    history_limit: int = 200
    narrator_history_window: int = 12
    record_action_summaries: bool = True
    default_world_name: str = "New world"
    entry_location_name: str = "Central location"

    def __post_init__(self) -> None:
        if self.connection_policy not in (CONNECTION_POLICY_ALWAYS, CONNECTION_POLICY_MINIMAL):
            raise ValueError(f"unknown connection_policy: {self.connection_policy!r}")
        if self.max_route_depth < 1:
            raise ValueError("max_route_depth must be >= 1")


DEFAULT_CONFIG = EngineConfig()
