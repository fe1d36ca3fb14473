from __future__ import annotations

import os
from dataclasses import dataclass, field

from smartvpn.constants import HISTORY, RULES, SERVERS

DEFAULT_ONE_SHOT = frozenset({SERVERS, RULES, HISTORY})


@dataclass(frozen=True)
class PollingConfig:
    """Per-screen refresh policy.

    Screens listed in ``one_shot_screens`` fetch once when mounted; every other
    screen re-polls every ``poll_interval_s`` seconds.
    """

    poll_interval_s: float = 3.0
    one_shot_screens: frozenset[str] = field(default_factory=lambda: DEFAULT_ONE_SHOT)

    def interval_for(self, screen: str) -> float | None:
        """Return the refresh interval for ``screen``, or None for a one-shot screen."""
        if screen in self.one_shot_screens:
            return None
        return self.poll_interval_s

    @classmethod
    def from_env(cls) -> "PollingConfig":
        interval_ms = int(os.getenv("SMARTVPN_POLL_INTERVAL_MS", "3000"))
        if interval_ms <= 0:
            raise ValueError("SMARTVPN_POLL_INTERVAL_MS must be > 0")
        raw = os.getenv("SMARTVPN_ONE_SHOT_SCREENS")
        if raw is None:
            one_shot = DEFAULT_ONE_SHOT
        else:
            one_shot = frozenset(
                s.strip().lower() for s in raw.split(",") if s.strip()
            )
        return cls(poll_interval_s=interval_ms / 1000.0, one_shot_screens=one_shot)


# Export a default instance for convenience
polling = PollingConfig.from_env()
