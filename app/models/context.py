from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class Preferences:
    region: str = "US"


@dataclass(slots=True)
class RequestContext:
    """Per-request caller state, passed explicitly to every handler."""

    user: str | None = None
    preferences: Preferences = field(default_factory=Preferences)

    def region_for(self, requested: str | None) -> str:
        """An explicit region in the request body wins over the preference."""
        if isinstance(requested, str) and requested.strip():
            return requested.strip().upper()
        return self.preferences.region
