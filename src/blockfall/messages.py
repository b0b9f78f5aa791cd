"""Transient status messages shown by the host."""

from __future__ import annotations

from dataclasses import dataclass

from .piece import Color


# Durations in seconds; negative values never expire.
FOREVER = -1.0
SHORT = 1.0
LONG = 10.0


@dataclass(frozen=True)
class StatusMessage:
    """A piece of feedback text issued at ``issued_at``."""

    text: str = ""
    color: Color = "#ffffff"
    issued_at: float = 0.0
    duration: float = FOREVER

    def is_expired(self, now: float) -> bool:
        if self.duration < 0:
            return False
        return now - self.issued_at > self.duration


EMPTY_MESSAGE = StatusMessage()
