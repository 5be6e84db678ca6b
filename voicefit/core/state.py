"""Mutable state of one guided session."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from voicefit.speech.narration import NarrationState


class SessionPhase(str, Enum):
    NOT_STARTED = "not_started"
    ACTIVE = "active"
    COMPLETED = "completed"
    EXITED = "exited"


@dataclass
class SessionState:
    current_index: int = 0
    time_remaining_sec: int = 0
    running: bool = False
    narration_state: NarrationState = NarrationState.IDLE
    phase: SessionPhase = SessionPhase.NOT_STARTED
    last_status: str = "Ready"

    @property
    def finished(self) -> bool:
        return self.phase in (SessionPhase.COMPLETED, SessionPhase.EXITED)
