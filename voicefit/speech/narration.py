"""Narration client: text to speech with at most one request in flight.

A request goes ``REQUESTING -> PLAYING -> IDLE``. Starting a new request
while one is outstanding either supersedes it (the old one is cancelled) or
is rejected, depending on ``supersede``. Failures and cancellations are
returned as a :class:`NarrationResult`, never raised to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from voicefit.speech.phrases import MAX_NARRATION_CHARS, resolve_language, sanitize
from voicefit.speech.playback import AudioPlayer

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT_SEC = 15.0


class NarrationFailed(RuntimeError):
    """Raised inside a request when the backend gives nothing playable."""


class Synthesizer(Protocol):
    async def synthesize(self, text: str, language: str) -> bytes: ...


class NarrationState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    PLAYING = "playing"


class NarrationOutcome(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"


@dataclass(frozen=True)
class NarrationResult:
    outcome: NarrationOutcome
    text: str = ""
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome is NarrationOutcome.COMPLETED

    @property
    def status(self) -> str:
        if self.outcome is NarrationOutcome.FAILED:
            return f"Failed: {self.message}" if self.message else "Failed"
        if self.outcome is NarrationOutcome.REJECTED:
            return "Busy"
        return self.outcome.value.capitalize()


class NarrationClient:
    def __init__(
        self,
        synthesizer: Synthesizer,
        player: AudioPlayer,
        *,
        max_chars: int = MAX_NARRATION_CHARS,
        timeout_sec: float = DEFAULT_REQUEST_TIMEOUT_SEC,
    ) -> None:
        self._synthesizer = synthesizer
        self._player = player
        self._max_chars = max_chars
        self._timeout_sec = timeout_sec
        self._state = NarrationState.IDLE
        self._active: Optional[asyncio.Task[None]] = None

    @property
    def state(self) -> NarrationState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._active is not None and not self._active.done()

    def cancel(self) -> bool:
        """Abort the outstanding request or playback, if any."""
        task = self._active
        if task is None or task.done():
            return False
        task.cancel()
        self._active = None
        self._state = NarrationState.IDLE
        logger.debug("Narration cancelled")
        return True

    async def aclose(self) -> None:
        """Cancel any request and wait until its playback has stopped."""
        task = self._active
        if self.cancel() and task is not None:
            await asyncio.wait({task})

    async def narrate(
        self,
        text: str,
        language: str = "en",
        *,
        supersede: bool = True,
    ) -> NarrationResult:
        clean = sanitize(text or "", self._max_chars)
        if not clean:
            return NarrationResult(
                NarrationOutcome.FAILED, message="No valid text to speak"
            )

        if self.busy:
            if not supersede:
                logger.debug("Narration rejected, client busy")
                return NarrationResult(NarrationOutcome.REJECTED, text=clean)
            self.cancel()

        lang = resolve_language(language)
        task = asyncio.create_task(self._speak(clean, lang.value))
        self._active = task
        self._state = NarrationState.REQUESTING
        logger.info("Speaking (%s): %s", lang.value, clean)

        try:
            await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                task.cancel()
                raise
            return NarrationResult(NarrationOutcome.CANCELLED, text=clean)
        except TimeoutError:
            logger.warning("Narration timed out after %.1fs", self._timeout_sec)
            return NarrationResult(
                NarrationOutcome.FAILED, text=clean, message="Request timed out"
            )
        except Exception as exc:
            logger.warning("Narration failed: %s", exc)
            return NarrationResult(NarrationOutcome.FAILED, text=clean, message=str(exc))
        finally:
            if self._active is task:
                self._active = None
                self._state = NarrationState.IDLE

        return NarrationResult(NarrationOutcome.COMPLETED, text=clean)

    async def _speak(self, text: str, language: str) -> None:
        async with asyncio.timeout(self._timeout_sec):
            audio = await self._synthesizer.synthesize(text, language)
        if not audio:
            raise NarrationFailed("Empty audio received")
        self._state = NarrationState.PLAYING
        await self._player.play(audio)
