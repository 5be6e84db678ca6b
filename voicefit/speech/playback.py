"""Audio playback backends for narration."""

from __future__ import annotations

import asyncio
import contextlib
import shutil
from typing import Protocol, Sequence

DEFAULT_PLAYER_COMMAND: tuple[str, ...] = (
    "ffplay",
    "-nodisp",
    "-autoexit",
    "-loglevel",
    "quiet",
    "-",
)


class PlaybackError(RuntimeError):
    """Raised when audio could not be played."""


class AudioPlayer(Protocol):
    async def play(self, audio: bytes) -> None: ...


class SubprocessPlayer:
    """Pipe audio into a command line player; cancelling kills the process."""

    def __init__(self, command: Sequence[str] = DEFAULT_PLAYER_COMMAND) -> None:
        if not command:
            raise ValueError("Player command must not be empty")
        self._command = tuple(command)

    @property
    def available(self) -> bool:
        return shutil.which(self._command[0]) is not None

    async def play(self, audio: bytes) -> None:
        if not audio:
            raise PlaybackError("No audio to play")
        if not self.available:
            raise PlaybackError(f"Audio player '{self._command[0]}' not found")

        proc = await asyncio.create_subprocess_exec(
            *self._command,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
        try:
            await proc.communicate(audio)
        except asyncio.CancelledError:
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            await proc.wait()
            raise
        if proc.returncode != 0:
            raise PlaybackError(f"Audio player exited with code {proc.returncode}")


class SilentPlayer:
    """Accepts audio and plays nothing (``--no-audio``)."""

    async def play(self, audio: bytes) -> None:
        if not audio:
            raise PlaybackError("No audio to play")
