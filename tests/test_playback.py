from __future__ import annotations

import asyncio
import shutil

import pytest

from voicefit.speech.playback import PlaybackError, SilentPlayer, SubprocessPlayer


def test_silent_player_requires_audio() -> None:
    async def _run() -> None:
        player = SilentPlayer()
        await player.play(b"mp3")
        with pytest.raises(PlaybackError):
            await player.play(b"")

    asyncio.run(_run())


def test_missing_player_command() -> None:
    async def _run() -> None:
        player = SubprocessPlayer(("voicefit-no-such-player",))
        assert not player.available
        with pytest.raises(PlaybackError, match="not found"):
            await player.play(b"mp3")

    asyncio.run(_run())


@pytest.mark.skipif(shutil.which("cat") is None, reason="needs cat")
def test_subprocess_player_pipes_audio() -> None:
    asyncio.run(SubprocessPlayer(("cat",)).play(b"mp3"))


@pytest.mark.skipif(shutil.which("sleep") is None, reason="needs sleep")
def test_cancel_kills_player_process() -> None:
    async def _run() -> None:
        task = asyncio.create_task(SubprocessPlayer(("sleep", "5")).play(b"mp3"))
        await asyncio.sleep(0.2)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await asyncio.wait_for(task, timeout=2.0)

    asyncio.run(_run())
