"""Async controller shared by the web UI and the terminal engine."""

from __future__ import annotations

import random
from typing import Callable, Optional

from voicefit.api.exercisedb import ExerciseDBClient
from voicefit.api.speech import SpeechClient
from voicefit.core.config import AppConfig
from voicefit.speech.narration import NarrationClient
from voicefit.speech.playback import AudioPlayer, SilentPlayer, SubprocessPlayer
from voicefit.workout.model import WorkoutPlan
from voicefit.workout.planner import ExerciseSource, generate_plan
from voicefit.workout.session import SessionController


class UIController:
    def __init__(
        self,
        config: AppConfig,
        *,
        play_audio: bool = True,
        speech_client: Optional[SpeechClient] = None,
        exercise_source: Optional[ExerciseSource] = None,
        player: Optional[AudioPlayer] = None,
        rng: Optional[random.Random] = None,
        tick_interval_sec: float = 1.0,
    ) -> None:
        self._config = config
        self._tick_interval_sec = tick_interval_sec
        self._speech = speech_client or SpeechClient(
            config.spitch_api_key,
            base_url=config.spitch_base_url,
            timeout_seconds=config.tts_timeout_sec,
        )
        self._exercises = exercise_source or ExerciseDBClient(
            config.exercisedb_key,
            host=config.exercisedb_host,
            base_url=f"https://{config.exercisedb_host}",
        )
        if player is None:
            player = SubprocessPlayer(config.player_command) if play_audio else SilentPlayer()
        self._player = player
        self._rng = rng or random.Random()
        self._session: SessionController | None = None
        self._narrator: NarrationClient | None = None

    @property
    def session(self) -> SessionController | None:
        return self._session

    async def transcribe(
        self, audio: bytes, language: str, filename: str = "recording.mp3"
    ) -> str:
        return await self._speech.transcribe(audio, language, filename=filename)

    async def build_plan(self, request: str) -> WorkoutPlan:
        return await generate_plan(request, self._exercises, self._rng)

    def start_session(
        self,
        plan: WorkoutPlan,
        *,
        on_complete: Callable[[], None],
        on_exit: Callable[[], None],
        language: str | None = None,
    ) -> SessionController:
        self.end_session()
        narrator = NarrationClient(
            self._speech,
            self._player,
            timeout_sec=self._config.tts_timeout_sec,
        )
        self._narrator = narrator
        self._session = SessionController(
            plan,
            narrator,
            on_complete=on_complete,
            on_exit=on_exit,
            language=language or self._config.language,
            narration_delay_sec=self._config.narration_delay_sec,
            tick_interval_sec=self._tick_interval_sec,
        )
        self._session.begin()
        return self._session

    def end_session(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    async def aclose(self) -> None:
        if self._narrator is not None:
            await self._narrator.aclose()
            self._narrator = None
        self.end_session()
        await self._speech.aclose()
        aclose = getattr(self._exercises, "aclose", None)
        if aclose is not None:
            await aclose()
