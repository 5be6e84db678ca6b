"""Runtime configuration from the environment (and an optional .env file)."""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from voicefit.api.constants import (
    DEFAULT_TIMEOUT_SECONDS,
    EXERCISEDB_HOST,
    SPITCH_API_BASE,
)
from voicefit.speech.phrases import DEFAULT_LANGUAGE, resolve_language
from voicefit.speech.playback import DEFAULT_PLAYER_COMMAND
from voicefit.workout.session import DEFAULT_NARRATION_DELAY_SEC


class ConfigError(RuntimeError):
    """Raised when an environment setting cannot be used."""


@dataclass(frozen=True)
class AppConfig:
    spitch_api_key: str | None = None
    spitch_base_url: str = SPITCH_API_BASE
    exercisedb_key: str | None = None
    exercisedb_host: str = EXERCISEDB_HOST
    language: str = DEFAULT_LANGUAGE.value
    narration_delay_sec: float = DEFAULT_NARRATION_DELAY_SEC
    tts_timeout_sec: float = DEFAULT_TIMEOUT_SECONDS
    player_command: tuple[str, ...] = DEFAULT_PLAYER_COMMAND


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc
    if value < 0:
        raise ConfigError(f"{name} must be >= 0")
    return value


def load_config(env_file: Path | None = None) -> AppConfig:
    load_dotenv(dotenv_path=env_file)

    player_raw = os.getenv("VOICEFIT_PLAYER")
    player_command = (
        tuple(shlex.split(player_raw)) if player_raw else DEFAULT_PLAYER_COMMAND
    )

    return AppConfig(
        spitch_api_key=os.getenv("SPITCH_API_KEY") or None,
        spitch_base_url=os.getenv("SPITCH_BASE_URL") or SPITCH_API_BASE,
        exercisedb_key=os.getenv("EXERCISEDB_KEY") or None,
        exercisedb_host=os.getenv("EXERCISEDB_HOST") or EXERCISEDB_HOST,
        language=resolve_language(os.getenv("VOICEFIT_LANGUAGE")).value,
        narration_delay_sec=_env_float(
            "VOICEFIT_NARRATION_DELAY", DEFAULT_NARRATION_DELAY_SEC
        ),
        tts_timeout_sec=_env_float("VOICEFIT_TTS_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
        player_command=player_command,
    )
