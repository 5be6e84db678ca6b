"""Endpoints for the third-party speech and exercise APIs."""

from __future__ import annotations

SPITCH_API_BASE = "https://api.spi-tch.com"
SPITCH_SPEECH_PATH = "/v1/speech"
SPITCH_TRANSCRIBE_PATH = "/v1/transcriptions"

EXERCISEDB_HOST = "exercisedb.p.rapidapi.com"
EXERCISEDB_API_BASE = f"https://{EXERCISEDB_HOST}"
EXERCISEDB_BODY_PART_PATH = "/exercises/bodyPart/{body_part}"

DEFAULT_TIMEOUT_SECONDS = 15.0
