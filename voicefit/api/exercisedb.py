"""ExerciseDB (RapidAPI) client."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from voicefit.api.constants import (
    DEFAULT_TIMEOUT_SECONDS,
    EXERCISEDB_API_BASE,
    EXERCISEDB_BODY_PART_PATH,
    EXERCISEDB_HOST,
)

logger = logging.getLogger(__name__)


class ExerciseDBError(RuntimeError):
    """Raised for exercise database failures."""


@dataclass(frozen=True)
class ExerciseRecord:
    id: str
    name: str
    body_part: str
    equipment: str
    target: str
    gif_url: str | None = None
    instructions: tuple[str, ...] = ()


def exercise_from_json(raw: Any) -> ExerciseRecord:
    if not isinstance(raw, dict):
        raise ExerciseDBError("Exercise record must be an object")
    name = str(raw.get("name") or "").strip()
    if not name:
        raise ExerciseDBError("Exercise record is missing a name")
    instructions = raw.get("instructions") or ()
    if isinstance(instructions, str):
        instructions = (instructions,)
    return ExerciseRecord(
        id=str(raw.get("id", "")),
        name=name,
        body_part=str(raw.get("bodyPart", "")).strip(),
        equipment=str(raw.get("equipment", "")).strip(),
        target=str(raw.get("target", "")).strip(),
        gif_url=raw.get("gifUrl") or None,
        instructions=tuple(str(item).strip() for item in instructions if str(item).strip()),
    )


class ExerciseDBClient:
    def __init__(
        self,
        api_key: str | None,
        host: str = EXERCISEDB_HOST,
        base_url: str = EXERCISEDB_API_BASE,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._has_key = bool(api_key)
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"X-RapidAPI-Key": api_key or "", "X-RapidAPI-Host": host},
            timeout=timeout_seconds,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_by_body_part(self, body_part: str) -> list[ExerciseRecord]:
        if not self._has_key:
            raise ExerciseDBError("EXERCISEDB_KEY is not configured")
        if not body_part:
            raise ExerciseDBError("Missing body part")
        path = EXERCISEDB_BODY_PART_PATH.format(body_part=body_part)
        try:
            response = await self._client.get(path)
        except httpx.HTTPError as exc:
            raise ExerciseDBError(f"Request failed for GET {path}: {exc}") from exc
        if not response.is_success:
            raise ExerciseDBError(
                f"Failed to fetch from ExerciseDB ({response.status_code}) for {body_part}"
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise ExerciseDBError(f"Invalid JSON from ExerciseDB: {exc}") from exc
        if not isinstance(data, list):
            raise ExerciseDBError("ExerciseDB response must be an array")

        records: list[ExerciseRecord] = []
        for raw in data:
            try:
                records.append(exercise_from_json(raw))
            except ExerciseDBError as exc:
                logger.warning("Skipping exercise record: %s", exc)
        return records
