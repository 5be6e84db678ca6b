"""Workout plan parser (JSON files and API-shaped dicts)."""

from __future__ import annotations

import json
import math
import re
from pathlib import Path
from typing import Any

from voicefit.workout.model import Difficulty, Step, StepKind, WorkoutPlan

DEFAULT_DURATION_SEC = 30

_DURATION_RE = re.compile(r"(\d+)\s*(sec|min)", re.IGNORECASE)


class PlanParseError(ValueError):
    """Raised when a workout plan file is invalid."""


def parse_duration(raw: str | None) -> int:
    """Parse ``"45 sec"`` / ``"2 min"``; anything unreadable counts as 30 seconds."""
    if not raw:
        return DEFAULT_DURATION_SEC
    match = _DURATION_RE.search(raw)
    if match is None:
        return DEFAULT_DURATION_SEC
    value = int(match.group(1))
    seconds = value * 60 if match.group(2).lower() == "min" else value
    return seconds if seconds > 0 else DEFAULT_DURATION_SEC


def format_duration(total_seconds: int) -> str:
    minutes, seconds = divmod(max(0, total_seconds), 60)
    return f"{minutes:02d}:{seconds:02d}"


def load_plan(path: str | Path) -> WorkoutPlan:
    file_path = Path(path)
    if file_path.suffix.lower() != ".json":
        raise PlanParseError(
            f"Unsupported plan format '{file_path.suffix}'. Use .json"
        )
    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise PlanParseError(f"Invalid JSON: {exc}") from exc
    return plan_from_dict(data, default_title=file_path.stem)


def plan_from_dict(data: Any, default_title: str = "Workout") -> WorkoutPlan:
    if not isinstance(data, dict):
        raise PlanParseError("Workout plan must be an object")

    title_obj = data.get("title", default_title)
    if not isinstance(title_obj, str):
        raise PlanParseError("Plan field 'title' must be a string")

    steps_obj = data.get("steps", data.get("exercises"))
    if not isinstance(steps_obj, list):
        raise PlanParseError("Plan field 'steps' must be an array")

    steps: list[Step] = []
    for i, raw in enumerate(steps_obj):
        if not isinstance(raw, dict):
            raise PlanParseError(f"Step {i + 1}: must be an object")
        steps.append(_build_step(raw, index=i))

    if not steps:
        raise PlanParseError("Workout must contain at least one step")

    total_obj = data.get("totalTime", data.get("total_duration"))
    total_duration = (
        str(total_obj).strip()
        if total_obj
        else minutes_label(sum(step.duration_sec for step in steps))
    )

    return WorkoutPlan(
        title=title_obj.strip() or default_title,
        total_duration=total_duration,
        difficulty=_parse_difficulty(data.get("difficulty")),
        steps=tuple(steps),
    )


def _build_step(raw: dict[str, Any], *, index: int) -> Step:
    name_obj = raw.get("name")
    if not isinstance(name_obj, str) or not name_obj.strip():
        raise PlanParseError(f"Step {index + 1}: missing name")

    if "duration_sec" in raw:
        duration_sec = _parse_int_field(raw["duration_sec"], "duration_sec", index)
        if duration_sec <= 0:
            raise PlanParseError(f"Step {index + 1}: duration_sec must be > 0")
    else:
        duration_sec = parse_duration(_optional_text(raw.get("duration")))

    kind_obj = str(raw.get("type", raw.get("kind", StepKind.EXERCISE.value)))
    try:
        kind = StepKind(kind_obj.strip().lower())
    except ValueError as exc:
        raise PlanParseError(f"Step {index + 1}: invalid type '{kind_obj}'") from exc

    narration = raw.get("narration", raw.get("instructions"))
    if isinstance(narration, list):
        narration = ". ".join(str(item).strip() for item in narration if str(item).strip())

    return Step(
        name=name_obj.strip(),
        duration_sec=duration_sec,
        kind=kind,
        description=_optional_text(raw.get("description")),
        narration=_optional_text(narration),
    )


def _parse_difficulty(raw: object) -> Difficulty:
    if raw is None:
        return Difficulty.BEGINNER
    try:
        return Difficulty(str(raw).strip().capitalize())
    except ValueError as exc:
        raise PlanParseError(f"Invalid difficulty '{raw}'") from exc


def _parse_int_field(raw: object, field_name: str, index: int) -> int:
    try:
        return int(str(raw).strip())
    except ValueError as exc:
        raise PlanParseError(f"Step {index + 1}: invalid {field_name}") from exc


def _optional_text(raw: object) -> str | None:
    if raw is None:
        return None
    return str(raw).strip() or None


def minutes_label(total_seconds: int) -> str:
    return f"{math.ceil(total_seconds / 60)} min"
