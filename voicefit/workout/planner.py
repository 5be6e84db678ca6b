"""Rule-based workout plans from a free-text request and ExerciseDB records."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import replace
from typing import Protocol, Sequence

from voicefit.api.exercisedb import ExerciseRecord
from voicefit.workout.model import Difficulty, Step, StepKind, WorkoutPlan
from voicefit.workout.parser import minutes_label

logger = logging.getLogger(__name__)

EXERCISE_DURATION_SEC = 45
REST_DURATION_SEC = 15
MAX_EXERCISES = 8
EXERCISES_PER_FETCH = 5
DEFAULT_NARRATION = "Follow proper form and technique"
REST_DESCRIPTION = "Take a short break and prepare for the next exercise"

FULL_BODY: tuple[str, ...] = ("chest", "back", "shoulders", "legs")

# First match wins; keywords are matched as substrings of the lowered request.
REQUEST_RULES: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (("full", "whole", "complete"), FULL_BODY),
    (("upper",), ("chest", "back", "shoulders")),
    (("lower",), ("legs",)),
    (("chest",), ("chest",)),
    (("back",), ("back",)),
    (("leg", "thigh"), ("legs",)),
    (("arm", "bicep", "tricep"), ("shoulders",)),
    (("abs", "core"), ("waist",)),
)


class PlanGenerationError(RuntimeError):
    """Raised when no plan can be assembled for a request."""


class ExerciseSource(Protocol):
    async def fetch_by_body_part(self, body_part: str) -> list[ExerciseRecord]: ...


def parse_workout_request(request: str) -> tuple[str, ...]:
    lowered = request.lower()
    for keywords, body_parts in REQUEST_RULES:
        if any(keyword in lowered for keyword in keywords):
            return body_parts
    return FULL_BODY


def _difficulty_for(exercise_count: int) -> Difficulty:
    if exercise_count <= 4:
        return Difficulty.BEGINNER
    if exercise_count <= 6:
        return Difficulty.INTERMEDIATE
    return Difficulty.ADVANCED


def _title_for(body_parts: Sequence[str]) -> str:
    if len(body_parts) > 2:
        return "Full Body Workout"
    return f"{' & '.join(body_parts).upper()} Workout"


def _exercise_step(record: ExerciseRecord) -> Step:
    narration = ". ".join(record.instructions) if record.instructions else DEFAULT_NARRATION
    return Step(
        name=record.name,
        duration_sec=EXERCISE_DURATION_SEC,
        kind=StepKind.EXERCISE,
        description=f"Target: {record.target} | Equipment: {record.equipment}",
        narration=narration,
    )


def build_plan(
    body_parts: Sequence[str],
    exercises: Sequence[ExerciseRecord],
    rng: random.Random,
) -> WorkoutPlan:
    if not body_parts:
        raise PlanGenerationError("No body parts requested")

    per_part = math.ceil(MAX_EXERCISES / len(body_parts))
    selected: list[ExerciseRecord] = []
    for body_part in body_parts:
        candidates = [record for record in exercises if record.body_part == body_part]
        rng.shuffle(candidates)
        selected.extend(candidates[:per_part])

    if not selected:
        raise PlanGenerationError(
            f"No exercises available for {', '.join(body_parts)}"
        )

    steps: list[Step] = []
    for index, record in enumerate(selected):
        steps.append(_exercise_step(record))
        if index < len(selected) - 1:
            steps.append(
                Step(
                    name="Rest",
                    duration_sec=REST_DURATION_SEC,
                    kind=StepKind.REST,
                    description=REST_DESCRIPTION,
                )
            )

    total_sec = len(selected) * EXERCISE_DURATION_SEC + (len(selected) - 1) * REST_DURATION_SEC
    return WorkoutPlan(
        title=_title_for(body_parts),
        total_duration=minutes_label(total_sec),
        difficulty=_difficulty_for(len(selected)),
        steps=tuple(steps),
    )


async def fetch_exercises(
    source: ExerciseSource,
    body_parts: Sequence[str],
    rng: random.Random,
) -> list[ExerciseRecord]:
    """Fetch a random handful of exercises per body part, skipping failed parts."""
    pool: list[ExerciseRecord] = []
    for body_part in body_parts:
        try:
            records = await source.fetch_by_body_part(body_part)
        except Exception as exc:
            logger.warning("Failed to fetch exercises for %s: %s", body_part, exc)
            continue
        records = [
            record if record.body_part else replace(record, body_part=body_part)
            for record in records
        ]
        rng.shuffle(records)
        pool.extend(records[:EXERCISES_PER_FETCH])
    return pool


async def generate_plan(
    request: str,
    source: ExerciseSource,
    rng: random.Random | None = None,
) -> WorkoutPlan:
    rng = rng or random.Random()
    body_parts = parse_workout_request(request)
    logger.info("Request %r -> body parts %s", request, ", ".join(body_parts))
    pool = await fetch_exercises(source, body_parts, rng)
    if not pool:
        raise PlanGenerationError("Unable to fetch exercises. Please try again.")
    return build_plan(body_parts, pool, rng)
