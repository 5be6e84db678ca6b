from __future__ import annotations

import asyncio
import random

import pytest

from voicefit.api.exercisedb import ExerciseDBError, ExerciseRecord
from voicefit.workout.model import Difficulty, StepKind
from voicefit.workout.planner import (
    DEFAULT_NARRATION,
    FULL_BODY,
    PlanGenerationError,
    build_plan,
    generate_plan,
    parse_workout_request,
)


def _records(body_part: str, count: int) -> list[ExerciseRecord]:
    return [
        ExerciseRecord(
            id=f"{body_part}-{i}",
            name=f"{body_part} move {i}",
            body_part=body_part,
            equipment="body weight",
            target="strength",
            instructions=("Brace your core", "Move slowly") if i % 2 else (),
        )
        for i in range(count)
    ]


class FakeExerciseSource:
    def __init__(self, failing: tuple[str, ...] = ()) -> None:
        self.failing = failing
        self.requested: list[str] = []

    async def fetch_by_body_part(self, body_part: str) -> list[ExerciseRecord]:
        self.requested.append(body_part)
        if body_part in self.failing:
            raise ExerciseDBError(f"Failed to fetch from ExerciseDB (500) for {body_part}")
        return _records(body_part, 10)


@pytest.mark.parametrize(
    ("request_text", "expected"),
    [
        ("Give me a full body burner", FULL_BODY),
        ("quick UPPER body session", ("chest", "back", "shoulders")),
        ("lower body please", ("legs",)),
        ("chest day", ("chest",)),
        ("strong back", ("back",)),
        ("thigh toner", ("legs",)),
        ("bicep pump", ("shoulders",)),
        ("core blast", ("waist",)),
        ("surprise me", FULL_BODY),
    ],
)
def test_parse_workout_request(request_text: str, expected: tuple[str, ...]) -> None:
    assert parse_workout_request(request_text) == expected


def test_build_plan_interleaves_rest_steps() -> None:
    plan = build_plan(("legs",), _records("legs", 5), random.Random(7))

    kinds = [step.kind for step in plan.steps]
    assert kinds == [
        StepKind.EXERCISE,
        StepKind.REST,
        StepKind.EXERCISE,
        StepKind.REST,
        StepKind.EXERCISE,
        StepKind.REST,
        StepKind.EXERCISE,
        StepKind.REST,
        StepKind.EXERCISE,
    ]
    assert plan.title == "LEGS Workout"
    assert plan.difficulty is Difficulty.INTERMEDIATE
    assert plan.total_duration == "5 min"
    assert all(step.duration_sec == 45 for step in plan.exercise_steps)
    assert all(step.duration_sec == 15 for step in plan.steps if not step.is_exercise)


def test_build_plan_caps_exercises_per_part() -> None:
    pool = _records("chest", 5) + _records("back", 5)

    plan = build_plan(("chest", "back"), pool, random.Random(3))

    names = [step.name for step in plan.exercise_steps]
    assert len(names) == 8
    assert sum(name.startswith("chest") for name in names) == 4
    assert plan.title == "CHEST & BACK Workout"
    assert plan.difficulty is Difficulty.ADVANCED


def test_build_plan_step_text() -> None:
    plan = build_plan(("waist",), _records("waist", 2), random.Random(0))

    narrations = {step.narration for step in plan.exercise_steps}
    assert narrations == {"Brace your core. Move slowly", DEFAULT_NARRATION}
    assert plan.steps[0].description == "Target: strength | Equipment: body weight"
    assert plan.difficulty is Difficulty.BEGINNER


def test_build_plan_without_matching_exercises() -> None:
    with pytest.raises(PlanGenerationError):
        build_plan(("legs",), _records("chest", 3), random.Random(0))


def test_generate_plan_skips_failed_body_parts() -> None:
    async def _run() -> None:
        source = FakeExerciseSource(failing=("back",))

        plan = await generate_plan("upper body", source, random.Random(5))

        assert source.requested == ["chest", "back", "shoulders"]
        assert plan.title == "Full Body Workout"
        assert all(not step.name.startswith("back") for step in plan.steps)
        assert len(plan.exercise_steps) == 6

    asyncio.run(_run())


def test_generate_plan_fails_when_nothing_fetched() -> None:
    async def _run() -> None:
        source = FakeExerciseSource(failing=("legs",))
        with pytest.raises(PlanGenerationError):
            await generate_plan("leg day", source, random.Random(5))

    asyncio.run(_run())
