from __future__ import annotations

import random

from voicefit.workout.model import Difficulty, Step, StepKind, WorkoutPlan
from voicefit.workout.summary import ENCOURAGEMENTS, summarize


def _plan() -> WorkoutPlan:
    return WorkoutPlan(
        title="Upper Body Blast",
        total_duration="8 min",
        difficulty=Difficulty.INTERMEDIATE,
        steps=(
            Step("Push-ups", 45),
            Step("Rest", 15, kind=StepKind.REST),
            Step("Dips", 45),
        ),
    )


def test_summarize_completed_session() -> None:
    summary = summarize(_plan(), rng=random.Random(1))

    assert summary.exercise_count == 2
    assert summary.difficulty == "Intermediate"
    assert summary.message in ENCOURAGEMENTS
    assert summary.headline == "You just crushed a 8 min upper body blast!"


def test_summarize_stopped_session() -> None:
    summary = summarize(_plan(), completed=False)

    assert summary.headline == "Workout stopped"
