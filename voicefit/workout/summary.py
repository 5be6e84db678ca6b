"""End-of-session summary shown on the completion screen."""

from __future__ import annotations

import random
from dataclasses import dataclass

from voicefit.workout.model import WorkoutPlan

ENCOURAGEMENTS: tuple[str, ...] = (
    "Outstanding work! You're unstoppable!",
    "Amazing dedication! Your body thanks you!",
    "Incredible effort! You're getting stronger!",
    "Fantastic job! You crushed that workout!",
    "Phenomenal! You're on fire today!",
)


@dataclass(frozen=True)
class SessionSummary:
    title: str
    exercise_count: int
    total_duration: str
    difficulty: str
    completed: bool
    message: str

    @property
    def headline(self) -> str:
        if not self.completed:
            return "Workout stopped"
        return f"You just crushed a {self.total_duration} {self.title.lower()}!"


def summarize(
    plan: WorkoutPlan,
    completed: bool = True,
    rng: random.Random | None = None,
) -> SessionSummary:
    picker = rng or random.Random()
    return SessionSummary(
        title=plan.title,
        exercise_count=len(plan.exercise_steps),
        total_duration=plan.total_duration,
        difficulty=plan.difficulty.value,
        completed=completed,
        message=picker.choice(ENCOURAGEMENTS),
    )
