"""Workout domain models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Difficulty(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class StepKind(str, Enum):
    EXERCISE = "exercise"
    REST = "rest"


@dataclass(frozen=True)
class Step:
    name: str
    duration_sec: int
    kind: StepKind = StepKind.EXERCISE
    description: str | None = None
    narration: str | None = None

    def __post_init__(self) -> None:
        if self.duration_sec <= 0:
            raise ValueError(f"Step '{self.name}': duration_sec must be > 0")

    @property
    def is_exercise(self) -> bool:
        return self.kind is StepKind.EXERCISE


@dataclass(frozen=True)
class WorkoutPlan:
    title: str
    total_duration: str
    difficulty: Difficulty
    steps: tuple[Step, ...]

    @property
    def exercise_steps(self) -> tuple[Step, ...]:
        return tuple(step for step in self.steps if step.is_exercise)

    @property
    def total_duration_sec(self) -> int:
        return sum(step.duration_sec for step in self.steps)
