"""Async runtime engine for guided sessions in the terminal."""

from __future__ import annotations

import asyncio
import contextlib

from voicefit.core.state import SessionPhase
from voicefit.ui.controller import UIController
from voicefit.workout.model import WorkoutPlan
from voicefit.workout.parser import format_duration
from voicefit.workout.session import SessionController
from voicefit.workout.summary import summarize


class SessionEngine:
    def __init__(
        self,
        controller: UIController,
        language: str | None = None,
        status_interval_sec: float = 1.0,
    ) -> None:
        self._controller = controller
        self._language = language
        self._status_interval_sec = status_interval_sec
        self._done = asyncio.Event()
        self._session: SessionController | None = None

    async def run(self, plan: WorkoutPlan) -> bool:
        """Run ``plan`` to the end. Returns True when every step was completed."""
        self._done = asyncio.Event()
        session = self._controller.start_session(
            plan,
            on_complete=self._done.set,
            on_exit=self._done.set,
            language=self._language,
        )
        self._session = session
        print(
            f"{plan.title} - {plan.difficulty.value} - {plan.total_duration} "
            f"({session.exercise_count} exercises)"
        )
        session.toggle_run()
        session.run_clock()

        last_status = ""
        try:
            while not self._done.is_set():
                self._print_status_line(session)
                status = session.state.last_status
                if status != last_status:
                    print(f"Narration: {status}")
                    last_status = status
                with contextlib.suppress(TimeoutError):
                    await asyncio.wait_for(
                        self._done.wait(), timeout=self._status_interval_sec
                    )
        finally:
            self._controller.end_session()
            self._session = None

        completed = session.phase is SessionPhase.COMPLETED
        summary = summarize(plan, completed=completed)
        print(summary.headline)
        if completed:
            print(summary.message)
        return completed

    def stop(self) -> None:
        if self._session is not None:
            self._session.exit()
        self._done.set()

    def _print_status_line(self, session: SessionController) -> None:
        state = session.state
        step = session.current_step
        print(
            f"[{state.current_index + 1}/{session.exercise_count}] {step.name} "
            f"{format_duration(state.time_remaining_sec)} | "
            f"voice: {state.narration_state.value}"
        )
