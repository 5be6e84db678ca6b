"""Guided workout session: countdown, auto-advance and spoken step changes."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Callable, Iterator, Optional

from voicefit.core.state import SessionPhase, SessionState
from voicefit.speech.narration import NarrationClient, NarrationResult
from voicefit.speech.phrases import (
    Language,
    resolve_language,
    step_announcement,
    step_instructions,
)
from voicefit.workout.model import Step, WorkoutPlan
from voicefit.workout.timer import SessionTimer

logger = logging.getLogger(__name__)

DEFAULT_NARRATION_DELAY_SEC = 1.5

SessionCallback = Callable[[], None]


class EmptyPlanError(ValueError):
    """Raised when a session is built from a plan without exercise steps."""


class SessionController:
    """Runs the exercise steps of a plan one after another.

    Public methods never await and must be called from the event loop, so
    transitions are serialized. Calls made while a transition is in
    progress (for example from inside ``on_complete``) are ignored, as are
    calls once the session has completed or exited.
    """

    def __init__(
        self,
        plan: WorkoutPlan,
        narrator: NarrationClient,
        *,
        on_complete: Optional[SessionCallback] = None,
        on_exit: Optional[SessionCallback] = None,
        language: str | Language = "en",
        narration_delay_sec: float = DEFAULT_NARRATION_DELAY_SEC,
        tick_interval_sec: float = 1.0,
    ) -> None:
        steps = plan.exercise_steps
        if not steps:
            raise EmptyPlanError("Workout plan has no exercise steps")

        self.plan = plan
        self._steps = steps
        self._narrator = narrator
        self._on_complete = on_complete
        self._on_exit = on_exit
        self._language = resolve_language(language)
        self._narration_delay_sec = narration_delay_sec
        self._tick_interval_sec = tick_interval_sec

        self._timer = SessionTimer()
        self._state = SessionState()
        self._in_transition = False
        self._seeded_index: int | None = None
        self._narrated_index: int | None = None
        self._auto_task: Optional[asyncio.Task[None]] = None
        self._narration_task: Optional[asyncio.Task[NarrationResult]] = None
        self._clock_task: Optional[asyncio.Task[None]] = None

    @property
    def state(self) -> SessionState:
        self._state.narration_state = self._narrator.state
        return self._state

    @property
    def phase(self) -> SessionPhase:
        return self._state.phase

    @property
    def is_active(self) -> bool:
        return self._state.phase is SessionPhase.ACTIVE

    @property
    def exercise_count(self) -> int:
        return len(self._steps)

    @property
    def current_step(self) -> Step:
        return self._steps[self._state.current_index]

    @property
    def is_last(self) -> bool:
        return self._state.current_index == len(self._steps) - 1

    @property
    def language(self) -> Language:
        return self._language

    @property
    def narration_task(self) -> Optional[asyncio.Task[NarrationResult]]:
        return self._narration_task

    def set_language(self, code: str | Language) -> None:
        self._language = resolve_language(code)

    def begin(self) -> None:
        if self._in_transition or self._state.phase is not SessionPhase.NOT_STARTED:
            return
        with self._transition():
            self._state.phase = SessionPhase.ACTIVE
            logger.info("Session started: %s", self.plan.title)
            self._enter(0)

    def toggle_run(self) -> None:
        if self._in_transition or not self.is_active:
            return
        if self._timer.running:
            self._timer.pause()
        else:
            self._timer.start()
        self._state.running = self._timer.running

    def tick(self) -> None:
        """Timer callback, once per second."""
        if self._in_transition or not self.is_active:
            return
        expired = self._timer.tick()
        self._state.time_remaining_sec = self._timer.remaining_sec
        if expired:
            with self._transition():
                self._advance()

    def skip(self) -> None:
        if self._in_transition or not self.is_active:
            return
        with self._transition():
            self._advance()

    def exit(self) -> None:
        if self._in_transition or self._state.finished:
            return
        with self._transition():
            self._shutdown()
            self._state.phase = SessionPhase.EXITED
            logger.info("Session exited at step %d", self._state.current_index + 1)
            if self._on_exit is not None:
                self._on_exit()

    def speak_current(self) -> Optional[asyncio.Task[NarrationResult]]:
        """Narrate the current step now, superseding any narration in flight."""
        if self._in_transition or not self.is_active:
            return None
        self._cancel_auto_narration()
        self._narrated_index = self._state.current_index
        return self._start_narration(step_instructions(self.current_step), supersede=True)

    def close(self) -> None:
        """Tear the session down without firing callbacks."""
        self._shutdown()
        if not self._state.finished:
            self._state.phase = SessionPhase.EXITED

    def run_clock(self) -> asyncio.Task[None]:
        """Drive ``tick`` from the event loop until the session ends."""
        if self._clock_task is None or self._clock_task.done():
            self._clock_task = asyncio.create_task(self._run_clock())
        return self._clock_task

    async def _run_clock(self) -> None:
        while not self._state.finished:
            await asyncio.sleep(self._tick_interval_sec)
            self.tick()

    @contextlib.contextmanager
    def _transition(self) -> Iterator[None]:
        self._in_transition = True
        try:
            yield
        finally:
            self._in_transition = False

    def _advance(self) -> None:
        self._cancel_narration()
        if self.is_last:
            self._complete()
            return
        self._enter(self._state.current_index + 1)

    def _complete(self) -> None:
        self._shutdown()
        self._state.phase = SessionPhase.COMPLETED
        logger.info("Session completed: %s", self.plan.title)
        if self._on_complete is not None:
            self._on_complete()

    def _enter(self, index: int) -> None:
        # Entry actions run once per index.
        if self._seeded_index == index:
            return
        self._seeded_index = index
        step = self._steps[index]
        self._state.current_index = index
        self._timer.reset(step.duration_sec)
        self._state.time_remaining_sec = self._timer.remaining_sec
        logger.info(
            "Step %d/%d: %s (%ss)", index + 1, len(self._steps), step.name, step.duration_sec
        )
        self._schedule_auto_narration(index)

    def _schedule_auto_narration(self, index: int) -> None:
        if self._narrated_index == index or not self._steps[index].is_exercise:
            return
        self._narrated_index = index
        self._cancel_auto_narration()
        self._auto_task = asyncio.create_task(self._auto_narrate(index))

    async def _auto_narrate(self, index: int) -> None:
        await asyncio.sleep(self._narration_delay_sec)
        if not self.is_active or self._state.current_index != index:
            return
        self._auto_task = None
        text = step_announcement(self._steps[index], self._language)
        self._start_narration(text, supersede=False)

    def _start_narration(
        self, text: str, *, supersede: bool
    ) -> Optional[asyncio.Task[NarrationResult]]:
        if not supersede and self._narrator.busy:
            return None
        if supersede and self._narration_task is not None:
            self._narration_task.cancel()
        task = asyncio.create_task(self._narrate(text, supersede))
        self._narration_task = task
        return task

    async def _narrate(self, text: str, supersede: bool) -> NarrationResult:
        result = await self._narrator.narrate(
            text, self._language.value, supersede=supersede
        )
        if self._narration_task is asyncio.current_task():
            self._narration_task = None
            self._state.last_status = result.status
        return result

    def _cancel_auto_narration(self) -> None:
        if self._auto_task is not None and not self._auto_task.done():
            self._auto_task.cancel()
        self._auto_task = None

    def _cancel_narration(self) -> None:
        self._cancel_auto_narration()
        if self._narration_task is not None and not self._narration_task.done():
            self._narration_task.cancel()
        self._narration_task = None
        self._narrator.cancel()

    def _shutdown(self) -> None:
        self._cancel_narration()
        self._timer.pause()
        self._state.running = False
        clock = self._clock_task
        if clock is not None and clock is not asyncio.current_task():
            clock.cancel()
        self._clock_task = None
