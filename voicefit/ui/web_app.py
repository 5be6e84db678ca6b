"""NiceGUI web UI for VoiceFit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from nicegui import app, ui

from voicefit.api.exercisedb import ExerciseDBError
from voicefit.api.speech import SpeechAPIError
from voicefit.core.config import AppConfig
from voicefit.core.state import SessionPhase
from voicefit.speech.phrases import LANGUAGE_LABELS
from voicefit.ui.controller import UIController
from voicefit.workout.model import WorkoutPlan
from voicefit.workout.parser import format_duration
from voicefit.workout.planner import PlanGenerationError
from voicefit.workout.summary import summarize

TICK_SEC = 1.0
REFRESH_SEC = 0.25
DESCRIPTION_PREVIEW_CHARS = 100
NARRATION_PREVIEW_CHARS = 80

LANGUAGE_OPTIONS = {lang.value: label for lang, label in LANGUAGE_LABELS.items()}


@dataclass
class WebState:
    status: str = "Tell me what you want to train"
    request: str = ""
    plan: WorkoutPlan | None = None
    busy: bool = False


def _preview(text: str | None, limit: int) -> str:
    if not text:
        return ""
    return text if len(text) <= limit else f"{text[:limit]}..."


def run_web_ui(
    config: AppConfig,
    *,
    host: str = "127.0.0.1",
    port: int = 8090,
    play_audio: bool = True,
) -> int:
    controller = UIController(config, play_audio=play_audio)
    state = WebState()
    language = {"code": config.language}

    ui.add_head_html(
        """
        <style>
          body {
            background: linear-gradient(135deg, #eff6ff 0%, #ffffff 50%, #f0fdf4 100%);
            font-family: Arial, "Segoe UI", sans-serif;
          }
          .vf-card { border-radius: 16px; box-shadow: 0 12px 24px rgba(15, 23, 42, 0.12); }
          .vf-timer { font-size: 4rem; font-weight: 700; color: #2563eb; }
          .vf-muted { color: #64748b; }
        </style>
        """
    )

    with ui.column().classes("w-full max-w-xl mx-auto gap-4 p-4") as request_view:
        ui.label("VOICEFIT").classes("text-2xl font-bold tracking-wide")
        status_label = ui.label().classes("vf-muted")
        with ui.card().classes("w-full vf-card"):
            request_lang = ui.select(
                LANGUAGE_OPTIONS, value=language["code"], label="Language"
            ).classes("w-40")
            request_input = ui.input(
                label="Workout request",
                placeholder="e.g. a quick upper body workout",
            ).classes("w-full")
            upload = ui.upload(
                label="...or upload a voice recording",
                auto_upload=True,
                max_files=1,
                on_upload=lambda e: on_recording(e),
            ).props("accept=audio/*").classes("w-full")
            build_btn = ui.button("Build my workout")

    with ui.column().classes("w-full max-w-xl mx-auto gap-4 p-4") as plan_view:
        with ui.row().classes("w-full items-center justify-between"):
            plan_back_btn = ui.button("Back").props("flat")
            plan_title = ui.label().classes("text-xl font-bold")
        plan_meta = ui.label().classes("vf-muted")
        plan_steps = ui.column().classes("w-full gap-2")
        start_btn = ui.button("Start workout").classes("w-full")

    with ui.column().classes("w-full max-w-xl mx-auto gap-4 p-4") as session_view:
        with ui.row().classes("w-full items-center justify-between"):
            exit_btn = ui.button("Exit").props("flat")
            with ui.column().classes("items-center gap-0"):
                session_title = ui.label().classes("text-lg font-bold")
                session_meta = ui.label().classes("text-sm vf-muted")
            session_counter = ui.label().classes("text-sm vf-muted")
        session_lang = ui.select(LANGUAGE_OPTIONS, value=language["code"]).classes("w-40")
        progress = ui.linear_progress(value=0.0, show_value=False)
        with ui.card().classes("w-full vf-card items-center"):
            step_name = ui.label().classes("text-2xl font-bold capitalize")
            step_description = ui.label().classes("text-sm vf-muted")
            step_narration = ui.label().classes("text-xs text-blue-700")
            timer_label = ui.label().classes("vf-timer")
            narration_label = ui.label().classes("text-xs vf-muted")
        with ui.row().classes("w-full gap-2"):
            run_btn = ui.button("Start").classes("grow")
            speak_btn = ui.button("Speak").props("color=purple")
            skip_btn = ui.button("Skip").props("color=grey")

    with ui.column().classes("w-full max-w-xl mx-auto gap-4 p-4 items-center") as complete_view:
        complete_title = ui.label().classes("text-3xl font-bold")
        complete_headline = ui.label().classes("text-lg")
        complete_message = ui.label().classes("text-base text-green-700")
        complete_stats = ui.label().classes("vf-muted")
        again_btn = ui.button("New workout")

    views = (request_view, plan_view, session_view, complete_view)

    def show(view: Any) -> None:
        for item in views:
            item.set_visibility(item is view)

    def refresh_plan_view() -> None:
        plan = state.plan
        if plan is None:
            return
        plan_title.text = plan.title
        plan_meta.text = (
            f"{plan.difficulty.value} | {plan.total_duration} | "
            f"{len(plan.exercise_steps)} exercises"
        )
        plan_steps.clear()
        with plan_steps:
            for step in plan.steps:
                with ui.card().classes("w-full vf-card" if step.is_exercise else "w-full"):
                    with ui.row().classes("w-full justify-between"):
                        ui.label(step.name).classes(
                            "font-semibold capitalize" if step.is_exercise else "vf-muted"
                        )
                        ui.label(format_duration(step.duration_sec)).classes("vf-muted")
                    if step.is_exercise and step.description:
                        ui.label(step.description).classes("text-xs vf-muted")

    def refresh_ui() -> None:
        status_label.text = state.status
        build_btn.set_enabled(not state.busy)
        session = controller.session
        if session is None or state.plan is None:
            return
        snapshot = session.state
        step = session.current_step
        session_title.text = state.plan.title
        session_meta.text = f"{state.plan.difficulty.value} | {state.plan.total_duration}"
        session_counter.text = f"{snapshot.current_index + 1} / {session.exercise_count}"
        progress.value = (snapshot.current_index + 1) / session.exercise_count
        step_name.text = step.name
        step_description.text = _preview(step.description, DESCRIPTION_PREVIEW_CHARS)
        step_narration.text = _preview(step.narration, NARRATION_PREVIEW_CHARS)
        timer_label.text = format_duration(snapshot.time_remaining_sec)
        narration_label.text = f"Voice: {snapshot.narration_state.value} | {snapshot.last_status}"
        run_btn.text = "Pause" if snapshot.running else "Start"
        skip_btn.text = "Finish" if session.is_last else "Skip"

    async def on_build() -> None:
        request = str(request_input.value or "").strip()
        if not request:
            ui.notify("Say or type what you want to train", color="negative")
            return
        state.request = request
        state.busy = True
        state.status = f"Building a plan for: {request}"
        refresh_ui()
        try:
            state.plan = await controller.build_plan(request)
        except (ExerciseDBError, PlanGenerationError) as exc:
            state.status = str(exc)
            ui.notify(str(exc), color="negative")
            return
        finally:
            state.busy = False
            refresh_ui()
        state.status = "Plan ready"
        refresh_plan_view()
        show(plan_view)

    async def on_recording(event: Any) -> None:
        audio = event.content.read()
        state.status = "Transcribing..."
        refresh_ui()
        try:
            text = await controller.transcribe(
                audio, language["code"], filename=event.name or "recording.mp3"
            )
        except SpeechAPIError as exc:
            state.status = f"Transcription failed: {exc}"
            ui.notify(state.status, color="negative")
            refresh_ui()
            return
        finally:
            upload.reset()
        if not text:
            state.status = "I did not catch that, please try again"
            refresh_ui()
            return
        request_input.value = text
        state.status = f"Heard: {text}"
        refresh_ui()
        await on_build()

    def on_complete() -> None:
        if state.plan is not None:
            render_completion(state.plan, completed=True)

    def on_exit() -> None:
        show(plan_view if state.plan is not None else request_view)

    def render_completion(plan: WorkoutPlan, completed: bool) -> None:
        summary = summarize(plan, completed=completed)
        complete_title.text = "Workout Complete!" if completed else "Workout stopped"
        complete_headline.text = summary.headline
        complete_message.text = summary.message if completed else ""
        complete_stats.text = (
            f"{summary.exercise_count} exercises | {summary.total_duration} | "
            f"{summary.difficulty}"
        )
        show(complete_view)

    def on_start() -> None:
        if state.plan is None:
            return
        controller.start_session(
            state.plan,
            on_complete=on_complete,
            on_exit=on_exit,
            language=language["code"],
        )
        show(session_view)
        refresh_ui()

    def on_tick() -> None:
        session = controller.session
        if session is not None and session.phase is SessionPhase.ACTIVE:
            session.tick()

    def with_session(action: str) -> None:
        session = controller.session
        if session is None:
            return
        if action == "toggle":
            session.toggle_run()
        elif action == "speak":
            session.speak_current()
        elif action == "skip":
            session.skip()
        elif action == "exit":
            session.exit()
        refresh_ui()

    def on_language_change(code: str | None) -> None:
        language["code"] = code or config.language
        request_lang.value = language["code"]
        session_lang.value = language["code"]
        if controller.session is not None:
            controller.session.set_language(language["code"])

    def on_again() -> None:
        controller.end_session()
        state.plan = None
        state.status = "Tell me what you want to train"
        request_input.value = ""
        show(request_view)
        refresh_ui()

    request_lang.on_value_change(lambda e: on_language_change(e.value))
    session_lang.on_value_change(lambda e: on_language_change(e.value))
    build_btn.on_click(on_build)
    plan_back_btn.on_click(on_again)
    start_btn.on_click(on_start)
    run_btn.on_click(lambda: with_session("toggle"))
    speak_btn.on_click(lambda: with_session("speak"))
    skip_btn.on_click(lambda: with_session("skip"))
    exit_btn.on_click(lambda: with_session("exit"))
    again_btn.on_click(on_again)
    app.on_shutdown(controller.aclose)

    show(request_view)
    refresh_ui()
    ui.timer(TICK_SEC, on_tick)
    ui.timer(REFRESH_SEC, refresh_ui)
    ui.run(host=host, port=port, reload=False, title="VoiceFit")
    return 0
