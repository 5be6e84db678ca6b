"""Terminal CLI entrypoint for VoiceFit."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from voicefit.api.exercisedb import ExerciseDBError
from voicefit.api.speech import SpeechAPIError
from voicefit.core.config import AppConfig, ConfigError, load_config
from voicefit.core.engine import SessionEngine
from voicefit.speech.phrases import LANGUAGE_LABELS, Language
from voicefit.ui.controller import UIController
from voicefit.workout.model import WorkoutPlan
from voicefit.workout.parser import PlanParseError, format_duration, load_plan
from voicefit.workout.planner import PlanGenerationError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="VoiceFit voice-guided workouts")
    parser.add_argument(
        "--ui-web",
        action="store_true",
        help="Launch web UI (NiceGUI)",
    )
    parser.add_argument("--web-host", default="127.0.0.1", help="Host bind for --ui-web")
    parser.add_argument("--web-port", type=int, default=8090, help="Port for --ui-web")
    parser.add_argument(
        "--request",
        default=None,
        help='Build a plan from a workout request, e.g. "upper body workout"',
    )
    parser.add_argument(
        "--plan",
        type=Path,
        default=None,
        help="Run a guided session from a JSON plan file",
    )
    parser.add_argument(
        "--run",
        action="store_true",
        help="Start a guided session with the plan built from --request",
    )
    parser.add_argument(
        "--transcribe",
        type=Path,
        default=None,
        help="Transcribe an audio recording and use it as the workout request",
    )
    parser.add_argument(
        "--language",
        choices=[lang.value for lang in Language],
        default=None,
        help="Narration and transcription language",
    )
    parser.add_argument("--no-audio", action="store_true", help="Do not play narration audio")
    parser.add_argument("--env-file", type=Path, default=None, help="Read settings from this .env file")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def print_plan(plan: WorkoutPlan) -> None:
    print(f"{plan.title} | {plan.difficulty.value} | {plan.total_duration}")
    for index, step in enumerate(plan.steps, start=1):
        marker = "-" if step.is_exercise else " "
        print(f"{index:>2} {marker} {step.name:<32} {format_duration(step.duration_sec)}")
        if step.description and step.is_exercise:
            print(f"       {step.description}")


async def run_session(controller: UIController, plan: WorkoutPlan, language: str | None) -> int:
    engine = SessionEngine(controller, language=language)
    try:
        completed = await engine.run(plan)
    except asyncio.CancelledError:
        engine.stop()
        raise
    finally:
        await controller.aclose()
    return 0 if completed else 1


async def run_request(
    config: AppConfig,
    request: str | None,
    audio_path: Path | None,
    language: str,
    play_audio: bool,
    run: bool,
) -> int:
    controller = UIController(config, play_audio=play_audio)
    try:
        if audio_path is not None:
            request = await controller.transcribe(
                audio_path.read_bytes(), language, filename=audio_path.name
            )
            print(f"Heard: {request or '(nothing)'}")
        if not request:
            print("No workout request")
            await controller.aclose()
            return 1
        plan = await controller.build_plan(request)
    except (OSError, SpeechAPIError, ExerciseDBError, PlanGenerationError) as exc:
        print(f"Error: {exc}")
        await controller.aclose()
        return 1

    print_plan(plan)
    if not run:
        await controller.aclose()
        return 0
    return await run_session(controller, plan, language)


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.env_file)
    except ConfigError as exc:
        print(f"Configuration error: {exc}")
        return 2
    language = args.language or config.language

    if args.ui_web:
        from voicefit.ui.web_app import run_web_ui

        return run_web_ui(
            config,
            host=args.web_host,
            port=args.web_port,
            play_audio=not args.no_audio,
        )

    if args.plan is not None:
        try:
            plan = load_plan(args.plan)
        except (OSError, PlanParseError) as exc:
            print(f"Invalid plan: {exc}")
            return 1
        print_plan(plan)
        controller = UIController(config, play_audio=not args.no_audio)
        try:
            return asyncio.run(run_session(controller, plan, language))
        except KeyboardInterrupt:
            print("Session stopped")
            return 130

    if args.request is not None or args.transcribe is not None:
        try:
            return asyncio.run(
                run_request(
                    config,
                    args.request,
                    args.transcribe,
                    language,
                    play_audio=not args.no_audio,
                    run=args.run,
                )
            )
        except KeyboardInterrupt:
            print("Session stopped")
            return 130

    print("Languages: " + ", ".join(f"{lang.value}={label}" for lang, label in LANGUAGE_LABELS.items()))
    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
