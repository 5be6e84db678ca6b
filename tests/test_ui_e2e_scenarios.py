from __future__ import annotations

import asyncio
import random
import sys
from pathlib import Path

import pytest

from voicefit.api.exercisedb import ExerciseRecord
from voicefit.cli import main as cli_main
from voicefit.core.config import AppConfig
from voicefit.core.engine import SessionEngine
from voicefit.core.state import SessionPhase
from voicefit.ui.controller import UIController
from voicefit.workout.model import Difficulty, Step, StepKind, WorkoutPlan


class FakeSpeechClient:
    def __init__(self) -> None:
        self.spoken: list[tuple[str, str]] = []
        self.closed = False

    async def synthesize(self, text: str, language: str) -> bytes:
        self.spoken.append((text, language))
        return b"mp3"

    async def transcribe(self, audio: bytes, language: str = "en", filename: str = "recording.mp3") -> str:
        return "a short chest workout"

    async def aclose(self) -> None:
        self.closed = True


class FakeExerciseSource:
    async def fetch_by_body_part(self, body_part: str) -> list[ExerciseRecord]:
        return [
            ExerciseRecord(
                id=str(i),
                name=f"{body_part} press {i}",
                body_part=body_part,
                equipment="dumbbell",
                target="pectorals",
            )
            for i in range(6)
        ]


class RecordingPlayer:
    def __init__(self) -> None:
        self.played = 0

    async def play(self, audio: bytes) -> None:
        self.played += 1


def _controller(speech: FakeSpeechClient, player: RecordingPlayer | None = None) -> UIController:
    return UIController(
        AppConfig(narration_delay_sec=0.0),
        speech_client=speech,  # type: ignore[arg-type]
        exercise_source=FakeExerciseSource(),
        player=player or RecordingPlayer(),
        rng=random.Random(11),
        tick_interval_sec=0.01,
    )


def _short_plan() -> WorkoutPlan:
    return WorkoutPlan(
        title="Short Chest",
        total_duration="1 min",
        difficulty=Difficulty.BEGINNER,
        steps=(
            Step("Bench press", 2, narration="Lower slowly"),
            Step("Rest", 1, kind=StepKind.REST),
            Step("Push-ups", 2),
        ),
    )


def test_voice_request_to_plan() -> None:
    async def _run() -> None:
        speech = FakeSpeechClient()
        controller = _controller(speech)

        request = await controller.transcribe(b"audio", "en")
        plan = await controller.build_plan(request)
        await controller.aclose()

        assert plan.title == "CHEST Workout"
        assert len(plan.exercise_steps) == 5
        assert plan.steps[1].name == "Rest"
        assert speech.closed

    asyncio.run(_run())


def test_engine_runs_plan_to_completion(capsys: pytest.CaptureFixture[str]) -> None:
    async def _run() -> bool:
        speech = FakeSpeechClient()
        player = RecordingPlayer()
        controller = _controller(speech, player)
        engine = SessionEngine(controller, language="ig", status_interval_sec=0.01)

        completed = await asyncio.wait_for(engine.run(_short_plan()), timeout=2.0)

        assert controller.session is None
        assert speech.spoken
        assert all(language == "ig" for _, language in speech.spoken)
        assert player.played >= 1
        return completed

    assert asyncio.run(_run()) is True
    output = capsys.readouterr().out
    assert "Short Chest - Beginner - 1 min (2 exercises)" in output
    assert "Bench press" in output
    assert "You just crushed a 1 min short chest!" in output


def test_engine_stop_exits_session(capsys: pytest.CaptureFixture[str]) -> None:
    async def _run() -> bool:
        controller = _controller(FakeSpeechClient())
        engine = SessionEngine(controller, status_interval_sec=0.01)
        plan = WorkoutPlan(
            title="Long",
            total_duration="10 min",
            difficulty=Difficulty.BEGINNER,
            steps=(Step("Plank", 600),),
        )

        run = asyncio.create_task(engine.run(plan))
        await asyncio.sleep(0.05)
        session = controller.session
        assert session is not None and session.is_active

        engine.stop()
        completed = await asyncio.wait_for(run, timeout=1.0)

        assert session.phase is SessionPhase.EXITED
        return completed

    assert asyncio.run(_run()) is False
    assert "Workout stopped" in capsys.readouterr().out


def test_start_session_replaces_previous() -> None:
    async def _run() -> None:
        controller = _controller(FakeSpeechClient())
        exits: list[str] = []

        first = controller.start_session(
            _short_plan(), on_complete=lambda: None, on_exit=lambda: exits.append("first")
        )
        second = controller.start_session(
            _short_plan(), on_complete=lambda: None, on_exit=lambda: exits.append("second")
        )

        assert first.phase is SessionPhase.EXITED
        assert second.is_active
        assert controller.session is second
        assert exits == []
        await controller.aclose()
        assert second.phase is SessionPhase.EXITED

    asyncio.run(_run())


def test_cli_runs_plan_file_without_audio(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("SPITCH_API_KEY", "")
    monkeypatch.setenv("VOICEFIT_NARRATION_DELAY", "0")
    plan_file = tmp_path / "tiny.json"
    plan_file.write_text(
        '{"title":"Tiny","steps":[{"name":"Jumping jacks","duration":"2 sec"}]}',
        encoding="utf-8",
    )
    monkeypatch.setattr(
        sys,
        "argv",
        ["voicefit", "--plan", str(plan_file), "--no-audio", "--env-file", str(tmp_path / "none.env")],
    )

    assert cli_main.main() == 0

    output = capsys.readouterr().out
    assert "Tiny | Beginner | 1 min" in output
    assert "Narration: Failed: SPITCH_API_KEY is not configured" in output


def test_cli_rejects_bad_plan(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    plan_file = tmp_path / "bad.json"
    plan_file.write_text('{"steps": []}', encoding="utf-8")
    monkeypatch.setattr(
        sys,
        "argv",
        ["voicefit", "--plan", str(plan_file), "--env-file", str(tmp_path / "none.env")],
    )

    assert cli_main.main() == 1
    assert "Invalid plan" in capsys.readouterr().out
