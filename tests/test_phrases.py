from __future__ import annotations

from voicefit.speech.phrases import (
    MAX_NARRATION_CHARS,
    Language,
    resolve_language,
    sanitize,
    step_announcement,
    step_instructions,
    voice_for,
)
from voicefit.workout.model import Step


def test_sanitize_strips_unsafe_characters() -> None:
    assert sanitize("Push-ups!  <b>now</b> & then") == "Push-ups! b now b then"
    assert sanitize("   ") == ""
    assert sanitize("@@@") == ""


def test_sanitize_keeps_accented_letters() -> None:
    assert sanitize("Na-abịa bụ squats") == "Na-abịa bụ squats"


def test_sanitize_truncates_long_text() -> None:
    text = "word " * 100

    clean = sanitize(text)

    assert clean.endswith(".")
    assert len(clean) <= MAX_NARRATION_CHARS
    assert len(sanitize("abcdefghij" * 40)) == MAX_NARRATION_CHARS
    assert len(sanitize("a" * MAX_NARRATION_CHARS)) == MAX_NARRATION_CHARS


def test_resolve_language_falls_back_to_english() -> None:
    assert resolve_language("yo") is Language.YORUBA
    assert resolve_language(" HA ") is Language.HAUSA
    assert resolve_language("fr") is Language.ENGLISH
    assert resolve_language(None) is Language.ENGLISH


def test_voice_for_languages() -> None:
    assert voice_for("en") == "john"
    assert voice_for("ig") == "obinna"
    assert voice_for("xx") == "john"


def test_step_announcement_templates() -> None:
    step = Step(name="Squats", duration_sec=45, narration="Keep your back straight")

    assert step_announcement(step, "en") == "Next exercise is Squats. Keep your back straight"
    assert step_announcement(step, "yo").startswith("Ti o tele ni Squats")
    assert step_announcement(step, "ha").startswith("Na gaba shine Squats")
    assert step_announcement(step, "am").startswith("Next exercise is Squats")


def test_step_instructions_fall_back_to_description() -> None:
    bare = Step(name="Plank", duration_sec=30)
    described = Step(name="Plank", duration_sec=30, description="Hold still")

    assert step_instructions(bare) == "Plank"
    assert step_instructions(described) == "Plank. Hold still"
