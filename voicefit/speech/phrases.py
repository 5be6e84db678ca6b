"""Languages, voices and narration text helpers."""

from __future__ import annotations

import re
from enum import Enum

from voicefit.workout.model import Step

MAX_NARRATION_CHARS = 180

_UNSAFE_CHARS_RE = re.compile(r"[^\w\s.,!?-]")
_WHITESPACE_RE = re.compile(r"\s+")


class Language(str, Enum):
    ENGLISH = "en"
    YORUBA = "yo"
    IGBO = "ig"
    HAUSA = "ha"
    AMHARIC = "am"


DEFAULT_LANGUAGE = Language.ENGLISH

LANGUAGE_LABELS: dict[Language, str] = {
    Language.ENGLISH: "English",
    Language.YORUBA: "Yoruba",
    Language.IGBO: "Igbo",
    Language.HAUSA: "Hausa",
    Language.AMHARIC: "Amharic",
}

DEFAULT_VOICES: dict[Language, str] = {
    Language.ENGLISH: "john",
    Language.YORUBA: "funmi",
    Language.HAUSA: "hasan",
    Language.IGBO: "obinna",
    Language.AMHARIC: "hana",
}

# "{name}" is the upcoming exercise.
_NEXT_EXERCISE_TEMPLATES: dict[Language, str] = {
    Language.ENGLISH: "Next exercise is {name}",
    Language.YORUBA: "Ti o tele ni {name}",
    Language.IGBO: "Na-abịa bụ {name}",
    Language.HAUSA: "Na gaba shine {name}",
}


def resolve_language(code: str | Language | None) -> Language:
    """Map a language code onto a supported language, falling back to English."""
    if isinstance(code, Language):
        return code
    if not code:
        return DEFAULT_LANGUAGE
    try:
        return Language(code.strip().lower())
    except ValueError:
        return DEFAULT_LANGUAGE


def voice_for(language: str | Language | None) -> str:
    return DEFAULT_VOICES[resolve_language(language)]


def sanitize(text: str, max_chars: int = MAX_NARRATION_CHARS) -> str:
    clean = _UNSAFE_CHARS_RE.sub(" ", text)
    clean = _WHITESPACE_RE.sub(" ", clean).strip()
    if len(clean) > max_chars:
        return clean[: max_chars - 1].rstrip() + "."
    return clean


def _with_details(head: str, step: Step) -> str:
    details = step.narration or step.description
    if details:
        return f"{head}. {details}"
    return head


def step_announcement(step: Step, language: str | Language | None) -> str:
    """Text spoken automatically when a session enters ``step``."""
    lang = resolve_language(language)
    template = _NEXT_EXERCISE_TEMPLATES.get(
        lang, _NEXT_EXERCISE_TEMPLATES[DEFAULT_LANGUAGE]
    )
    return _with_details(template.format(name=step.name), step)


def step_instructions(step: Step) -> str:
    """Text spoken on a manual request: the step name and its instructions."""
    return _with_details(step.name, step)
