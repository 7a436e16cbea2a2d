"""Resolve raw CLI flags and interactive answers into an ``Answers`` record.

Resolution is the only place where option values are validated.  Flags are
mapped onto ``Answers`` fields over :data:`~pwscaffold.config.DEFAULT_ANSWERS`;
in interactive mode one question per field is then asked, in a fixed order,
with the flag-derived value offered as the default.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from pydantic import ValidationError
from rich.prompt import Confirm, Prompt

from pwscaffold.config import (
    CI_PROVIDERS,
    DEFAULT_ANSWERS,
    LANGUAGES,
    PACKAGE_MANAGERS,
    PRESETS,
    REPORTERS,
    Answers,
    is_ci_environment,
)
from pwscaffold.utils import console


# ---------------------------------------------------------------------------
# Questions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Question:
    """One interactive question.  ``choices=None`` means a yes/no question."""

    field: str
    message: str
    choices: tuple[str, ...] | None = None


QUESTIONS: tuple[Question, ...] = (
    Question("package_manager", "Package manager?", PACKAGE_MANAGERS),
    Question("language", "Language?", LANGUAGES),
    Question("preset", "Preset? (web = UI/POM, api = APIClient, soap = SOAPClient, hybrid = all)", PRESETS),
    Question("ci_provider", "CI provider?", CI_PROVIDERS),
    Question("reporter", "Reporter?", REPORTERS),
    Question("notifications_enabled", "Include notification channels (email, slack, teams)?"),
    Question("husky_enabled", "Include Husky pre-commit hooks?"),
    Question("zephyr_enabled", "Include Zephyr publish stub?"),
)

# Answers field -> CLI flag, for error messages.
FLAG_NAMES: dict[str, str] = {
    "project_name": "project-name",
    "language": "--js",
    "package_manager": "--pm",
    "ci_provider": "--ci",
    "reporter": "--reporter",
    "preset": "--preset",
    "notifications_enabled": "--notifications",
    "husky_enabled": "--no-husky",
    "zephyr_enabled": "--zephyr",
}

_FIELD_CHOICES: dict[str, tuple[str, ...]] = {
    "language": LANGUAGES,
    "package_manager": PACKAGE_MANAGERS,
    "ci_provider": CI_PROVIDERS,
    "reporter": REPORTERS,
    "preset": PRESETS,
}


class Prompter(Protocol):
    def choose(self, message: str, choices: tuple[str, ...], default: str) -> str: ...

    def confirm(self, message: str, default: bool) -> bool: ...


class RichPrompter:
    """Asks questions on the terminal with ``rich.prompt``."""

    def choose(self, message: str, choices: tuple[str, ...], default: str) -> str:
        return Prompt.ask(message, choices=list(choices), default=default, console=console)

    def confirm(self, message: str, default: bool) -> bool:
        return Confirm.ask(message, default=default, console=console)


# ---------------------------------------------------------------------------
# Flag mapping
# ---------------------------------------------------------------------------


def is_non_interactive(flags: Mapping[str, Any], env: Mapping[str, str] | None = None) -> bool:
    """Return ``True`` when prompting must be skipped.

    Triggered by ``--yes`` / ``--non-interactive`` or by ``CI=1`` / ``CI=true``
    in the environment.
    """
    return bool(flags.get("yes")) or bool(flags.get("non_interactive")) or is_ci_environment(env)


def _pick(flags: Mapping[str, Any], key: str, field: str) -> Any:
    value = flags.get(key)
    return DEFAULT_ANSWERS[field] if value is None else value


def flags_to_base(project_name: str, flags: Mapping[str, Any]) -> dict[str, Any]:
    """Map raw flag values onto ``Answers`` fields, filling in defaults.

    Values are passed through untouched; validation happens when the record
    is built.
    """
    return {
        "project_name": project_name,
        "language": "js" if flags.get("js") else DEFAULT_ANSWERS["language"],
        "package_manager": _pick(flags, "pm", "package_manager"),
        "ci_provider": _pick(flags, "ci", "ci_provider"),
        "reporter": _pick(flags, "reporter", "reporter"),
        "notifications_enabled": _pick(flags, "notifications", "notifications_enabled"),
        "husky_enabled": _pick(flags, "husky", "husky_enabled"),
        "zephyr_enabled": _pick(flags, "zephyr", "zephyr_enabled"),
        "preset": _pick(flags, "preset", "preset"),
    }


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def ask_questions(base: Answers, prompter: Prompter) -> dict[str, Any]:
    """Ask every question in :data:`QUESTIONS` order, defaulting to *base*."""
    collected: dict[str, Any] = {}
    for question in QUESTIONS:
        default = getattr(base, question.field)
        if question.choices is None:
            collected[question.field] = prompter.confirm(question.message, default=bool(default))
        else:
            collected[question.field] = prompter.choose(
                question.message, question.choices, default=default
            )
    return collected


def resolve(
    project_name: str,
    flags: Mapping[str, Any] | None = None,
    answers: Mapping[str, Any] | None = None,
    *,
    prompter: Prompter | None = None,
    env: Mapping[str, str] | None = None,
) -> Answers:
    """Turn flags (and optionally interactive answers) into ``Answers``.

    Args:
        project_name: Destination folder name.
        flags: Raw option values keyed by flag name (``pm``, ``js``, ``ci``,
            ``reporter``, ``notifications``, ``husky``, ``zephyr``,
            ``preset``, ``yes``, ``non_interactive``).
        answers: Pre-collected interactive answers keyed by ``Answers`` field.
            When given, no prompting happens.
        prompter: Source of interactive answers; defaults to
            :class:`RichPrompter`.
        env: Environment used for CI detection; defaults to ``os.environ``.

    Raises:
        pydantic.ValidationError: If any option is outside its allowed set.
    """
    flags = flags or {}
    base = Answers(**flags_to_base(project_name, flags))

    if is_non_interactive(flags, env):
        return base

    if answers is None:
        answers = ask_questions(base, prompter or RichPrompter())

    return Answers(**{**base.model_dump(), **answers})


def describe_validation_error(exc: ValidationError) -> list[str]:
    """Render a validation error as one ``flag must be one of`` line per option."""
    lines: list[str] = []
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else ""
        flag = FLAG_NAMES.get(field, field)
        choices = _FIELD_CHOICES.get(field)
        if choices:
            lines.append(f"  {flag} must be one of: {', '.join(choices)}")
        else:
            lines.append(f"  {flag}: {error['msg']}")
    return lines
