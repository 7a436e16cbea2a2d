"""Shared pytest fixtures for the Playwright scaffold generator test suite.

Provides reusable fixtures for:
- Answers records with overridable fields
- A small on-disk template tree
- A scripted prompter for interactive resolution
- A recording stand-in for filesystem tree operations
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from pwscaffold.config import Answers
from pwscaffold.scaffolder.templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Answers
# ---------------------------------------------------------------------------

@pytest.fixture
def make_answers() -> Callable[..., Answers]:
    """Factory for ``Answers`` with defaults and per-test overrides."""

    def _make(**overrides: Any) -> Answers:
        fields: dict[str, Any] = {"project_name": "demo-tests"}
        fields.update(overrides)
        return Answers(**fields)

    return _make


# ---------------------------------------------------------------------------
# Template trees
# ---------------------------------------------------------------------------

@pytest.fixture
def bundled_template_dir() -> Path:
    """The template tree shipped with the package."""
    path = Path(__file__).resolve().parent.parent / "pwscaffold" / "templates"
    assert path.is_dir(), f"Bundled templates not found at {path}"
    return path


@pytest.fixture
def mini_template_dir(tmp_path: Path) -> Path:
    """A small template tree with plain files, templates and nesting."""
    root = tmp_path / "templates"
    (root / "nested" / "deeper").mkdir(parents=True)
    (root / "plain.txt").write_text("hello {{ not_rendered }}\n", encoding="utf-8")
    (root / "greeting.md.j2").write_text(
        "# {{ project_name }}\n\n  preset: {{ preset }}\n", encoding="utf-8"
    )
    (root / "nested" / "config.json.j2").write_text(
        '{"name": "{{ project_slug }}"}\n', encoding="utf-8"
    )
    (root / "nested" / "deeper" / ".hidden").write_text("x=1\n", encoding="utf-8")
    return root


@pytest.fixture
def renderer(bundled_template_dir: Path) -> TemplateRenderer:
    return TemplateRenderer(bundled_template_dir)


# ---------------------------------------------------------------------------
# Prompting
# ---------------------------------------------------------------------------

class ScriptedPrompter:
    """Answers questions from a field->value script and records what it saw.

    Fields absent from the script get the offered default.
    """

    def __init__(self, script: dict[str, Any] | None = None) -> None:
        self.script = script or {}
        self.asked: list[tuple[str, Any]] = []

    def _lookup(self, message: str, default: Any) -> Any:
        from pwscaffold.prompts import QUESTIONS

        field = next(q.field for q in QUESTIONS if q.message == message)
        self.asked.append((field, default))
        return self.script.get(field, default)

    def choose(self, message: str, choices: tuple[str, ...], default: str) -> str:
        return self._lookup(message, default)

    def confirm(self, message: str, default: bool) -> bool:
        return self._lookup(message, default)


@pytest.fixture
def scripted_prompter() -> Callable[..., ScriptedPrompter]:
    return ScriptedPrompter


# ---------------------------------------------------------------------------
# Tree operations
# ---------------------------------------------------------------------------

class RecordingOps:
    """Records every tree operation instead of touching the filesystem.

    ``fail_on`` names an operation that raises ``OSError`` when called.
    """

    def __init__(self, manifest: dict[str, Any] | None = None, fail_on: str | None = None) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.manifest = manifest if manifest is not None else {"name": "demo-tests"}
        self.written: dict[Path, Any] = {}
        self.fail_on = fail_on

    def _record(self, *call: Any) -> None:
        self.calls.append(call)
        if call[0] == self.fail_on:
            raise OSError(f"simulated failure in {call[0]}")

    async def ensure_dir(self, path: Path) -> Path:
        self._record("ensure_dir", path)
        return path

    async def copy_tree(self, src: Path, dst: Path) -> list[Path]:
        self._record("copy_tree", src, dst)
        return [dst / "hook"]

    async def render_and_copy_tree(self, src: Path, dst: Path, context: dict[str, Any]) -> list[Path]:
        self._record("render_and_copy_tree", src, dst)
        return []

    async def load_json(self, path: Path) -> dict[str, Any]:
        self._record("load_json", path)
        return dict(self.manifest)

    async def write_json(self, path: Path, value: Any) -> Path:
        self._record("write_json", path)
        self.written[path] = value
        return path

    async def make_executable(self, paths: list[Path]) -> None:
        self._record("make_executable", tuple(paths))

    def sources(self, template_dir: Path) -> list[str]:
        """Template paths (relative, posix) used by copy/render calls, in order."""
        return [
            call[1].relative_to(template_dir).as_posix()
            for call in self.calls
            if call[0] in ("copy_tree", "render_and_copy_tree")
        ]


@pytest.fixture
def recording_ops() -> Callable[..., RecordingOps]:
    return RecordingOps
