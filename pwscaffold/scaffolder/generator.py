"""Main scaffolding orchestrator.

Takes an :class:`~pwscaffold.config.Answers` record and builds a complete
Playwright test-framework project: base files, shared framework code, the
Playwright config, preset scaffolding (web / api / soap / hybrid), optional
extras (reporter docs, notifications, CI, husky hooks, Zephyr publishing), and
finally a ``package.json`` patched with the computed dependencies and scripts.

The sequence is a declarative list of :class:`Step` objects, each gated by a
predicate over the answers, so it can be inspected without touching disk.
"""

from __future__ import annotations

import asyncio
import stat
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pwscaffold.config import Answers, Settings
from pwscaffold.utils import StepReporter

from . import files
from .manifest import merge_manifest
from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


def _always(answers: Answers) -> bool:
    return True


@dataclass(frozen=True)
class Step:
    """One labelled, idempotent scaffolding action."""

    label: str
    action: Callable[[], Awaitable[Any]] = field(repr=False)
    predicate: Callable[[Answers], bool] = field(default=_always, repr=False)

    def enabled(self, answers: Answers) -> bool:
        return self.predicate(answers)


# Shared framework folders copied from ``playwright/src/common`` into ``src``.
COMMON_FOLDERS: tuple[str, ...] = ("configs", "environments", "helpers", "reporters", "utils")

# Data subfolders that a hybrid project always has, even when the template
# tree ships them empty.
HYBRID_DATA_FOLDERS: tuple[str, ...] = ("api", "soap", "ui")


# ---------------------------------------------------------------------------
# Tree operations
# ---------------------------------------------------------------------------


class TreeOperations:
    """Filesystem operations the orchestrator drives.

    Thin delegation to :mod:`pwscaffold.scaffolder.files`, bundled so tests
    can substitute a recording fake.
    """

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    async def ensure_dir(self, path: Path) -> Path:
        return await files.ensure_dir(path)

    async def copy_tree(self, src: Path, dst: Path) -> list[Path]:
        return await files.copy_tree(src, dst)

    async def render_and_copy_tree(
        self, src: Path, dst: Path, context: dict[str, Any]
    ) -> list[Path]:
        return await files.render_and_copy_tree(src, dst, context, self.renderer)

    async def load_json(self, path: Path) -> dict[str, Any]:
        return await asyncio.to_thread(files.load_json, path)

    async def write_json(self, path: Path, value: Any) -> Path:
        return await files.write_json(path, value)

    async def make_executable(self, paths: list[Path]) -> None:
        await asyncio.gather(*(asyncio.to_thread(_make_executable, p) for p in paths))


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ScaffoldGenerator:
    """Builds a Playwright framework project from an ``Answers`` record.

    Steps run strictly in order.  A failing step is reported to the progress
    sink and its exception is re-raised unchanged; whatever earlier steps
    wrote stays on disk.  Every step is idempotent, so running the generator
    again with the same answers converges to the same tree.
    """

    def __init__(
        self,
        answers: Answers,
        *,
        template_dir: str | Path | None = None,
        ops: TreeOperations | None = None,
        reporter: StepReporter | None = None,
    ) -> None:
        self.answers = answers
        if template_dir is None:
            template_dir = Settings.from_env().template_dir
        self.template_dir = Path(template_dir)
        self.ops = ops or TreeOperations(TemplateRenderer(self.template_dir))
        self.reporter = reporter or StepReporter()
        self.context = answers.template_context()

    # -- Public API --------------------------------------------------------

    async def generate(self, base_dir: str | Path) -> Path:
        """Generate the project under ``base_dir / project_name``.

        Returns:
            Path to the generated project root.
        """
        dest = Path(base_dir) / self.answers.project_name
        for step in self.steps(dest):
            if step.enabled(self.answers):
                await self._run_step(step)
        return dest

    def steps(self, dest: Path) -> list[Step]:
        """Return the full, ordered step list for a project rooted at *dest*."""
        a = self.answers
        return [
            Step(
                f"Create project folder: {a.project_name}",
                lambda: self.ops.ensure_dir(dest),
            ),
            Step(
                "Scaffold base files and folders (.vscode/, .editorconfig, .gitignore, "
                ".prettierignore, .prettierrc, eslint.config.js, package.json, README.md, "
                "tsconfig.json)",
                lambda: self._render("base", dest),
            ),
            Step(
                "Add Playwright structure (src => configs, environments, helpers, reporters, utils)",
                lambda: self._add_common(dest),
            ),
            Step(
                "Add Playwright config (playwright.config.ts)",
                lambda: self._render("playwright/playwright.config.ts.j2", dest),
            ),
            Step(
                "Add Web as preset (UI/POM + fixtures)",
                lambda: self._add_web(dest),
                lambda a: a.preset == "web",
            ),
            Step(
                "Add API as preset (API Server, services, tests and fixtures)",
                lambda: self._add_api(dest),
                lambda a: a.preset == "api",
            ),
            Step(
                "Add SOAP preset (WSDL client, services, tests and fixtures)",
                lambda: self._add_soap(dest),
                lambda a: a.preset == "soap",
            ),
            Step(
                "Add Hybrid (UI + API + SOAP + Fixtures) as preset",
                lambda: self._add_hybrid(dest),
                lambda a: a.preset == "hybrid",
            ),
            Step(
                "Include Allure docs (docs/reporters/allure)",
                lambda: self._copy("docs/reporters/allure", dest / "docs" / "reporters" / "allure"),
                lambda a: a.reporter == "allure",
            ),
            Step(
                "Include Monocart docs (docs/reporters/monocart)",
                lambda: self._copy("docs/reporters/monocart", dest / "docs" / "reporters" / "monocart"),
                lambda a: a.reporter == "monocart",
            ),
            Step(
                "Add Notifications stub (email, slack, teams)",
                lambda: self._render("extras/notifications", dest / "src" / "tools" / "notifications"),
                lambda a: a.notifications_enabled,
            ),
            Step(
                "Add GitHub Actions workflow",
                lambda: self._render("ci/github", dest / ".github" / "workflows"),
                lambda a: a.ci_provider == "github",
            ),
            Step(
                "Add GitLab CI config",
                lambda: self._render("ci/gitlab", dest),
                lambda a: a.ci_provider == "gitlab",
            ),
            Step(
                "Setup Husky hooks (.husky/)",
                lambda: self._add_husky(dest),
                lambda a: a.husky_enabled,
            ),
            Step(
                "Add Zephyr publish stub",
                lambda: self._render("extras/publications", dest / "src" / "tools" / "publications"),
                lambda a: a.zephyr_enabled,
            ),
            Step(
                "Finalize package.json (dependencies, devDependencies, scripts)",
                lambda: self._finalize_manifest(dest),
            ),
            Step(
                "Include docs (docs/best-practices)",
                lambda: self._copy("docs/best-practices", dest / "docs" / "best-practices"),
            ),
        ]

    # -- Step execution ----------------------------------------------------

    async def _run_step(self, step: Step) -> None:
        self.reporter.start(step.label)
        try:
            await step.action()
        except Exception:
            self.reporter.fail(step.label)
            raise
        self.reporter.succeed(step.label)

    # -- Helpers -----------------------------------------------------------

    def _tpl(self, relative: str) -> Path:
        return self.template_dir / relative

    async def _render(self, template: str, dst: Path) -> list[Path]:
        return await self.ops.render_and_copy_tree(self._tpl(template), dst, self.context)

    async def _copy(self, template: str, dst: Path) -> list[Path]:
        return await self.ops.copy_tree(self._tpl(template), dst)

    async def _add_common(self, dest: Path) -> None:
        for folder in COMMON_FOLDERS:
            await self._render(f"playwright/src/common/{folder}", dest / "src" / folder)

    # -- Presets -----------------------------------------------------------

    async def _add_web(self, dest: Path) -> None:
        src = dest / "src"
        await self._render("playwright/src/pages", src / "pages")
        await self._render("playwright/src/fixtures/web", src / "fixtures")
        await self._render("playwright/src/fixtures/index.ts.j2", src / "fixtures")
        await self._render("playwright/src/data/ui", src / "data" / "ui")
        await self._render("playwright/src/data/index.ts.j2", src / "data")
        await self._render("playwright/tests/ui", dest / "tests" / "ui")

    async def _add_api(self, dest: Path) -> None:
        src = dest / "src"
        await self._render("playwright/src/fixtures/api", src / "fixtures")
        await self._render("playwright/src/fixtures/index.ts.j2", src / "fixtures")
        await self._render("playwright/src/common/servers", src / "servers")
        await self._render("playwright/src/services/api", src / "services" / "api")
        await self._render("playwright/src/services/index.ts.j2", src / "services")
        await self._render("playwright/src/data/api", src / "data" / "api")
        await self._render("playwright/src/data/index.ts.j2", src / "data")
        await self._render("playwright/tests/api", dest / "tests" / "api")

    async def _add_soap(self, dest: Path) -> None:
        src = dest / "src"
        await self._render("playwright/src/fixtures/soap", src / "fixtures")
        await self._render("playwright/src/fixtures/index.ts.j2", src / "fixtures")
        await self._render("playwright/src/services/soap", src / "services" / "soap")
        await self._render("playwright/src/services/index.ts.j2", src / "services")
        await self._render("playwright/src/data/soap", src / "data" / "soap")
        await self._render("playwright/src/data/index.ts.j2", src / "data")
        await self._render("playwright/tests/soap", dest / "tests" / "soap")

    async def _add_hybrid(self, dest: Path) -> None:
        src = dest / "src"
        # UI
        await self._render("playwright/src/pages", src / "pages")
        await self._render("playwright/src/fixtures/hybrid", src / "fixtures")
        await self._render("playwright/src/fixtures/index.ts.j2", src / "fixtures")
        for suite in ("ui", "api", "soap"):
            await self._render(f"playwright/tests/{suite}", dest / "tests" / suite)
        # API + SOAP
        await self._render("playwright/src/common/servers", src / "servers")
        await self._render("playwright/src/services", src / "services")
        await self._render("playwright/src/data", src / "data")
        for folder in HYBRID_DATA_FOLDERS:
            await self.ops.ensure_dir(src / "data" / folder)

    # -- Extras ------------------------------------------------------------

    async def _add_husky(self, dest: Path) -> None:
        hooks = await self._copy("husky", dest / ".husky")
        await self.ops.make_executable(hooks)

    async def _finalize_manifest(self, dest: Path) -> None:
        pkg_path = dest / "package.json"
        pkg = await self.ops.load_json(pkg_path)
        await self.ops.write_json(pkg_path, merge_manifest(pkg, self.answers))


# ---------------------------------------------------------------------------
# Convenience entry point
# ---------------------------------------------------------------------------


def scaffold(
    answers: Answers,
    base_dir: str | Path,
    *,
    template_dir: str | Path | None = None,
    reporter: StepReporter | None = None,
) -> Path:
    """Synchronously generate a project and return its root path."""
    generator = ScaffoldGenerator(answers, template_dir=template_dir, reporter=reporter)
    return asyncio.run(generator.generate(base_dir))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _make_executable(path: Path) -> None:
    """Set the executable bit on a file."""
    current = path.stat().st_mode
    path.chmod(current | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
