"""Command-line entry point.

Usage::

    playwright-test-framework-generator init my-tests
    playwright-test-framework-generator init my-tests --preset api --reporter html -y
    python -m pwscaffold init my-tests --pm yarn --ci gitlab --no-husky
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from pathlib import Path
from typing import Any

from jinja2 import TemplateError
from pydantic import ValidationError
from rich.markup import escape

from pwscaffold import __version__
from pwscaffold.config import Answers
from pwscaffold.prompts import describe_validation_error, resolve
from pwscaffold.scaffolder.generator import ScaffoldGenerator
from pwscaffold.utils import (
    ConsoleStepReporter,
    console,
    format_duration,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)

PROG = "playwright-test-framework-generator"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with its ``init`` sub-command."""
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Scaffold a Playwright test framework baseline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            f"  {PROG} init my-tests\n"
            f"  {PROG} init my-tests --preset hybrid --reporter monocart -y\n"
            f"  {PROG} init my-tests --pm yarn --ci gitlab --no-husky\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="command", required=True)
    init = subparsers.add_parser(
        "init",
        help="Create a new Playwright framework project",
        description="Create a new Playwright framework project",
    )
    init.add_argument("project_name", metavar="project-name", help="folder to create")
    init.add_argument(
        "-y", "--yes",
        action="store_true",
        help="Use defaults and skip prompts",
    )
    init.add_argument(
        "--non-interactive",
        action="store_true",
        help="Alias of --yes",
    )
    init.add_argument(
        "--pm",
        metavar="NAME",
        default=None,
        help="Package manager (npm|yarn) (default: npm)",
    )
    init.add_argument(
        "--js",
        action="store_true",
        help="Use JavaScript instead of TypeScript",
    )
    init.add_argument(
        "--ci",
        metavar="PROVIDER",
        default=None,
        help="CI provider (github|gitlab|none) (default: github)",
    )
    init.add_argument(
        "--reporter",
        metavar="NAME",
        default=None,
        help="Test reporter (html|allure|monocart) (default: allure)",
    )
    init.add_argument(
        "--notifications",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Include email/slack/teams notification tooling (default: on)",
    )
    init.add_argument(
        "--zephyr",
        action="store_true",
        help="Include Zephyr results stub",
    )
    init.add_argument(
        "--no-husky",
        dest="husky",
        action="store_false",
        help="Skip Husky hooks",
    )
    init.add_argument(
        "--preset",
        metavar="NAME",
        default=None,
        help="Quick preset (web|api|soap|hybrid) (default: web)",
    )
    init.add_argument(
        "--dir",
        dest="base_dir",
        default=".",
        help="Directory to create the project in (default: current directory)",
    )
    return parser


def _flags_from_args(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "yes": args.yes,
        "non_interactive": args.non_interactive,
        "pm": args.pm,
        "js": args.js,
        "ci": args.ci,
        "reporter": args.reporter,
        "notifications": args.notifications,
        "husky": args.husky,
        "zephyr": args.zephyr,
        "preset": args.preset,
    }


def _summary(answers: Answers) -> dict[str, str]:
    def on_off(value: bool) -> str:
        return "yes" if value else "no"

    return {
        "Project": answers.project_name,
        "Package manager": answers.package_manager,
        "Language": answers.language,
        "Preset": answers.preset,
        "CI provider": answers.ci_provider,
        "Reporter": answers.reporter,
        "Notifications": on_off(answers.notifications_enabled),
        "Husky": on_off(answers.husky_enabled),
        "Zephyr": on_off(answers.zephyr_enabled),
    }


def run_init(args: argparse.Namespace) -> Path:
    """Resolve options for ``init`` and generate the project.

    Exits with status 1 on invalid options or a failed step, 130 when the
    user aborts the prompts.
    """
    try:
        answers = resolve(args.project_name, _flags_from_args(args))
    except ValidationError as exc:
        print_error("✖ Invalid option(s):")
        for line in describe_validation_error(exc):
            console.print(escape(line))
        sys.exit(1)
    except (KeyboardInterrupt, EOFError):
        print_warning("Aborted.")
        sys.exit(130)

    print_summary_table(_summary(answers), title=f"Scaffolding project: {answers.project_name}")

    reporter = ConsoleStepReporter()
    generator = ScaffoldGenerator(answers, reporter=reporter)
    started = time.monotonic()
    try:
        root = asyncio.run(generator.generate(Path(args.base_dir).resolve()))
    except (TemplateError, OSError, ValueError) as exc:
        print_error(f"Step failed: {reporter.failed_label or 'unknown step'}")
        console.print(f"  {escape(type(exc).__name__)}: {escape(str(exc))}")
        sys.exit(1)

    elapsed = format_duration(time.monotonic() - started)
    install = "yarn" if answers.package_manager == "yarn" else "npm i"
    run_tests = "yarn test" if answers.package_manager == "yarn" else "npm test"
    console.print()
    print_success(f"✔ Done! ({elapsed})")
    console.print(f"  cd [cyan]{escape(answers.project_name)}[/cyan] && {install} && {run_tests}")
    return root


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``playwright-test-framework-generator``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "init":
        run_init(args)


if __name__ == "__main__":
    main()
