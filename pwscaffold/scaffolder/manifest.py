"""Dependency and script computation for the generated ``package.json``.

Everything here is a pure function of :class:`~pwscaffold.config.Answers`.
Dependency maps are assembled by an explicit builder: it starts empty and
inserts groups of pinned packages whose predicate holds.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pwscaffold.config import Answers


# ---------------------------------------------------------------------------
# Version tables
# ---------------------------------------------------------------------------

RUNTIME_VERSIONS: dict[str, str] = {
    "@playwright/test": "^1.51.1",
    "axios": "^1.9.0",
    "dotenv": "^16.5.0",
}

YARN_VERSION: dict[str, str] = {"yarn": "^1.22.22"}

DEV_BASELINE_VERSIONS: dict[str, str] = {
    "@eslint/json": "^0.12.0",
    "@eslint/markdown": "^6.4.0",
    "eslint-plugin-jsonc": "^2.20.0",
    "adm-zip": "^0.5.16",
    "@types/adm-zip": "^0.5.7",
    "eslint": "^9.36.0",
    "@eslint/js": "^9.36.0",
    "globals": "^15.12.0",
    "eslint-config-prettier": "^9.1.0",
    "eslint-plugin-playwright": "^2.0.0",
    "prettier": "^3.3.3",
    "husky": "^9.1.7",
    "lint-staged": "^15.5.1",
    "@faker-js/faker": "^9.7.0",
    "chance": "^1.1.12",
    "moment": "^2.30.1",
    "cross-env": "^7.0.3",
    "lodash": "^4.17.21",
    "rimraf": "^6.0.1",
    "winston": "^3.17.0",
    "winston-daily-rotate-file": "^5.0.0",
    "kolorist": "^1.8.0",
}

SERVER_VERSIONS: dict[str, str] = {
    "express": "^5.2.1",
    "@types/express": "^5.0.6",
}

SCHEMA_VERSIONS: dict[str, str] = {
    "ajv": "^8.12.0",
    "ajv-formats": "^2.1.1",
}

XML_VERSIONS: dict[str, str] = {"fast-xml-parser": "^5.3.3"}

ALLURE_VERSIONS: dict[str, str] = {
    "allure-playwright": "^3.2.1",
    "allure-commandline": "^2.34.1",
}

MONOCART_VERSIONS: dict[str, str] = {"monocart-reporter": "^2.9.18"}

TYPESCRIPT_VERSIONS: dict[str, str] = {
    "typescript": "^5.8.3",
    "ts-node": "^10.9.2",
    "tsx": "^4.20.6",
    "@types/node": "^20.14.15",
    "@types/argparse": "^2.0.17",
    "typescript-eslint": "^8.8.1",
}

NOTIFICATION_VERSIONS: dict[str, str] = {
    "nodemailer": "^7.0.11",
    "@slack/webhook": "^7.0.6",
    "@types/nodemailer": "^7.0.4",
}


# ---------------------------------------------------------------------------
# Dependency groups
# ---------------------------------------------------------------------------

Predicate = Callable[[Answers], bool]

# (predicate, packages).  Order is the order keys appear in the
# generated manifest.
RUNTIME_GROUPS: tuple[tuple[Predicate, dict[str, str]], ...] = (
    (lambda a: True, RUNTIME_VERSIONS),
    (lambda a: a.package_manager == "yarn", YARN_VERSION),
)

DEV_GROUPS: tuple[tuple[Predicate, dict[str, str]], ...] = (
    (lambda a: True, DEV_BASELINE_VERSIONS),
    (lambda a: a.preset in ("api", "hybrid"), SERVER_VERSIONS),
    (lambda a: a.reporter == "allure", ALLURE_VERSIONS),
    (lambda a: a.reporter == "monocart", MONOCART_VERSIONS),
    (lambda a: a.language in ("ts", "js"), TYPESCRIPT_VERSIONS),
    (lambda a: a.notifications_enabled, NOTIFICATION_VERSIONS),
    (lambda a: a.preset in ("api", "soap", "hybrid"), SCHEMA_VERSIONS),
    (lambda a: a.preset in ("soap", "hybrid"), XML_VERSIONS),
)


class DependencyBuilder:
    """Accumulates pinned packages from groups whose predicate holds."""

    def __init__(self) -> None:
        self._packages: dict[str, str] = {}

    def add_group(self, packages: Mapping[str, str], when: bool = True) -> "DependencyBuilder":
        if when:
            self._packages.update(packages)
        return self

    def build(self) -> dict[str, str]:
        return dict(self._packages)


def _build(groups: tuple[tuple[Predicate, dict[str, str]], ...], answers: Answers) -> dict[str, str]:
    builder = DependencyBuilder()
    for predicate, packages in groups:
        builder.add_group(packages, when=predicate(answers))
    return builder.build()


def compute_dependencies(answers: Answers) -> tuple[dict[str, str], dict[str, str]]:
    """Return ``(dependencies, devDependencies)`` for *answers*."""
    return _build(RUNTIME_GROUPS, answers), _build(DEV_GROUPS, answers)


def drop_undefined(mapping: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of *mapping* without ``None`` values."""
    return {key: value for key, value in mapping.items() if value is not None}


# ---------------------------------------------------------------------------
# Scripts
# ---------------------------------------------------------------------------

BASE_SCRIPTS: dict[str, str] = {
    "test": "playwright test",
    "test:ui": "playwright test --ui",
    "test:headed": "playwright test --headed",
    "test:smoke": "playwright test --grep @smoke",
    "test:debug": "playwright test --debug",
}

ALLURE_RESULTS_DIR = "artifacts/reports/allure-results"
ALLURE_REPORT_DIR = "artifacts/reports/allure-report"
MONOCART_REPORT_JSON = "artifacts/reports/monocart-report/index.json"


def compute_scripts(answers: Answers) -> dict[str, str]:
    """Return the manifest scripts for *answers*.

    Reporter commands are prefixed with ``yarn`` for yarn projects and with
    ``npx`` otherwise.
    """
    scripts = dict(BASE_SCRIPTS)
    pm_bin = answers.pm_bin
    xenv = f"{pm_bin} cross-env"

    if answers.reporter == "allure":
        scripts["report:generate"] = (
            f"{xenv} ALLURE_NO_ANALYTICS=1 allure generate --single-file "
            f"{ALLURE_RESULTS_DIR} -o {ALLURE_REPORT_DIR} --clean"
        )
        scripts["report:open"] = f"{xenv} ALLURE_NO_ANALYTICS=1 allure open {ALLURE_REPORT_DIR}"
    elif answers.reporter == "monocart":
        scripts["report:open"] = f"{pm_bin} monocart show-report {MONOCART_REPORT_JSON} --open"
    elif answers.reporter == "html":
        scripts["report:open"] = f"{pm_bin} playwright show-report"

    return scripts


# ---------------------------------------------------------------------------
# Manifest merge
# ---------------------------------------------------------------------------

LINT_STAGED: dict[str, list[str]] = {
    "*.{ts,js}": [
        "eslint . --fix --max-warnings 0 --no-cache",
        "prettier -w . --ignore-pattern .prettierignore",
    ],
}


def merge_manifest(manifest: Mapping[str, Any], answers: Answers) -> dict[str, Any]:
    """Return *manifest* with computed dependencies and scripts merged in.

    Computed dependency versions win over the ones already present.  Scripts
    are merged key by key.  When husky is enabled a ``lint-staged`` block and
    a ``prepare`` script are added.  The input mapping is not modified.
    """
    pkg: dict[str, Any] = dict(manifest)
    deps, dev_deps = compute_dependencies(answers)

    pkg["dependencies"] = {**(pkg.get("dependencies") or {}), **drop_undefined(deps)}
    pkg["devDependencies"] = {**(pkg.get("devDependencies") or {}), **drop_undefined(dev_deps)}

    scripts: dict[str, str] = dict(pkg.get("scripts") or {})
    scripts.update(compute_scripts(answers))
    if answers.husky_enabled:
        pkg["lint-staged"] = {pattern: list(cmds) for pattern, cmds in LINT_STAGED.items()}
        scripts["prepare"] = "husky"
    pkg["scripts"] = scripts

    return pkg
