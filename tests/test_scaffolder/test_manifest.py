"""Tests for package.json dependency and script computation.

Covers:
- Baseline runtime and dev dependencies
- Preset, reporter, notification and package-manager driven groups
- Report scripts per reporter and package manager
- Manifest merge (override, script merge, lint-staged, purity)
"""

from __future__ import annotations

import copy

import pytest

from pwscaffold.scaffolder.manifest import (
    ALLURE_VERSIONS,
    BASE_SCRIPTS,
    DEV_BASELINE_VERSIONS,
    MONOCART_VERSIONS,
    NOTIFICATION_VERSIONS,
    RUNTIME_VERSIONS,
    SCHEMA_VERSIONS,
    SERVER_VERSIONS,
    TYPESCRIPT_VERSIONS,
    XML_VERSIONS,
    DependencyBuilder,
    compute_dependencies,
    compute_scripts,
    drop_undefined,
    merge_manifest,
)

pytestmark = pytest.mark.unit


def _has_all(target: dict[str, str], group: dict[str, str]) -> bool:
    return all(target.get(name) == version for name, version in group.items())


def _has_none(target: dict[str, str], group: dict[str, str]) -> bool:
    return not any(name in target for name in group)


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


class TestDependencyBuilder:
    def test_starts_empty(self):
        assert DependencyBuilder().build() == {}

    def test_skips_disabled_groups(self):
        built = (
            DependencyBuilder()
            .add_group({"a": "1"})
            .add_group({"b": "2"}, when=False)
            .add_group({"c": "3"}, when=True)
            .build()
        )
        assert built == {"a": "1", "c": "3"}

    def test_build_returns_copy(self):
        builder = DependencyBuilder().add_group({"a": "1"})
        builder.build()["b"] = "2"
        assert builder.build() == {"a": "1"}


class TestComputeDependencies:
    def test_runtime_baseline(self, make_answers):
        deps, _ = compute_dependencies(make_answers())
        assert deps == RUNTIME_VERSIONS

    def test_yarn_adds_yarn_runtime(self, make_answers):
        deps, _ = compute_dependencies(make_answers(package_manager="yarn"))
        assert deps["yarn"] == "^1.22.22"

    def test_dev_baseline_always_present(self, make_answers):
        for preset in ("web", "api", "soap", "hybrid"):
            _, dev = compute_dependencies(make_answers(preset=preset))
            assert _has_all(dev, DEV_BASELINE_VERSIONS)
            assert _has_all(dev, TYPESCRIPT_VERSIONS)

    def test_javascript_keeps_typescript_tooling(self, make_answers):
        _, dev = compute_dependencies(make_answers(language="js"))
        assert _has_all(dev, TYPESCRIPT_VERSIONS)

    def test_web_preset(self, make_answers):
        _, dev = compute_dependencies(make_answers(preset="web"))
        assert _has_none(dev, SERVER_VERSIONS)
        assert _has_none(dev, SCHEMA_VERSIONS)
        assert _has_none(dev, XML_VERSIONS)

    def test_api_preset(self, make_answers):
        _, dev = compute_dependencies(make_answers(preset="api"))
        assert _has_all(dev, SERVER_VERSIONS)
        assert _has_all(dev, SCHEMA_VERSIONS)
        assert _has_none(dev, XML_VERSIONS)

    def test_soap_preset(self, make_answers):
        _, dev = compute_dependencies(make_answers(preset="soap"))
        assert _has_none(dev, SERVER_VERSIONS)
        assert _has_all(dev, SCHEMA_VERSIONS)
        assert _has_all(dev, XML_VERSIONS)

    def test_hybrid_preset(self, make_answers):
        _, dev = compute_dependencies(make_answers(preset="hybrid"))
        assert _has_all(dev, SERVER_VERSIONS)
        assert _has_all(dev, SCHEMA_VERSIONS)
        assert _has_all(dev, XML_VERSIONS)

    @pytest.mark.parametrize(
        "reporter,present,absent",
        [
            ("allure", ALLURE_VERSIONS, MONOCART_VERSIONS),
            ("monocart", MONOCART_VERSIONS, ALLURE_VERSIONS),
        ],
    )
    def test_reporter_groups(self, make_answers, reporter, present, absent):
        _, dev = compute_dependencies(make_answers(reporter=reporter))
        assert _has_all(dev, present)
        assert _has_none(dev, absent)

    def test_html_reporter_adds_nothing(self, make_answers):
        _, dev = compute_dependencies(make_answers(reporter="html"))
        assert _has_none(dev, ALLURE_VERSIONS)
        assert _has_none(dev, MONOCART_VERSIONS)

    def test_notifications(self, make_answers):
        _, with_n = compute_dependencies(make_answers(notifications_enabled=True))
        _, without_n = compute_dependencies(make_answers(notifications_enabled=False))
        assert _has_all(with_n, NOTIFICATION_VERSIONS)
        assert _has_none(without_n, NOTIFICATION_VERSIONS)

    def test_deterministic(self, make_answers):
        answers = make_answers(preset="hybrid", reporter="monocart")
        assert compute_dependencies(answers) == compute_dependencies(answers)

    def test_drop_undefined(self):
        assert drop_undefined({"a": "1", "b": None}) == {"a": "1"}


# ---------------------------------------------------------------------------
# Scripts
# ---------------------------------------------------------------------------


class TestComputeScripts:
    def test_base_scripts(self, make_answers):
        scripts = compute_scripts(make_answers(reporter="html"))
        for name, command in BASE_SCRIPTS.items():
            assert scripts[name] == command
        assert scripts["test:smoke"] == "playwright test --grep @smoke"

    def test_allure_npm(self, make_answers):
        scripts = compute_scripts(make_answers(reporter="allure"))
        assert scripts["report:generate"] == (
            "npx cross-env ALLURE_NO_ANALYTICS=1 allure generate --single-file "
            "artifacts/reports/allure-results -o artifacts/reports/allure-report --clean"
        )
        assert scripts["report:open"] == (
            "npx cross-env ALLURE_NO_ANALYTICS=1 allure open artifacts/reports/allure-report"
        )

    def test_allure_yarn(self, make_answers):
        scripts = compute_scripts(make_answers(reporter="allure", package_manager="yarn"))
        assert scripts["report:generate"].startswith("yarn cross-env ")
        assert scripts["report:open"].startswith("yarn cross-env ")

    def test_monocart(self, make_answers):
        scripts = compute_scripts(make_answers(reporter="monocart"))
        assert scripts["report:open"] == (
            "npx monocart show-report artifacts/reports/monocart-report/index.json --open"
        )
        assert "report:generate" not in scripts

    def test_html(self, make_answers):
        scripts = compute_scripts(make_answers(reporter="html", package_manager="yarn"))
        assert scripts["report:open"] == "yarn playwright show-report"
        assert "report:generate" not in scripts


# ---------------------------------------------------------------------------
# Manifest merge
# ---------------------------------------------------------------------------


class TestMergeManifest:
    def test_computed_versions_win(self, make_answers):
        manifest = {"dependencies": {"axios": "^0.1.0", "left-pad": "1.0.0"}}
        merged = merge_manifest(manifest, make_answers())
        assert merged["dependencies"]["axios"] == RUNTIME_VERSIONS["axios"]
        assert merged["dependencies"]["left-pad"] == "1.0.0"

    def test_existing_scripts_kept(self, make_answers):
        manifest = {"scripts": {"lint": "eslint .", "test": "echo old"}}
        merged = merge_manifest(manifest, make_answers())
        assert merged["scripts"]["lint"] == "eslint ."
        assert merged["scripts"]["test"] == "playwright test"

    def test_husky_adds_lint_staged_and_prepare(self, make_answers):
        merged = merge_manifest({}, make_answers(husky_enabled=True))
        assert merged["scripts"]["prepare"] == "husky"
        assert merged["lint-staged"] == {
            "*.{ts,js}": [
                "eslint . --fix --max-warnings 0 --no-cache",
                "prettier -w . --ignore-pattern .prettierignore",
            ],
        }

    def test_no_husky(self, make_answers):
        merged = merge_manifest({}, make_answers(husky_enabled=False))
        assert "lint-staged" not in merged
        assert "prepare" not in merged["scripts"]

    def test_other_keys_preserved(self, make_answers):
        manifest = {"name": "demo", "version": "1.0.0", "type": "module"}
        merged = merge_manifest(manifest, make_answers())
        assert merged["name"] == "demo"
        assert merged["type"] == "module"
        assert list(merged)[:3] == ["name", "version", "type"]

    def test_input_not_modified(self, make_answers):
        manifest = {"scripts": {"lint": "eslint ."}, "dependencies": {}}
        snapshot = copy.deepcopy(manifest)
        merge_manifest(manifest, make_answers())
        assert manifest == snapshot

    def test_merge_is_idempotent(self, make_answers):
        answers = make_answers(preset="hybrid", reporter="allure", package_manager="yarn")
        once = merge_manifest({"name": "demo"}, answers)
        assert merge_manifest(once, answers) == once
