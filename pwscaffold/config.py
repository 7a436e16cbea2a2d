"""Playwright scaffold configuration.

The ``Answers`` record is the single, immutable description of the project to
generate.  It is produced once by the resolver in :mod:`pwscaffold.prompts`
and then read by every downstream stage, both as the Jinja2 rendering context
and as the set of gates for optional scaffolding steps.

``Settings`` holds process-level knobs (template location, CI detection) that
are read from the environment.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Language(str, Enum):
    """Source language of the generated framework."""
    TS = "ts"
    JS = "js"


class PackageManager(str, Enum):
    """Package manager the generated project is wired for."""
    NPM = "npm"
    YARN = "yarn"


class CIProvider(str, Enum):
    """CI pipeline definition to include."""
    GITHUB = "github"
    GITLAB = "gitlab"
    NONE = "none"


class Reporter(str, Enum):
    """Test-result presentation integration."""
    HTML = "html"
    ALLURE = "allure"
    MONOCART = "monocart"


class Preset(str, Enum):
    """Bundle of test-domain scaffolding to generate."""
    WEB = "web"
    API = "api"
    SOAP = "soap"
    HYBRID = "hybrid"


LANGUAGES: tuple[str, ...] = tuple(m.value for m in Language)
PACKAGE_MANAGERS: tuple[str, ...] = tuple(m.value for m in PackageManager)
CI_PROVIDERS: tuple[str, ...] = tuple(m.value for m in CIProvider)
REPORTERS: tuple[str, ...] = tuple(m.value for m in Reporter)
PRESETS: tuple[str, ...] = tuple(m.value for m in Preset)


# Values used when neither a flag nor an interactive answer supplies one.
DEFAULT_ANSWERS: dict[str, Any] = {
    "language": Language.TS.value,
    "package_manager": PackageManager.NPM.value,
    "ci_provider": CIProvider.GITHUB.value,
    "reporter": Reporter.ALLURE.value,
    "notifications_enabled": True,
    "husky_enabled": True,
    "zephyr_enabled": False,
    "preset": Preset.WEB.value,
}


# ---------------------------------------------------------------------------
# Answers
# ---------------------------------------------------------------------------


class Answers(BaseModel):
    """Validated, immutable set of user choices for one scaffold run.

    Enum fields are stored as their plain string values, defaults included,
    so ``answers.preset == "web"`` holds and templates render
    ``{{ preset }}`` as ``web``.
    """

    model_config = ConfigDict(
        frozen=True, extra="forbid", use_enum_values=True, validate_default=True
    )

    project_name: str = Field(..., min_length=1, description="Destination folder name")
    language: Language = Field(default=Language.TS)
    package_manager: PackageManager = Field(default=PackageManager.NPM)
    ci_provider: CIProvider = Field(default=CIProvider.GITHUB)
    reporter: Reporter = Field(default=Reporter.ALLURE)
    notifications_enabled: bool = Field(default=True)
    husky_enabled: bool = Field(default=True)
    zephyr_enabled: bool = Field(default=False)
    preset: Preset = Field(default=Preset.WEB)

    @field_validator("project_name")
    @classmethod
    def validate_project_name(cls, v: str) -> str:
        """Strip surrounding whitespace; the result must be a single folder name."""
        name = v.strip()
        if not name:
            raise ValueError("Project name must not be blank")
        if name in (".", "..") or "/" in name or "\\" in name:
            raise ValueError("Project name must be a single folder name, not a path")
        return name

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def pm_bin(self) -> str:
        """Command prefix for running package binaries (``yarn`` or ``npx``)."""
        return "yarn" if self.package_manager == PackageManager.YARN.value else "npx"

    @property
    def pm_run(self) -> str:
        """Command prefix for running package scripts."""
        return "yarn" if self.package_manager == PackageManager.YARN.value else "npm run"

    @property
    def project_slug(self) -> str:
        """npm-safe package name derived from the project name."""
        slug = re.sub(r"[^a-z0-9._-]+", "-", self.project_name.lower().strip())
        return slug.strip("-._") or "playwright-tests"

    def template_context(self) -> dict[str, Any]:
        """Build the Jinja2 rendering context for this run."""
        return {
            **self.model_dump(),
            "project_slug": self.project_slug,
            "pm_bin": self.pm_bin,
            "pm_run": self.pm_run,
            "is_typescript": self.language == Language.TS.value,
            "has_ui": self.preset in (Preset.WEB.value, Preset.HYBRID.value),
            "has_api": self.preset in (Preset.API.value, Preset.HYBRID.value),
            "has_soap": self.preset in (Preset.SOAP.value, Preset.HYBRID.value),
        }


# ---------------------------------------------------------------------------
# Process settings
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


class Settings(BaseModel):
    """Process-level settings, independent of any single project."""

    template_dir: Path = Field(default=_DEFAULT_TEMPLATE_DIR)
    ci: bool = Field(default=False, description="Running under a CI system")

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            PWSCAFFOLD_TEMPLATE_DIR, CI.
        """
        env = os.environ if env is None else env
        kwargs: dict[str, Any] = {"ci": is_ci_environment(env)}
        if env.get("PWSCAFFOLD_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(env["PWSCAFFOLD_TEMPLATE_DIR"])
        return cls(**kwargs)


def is_ci_environment(env: Mapping[str, str] | None = None) -> bool:
    """Return ``True`` when ``CI`` is set to ``1`` or ``true``."""
    env = os.environ if env is None else env
    return env.get("CI", "").strip().lower() in ("1", "true")
