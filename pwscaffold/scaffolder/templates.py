"""Jinja2 template rendering for project scaffolding.

Provides the TemplateRenderer class which wraps a Jinja2 environment rooted
at the ``pwscaffold/templates/`` directory.  Template files are recognised by
the ``.j2`` marker suffix, which is stripped from the output filename when the
file is rendered into a project.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

TEMPLATE_SUFFIX = ".j2"


def is_template(name: str) -> bool:
    """Return ``True`` if *name* carries the template marker suffix."""
    return name.endswith(TEMPLATE_SUFFIX)


def strip_marker(name: str) -> str:
    """Remove one trailing ``.j2`` marker from a filename.

    ``"package.json.j2"`` becomes ``"package.json"``; names without the
    marker are returned unchanged.
    """
    if is_template(name):
        return name[: -len(TEMPLATE_SUFFIX)]
    return name


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for project scaffolding.

    Undefined names are fatal (``StrictUndefined``) and no block trimming is
    applied, so everything outside template syntax is written verbatim.
    Autoescaping is off: output is source code and config, never HTML.
    Errors raised by Jinja2 (``TemplateSyntaxError``, ``UndefinedError``) are
    left to propagate to the caller.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    # -- Rendering ---------------------------------------------------------

    def render(self, template_text: str, context: dict[str, Any]) -> str:
        """Render template source text with the provided context.

        This is a pure function of its inputs: nothing is read from or written
        to disk.
        """
        template = self.env.from_string(template_text)
        return template.render(**context)

    def render_template(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a template file from the template directory.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"base/package.json.j2"``).
            context: Dictionary of variables available inside the template.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    # -- Utility -----------------------------------------------------------

    def list_templates(self, prefix: str = "") -> list[str]:
        """Return a sorted list of all ``.j2`` template paths under *prefix*.

        Paths are relative to the template root directory and use forward
        slashes.
        """
        search_dir = self.template_dir / prefix if prefix else self.template_dir
        if not search_dir.is_dir():
            return []
        return sorted(
            p.relative_to(self.template_dir).as_posix()
            for p in search_dir.rglob(f"*{TEMPLATE_SUFFIX}")
        )
