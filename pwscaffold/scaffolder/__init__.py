"""Playwright scaffold generator -- builds complete test-framework projects.

This module takes an ``Answers`` record and renders a ready-to-install
Playwright project directory from the template tree shipped in
``pwscaffold/templates/``.

Quick usage::

    from pwscaffold.config import Answers
    from pwscaffold.scaffolder import ScaffoldGenerator

    answers = Answers(project_name="my-tests", preset="api", reporter="html")
    generator = ScaffoldGenerator(answers)
    project_path = await generator.generate("/tmp/output")
"""

from pwscaffold.scaffolder.files import copy_tree, ensure_dir, render_and_copy_tree, write_json
from pwscaffold.scaffolder.generator import ScaffoldGenerator, Step, TreeOperations, scaffold
from pwscaffold.scaffolder.manifest import compute_dependencies, compute_scripts, merge_manifest
from pwscaffold.scaffolder.templates import TEMPLATE_SUFFIX, TemplateRenderer, strip_marker

__all__ = [
    "ScaffoldGenerator",
    "Step",
    "TreeOperations",
    "scaffold",
    "TemplateRenderer",
    "TEMPLATE_SUFFIX",
    "strip_marker",
    "copy_tree",
    "ensure_dir",
    "render_and_copy_tree",
    "write_json",
    "compute_dependencies",
    "compute_scripts",
    "merge_manifest",
]
