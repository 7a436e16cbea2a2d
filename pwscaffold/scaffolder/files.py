"""Recursive directory operations used to assemble a project tree.

Every copy goes through :func:`walk_tree`, a single recursive walker that
mirrors a source tree into a destination tree and hands each file to a
per-file transform.  Plain copies use :func:`copy_file`; template-aware copies
use :class:`TemplateTransform`, which renders ``.j2`` files and strips the
marker from the output name.

A source path that does not exist is not an error: the destination directory
is created and nothing else happens.  Any other filesystem failure propagates
as the underlying ``OSError``.
"""

from __future__ import annotations

import asyncio
import json
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import Any

from .templates import TemplateRenderer, is_template, strip_marker

# A transform writes one source file into a destination directory and returns
# the path it wrote.
FileTransform = Callable[[Path, Path], Path]


# ---------------------------------------------------------------------------
# Per-file transforms
# ---------------------------------------------------------------------------


def copy_file(src: Path, dst_dir: Path) -> Path:
    """Copy *src* byte-for-byte into *dst_dir*, keeping its name and mode."""
    out = dst_dir / src.name
    shutil.copy(src, out)
    return out


class TemplateTransform:
    """Render ``.j2`` files, copy everything else unchanged."""

    def __init__(self, renderer: TemplateRenderer, context: dict[str, Any]) -> None:
        self.renderer = renderer
        self.context = context

    def __call__(self, src: Path, dst_dir: Path) -> Path:
        if not is_template(src.name):
            return copy_file(src, dst_dir)
        content = self.renderer.render(src.read_text(encoding="utf-8"), self.context)
        out = dst_dir / strip_marker(src.name)
        out.write_text(content, encoding="utf-8")
        return out


# ---------------------------------------------------------------------------
# Tree operations
# ---------------------------------------------------------------------------


async def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist."""
    dir_path = Path(path)
    await asyncio.to_thread(dir_path.mkdir, parents=True, exist_ok=True)
    return dir_path


async def walk_tree(src: str | Path, dst: str | Path, transform: FileTransform) -> list[Path]:
    """Mirror *src* into *dst*, passing every file through *transform*.

    If *src* is a single file, *dst* is the directory the output is placed
    into.  Sibling entries are processed concurrently; directories on the
    destination path always exist before a file is written into them.  When
    a sibling fails, the others still run to completion before the first
    error (in sorted entry order) is raised.

    Returns:
        The list of written file paths.
    """
    src_path = Path(src)
    dst_path = Path(dst)

    if not await asyncio.to_thread(src_path.exists):
        await ensure_dir(dst_path)
        return []

    await ensure_dir(dst_path)

    if await asyncio.to_thread(src_path.is_file):
        out = await asyncio.to_thread(transform, src_path, dst_path)
        return [out]

    entries = sorted(await asyncio.to_thread(lambda: list(src_path.iterdir())))
    results = await asyncio.gather(
        *(_walk_entry(entry, dst_path, transform) for entry in entries),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return [path for written in results for path in written]


async def _walk_entry(entry: Path, dst_dir: Path, transform: FileTransform) -> list[Path]:
    if await asyncio.to_thread(entry.is_dir):
        # Directory names are never rewritten.
        return await walk_tree(entry, dst_dir / entry.name, transform)
    out = await asyncio.to_thread(transform, entry, dst_dir)
    return [out]


async def copy_tree(src: str | Path, dst: str | Path) -> list[Path]:
    """Copy *src* to *dst* recursively without rendering anything."""
    return await walk_tree(src, dst, copy_file)


async def render_and_copy_tree(
    src: str | Path,
    dst: str | Path,
    context: dict[str, Any],
    renderer: TemplateRenderer | None = None,
) -> list[Path]:
    """Copy *src* to *dst*, rendering ``.j2`` files through Jinja2.

    Rendered files are written under their name with the ``.j2`` marker
    removed; all other files are copied unchanged.
    """
    transform = TemplateTransform(renderer or TemplateRenderer(), context)
    return await walk_tree(src, dst, transform)


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> dict[str, Any]:
    """Load and parse a JSON object file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If the top-level value is not an object.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}")
    return data


async def write_json(path: str | Path, value: Any) -> Path:
    """Serialise *value* as two-space indented JSON and overwrite *path*.

    Keys keep their insertion order and the output ends with a newline, so the
    same input always produces byte-identical files.
    """
    file_path = Path(path)
    content = json.dumps(value, indent=2, ensure_ascii=False) + "\n"
    await asyncio.to_thread(file_path.write_text, content, "utf-8")
    return file_path
