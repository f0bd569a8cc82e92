"""Remove what a failed run generated in the target directory.

Only entries matching :data:`KNOWN_GENERATED_FILES` are ever deleted, so
files the user had in the directory before the run survive a rollback.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path

from .models import RollbackReport
from .utils import console

KNOWN_GENERATED_FILES: tuple[str, ...] = (
    "package.json",
    "npm-debug.log",
    "yarn-error.log",
    "yarn-debug.log",
    "node_modules",
)


def is_generated(filename: str) -> bool:
    """Return ``True`` if *filename* is on the rollback allow-list.

    Log entries match by prefix, which also catches rotated files such as
    ``npm-debug.log.2417``; everything else must match exactly.
    """
    for known in KNOWN_GENERATED_FILES:
        if known.endswith(".log"):
            if filename.startswith(known):
                return True
        elif filename == known:
            return True
    return False


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


async def rollback(root: Path, app_name: str) -> RollbackReport:
    """Delete generated artifacts from *root*, then *root* itself if empty.

    Returns:
        A report whose ``working_root`` is the parent directory when *root*
        was removed, and *root* otherwise.
    """
    report = RollbackReport(working_root=root)
    if not root.is_dir():
        return report

    for entry in sorted(root.iterdir()):
        if not is_generated(entry.name):
            continue
        console.print(f"Deleting generated file... [cyan]{entry.name}[/cyan]")
        await asyncio.to_thread(_remove, entry)
        report.deleted.append(entry.name)

    if not any(root.iterdir()):
        parent = root.parent
        console.print(f"Deleting [cyan]{app_name}/[/cyan] from [cyan]{parent}[/cyan]")
        await asyncio.to_thread(root.rmdir)
        report.root_removed = True
        report.working_root = parent

    return report
