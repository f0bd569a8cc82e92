"""Rewrite the generated ``package.json`` after installation.

The scripts package is installed with ``--save`` and so lands in
``dependencies``.  It is moved to ``devDependencies`` together with
``react`` and ``react-dom``, which must not end up in the extension's
production bundle, and the React packages get caret ranges.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import semantic_version

from ..errors import MissingDependency
from ..utils import load_json, print_warning, save_json


@dataclass
class Manifest:
    """In-memory ``package.json``; key order is preserved on save."""

    path: Path
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def load(cls, root: Path) -> "Manifest":
        path = Path(root) / "package.json"
        return cls(path=path, data=load_json(path))

    async def save(self) -> None:
        await save_json(self.data, self.path)

    @property
    def dependencies(self) -> dict[str, str]:
        deps = self.data.get("dependencies")
        if not isinstance(deps, dict):
            raise MissingDependency("dependencies")
        return deps

    @property
    def dev_dependencies(self) -> dict[str, str]:
        return self.data.setdefault("devDependencies", {})

    def move_to_dev(self, name: str) -> None:
        """Move *name* from ``dependencies`` into ``devDependencies``."""
        deps = self.dependencies
        if name not in deps:
            raise MissingDependency(name)
        self.dev_dependencies[name] = deps.pop(name)


def is_valid_range(spec: str) -> bool:
    """Return ``True`` if *spec* parses as an npm version range."""
    try:
        semantic_version.NpmSpec(spec)
    except ValueError:
        return False
    return True


def make_caret_range(dependencies: dict[str, str], name: str) -> None:
    """Rewrite ``dependencies[name]`` to ``^<version>`` in place.

    A range that already starts with ``^`` is left alone.  If the caret form
    is not a valid range the original version is kept.

    Raises:
        MissingDependency: If *name* is not in *dependencies*.
    """
    version = dependencies.get(name)
    if version is None:
        raise MissingDependency(name)

    if version.startswith("^"):
        return

    patched = f"^{version}"
    if not is_valid_range(patched):
        print_warning(
            f"Unable to patch {name} dependency version because version "
            f"{version} will become invalid {patched}"
        )
        patched = version

    dependencies[name] = patched


async def fix_dependencies(
    root: Path, package_name: str, runtime_packages: list[str]
) -> Manifest:
    """Move *package_name* and *runtime_packages* to ``devDependencies``.

    Every entry is checked before anything is modified, so a missing
    dependency leaves the file on disk untouched.

    Raises:
        MissingDependency: If ``dependencies`` or any required entry is missing.
    """
    manifest = await asyncio.to_thread(Manifest.load, root)

    deps = manifest.dependencies
    for name in (package_name, *runtime_packages):
        if name not in deps:
            raise MissingDependency(name)

    manifest.move_to_dev(package_name)
    for name in runtime_packages:
        manifest.move_to_dev(name)
        make_caret_range(manifest.dev_dependencies, name)

    await manifest.save()
    return manifest
