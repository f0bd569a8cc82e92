"""Check the running Node.js against the installed package's ``engines`` field."""

from __future__ import annotations

import asyncio
from pathlib import Path

import semantic_version

from ..errors import RuntimeIncompatible
from ..installer.toolchain import get_node_version
from ..utils import load_json, print_warning


def read_engine_constraint(root: Path, package_name: str) -> str | None:
    """Return ``engines.node`` of the installed package, if declared."""
    manifest = root / "node_modules" / package_name / "package.json"
    data = load_json(manifest)
    engines = data.get("engines")
    if not isinstance(engines, dict):
        return None
    constraint = engines.get("node")
    return constraint if isinstance(constraint, str) and constraint.strip() else None


def satisfies(version: str, constraint: str) -> bool:
    """npm range satisfaction (``semver.satisfies``).

    Raises:
        ValueError: If *version* or *constraint* cannot be parsed.
    """
    return semantic_version.NpmSpec(constraint).match(semantic_version.Version.coerce(version))


async def check_node_version(root: Path, package_name: str) -> None:
    """Abort if the running Node.js does not satisfy the package's engines range.

    A package without an ``engines.node`` entry imposes no requirement.

    Raises:
        RuntimeIncompatible: If the installed Node.js is too old.
    """
    constraint = await asyncio.to_thread(read_engine_constraint, root, package_name)
    if constraint is None:
        return

    current = await get_node_version()
    if current is None:
        print_warning(
            f"Could not determine the Node.js version; skipping the check for {constraint}."
        )
        return

    try:
        ok = satisfies(current, constraint)
    except ValueError:
        print_warning(f"Ignoring unparseable engines.node range {constraint!r}.")
        return

    if not ok:
        raise RuntimeIncompatible(current, constraint)
