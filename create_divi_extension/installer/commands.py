"""Dependency installation and the downstream initialization script."""

from __future__ import annotations

import json
from pathlib import Path

from ..errors import InitScriptFailure, InstallFailure
from ..models import InstallPlan
from ..utils import console, format_command, print_warning, run_command_inherit

# Loads a CommonJS init script and calls it with the arguments passed on argv.
_INIT_BOOTSTRAP = (
    "const args = JSON.parse(process.argv[2]);"
    "require(process.argv[1])(args.root, args.appName, args.verbose,"
    " args.originalDirectory, args.template);"
)


def build_install_command(plan: InstallPlan, verbose: bool = False) -> list[str]:
    """Return the package-manager argv for *plan*.

    Both managers pin exact versions.  ``--offline`` is only added for yarn
    when the registry probe failed.
    """
    if plan.use_yarn:
        cmd = ["yarnpkg", "add", "--exact"]
        if not plan.online:
            cmd.append("--offline")
        cmd.extend(plan.dependencies)
    else:
        cmd = ["npm", "install", "--save", "--save-exact", *plan.dependencies]

    if verbose:
        cmd.append("--verbose")
    return cmd


async def install(plan: InstallPlan, root: Path, verbose: bool = False) -> None:
    """Install ``plan.dependencies`` into *root*.

    The package manager writes straight to the terminal so its progress is
    visible while it runs.

    Raises:
        InstallFailure: If the package manager exits with a non-zero status.
    """
    cmd = build_install_command(plan, verbose=verbose)

    if plan.use_yarn and not plan.online:
        print_warning("You appear to be offline.")
        print_warning("Falling back to the local Yarn cache.")
        console.print()

    returncode = await run_command_inherit(cmd, cwd=root)
    if returncode != 0:
        raise InstallFailure(format_command(cmd), returncode)


def init_script_path(root: Path, package_name: str) -> Path:
    return root / "node_modules" / package_name / "scripts" / "init.js"


async def run_init_script(
    root: Path,
    package_name: str,
    app_name: str,
    verbose: bool,
    original_directory: Path,
    template_dir: Path,
) -> None:
    """Hand over to the installed package's ``scripts/init.js``.

    Raises:
        InitScriptFailure: If the script cannot be run or exits non-zero.
    """
    script = init_script_path(root, package_name)
    args = {
        "root": str(root),
        "appName": app_name,
        "verbose": bool(verbose),
        "originalDirectory": str(original_directory),
        "template": str(template_dir),
    }
    cmd = ["node", "-e", _INIT_BOOTSTRAP, str(script), json.dumps(args)]

    returncode = await run_command_inherit(cmd, cwd=root)
    if returncode != 0:
        raise InitScriptFailure(f"node {script}", returncode)
