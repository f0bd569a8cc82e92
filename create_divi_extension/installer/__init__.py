"""Package-manager interaction: detection, registry probe, install and init."""

from __future__ import annotations

from .commands import build_install_command, init_script_path, install, run_init_script
from .toolchain import (
    NpmInfo,
    check_if_online,
    check_npm_version,
    coerce_version,
    get_node_version,
    should_use_yarn,
)

__all__ = [
    "NpmInfo",
    "build_install_command",
    "check_if_online",
    "check_npm_version",
    "coerce_version",
    "get_node_version",
    "init_script_path",
    "install",
    "run_init_script",
    "should_use_yarn",
]
