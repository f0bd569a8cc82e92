"""create-divi-extension configuration.

Centralised, typed configuration for a bootstrap run. All settings use
Pydantic v2 models so they can be validated at construction time and
serialised to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "template"


class ToolchainConfig(BaseModel):
    """Minimum toolchain versions and the legacy fallback package.

    When the running Node.js or the detected npm is older than these floors
    the project is bootstrapped with ``legacy_scripts_package`` instead.
    """

    min_node: str = Field(default="6.0.0")
    min_npm: str = Field(default="3.0.0")
    legacy_scripts_package: str = Field(default="react-scripts@0.9.x")


class NetworkConfig(BaseModel):
    """Registry probe and archive download settings."""

    registry_host: str = Field(default="registry.yarnpkg.com")
    probe_timeout: float = Field(
        default=5.0, gt=0, description="Upper bound for the registry DNS lookup in seconds"
    )
    download_timeout: float = Field(
        default=60.0, gt=0, description="Timeout for fetching a .tgz archive in seconds"
    )


class Config(BaseModel):
    """Global create-divi-extension configuration.

    Instances are typically created once by the CLI entry point and passed to
    :class:`~create_divi_extension.orchestrator.Bootstrapper`.
    """

    scripts_package: str = Field(default="react-scripts")
    runtime_packages: list[str] = Field(default=["react", "react-dom"])
    template_dir: Path = Field(default=_DEFAULT_TEMPLATE_DIR)

    # Template prefix derivation
    prefix_word: str = Field(default="divi")
    prefix_length: int = Field(default=4, ge=1)
    scaffold_files: list[str] = Field(
        default=[
            "template.php",
            "module/loader.php",
            "module/__Prefix_Custom.php",
        ]
    )

    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)
    network: NetworkConfig = Field(default_factory=NetworkConfig)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def reserved_names(self) -> list[str]:
        """Names a new project may not take (they clash with its own dependencies)."""
        return sorted([*self.runtime_packages, self.scripts_package])

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            CDE_SCRIPTS_PACKAGE, CDE_TEMPLATE_DIR, CDE_PREFIX_WORD,
            CDE_REGISTRY_HOST, CDE_PROBE_TIMEOUT, CDE_DOWNLOAD_TIMEOUT,
            CDE_MIN_NODE, CDE_MIN_NPM.
        """
        network_kwargs: dict[str, Any] = {}
        if os.environ.get("CDE_REGISTRY_HOST"):
            network_kwargs["registry_host"] = os.environ["CDE_REGISTRY_HOST"]
        if os.environ.get("CDE_PROBE_TIMEOUT"):
            network_kwargs["probe_timeout"] = float(os.environ["CDE_PROBE_TIMEOUT"])
        if os.environ.get("CDE_DOWNLOAD_TIMEOUT"):
            network_kwargs["download_timeout"] = float(os.environ["CDE_DOWNLOAD_TIMEOUT"])

        toolchain_kwargs: dict[str, Any] = {}
        if os.environ.get("CDE_MIN_NODE"):
            toolchain_kwargs["min_node"] = os.environ["CDE_MIN_NODE"]
        if os.environ.get("CDE_MIN_NPM"):
            toolchain_kwargs["min_npm"] = os.environ["CDE_MIN_NPM"]

        kwargs: dict[str, Any] = {}
        if os.environ.get("CDE_SCRIPTS_PACKAGE"):
            kwargs["scripts_package"] = os.environ["CDE_SCRIPTS_PACKAGE"]
        if os.environ.get("CDE_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["CDE_TEMPLATE_DIR"])
        if os.environ.get("CDE_PREFIX_WORD"):
            kwargs["prefix_word"] = os.environ["CDE_PREFIX_WORD"]

        return cls(
            network=NetworkConfig(**network_kwargs),
            toolchain=ToolchainConfig(**toolchain_kwargs),
            **kwargs,
        )
