"""Shared pytest fixtures for the create-divi-extension test suite.

Provides reusable fixtures for:
- Temporary project directories
- Post-install ``package.json`` manifests
- Scaffold file trees containing template tokens
- ``.tgz`` archives shaped like npm packages
- Mock subprocess helpers
"""

from __future__ import annotations

import io
import json
import tarfile
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Empty target directory named like a real extension project."""
    project_dir = tmp_path / "divi-sample"
    project_dir.mkdir()
    yield project_dir


# ---------------------------------------------------------------------------
# Manifests
# ---------------------------------------------------------------------------

@pytest.fixture
def installed_manifest() -> dict[str, Any]:
    """``package.json`` as it looks right after ``npm install --save-exact``."""
    return {
        "name": "divi-sample",
        "version": "0.1.0",
        "private": True,
        "dependencies": {
            "react": "16.2.0",
            "react-dom": "16.2.0",
            "react-scripts": "1.0.17",
        },
    }


@pytest.fixture
def write_manifest():
    """Write a dict as ``package.json`` into a directory.

    Usage:
        def test_x(write_manifest, tmp_path):
            path = write_manifest(tmp_path, {"name": "x"})
    """
    def factory(directory: Path, data: dict[str, Any]) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / "package.json"
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return path

    return factory


@pytest.fixture
def installed_package(write_manifest):
    """Create ``node_modules/<name>/package.json`` with optional ``engines.node``."""
    def factory(root: Path, name: str = "react-scripts", engines_node: str | None = None) -> Path:
        data: dict[str, Any] = {"name": name, "version": "1.0.17"}
        if engines_node is not None:
            data["engines"] = {"node": engines_node}
        return write_manifest(root / "node_modules" / name, data)

    return factory


# ---------------------------------------------------------------------------
# Scaffold files
# ---------------------------------------------------------------------------

TEMPLATE_PHP = """<?php
/*
Plugin Name: <NAME>
Text Domain: <GETTEXT_DOMAIN>
*/

if ( ! function_exists( '__prefix_initialize_extension' ) ):
function __prefix_initialize_extension() {
	require_once plugin_dir_path( __FILE__ ) . 'includes/__Prefix_Extension.php';
	define( '__PREFIX_VERSION', '1.0.0' );
}
add_action( 'divi_extensions_init', '__prefix_initialize_extension' );
endif;
"""

LOADER_PHP = """<?php
if ( ! class_exists( 'ET_Builder_Element' ) ) {
	return;
}
$module_files = glob( __DIR__ . '/__Prefix_*.php' );
"""

CUSTOM_PHP = """<?php
class __Prefix_Custom extends ET_Builder_Module {
	public $slug = '__prefix_custom';
	public $vb_support = 'on';
	protected $module_credits = array( 'author' => '<NAME>' );
}
new __Prefix_Custom;
"""


@pytest.fixture
def scaffold_tree(tmp_project_dir: Path) -> Path:
    """Project root holding the three tokenised scaffold files."""
    (tmp_project_dir / "module").mkdir()
    (tmp_project_dir / "template.php").write_text(TEMPLATE_PHP, encoding="utf-8")
    (tmp_project_dir / "module" / "loader.php").write_text(LOADER_PHP, encoding="utf-8")
    (tmp_project_dir / "module" / "__Prefix_Custom.php").write_text(CUSTOM_PHP, encoding="utf-8")
    return tmp_project_dir


# ---------------------------------------------------------------------------
# Archives
# ---------------------------------------------------------------------------

@pytest.fixture
def make_tarball(tmp_path: Path):
    """Build a ``.tgz`` archive laid out like an npm package.

    Usage:
        path = make_tarball("my-scripts-1.2.0.tgz", {"name": "my-scripts"})
        path = make_tarball("broken.tgz", None)  # archive without package.json
    """
    def factory(filename: str, manifest: dict[str, Any] | None, top_dir: str = "package") -> Path:
        path = tmp_path / filename
        with tarfile.open(path, "w:gz") as tar:
            files: dict[str, bytes] = {f"{top_dir}/index.js": b"module.exports = {};\n"}
            if manifest is not None:
                files[f"{top_dir}/package.json"] = json.dumps(manifest).encode("utf-8")
            for name, content in files.items():
                info = tarfile.TarInfo(name)
                info.size = len(content)
                tar.addfile(info, io.BytesIO(content))
        return path

    return factory


# ---------------------------------------------------------------------------
# Mock subprocess
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
