"""create-divi-extension bootstrap orchestrator.

Creates a new Divi extension project:

1. Validate the project name and prepare the target directory.
2. Resolve which scripts package to install and what it is called.
3. Probe the registry (yarn only) and install react, react-dom and the
   scripts package.
4. Check the installed package's Node.js requirement.
5. Move the installed packages to ``devDependencies``.
6. Run the scripts package's ``init.js`` and finalise the PHP scaffold files.

Any failure from step 2 onwards removes the files the run generated (see
:mod:`create_divi_extension.rollback`), except when the Node.js version is
too old, which leaves the install in place.

Usage::

    create-divi-extension my-extension
    create-divi-extension my-extension --scripts-version 1.0.4 --verbose
"""

from __future__ import annotations

import asyncio
import sys
import traceback
from pathlib import Path

from rich.markup import escape
from rich.panel import Panel

from .config import Config
from .errors import (
    BootstrapError,
    CommandFailure,
    InvalidName,
    NameCollision,
    UnexpectedError,
    UnsafeDirectory,
)
from .installer import (
    check_if_online,
    check_npm_version,
    coerce_version,
    get_node_version,
    install,
    run_init_script,
    should_use_yarn,
)
from .manifest import check_node_version, fix_dependencies
from .models import InstallPlan, ProjectRequest, RunContext
from .resolver import get_install_package, get_package_name
from .rollback import rollback
from .scaffold import (
    check_app_name,
    derive_template_context,
    ensure_safe_to_create,
    finalize_extension_files,
)
from .utils import console, print_error, print_list, print_success, print_warning, save_json


class Bootstrapper:
    """Runs one bootstrap from a :class:`ProjectRequest` to an exit status.

    Attributes:
        config: Global configuration.
    """

    # Steps covered by rollback, executed in this order.
    _STEPS: list[tuple[str, str]] = [
        ("resolve", "_step_resolve"),
        ("probe", "_step_probe"),
        ("install", "_step_install"),
        ("check_node", "_step_check_node"),
        ("fix_dependencies", "_step_fix_dependencies"),
        ("init", "_step_init"),
        ("finalize", "_step_finalize"),
    ]

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    async def run(self, request: ProjectRequest) -> int:
        """Bootstrap the project described by *request*.

        Returns:
            ``0`` on success, ``1`` on any failure.
        """
        try:
            ctx = await self.prepare(request)
        except BootstrapError as exc:
            self._report_validation_error(exc)
            return 1
        except Exception as exc:
            print_error(f"Could not prepare the project directory: {exc}")
            return 1

        try:
            for step_name, method_name in self._STEPS:
                await getattr(self, method_name)(ctx)
                ctx.completed_steps.append(step_name)
        except BootstrapError as exc:
            return await self._abort(ctx, exc)
        except Exception as exc:
            return await self._abort(ctx, UnexpectedError(exc))

        if ctx.used_legacy_fallback:
            print_warning(
                "\nNote: the project was boostrapped with an old unsupported version of tools.\n"
                "Please update to Node >=6 and npm >=4 to get supported tools in new projects.\n"
            )
        print_success(f"Created {ctx.app_name} at {ctx.root}")
        return 0

    # ------------------------------------------------------------------
    # Preparation
    # ------------------------------------------------------------------

    async def prepare(self, request: ProjectRequest) -> RunContext:
        """Validate *request*, create the directory and its initial manifest.

        Everything that can fail without leaving files behind (name checks,
        toolchain detection, the directory check) runs before the directory
        and ``package.json`` are written.

        Raises:
            InvalidName, NameCollision, UnsafeDirectory: On validation failure.
        """
        root = Path(request.name).resolve()
        app_name = root.name

        check_app_name(app_name, self.config.reserved_names)
        template = derive_template_context(
            app_name,
            strip_word=self.config.prefix_word,
            length=self.config.prefix_length,
        )

        ctx = RunContext(
            root=root,
            app_name=app_name,
            original_directory=Path.cwd(),
            verbose=request.verbose,
            version_spec=request.version_spec,
            template=template,
            working_root=root,
        )
        ctx.use_yarn = await should_use_yarn()
        await self._apply_toolchain_floor(ctx)

        ensure_safe_to_create(root)
        await asyncio.to_thread(root.mkdir, parents=True, exist_ok=True)

        console.print(f"Creating a new Divi extension in [green]{escape(str(root))}[/green].")
        console.print()

        try:
            await save_json(
                {"name": app_name, "version": "0.1.0", "private": True},
                root / "package.json",
            )
        except OSError:
            await rollback(root, app_name)
            raise
        return ctx

    async def _apply_toolchain_floor(self, ctx: RunContext) -> None:
        """Fall back to the legacy scripts package on very old Node.js or npm."""
        toolchain = self.config.toolchain

        node_version = await get_node_version()
        if node_version is not None and not _at_least(node_version, toolchain.min_node):
            print_warning(
                f"You are using Node {node_version} so the project will be bootstrapped "
                f"with an old unsupported version of tools.\n\n"
                f"Please update to Node {toolchain.min_node} or higher for a better, "
                f"fully supported experience.\n"
            )
            ctx.version_spec = toolchain.legacy_scripts_package
            ctx.used_legacy_fallback = True

        if ctx.use_yarn:
            return

        npm_info = await check_npm_version(toolchain.min_npm)
        if not npm_info.has_min_npm:
            if npm_info.npm_version:
                print_warning(
                    f"You are using npm {npm_info.npm_version} so the project will be "
                    f"bootstrapped with an old unsupported version of tools.\n\n"
                    f"Please update to npm {toolchain.min_npm} or higher for a better, "
                    f"fully supported experience.\n"
                )
            ctx.version_spec = toolchain.legacy_scripts_package
            ctx.used_legacy_fallback = True

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def _step_resolve(self, ctx: RunContext) -> None:
        ctx.install_package = get_install_package(ctx.version_spec, self.config.scripts_package)
        console.print("Installing packages. This might take a couple minutes.")

        resolution = await get_package_name(
            ctx.install_package, timeout=self.config.network.download_timeout
        )
        ctx.name_resolution = resolution
        ctx.package_name = resolution.name

    async def _step_probe(self, ctx: RunContext) -> None:
        ctx.online = await check_if_online(
            ctx.use_yarn,
            self.config.network.registry_host,
            timeout=self.config.network.probe_timeout,
        )

    async def _step_install(self, ctx: RunContext) -> None:
        names = ", ".join(f"[cyan]{escape(name)}[/cyan]" for name in self.config.runtime_packages)
        console.print(f"Installing {names}, and [cyan]{escape(ctx.package_name)}[/cyan]...")
        console.print()

        plan = InstallPlan(
            use_yarn=ctx.use_yarn,
            online=ctx.online,
            dependencies=(*self.config.runtime_packages, ctx.install_package),
        )
        await install(plan, ctx.root, verbose=ctx.verbose)

    async def _step_check_node(self, ctx: RunContext) -> None:
        await check_node_version(ctx.root, ctx.package_name)

    async def _step_fix_dependencies(self, ctx: RunContext) -> None:
        await fix_dependencies(ctx.root, ctx.package_name, self.config.runtime_packages)

    async def _step_init(self, ctx: RunContext) -> None:
        await run_init_script(
            ctx.root,
            ctx.package_name,
            ctx.app_name,
            ctx.verbose,
            ctx.original_directory,
            self.config.template_dir,
        )

    async def _step_finalize(self, ctx: RunContext) -> None:
        assert ctx.template is not None  # set by prepare()
        await finalize_extension_files(ctx.root, ctx.template, self.config.scaffold_files)

    # ------------------------------------------------------------------
    # Failure handling
    # ------------------------------------------------------------------

    async def _abort(self, ctx: RunContext, exc: BootstrapError) -> int:
        """Report *exc*, roll back if its class asks for it, return ``1``."""
        if not exc.rollback:
            print_error(str(exc))
            return 1

        console.print()
        console.print("Aborting installation.")
        if isinstance(exc, CommandFailure):
            console.print(f"  [cyan]{escape(exc.command)}[/cyan] has failed.")
        elif isinstance(exc, UnexpectedError):
            print_error("Unexpected error. Please report it as a bug:")
            console.print(
                "".join(traceback.format_exception(exc.cause)), markup=False
            )
        else:
            print_error(str(exc))
        console.print()

        report = await rollback(ctx.root, ctx.app_name)
        ctx.working_root = report.working_root
        console.print("Done.")
        return 1

    @staticmethod
    def _report_validation_error(exc: BootstrapError) -> None:
        if isinstance(exc, InvalidName):
            print_error(f"{exc}:")
            print_list(exc.errors, style="red")
            print_list(exc.warnings, style="red")
        elif isinstance(exc, NameCollision):
            print_error(str(exc))
            print_error("Due to the way npm works, the following names are not allowed:")
            console.print()
            print_list(exc.reserved)
            console.print()
            print_error("Please choose a different project name.")
        elif isinstance(exc, UnsafeDirectory) and exc.conflicts:
            console.print(
                f"The directory [green]{escape(str(exc.root))}[/green] contains files that could conflict:"
            )
            print_list(exc.conflicts)
            console.print("Try using a new directory name.")
        else:
            print_error(str(exc))


def _at_least(version: str, minimum: str) -> bool:
    current = coerce_version(version)
    floor = coerce_version(minimum)
    if current is None or floor is None:
        return True
    return current >= floor


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``create-divi-extension``."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="create-divi-extension",
        description="Create a new Divi extension project.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "A custom --scripts-version can be one of:\n"
            "  - a specific npm version: 0.8.2\n"
            "  - a custom fork published on npm: my-react-scripts\n"
            "  - a .tgz archive: https://mysite.com/my-react-scripts-0.8.2.tgz\n"
            "  - a git URL: git+https://github.com/me/my-react-scripts.git#v1.2.3\n"
            "It is not needed unless you specifically want to use a fork.\n"
        ),
    )
    parser.add_argument("project_directory", nargs="?", help="Directory to create the project in")
    parser.add_argument("--verbose", action="store_true", help="print additional logs")
    parser.add_argument(
        "--scripts-version",
        default=None,
        metavar="<alternative-package>",
        help="use a non-standard version of react-scripts",
    )

    args, _unknown = parser.parse_known_args(argv)

    if not args.project_directory:
        print_error("Please specify the project directory:")
        console.print(f"  [cyan]{parser.prog}[/cyan] [green]<project-directory>[/green]")
        console.print()
        console.print("For example:")
        console.print(f"  [cyan]{parser.prog}[/cyan] [green]divi-custom-modules[/green]")
        console.print()
        console.print(f"Run [cyan]{parser.prog} --help[/cyan] to see all options.")
        sys.exit(1)

    request = ProjectRequest(
        name=args.project_directory,
        verbose=args.verbose,
        version_spec=args.scripts_version,
    )

    console.print(
        Panel(f"[bold]create-divi-extension[/bold] {escape(request.name)}", border_style="cyan")
    )
    status = asyncio.run(Bootstrapper(Config.from_env()).run(request))
    sys.exit(status)


if __name__ == "__main__":
    main()
