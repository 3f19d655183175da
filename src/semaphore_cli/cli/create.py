"""Project creation command: create."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from .. import __version__
from ._common import console, error_line, get_config, success_line, warning_line


def register_create_commands(main: click.Group) -> None:
    """Register the create command."""

    @main.command("create")
    @click.argument("project_directory", required=False, metavar="[PROJECT-DIRECTORY]")
    @click.option(
        "--template-version", default=None,
        help="Template version or npm dist-tag (default: from config, 'latest').",
    )
    @click.pass_context
    def create(ctx, project_directory, template_version):
        """Create a Semaphore project with a supported template."""
        from ..errors import ScaffoldError
        from ..prompts import ask_project_name
        from ..scaffold import ProjectScaffolder
        from ..updates import check_latest_version

        config = get_config(ctx)

        if not project_directory:
            project_directory = ask_project_name()

        target = Path.cwd() / project_directory
        if target.exists():
            error_line(f"the '{project_directory}' folder already exists")
            sys.exit(1)

        scaffolder = ProjectScaffolder(
            config.template_package,
            registry=config.npm_registry,
            timeout=config.request_timeout,
        )

        latest = None
        with console.status(f"Creating your project in [green]./{project_directory}[/]"):
            if config.check_updates:
                latest = check_latest_version(__version__)
            try:
                result = scaffolder.create(target, template_version or config.template_version)
            except ScaffoldError as exc:
                error_line(str(exc))
                sys.exit(1)

        if latest:
            warning_line(
                f"You are using an outdated version of the Semaphore CLI ({__version__}), "
                f"please update to {latest}"
            )

        success_line("Your project is ready!")
        console.print(" Please, install your dependencies by running:\n")
        console.print(f"   [cyan]cd[/] {project_directory}")
        console.print("   [cyan]npm i[/]\n")

        if result.scripts:
            console.print(" Available scripts:\n")
            console.print("\n".join(f"   [cyan]npm run {name}[/]" for name in result.scripts) + "\n")
            console.print(" See the README.md file to understand how to use them!\n")
