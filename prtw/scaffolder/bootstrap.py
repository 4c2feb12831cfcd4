"""Third-party project bootstrap.

Before the generation plan runs, the base project is created by the
framework's own scaffolder (``create vite`` or ``create-next-app``) and its
dependencies are installed.  The commands are computed by the pure
:func:`bootstrap_commands`; :class:`Bootstrapper` runs them.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NamedTuple

from prtw.config import Framework, ProjectConfig
from prtw.scaffolder.collaborators import ProcessRunner
from prtw.scaffolder.package_managers import commands_for

logger = logging.getLogger(__name__)


class BootstrapCommands(NamedTuple):
    create: list[str]
    install: list[str]


def _vite_template(config: ProjectConfig) -> str:
    return "react-ts" if config.is_typescript else "react"


def create_command(config: ProjectConfig) -> list[str]:
    """argv creating the base project in the current directory."""
    pm = commands_for(config.package_manager)
    if config.framework is Framework.REACT_VITE:
        argv = [*pm.create_vite, config.project_name]
        if pm.create_vite_separator:
            argv.append("--")
        return argv + ["--template", _vite_template(config)]

    return [
        *pm.dlx,
        "create-next-app@latest",
        config.project_name,
        "--ts" if config.is_typescript else "--js",
        "--app" if config.is_app_router else "--no-app",
        "--src-dir",
        # Tailwind is installed and configured by the generation plan
        "--no-tailwind",
        "--eslint",
        "--import-alias",
        "@/*",
        pm.next_flag,
        "--yes",
    ]


def bootstrap_commands(config: ProjectConfig) -> BootstrapCommands:
    """Return the create and base-install commands for *config*.

    Examples::

        Vite + TS + npm   -> npm create vite@latest app -- --template react-ts
                             npm install
        Next + JS + yarn  -> yarn dlx create-next-app@latest app --js ...
                             yarn install
    """
    pm = commands_for(config.package_manager)
    return BootstrapCommands(
        create=create_command(config),
        install=[pm.binary, *pm.install_all],
    )


class Bootstrapper:
    """Runs the bootstrap commands through a ``ProcessRunner``."""

    def __init__(self, runner: ProcessRunner) -> None:
        self.runner = runner

    async def create(self, config: ProjectConfig, parent_dir: str | Path) -> None:
        """Create the base project as ``parent_dir/<project_name>``."""
        argv = bootstrap_commands(config).create
        logger.info("Bootstrapping %s with %s", config.project_name, " ".join(argv))
        await self.runner.run(argv[0], argv[1:], cwd=parent_dir)

    async def install(self, config: ProjectConfig) -> None:
        """Install the base project's dependencies in the current directory."""
        argv = bootstrap_commands(config).install
        logger.info("Installing base dependencies with %s", " ".join(argv))
        await self.runner.run(argv[0], argv[1:])
