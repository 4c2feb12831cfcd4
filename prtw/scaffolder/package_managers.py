"""Command shapes for each supported package manager."""

from __future__ import annotations

from dataclasses import dataclass

from prtw.config import PackageManager


@dataclass(frozen=True)
class PackageManagerCommands:
    """How to drive one package manager from the command line.

    Attributes:
        binary: Executable name.
        install_all: Arguments installing everything in ``package.json``.
        add: Arguments preceding package names when adding dependencies.
        dev_flag: Flag marking added packages as dev dependencies.
        exec: Prefix running a locally installed binary (used in git hooks).
        exec_no_install: Like ``exec`` but never downloading missing packages.
        dlx: Command running a package without installing it.
        create_vite: Command creating a Vite project.
        create_vite_separator: Whether template flags must follow ``--``.
        next_flag: ``create-next-app`` flag selecting this manager.
    """

    binary: str
    install_all: tuple[str, ...]
    add: tuple[str, ...]
    dev_flag: str
    exec: str
    exec_no_install: str
    dlx: tuple[str, ...]
    create_vite: tuple[str, ...]
    create_vite_separator: bool
    next_flag: str

    def add_command(self, packages: list[str], *, dev: bool = False) -> list[str]:
        """Full argv adding *packages*."""
        argv = [self.binary, *self.add]
        if dev:
            argv.append(self.dev_flag)
        return argv + list(packages)


PACKAGE_MANAGERS: dict[PackageManager, PackageManagerCommands] = {
    PackageManager.NPM: PackageManagerCommands(
        binary="npm",
        install_all=("install",),
        add=("install",),
        dev_flag="-D",
        exec="npx",
        exec_no_install="npx --no --",
        dlx=("npx",),
        create_vite=("npm", "create", "vite@latest"),
        create_vite_separator=True,
        next_flag="--use-npm",
    ),
    PackageManager.YARN: PackageManagerCommands(
        binary="yarn",
        install_all=("install",),
        add=("add",),
        dev_flag="-D",
        exec="yarn",
        exec_no_install="yarn",
        dlx=("yarn", "dlx"),
        create_vite=("yarn", "create", "vite"),
        create_vite_separator=False,
        next_flag="--use-yarn",
    ),
    PackageManager.BUN: PackageManagerCommands(
        binary="bun",
        install_all=("install",),
        add=("add",),
        dev_flag="-d",
        exec="bunx",
        exec_no_install="bunx",
        dlx=("bunx",),
        create_vite=("bun", "create", "vite"),
        create_vite_separator=False,
        next_flag="--use-bun",
    ),
}

if set(PACKAGE_MANAGERS) != set(PackageManager):
    raise RuntimeError("PACKAGE_MANAGERS must cover every PackageManager")


def commands_for(manager: PackageManager) -> PackageManagerCommands:
    return PACKAGE_MANAGERS[manager]
