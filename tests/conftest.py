"""Shared pytest fixtures for the create-prtw test suite.

Provides reusable fixtures for:
- Building ``ProjectConfig`` instances with sensible defaults
- Recording / failing process runners
- An in-memory file system
- Mock subprocess helpers
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from prtw.config import ProjectConfig
from prtw.errors import FileSystemError, ProcessError
from prtw.scaffolder.collaborators import ProcessOutput


# ---------------------------------------------------------------------------
# Configurations
# ---------------------------------------------------------------------------

@pytest.fixture
def make_config() -> Callable[..., ProjectConfig]:
    """Factory building a ``ProjectConfig`` with gated defaults filled in.

    Usage:
        def test_something(make_config):
            config = make_config(framework="nextjs", styling="shadcn")
    """
    def factory(**overrides: Any) -> ProjectConfig:
        values: dict[str, Any] = {"project_name": "test-app"}
        values.update(overrides)
        return ProjectConfig.with_defaults(**values)

    return factory


@pytest.fixture
def vite_config(make_config) -> ProjectConfig:
    """Vite + TypeScript + Tailwind v3 + Zustand + Lucide, no code quality."""
    return make_config(
        framework="react-vite",
        language="typescript",
        styling="tailwind",
        tailwind_version="v3",
        state_management="zustand",
        icons="lucide",
        code_quality=False,
    )


@pytest.fixture
def next_pages_config(make_config) -> ProjectConfig:
    """Next.js Pages Router + JavaScript + plain CSS."""
    return make_config(
        framework="nextjs",
        router="pages",
        language="javascript",
        styling="vanilla-css",
    )


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------

class RecordingRunner:
    """Process runner that records every call instead of spawning processes.

    ``fail_when`` receives the full argv and returns True to make that call
    raise ``ProcessError``.  ``on_run`` lets a test simulate side effects
    (e.g. ``create vite`` writing a ``package.json``).
    """

    def __init__(
        self,
        fail_when: Callable[[list[str]], bool] | None = None,
        on_run: Callable[[list[str], Path | None], None] | None = None,
    ) -> None:
        self.calls: list[list[str]] = []
        self.cwds: list[Any] = []
        self.fail_when = fail_when
        self.on_run = on_run

    async def run(self, command: str, args: list[str], cwd: Any = None) -> ProcessOutput:
        argv = [command, *args]
        self.calls.append(argv)
        self.cwds.append(cwd)
        if self.fail_when is not None and self.fail_when(argv):
            raise ProcessError(argv, 1, "simulated failure")
        if self.on_run is not None:
            self.on_run(argv, Path(cwd) if cwd is not None else None)
        return ProcessOutput()


class MemoryFileSystem:
    """File system keeping directories and files in dictionaries."""

    def __init__(self, files: dict[str, str] | None = None, fail_on: str | None = None) -> None:
        self.directories: list[str] = []
        self.files: dict[str, str] = dict(files or {})
        self.fail_on = fail_on

    def _check(self, path: Any) -> None:
        if self.fail_on is not None and str(path) == self.fail_on:
            raise FileSystemError(path, "Permission denied")

    async def ensure_directory(self, path: Any) -> None:
        self._check(path)
        self.directories.append(str(path))

    async def write_file(self, path: Any, content: str) -> None:
        self._check(path)
        self.files[str(path)] = content

    async def read_json(self, path: Any) -> dict[str, Any]:
        self._check(path)
        if str(path) not in self.files:
            raise FileSystemError(path, "No such file or directory")
        return json.loads(self.files[str(path)])

    async def write_json(self, path: Any, data: dict[str, Any]) -> None:
        await self.write_file(path, json.dumps(data, indent=2) + "\n")


@pytest.fixture
def recording_runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def make_runner() -> type[RecordingRunner]:
    """The ``RecordingRunner`` class, for tests needing failures or side effects."""
    return RecordingRunner


@pytest.fixture
def make_fs() -> type[MemoryFileSystem]:
    return MemoryFileSystem


@pytest.fixture
def memory_fs() -> MemoryFileSystem:
    """In-memory file system seeded with a minimal ``package.json``."""
    manifest = {
        "name": "test-app",
        "version": "0.0.0",
        "scripts": {"dev": "old-dev", "lint": "eslint ."},
        "dependencies": {"react": "^19.0.0"},
    }
    return MemoryFileSystem(files={"package.json": json.dumps(manifest)})


# ---------------------------------------------------------------------------
# Mock Subprocess (generic)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
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
