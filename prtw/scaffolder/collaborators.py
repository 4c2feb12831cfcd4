"""External collaborators used by the step executor and the bootstrap.

The executor never touches processes or the disk directly.  It talks to a
``ProcessRunner`` and a ``FileSystem``; the concrete implementations below
wrap :func:`prtw.utils.run_command` and :mod:`pathlib`, and translate
low-level failures into the scaffolder's own error types.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel

from prtw.errors import FileSystemError, ProcessError
from prtw.utils import dump_json, run_command

logger = logging.getLogger(__name__)


class ProcessOutput(BaseModel):
    """Captured result of a successful external command."""

    returncode: int = 0
    stdout: str = ""
    stderr: str = ""


class ProcessRunner(Protocol):
    async def run(
        self,
        command: str,
        args: list[str],
        cwd: str | Path | None = None,
    ) -> ProcessOutput:
        """Run *command* with *args*; raise ``ProcessError`` on failure."""
        ...


class FileSystem(Protocol):
    async def ensure_directory(self, path: str | Path) -> None: ...

    async def write_file(self, path: str | Path, content: str) -> None: ...

    async def read_json(self, path: str | Path) -> dict[str, Any]: ...

    async def write_json(self, path: str | Path, data: dict[str, Any]) -> None: ...


# ---------------------------------------------------------------------------
# Subprocess runner
# ---------------------------------------------------------------------------


class SubprocessRunner:
    """Runs commands as child processes via :func:`run_command`.

    Package-manager commands can legitimately run for minutes, so no
    timeout is applied.
    """

    def __init__(self, env: dict[str, str] | None = None) -> None:
        self.env = env

    async def run(
        self,
        command: str,
        args: list[str],
        cwd: str | Path | None = None,
    ) -> ProcessOutput:
        argv = [command, *args]
        logger.debug("Running %s (cwd=%s)", " ".join(argv), cwd or ".")
        try:
            returncode, stdout, stderr = await run_command(argv, cwd=cwd, env=self.env)
        except FileNotFoundError as exc:
            raise ProcessError(argv, 127, f"executable not found: {command}") from exc
        except OSError as exc:
            raise ProcessError(argv, 126, f"cannot run {command}: {exc.strerror or exc}") from exc
        if returncode != 0:
            raise ProcessError(argv, returncode, stderr)
        return ProcessOutput(returncode=returncode, stdout=stdout, stderr=stderr)


# ---------------------------------------------------------------------------
# Local file system
# ---------------------------------------------------------------------------


class LocalFileSystem:
    """File-system access rooted at *root* (the process cwd by default).

    Blocking calls run in a worker thread.  ``OSError``, undecodable text
    and malformed JSON are re-raised as ``FileSystemError``.
    """

    def __init__(self, root: str | Path | None = None) -> None:
        self.root = Path(root) if root is not None else None

    def _resolve(self, path: str | Path) -> Path:
        target = Path(path)
        if self.root is not None and not target.is_absolute():
            return self.root / target
        return target

    async def ensure_directory(self, path: str | Path) -> None:
        target = self._resolve(path)
        try:
            await asyncio.to_thread(target.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise FileSystemError(path, exc.strerror or str(exc)) from exc

    async def write_file(self, path: str | Path, content: str) -> None:
        target = self._resolve(path)
        try:
            await asyncio.to_thread(target.write_text, content, "utf-8")
        except OSError as exc:
            raise FileSystemError(path, exc.strerror or str(exc)) from exc

    async def read_json(self, path: str | Path) -> dict[str, Any]:
        target = self._resolve(path)
        try:
            raw = await asyncio.to_thread(target.read_text, "utf-8")
        except OSError as exc:
            raise FileSystemError(path, exc.strerror or str(exc)) from exc
        except UnicodeDecodeError as exc:
            raise FileSystemError(path, f"not valid UTF-8: {exc.reason}") from exc
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise FileSystemError(path, f"invalid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise FileSystemError(path, "expected a JSON object")
        return data

    async def write_json(self, path: str | Path, data: dict[str, Any]) -> None:
        await self.write_file(path, dump_json(data))
