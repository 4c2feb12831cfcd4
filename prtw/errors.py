"""Exception hierarchy for create-prtw.

Every failure the scaffolder can report derives from ``ScaffoldError`` so the
CLI can catch a single type and exit non-zero.  ``StepFailure`` wraps the
collaborator error that aborted a plan, together with the index of the step
that was running.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prtw.scaffolder.plan import Step


class ScaffoldError(Exception):
    """Base class for every error raised by the scaffolder."""


class InvalidConfiguration(ScaffoldError):
    """Raised when a gated field is set (or missing) against its governor."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"Invalid configuration for '{field}': {message}")


class ProcessError(ScaffoldError):
    """Raised when an external command exits non-zero or cannot be started."""

    def __init__(
        self,
        command: list[str],
        returncode: int,
        stderr: str = "",
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr.strip()}" if stderr.strip() else ""
        super().__init__(
            f"Command '{' '.join(command)}' failed with exit code {returncode}{detail}"
        )


class FileSystemError(ScaffoldError):
    """Raised when a file-system operation fails (permissions, bad paths...)."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(f"{path}: {message}")


class StepFailure(ScaffoldError):
    """Raised by the executor when a plan step fails.

    Attributes:
        step_index: Zero-based index of the failed step in the plan.
        step: The step that failed.
        error: The underlying collaborator error, propagated unchanged.
    """

    def __init__(self, step_index: int, step: "Step", error: ScaffoldError) -> None:
        self.step_index = step_index
        self.step = step
        self.error = error
        super().__init__(f"Step {step_index + 1} ({step.label}) failed: {error}")
