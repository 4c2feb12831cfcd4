"""Sequential plan execution.

``StepExecutor.execute(plan)`` applies each step of a ``GenerationPlan`` in
order against a ``ProcessRunner`` and a ``FileSystem``.  Every status
transition is pushed to a ``StepObserver``; the Rich-based observer below
renders them as spinners.  The first failing step aborts the run with
``StepFailure``.  Work already done is left in place.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

from pydantic import BaseModel, ConfigDict

from prtw.errors import ScaffoldError, StepFailure
from prtw.scaffolder.collaborators import FileSystem, ProcessRunner
from prtw.scaffolder.package_managers import commands_for
from prtw.scaffolder.plan import (
    EnsureDirectory,
    GenerationPlan,
    InstallDependencies,
    MergeManifestScripts,
    Step,
    WriteFile,
)
from prtw.utils import console, create_progress

logger = logging.getLogger(__name__)


class StepStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class StepResult(BaseModel):
    """Status of one plan step at a point in time."""

    model_config = ConfigDict(frozen=True)

    index: int
    label: str
    status: StepStatus
    error: str | None = None


class StepObserver(Protocol):
    def on_transition(self, result: StepResult) -> None: ...


class NullObserver:
    """Observer that ignores every transition."""

    def on_transition(self, result: StepResult) -> None:
        return None


# ---------------------------------------------------------------------------
# Rich progress observer
# ---------------------------------------------------------------------------


class RichStepReporter:
    """Renders step transitions as a Rich progress list.

    Use as a context manager around ``StepExecutor.execute`` so the live
    display is torn down even when a step fails.
    """

    def __init__(self) -> None:
        self.progress = create_progress()
        self._tasks: dict[int, int] = {}

    def __enter__(self) -> "RichStepReporter":
        self.progress.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.progress.stop()

    def on_transition(self, result: StepResult) -> None:
        if result.status is StepStatus.PENDING:
            # Pending steps stay hidden until they start
            self._tasks[result.index] = self.progress.add_task(
                result.label, total=1, visible=False, start=False
            )
            return

        task_id = self._tasks[result.index]
        if result.status is StepStatus.RUNNING:
            self.progress.start_task(task_id)
            self.progress.update(task_id, visible=True)
        elif result.status is StepStatus.SUCCEEDED:
            self.progress.update(
                task_id,
                completed=1,
                description=f"[green]+[/green] {result.label}",
            )
        else:
            self.progress.update(
                task_id,
                completed=1,
                description=f"[red]x[/red] {result.label}",
            )


# ---------------------------------------------------------------------------
# Executor
# ---------------------------------------------------------------------------


class StepExecutor:
    """Applies a ``GenerationPlan`` one step at a time.

    Args:
        runner: Process runner used for dependency installs.
        fs: File system used for directories, files and the manifest.
        observer: Receives every status transition.  Defaults to a no-op.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        fs: FileSystem,
        observer: StepObserver | None = None,
    ) -> None:
        self.runner = runner
        self.fs = fs
        self.observer = observer or NullObserver()

    async def execute(self, plan: GenerationPlan) -> list[StepResult]:
        """Run every step of *plan* in order.

        Returns:
            The final ``StepResult`` of each step (all ``succeeded``).

        Raises:
            StepFailure: On the first failing step.  Its ``error`` (also the
                ``__cause__``) is the underlying ``ProcessError`` or
                ``FileSystemError``.  Later steps are never started.
        """
        results = [
            StepResult(index=i, label=step.label, status=StepStatus.PENDING)
            for i, step in enumerate(plan.steps)
        ]
        for result in results:
            self.observer.on_transition(result)

        for index, step in enumerate(plan.steps):
            self._transition(results, index, StepStatus.RUNNING)
            try:
                await self.apply(step)
            except ScaffoldError as exc:
                logger.debug("Step %d (%s) failed: %s", index + 1, step.label, exc)
                self._transition(results, index, StepStatus.FAILED, error=str(exc))
                raise StepFailure(index, step, exc) from exc
            self._transition(results, index, StepStatus.SUCCEEDED)

        return results

    def _transition(
        self,
        results: list[StepResult],
        index: int,
        status: StepStatus,
        error: str | None = None,
    ) -> None:
        results[index] = results[index].model_copy(update={"status": status, "error": error})
        self.observer.on_transition(results[index])

    # -- Step handlers -----------------------------------------------------

    async def apply(self, step: Step) -> None:
        """Apply a single step."""
        if isinstance(step, EnsureDirectory):
            await self.fs.ensure_directory(step.path)
        elif isinstance(step, InstallDependencies):
            await self._install(step)
        elif isinstance(step, WriteFile):
            await self.fs.write_file(step.path, step.content)
        elif isinstance(step, MergeManifestScripts):
            await self._merge_scripts(step)
        else:
            raise TypeError(f"Unknown step type: {type(step).__name__}")

    async def _install(self, step: InstallDependencies) -> None:
        commands = commands_for(step.manager)
        # Production packages first, then dev packages; at most one call each
        for packages, dev in ((step.prod_packages, False), (step.dev_packages, True)):
            if not packages:
                continue
            argv = commands.add_command(packages, dev=dev)
            logger.debug("Installing: %s", " ".join(argv))
            await self.runner.run(argv[0], argv[1:])

    async def _merge_scripts(self, step: MergeManifestScripts) -> None:
        manifest = await self.fs.read_json(step.manifest)
        scripts = dict(manifest.get("scripts") or {})
        # Existing keys keep their position; new keys are appended
        scripts.update(step.entries)
        manifest["scripts"] = scripts
        await self.fs.write_json(step.manifest, manifest)


def print_step_summary(results: list[StepResult]) -> None:
    """Print how many steps ran, used after a successful execution."""
    succeeded = sum(1 for r in results if r.status is StepStatus.SUCCEEDED)
    console.print(f"  [green]+[/green] {succeeded}/{len(results)} steps completed")
