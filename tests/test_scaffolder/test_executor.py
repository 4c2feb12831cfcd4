"""Tests for the step executor (prtw.scaffolder.executor).

Covers:
- Sequential application of every step kind
- Observer transitions (pending -> running -> succeeded / failed)
- Fail-fast behaviour and StepFailure wrapping
- Production-before-dev installs
- package.json script merging
- RichStepReporter progress bookkeeping
"""

from __future__ import annotations

import json
import sys
from unittest.mock import patch

import pytest

from prtw.config import PackageManager
from prtw.errors import FileSystemError, ProcessError, StepFailure
from prtw.scaffolder.collaborators import LocalFileSystem, SubprocessRunner
from prtw.scaffolder.executor import (
    RichStepReporter,
    StepExecutor,
    StepResult,
    StepStatus,
    print_step_summary,
)
from prtw.scaffolder.plan import (
    Dependency,
    EnsureDirectory,
    GenerationPlan,
    InstallDependencies,
    MergeManifestScripts,
    WriteFile,
)


pytestmark = pytest.mark.unit


class RecordingObserver:
    def __init__(self) -> None:
        self.transitions: list[StepResult] = []

    def on_transition(self, result: StepResult) -> None:
        self.transitions.append(result)

    def statuses(self, index: int) -> list[StepStatus]:
        return [t.status for t in self.transitions if t.index == index]


def _plan(*steps) -> GenerationPlan:
    return GenerationPlan(steps=tuple(steps))


@pytest.fixture
def sample_plan() -> GenerationPlan:
    return _plan(
        EnsureDirectory(path="src/store"),
        InstallDependencies(
            manager=PackageManager.NPM,
            packages=(Dependency(name="zustand"),),
            description="Zustand",
        ),
        WriteFile(path="src/store/useAuth.ts", content="export {};\n"),
        MergeManifestScripts(entries={"dev": "vite", "type-check": "tsc --noEmit"}),
    )


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------


class TestExecute:
    @pytest.mark.asyncio
    async def test_applies_every_step(self, recording_runner, memory_fs, sample_plan):
        results = await StepExecutor(recording_runner, memory_fs).execute(sample_plan)

        assert [r.status for r in results] == [StepStatus.SUCCEEDED] * 4
        assert memory_fs.directories == ["src/store"]
        assert memory_fs.files["src/store/useAuth.ts"] == "export {};\n"
        assert recording_runner.calls == [["npm", "install", "zustand"]]

    @pytest.mark.asyncio
    async def test_results_carry_labels(self, recording_runner, memory_fs, sample_plan):
        results = await StepExecutor(recording_runner, memory_fs).execute(sample_plan)
        assert [r.label for r in results] == [
            "Create src/store/",
            "Install Zustand",
            "Write src/store/useAuth.ts",
            "Update package.json scripts",
        ]
        assert [r.index for r in results] == [0, 1, 2, 3]

    @pytest.mark.asyncio
    async def test_empty_plan(self, recording_runner, memory_fs):
        assert await StepExecutor(recording_runner, memory_fs).execute(GenerationPlan()) == []

    @pytest.mark.asyncio
    async def test_observer_sees_every_transition(self, recording_runner, memory_fs, sample_plan):
        observer = RecordingObserver()
        await StepExecutor(recording_runner, memory_fs, observer=observer).execute(sample_plan)

        # Every step is announced as pending before the first one starts
        assert [t.status for t in observer.transitions[:4]] == [StepStatus.PENDING] * 4
        for index in range(4):
            assert observer.statuses(index) == [
                StepStatus.PENDING,
                StepStatus.RUNNING,
                StepStatus.SUCCEEDED,
            ]

    @pytest.mark.asyncio
    async def test_steps_run_in_order(self, recording_runner, memory_fs, sample_plan):
        observer = RecordingObserver()
        await StepExecutor(recording_runner, memory_fs, observer=observer).execute(sample_plan)
        running = [t.index for t in observer.transitions if t.status is StepStatus.RUNNING]
        assert running == [0, 1, 2, 3]


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFailFast:
    @pytest.mark.asyncio
    async def test_install_failure_aborts(self, make_runner, memory_fs, sample_plan):
        runner = make_runner(fail_when=lambda argv: "zustand" in argv)
        observer = RecordingObserver()
        executor = StepExecutor(runner, memory_fs, observer=observer)

        with pytest.raises(StepFailure) as exc_info:
            await executor.execute(sample_plan)

        failure = exc_info.value
        assert failure.step_index == 1
        assert failure.step is sample_plan.steps[1]
        assert isinstance(failure.error, ProcessError)
        assert failure.__cause__ is failure.error
        assert "Install Zustand" in str(failure)

        # Later steps were never started
        assert observer.statuses(1)[-1] is StepStatus.FAILED
        assert observer.statuses(2) == [StepStatus.PENDING]
        assert observer.statuses(3) == [StepStatus.PENDING]
        assert "src/store/useAuth.ts" not in memory_fs.files

    @pytest.mark.asyncio
    async def test_failed_transition_carries_error(self, make_runner, memory_fs, sample_plan):
        observer = RecordingObserver()
        executor = StepExecutor(
            make_runner(fail_when=lambda argv: True), memory_fs, observer=observer
        )
        with pytest.raises(StepFailure):
            await executor.execute(sample_plan)
        failed = [t for t in observer.transitions if t.status is StepStatus.FAILED]
        assert len(failed) == 1
        assert "simulated failure" in failed[0].error

    @pytest.mark.asyncio
    async def test_file_system_failure_wrapped(self, recording_runner, make_fs, sample_plan):
        fs = make_fs(fail_on="src/store")
        with pytest.raises(StepFailure) as exc_info:
            await StepExecutor(recording_runner, fs).execute(sample_plan)
        assert exc_info.value.step_index == 0
        assert isinstance(exc_info.value.error, FileSystemError)
        assert recording_runner.calls == []

    @pytest.mark.asyncio
    async def test_earlier_work_is_kept(self, recording_runner, make_fs):
        fs = make_fs(fail_on="b.txt")
        plan = _plan(
            WriteFile(path="a.txt", content="a"),
            WriteFile(path="b.txt", content="b"),
            WriteFile(path="c.txt", content="c"),
        )
        with pytest.raises(StepFailure) as exc_info:
            await StepExecutor(recording_runner, fs).execute(plan)
        assert exc_info.value.step_index == 1
        assert fs.files == {"a.txt": "a"}

    @pytest.mark.asyncio
    async def test_missing_manifest(self, recording_runner, make_fs):
        plan = _plan(MergeManifestScripts(entries={"dev": "vite"}))
        with pytest.raises(StepFailure) as exc_info:
            await StepExecutor(recording_runner, make_fs()).execute(plan)
        assert isinstance(exc_info.value.error, FileSystemError)


class TestRealCollaboratorFailures:
    @pytest.mark.asyncio
    async def test_undecodable_manifest_fails_step(self, tmp_path, recording_runner):
        (tmp_path / "package.json").write_bytes(b'{"name": "\xff\xfe"}')
        observer = RecordingObserver()
        executor = StepExecutor(recording_runner, LocalFileSystem(tmp_path), observer=observer)

        with pytest.raises(StepFailure) as exc_info:
            await executor.execute(_plan(MergeManifestScripts(entries={"dev": "vite"})))
        assert isinstance(exc_info.value.error, FileSystemError)
        assert observer.statuses(0)[-1] is StepStatus.FAILED

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
    @pytest.mark.asyncio
    async def test_non_executable_package_manager_fails_step(self, tmp_path, memory_fs):
        npm = tmp_path / "npm"
        npm.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
        npm.chmod(0o644)
        step = InstallDependencies(
            manager=PackageManager.NPM,
            packages=(Dependency(name="zustand"),),
            description="Zustand",
        )
        observer = RecordingObserver()
        executor = StepExecutor(SubprocessRunner(), memory_fs, observer=observer)

        with patch.dict("os.environ", {"PATH": str(tmp_path)}):
            with pytest.raises(StepFailure) as exc_info:
                await executor.execute(_plan(step))
        assert isinstance(exc_info.value.error, ProcessError)
        assert observer.statuses(0)[-1] is StepStatus.FAILED


# ---------------------------------------------------------------------------
# Installs
# ---------------------------------------------------------------------------


class TestInstall:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "manager, prod_argv, dev_argv",
        [
            (
                PackageManager.NPM,
                ["npm", "install", "@tanstack/react-query"],
                ["npm", "install", "-D", "@tanstack/react-query-devtools"],
            ),
            (
                PackageManager.YARN,
                ["yarn", "add", "@tanstack/react-query"],
                ["yarn", "add", "-D", "@tanstack/react-query-devtools"],
            ),
            (
                PackageManager.BUN,
                ["bun", "add", "@tanstack/react-query"],
                ["bun", "add", "-d", "@tanstack/react-query-devtools"],
            ),
        ],
    )
    async def test_prod_before_dev(self, recording_runner, memory_fs, manager, prod_argv, dev_argv):
        step = InstallDependencies(
            manager=manager,
            packages=(
                Dependency(name="@tanstack/react-query-devtools", dev=True),
                Dependency(name="@tanstack/react-query"),
            ),
        )
        await StepExecutor(recording_runner, memory_fs).execute(_plan(step))
        assert recording_runner.calls == [prod_argv, dev_argv]

    @pytest.mark.asyncio
    async def test_dev_only_batch_makes_one_call(self, recording_runner, memory_fs):
        step = InstallDependencies(
            manager=PackageManager.NPM,
            packages=(
                Dependency(name="tailwindcss@^3", dev=True),
                Dependency(name="postcss", dev=True),
            ),
        )
        await StepExecutor(recording_runner, memory_fs).execute(_plan(step))
        assert recording_runner.calls == [["npm", "install", "-D", "tailwindcss@^3", "postcss"]]

    @pytest.mark.asyncio
    async def test_dev_failure_after_prod(self, make_runner, memory_fs):
        runner = make_runner(fail_when=lambda argv: "-D" in argv)
        step = InstallDependencies(
            manager=PackageManager.NPM,
            packages=(Dependency(name="axios"), Dependency(name="vitest", dev=True)),
        )
        with pytest.raises(StepFailure):
            await StepExecutor(runner, memory_fs).execute(_plan(step))
        assert runner.calls[0] == ["npm", "install", "axios"]
        assert len(runner.calls) == 2


# ---------------------------------------------------------------------------
# Manifest merge
# ---------------------------------------------------------------------------


class TestMergeScripts:
    @pytest.mark.asyncio
    async def test_new_values_win_and_order_is_kept(self, recording_runner, memory_fs):
        step = MergeManifestScripts(entries={"dev": "vite", "test": "vitest run"})
        await StepExecutor(recording_runner, memory_fs).execute(_plan(step))

        manifest = json.loads(memory_fs.files["package.json"])
        assert manifest["scripts"] == {"dev": "vite", "lint": "eslint .", "test": "vitest run"}
        assert list(manifest["scripts"]) == ["dev", "lint", "test"]

    @pytest.mark.asyncio
    async def test_other_manifest_keys_untouched(self, recording_runner, memory_fs):
        step = MergeManifestScripts(entries={"dev": "vite"})
        await StepExecutor(recording_runner, memory_fs).execute(_plan(step))
        manifest = json.loads(memory_fs.files["package.json"])
        assert manifest["name"] == "test-app"
        assert manifest["dependencies"] == {"react": "^19.0.0"}

    @pytest.mark.asyncio
    async def test_manifest_without_scripts(self, recording_runner, make_fs):
        fs = make_fs(files={"package.json": json.dumps({"name": "bare"})})
        await StepExecutor(recording_runner, fs).execute(
            _plan(MergeManifestScripts(entries={"dev": "next dev"}))
        )
        assert json.loads(fs.files["package.json"])["scripts"] == {"dev": "next dev"}


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------


class TestRichStepReporter:
    @pytest.mark.asyncio
    async def test_tracks_tasks(self, recording_runner, memory_fs, sample_plan):
        with RichStepReporter() as reporter:
            await StepExecutor(recording_runner, memory_fs, observer=reporter).execute(sample_plan)
        tasks = reporter.progress.tasks
        assert len(tasks) == 4
        assert all(task.completed == 1 for task in tasks)
        assert all(task.description.startswith("[green]+[/green]") for task in tasks)

    @pytest.mark.asyncio
    async def test_marks_failed_task(self, make_runner, memory_fs, sample_plan):
        runner = make_runner(fail_when=lambda argv: True)
        with RichStepReporter() as reporter:
            with pytest.raises(StepFailure):
                await StepExecutor(runner, memory_fs, observer=reporter).execute(sample_plan)
        tasks = reporter.progress.tasks
        assert tasks[1].description.startswith("[red]x[/red]")
        assert not tasks[2].visible

    def test_print_step_summary(self):
        results = [
            StepResult(index=0, label="Create src/", status=StepStatus.SUCCEEDED),
            StepResult(index=1, label="Write a", status=StepStatus.SUCCEEDED),
        ]
        with patch("prtw.scaffolder.executor.console") as console:
            print_step_summary(results)
        assert "2/2 steps completed" in console.print.call_args.args[0]
