"""create-prtw pipeline orchestrator and CLI.

Runs a scaffold end to end:

1. COLLECT   -- resolve the answers (flags, saved config, prompts).
2. COMPILE   -- turn them into a ``GenerationPlan`` (pure, fails fast on
   invalid combinations before anything touches the disk).
3. BOOTSTRAP -- run ``create vite`` / ``create-next-app`` and the base install.
4. EXECUTE   -- apply the plan step by step inside the new project.

Usage::

    create-prtw my-app
    create-prtw my-app --framework nextjs --router pages --styling shadcn
    create-prtw my-app --yes --dry-run
    python -m prtw --config answers.json
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
import time
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from rich.panel import Panel
from rich.table import Table

from prtw.config import (
    Config,
    Framework,
    Icons,
    Language,
    PackageManager,
    ProjectConfig,
    Router,
    StateManagement,
    Styling,
    TailwindVersion,
)
from prtw.errors import FileSystemError, ScaffoldError, StepFailure
from prtw.prompts import AnswerCollector
from prtw.scaffolder.bootstrap import Bootstrapper
from prtw.scaffolder.collaborators import FileSystem, LocalFileSystem, ProcessRunner, SubprocessRunner
from prtw.scaffolder.compiler import compile_plan
from prtw.scaffolder.executor import RichStepReporter, StepExecutor, StepResult, print_step_summary
from prtw.scaffolder.plan import GenerationPlan
from prtw.utils import (
    console,
    ensure_dir,
    format_duration,
    print_error,
    print_header,
    print_success,
    print_summary_table,
    print_warning,
    run_script_command,
    setup_logging,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class Pipeline:
    """Scaffolds one project from a resolved ``ProjectConfig``.

    Attributes:
        config: Tool settings (output directory, dry-run...).
        runner: Process runner shared by the bootstrap and the executor.
        fs: File system used by the executor, relative to the process cwd.
    """

    def __init__(
        self,
        config: Config,
        runner: ProcessRunner | None = None,
        fs: FileSystem | None = None,
    ) -> None:
        self.config = config
        self.runner = runner or SubprocessRunner()
        self.fs = fs or LocalFileSystem()
        self.bootstrapper = Bootstrapper(self.runner)

    async def run(self, project: ProjectConfig) -> list[StepResult]:
        """Compile and apply the plan for *project*.

        Returns:
            The per-step results.  Empty for a dry run.

        Raises:
            InvalidConfiguration: The answers contradict each other.
            FileSystemError: The project directory already exists.
            ProcessError: The bootstrap commands failed.
            StepFailure: A plan step failed.
        """
        start = time.monotonic()
        plan = compile_plan(project)
        root = self.config.project_root(project.project_name)
        framework = project.framework.value
        if project.router is not None:
            framework += f" ({project.router.value} router)"

        console.print(
            Panel(
                f"[bold bright_cyan]create-prtw[/bold bright_cyan]\n"
                f"Project   : {project.project_name}\n"
                f"Framework : {framework}\n"
                f"Output    : {root.resolve()}\n"
                f"Steps     : {len(plan.steps)}",
                title="[bold]Scaffold[/bold]",
                border_style="bright_cyan",
            )
        )

        if self.config.dry_run:
            print_plan(plan)
            print_success("Dry run: nothing was written.")
            return []

        if root.exists():
            raise FileSystemError(root, "directory already exists")
        ensure_dir(self.config.output_dir)

        print_header("Bootstrap")
        with console.status(f"Creating {project.framework.value} project..."):
            await self.bootstrapper.create(project, self.config.output_dir)
        os.chdir(root)
        logger.debug("Working directory is now %s", root)
        with console.status("Installing base dependencies..."):
            await self.bootstrapper.install(project)
        console.print("  [green]+[/green] Base project created")

        print_header("Generate")
        with RichStepReporter() as reporter:
            executor = StepExecutor(self.runner, self.fs, observer=reporter)
            results = await executor.execute(plan)
        print_step_summary(results)

        print_success(
            f"Created {project.project_name} in {format_duration(time.monotonic() - start)}"
        )
        print_next_steps(project)
        return results


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------


def print_plan(plan: GenerationPlan) -> None:
    """Print every plan step as a table."""
    table = Table(title="Generation plan", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Kind", no_wrap=True)
    table.add_column("Step")
    for index, step in enumerate(plan.steps, start=1):
        table.add_row(str(index), step.kind, step.label)
    console.print(table)
    console.print()


def print_next_steps(project: ProjectConfig) -> None:
    pm = project.package_manager.value
    summary = {
        "cd": project.project_name,
        "Start dev server": run_script_command(pm, "dev"),
        "Build": run_script_command(pm, "build"),
    }
    if project.testing:
        summary["Run tests"] = run_script_command(pm, "test")
    if project.code_quality:
        summary["Lint"] = run_script_command(pm, "lint")
    print_summary_table(summary, title="Next steps")


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _values(enum: type) -> list[str]:
    return [member.value for member in enum]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-prtw",
        description="Scaffold a React project (Vite or Next.js) with your choice of tooling",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-prtw my-app\n"
            "  create-prtw my-app --framework nextjs --router pages --styling shadcn\n"
            "  create-prtw my-app --yes --dry-run\n"
            "  create-prtw --config answers.json\n"
        ),
    )
    parser.add_argument("project_name", nargs="?", default=None, help="Name of the project directory")
    parser.add_argument("--framework", choices=_values(Framework), default=None)
    parser.add_argument("--router", choices=_values(Router), default=None, help="Next.js only")
    parser.add_argument("--language", choices=_values(Language), default=None)
    parser.add_argument("--package-manager", choices=_values(PackageManager), default=None)
    parser.add_argument("--styling", choices=_values(Styling), default=None)
    parser.add_argument(
        "--tailwind-version", choices=_values(TailwindVersion), default=None, help="Tailwind only"
    )
    parser.add_argument("--state", dest="state_management", choices=_values(StateManagement), default=None)
    parser.add_argument("--icons", choices=_values(Icons), default=None)
    for flag, help_text in (
        ("--code-quality", "ESLint, Prettier, Husky, lint-staged and Commitlint"),
        ("--testing", "Vitest and Testing Library"),
        ("--api-client", "Axios API client"),
    ):
        parser.add_argument(flag, action=argparse.BooleanOptionalAction, default=None, help=help_text)
    parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Do not prompt; unanswered questions take their defaults",
    )
    parser.add_argument("--config", type=Path, default=None, help="Replay answers saved with --save-config")
    parser.add_argument("--save-config", type=Path, default=None, help="Save the answers to a JSON file")
    parser.add_argument("--output", "-o", type=Path, default=None, help="Parent directory (default: .)")
    parser.add_argument("--dry-run", action="store_true", default=None, help="Print the plan only")
    parser.add_argument("--verbose", "-v", action="store_true", default=None, help="Debug logging")
    return parser


_ANSWER_FIELDS = (
    "project_name",
    "framework",
    "router",
    "language",
    "package_manager",
    "styling",
    "tailwind_version",
    "state_management",
    "icons",
    "code_quality",
    "testing",
    "api_client",
)


def resolve_settings(args: argparse.Namespace) -> Config:
    """Environment settings overridden by command-line flags."""
    config = Config.from_env()
    updates: dict[str, Any] = {}
    if args.output is not None:
        updates["output_dir"] = args.output
    if args.dry_run:
        updates["dry_run"] = True
    if args.verbose:
        updates["verbose"] = True
    return config.model_copy(update=updates)


def resolve_project(args: argparse.Namespace, settings: Config) -> ProjectConfig:
    """Answers from ``--config`` or from flags plus prompts."""
    if args.config is not None:
        try:
            project = ProjectConfig.load(args.config)
        except OSError as exc:
            raise FileSystemError(args.config, exc.strerror or str(exc)) from exc
        if args.project_name:
            project = ProjectConfig.model_validate(
                {**project.model_dump(), "project_name": args.project_name}
            )
        return project

    answers = {name: getattr(args, name) for name in _ANSWER_FIELDS}
    collector = AnswerCollector(
        interactive=not args.yes,
        default_package_manager=settings.default_package_manager,
    )
    return collector.collect(answers)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``create-prtw`` and ``python -m prtw``."""
    args = build_parser().parse_args(argv)
    settings = resolve_settings(args)
    setup_logging(settings.verbose)

    try:
        project = resolve_project(args, settings)
        if args.save_config is not None:
            project.save(args.save_config)
            logger.info("Saved answers to %s", args.save_config)
        asyncio.run(Pipeline(settings).run(project))
    except KeyboardInterrupt:
        print_error("Aborted.")
        sys.exit(130)
    except ValidationError as exc:
        print_error(f"Invalid answers: {exc}")
        sys.exit(1)
    except StepFailure as exc:
        print_error(str(exc))
        print_warning("The project was left as is; remove it before retrying.")
        sys.exit(1)
    except (ScaffoldError, OSError) as exc:
        print_error(str(exc))
        sys.exit(1)


if __name__ == "__main__":
    main()
