"""create-prtw scaffolder -- compiles scaffolding answers into a plan and applies it.

Quick usage::

    from prtw.config import ProjectConfig
    from prtw.scaffolder import StepExecutor, compile_plan
    from prtw.scaffolder.collaborators import LocalFileSystem, SubprocessRunner

    config = ProjectConfig.with_defaults(project_name="my-app")
    plan = compile_plan(config)
    await StepExecutor(SubprocessRunner(), LocalFileSystem()).execute(plan)
"""

from prtw.scaffolder.compiler import compile_plan
from prtw.scaffolder.executor import StepExecutor, StepResult, StepStatus
from prtw.scaffolder.plan import GenerationPlan
from prtw.scaffolder.templates import TemplateRenderer
from prtw.scaffolder.variants import FileKind, TemplateVariantSelector, render

__all__ = [
    "FileKind",
    "GenerationPlan",
    "StepExecutor",
    "StepResult",
    "StepStatus",
    "TemplateRenderer",
    "TemplateVariantSelector",
    "compile_plan",
    "render",
]
