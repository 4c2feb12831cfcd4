"""Plan compilation.

``compile_plan(config)`` turns a ``ProjectConfig`` into the ordered
``GenerationPlan`` the executor applies to a freshly bootstrapped project:

1. ``EnsureDirectory`` for every directory the project needs
2. one ``InstallDependencies`` per non-empty dependency batch
3. one ``WriteFile`` per generated file, content fully rendered
4. a single trailing ``MergeManifestScripts``

The compiler is pure.  File contents come from the template variant
selector, which only reads packaged templates.
"""

from __future__ import annotations

import logging

from prtw.config import ProjectConfig, StateManagement, Styling, TailwindVersion
from prtw.errors import InvalidConfiguration
from prtw.scaffolder.dependencies import dependency_batches
from prtw.scaffolder.fragments import FRAMEWORK_FRAGMENTS
from prtw.scaffolder.plan import (
    EnsureDirectory,
    GenerationPlan,
    InstallDependencies,
    MergeManifestScripts,
    Step,
    WriteFile,
)
from prtw.scaffolder.variants import (
    FileKind,
    TemplateVariantSelector,
    default_selector,
    has_protected_route,
    has_theme_toggle,
    needs_providers,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Directory layout
# ---------------------------------------------------------------------------

BASE_DIRECTORIES: tuple[str, ...] = (
    "src/components/ui",
    "src/components/layout",
    "src/components/common",
    "src/hooks",
    "src/lib",
    "src/utils",
)


def _routing_directories(config: ProjectConfig) -> tuple[str, ...]:
    if not config.is_nextjs:
        return ("src/routes", "src/pages")
    if config.is_app_router:
        return ("src/app", "src/app/about")
    return ("src/pages", "src/styles")


def required_directories(config: ProjectConfig) -> list[str]:
    """Directories to create, in plan order."""
    directories = list(BASE_DIRECTORIES)
    directories.extend(_routing_directories(config))
    if config.state_management is not StateManagement.NONE:
        directories.append("src/store")
    if config.is_typescript:
        directories.append("src/types")
    if config.testing:
        directories.extend(["src/__tests__", "src/test"])
    if config.code_quality:
        directories.append(".husky")
    return directories


# ---------------------------------------------------------------------------
# File set
# ---------------------------------------------------------------------------

_STATE_FILES: dict[StateManagement, tuple[FileKind, ...]] = {
    StateManagement.REDUX: (FileKind.REDUX_SLICE, FileKind.REDUX_STORE, FileKind.REDUX_HOOKS),
    StateManagement.ZUSTAND: (FileKind.ZUSTAND_STORE,),
    StateManagement.TANSTACK_QUERY: (FileKind.QUERY_CLIENT, FileKind.CURRENT_USER_HOOK),
    StateManagement.NONE: (),
}

_CODE_QUALITY_FILES: tuple[FileKind, ...] = (
    FileKind.ESLINT_CONFIG,
    FileKind.PRETTIER_CONFIG,
    FileKind.PRETTIER_IGNORE,
    FileKind.LINT_STAGED_CONFIG,
    FileKind.COMMITLINT_CONFIG,
    FileKind.HUSKY_PRE_COMMIT,
    FileKind.HUSKY_COMMIT_MSG,
)

_TESTING_FILES: tuple[FileKind, ...] = (
    FileKind.VITEST_CONFIG,
    FileKind.TEST_SETUP,
    FileKind.BUTTON_TEST,
)

if set(_STATE_FILES) != set(StateManagement):
    raise RuntimeError("_STATE_FILES must cover every StateManagement option")


def _styling_files(config: ProjectConfig) -> list[FileKind]:
    files = [FileKind.STYLESHEET]
    if config.styling is Styling.SHADCN:
        files += [
            FileKind.TAILWIND_CONFIG,
            FileKind.POSTCSS_CONFIG,
            FileKind.SHADCN_CONFIG,
            FileKind.SHADCN_UTILS,
        ]
    elif config.styling is Styling.TAILWIND:
        if config.tailwind_version is TailwindVersion.V3:
            files += [FileKind.TAILWIND_CONFIG, FileKind.POSTCSS_CONFIG]
        elif config.is_nextjs:
            # Vite loads Tailwind v4 through its own plugin in vite.config
            files.append(FileKind.POSTCSS_CONFIG)
    return files


def _routing_files(config: ProjectConfig) -> list[FileKind]:
    if not config.is_nextjs:
        files = [
            FileKind.LAYOUT,
            FileKind.APP,
            FileKind.APP_ROUTES,
            FileKind.HOME_PAGE,
            FileKind.ABOUT_PAGE,
            FileKind.VITE_CONFIG,
        ]
        if has_protected_route(config):
            files += [FileKind.PROTECTED_ROUTE, FileKind.DASHBOARD_PAGE]
        return files
    if config.is_app_router:
        files = [FileKind.ROOT_LAYOUT, FileKind.HOME_PAGE, FileKind.ABOUT_PAGE]
        if needs_providers(config):
            files.append(FileKind.PROVIDERS)
        return files
    return [FileKind.LAYOUT, FileKind.CUSTOM_APP, FileKind.HOME_PAGE, FileKind.ABOUT_PAGE]


def required_files(config: ProjectConfig) -> list[FileKind]:
    """File kinds generated for *config*, in plan order."""
    files = [FileKind.BUTTON, FileKind.NAVBAR, FileKind.FOOTER]
    if has_theme_toggle(config):
        files.append(FileKind.THEME_TOGGLE)
    files += _routing_files(config)
    files += _styling_files(config)
    files += _STATE_FILES[config.state_management]
    files += [FileKind.UTILS, FileKind.LOCAL_STORAGE_HOOK]
    if config.is_typescript:
        files.append(FileKind.TYPES)
    if config.api_client:
        files += [FileKind.API_CLIENT, FileKind.ENV_EXAMPLE]
    if config.testing:
        files += _TESTING_FILES
    if config.code_quality:
        files += _CODE_QUALITY_FILES
    return files


# ---------------------------------------------------------------------------
# package.json scripts
# ---------------------------------------------------------------------------


def manifest_scripts(config: ProjectConfig) -> dict[str, str]:
    """Scripts merged into ``package.json``.  Later keys win on conflict."""
    scripts = dict(FRAMEWORK_FRAGMENTS[config.framework].scripts)
    if config.is_typescript:
        scripts["type-check"] = "tsc --noEmit"
    if config.code_quality:
        scripts["lint"] = "eslint ."
        scripts["lint:fix"] = "eslint . --fix"
        scripts["format"] = "prettier --write ."
        scripts["format:check"] = "prettier --check ."
        scripts["prepare"] = "husky"
    if config.testing:
        scripts["test"] = "vitest run"
        scripts["test:watch"] = "vitest"
    return scripts


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_gating(config: ProjectConfig) -> None:
    """Raise ``InvalidConfiguration`` if a gated field disagrees with its governor."""
    if config.is_nextjs and config.router is None:
        raise InvalidConfiguration("router", "a router must be selected for Next.js projects")
    if not config.is_nextjs and config.router is not None:
        raise InvalidConfiguration("router", "router only applies to Next.js projects")
    if config.styling is Styling.TAILWIND and config.tailwind_version is None:
        raise InvalidConfiguration(
            "tailwind_version", "a Tailwind version must be selected for Tailwind styling"
        )
    if config.styling is not Styling.TAILWIND and config.tailwind_version is not None:
        raise InvalidConfiguration(
            "tailwind_version", "tailwind_version only applies to Tailwind styling"
        )


# ---------------------------------------------------------------------------
# Compiler
# ---------------------------------------------------------------------------


def compile_plan(
    config: ProjectConfig,
    selector: TemplateVariantSelector | None = None,
) -> GenerationPlan:
    """Compile *config* into an ordered ``GenerationPlan``.

    Args:
        config: Resolved scaffolding answers.
        selector: Template selector used to render file contents.  Defaults
            to the shared packaged-template selector.

    Returns:
        The plan.  Compiling the same configuration twice yields equal plans.

    Raises:
        InvalidConfiguration: A gated field is set without its governor, or
            missing although its governor selects it.
    """
    validate_gating(config)
    selector = selector or default_selector()

    steps: list[Step] = [EnsureDirectory(path=path) for path in required_directories(config)]

    for batch in dependency_batches(config):
        steps.append(
            InstallDependencies(
                manager=config.package_manager,
                packages=batch.packages,
                description=batch.description,
            )
        )

    for kind in required_files(config):
        generated = selector.generate(kind, config)
        steps.append(WriteFile(path=generated.relative_path, content=generated.content))

    steps.append(MergeManifestScripts(entries=manifest_scripts(config)))

    plan = GenerationPlan(steps=tuple(steps))
    logger.debug(
        "Compiled plan for %s: %d directories, %d installs, %d files",
        config.project_name,
        len(plan.directories),
        len(plan.installs),
        len(plan.files),
    )
    return plan
