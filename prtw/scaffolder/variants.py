"""Template variant selection.

``render(kind, config)`` maps a file kind and a ``ProjectConfig`` to the
literal content of that file.  Each kind has one skeleton template; the
variation between configurations comes from the per-axis fragments in
:mod:`prtw.scaffolder.fragments`, selected here and handed to the template
as context.  Output depends on nothing but its two arguments.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict

from prtw.config import Framework, ProjectConfig, StateManagement, Styling, TailwindVersion
from prtw.scaffolder.fragments import (
    FRAMEWORK_FRAGMENTS,
    ICON_FRAGMENTS,
    LANGUAGE_FRAGMENTS,
    STYLING_FRAGMENTS,
)
from prtw.scaffolder.package_managers import commands_for
from prtw.scaffolder.templates import TemplateRenderer


class FileKind(str, Enum):
    """Every file the scaffolder can generate."""

    # UI components
    BUTTON = "button"
    NAVBAR = "navbar"
    FOOTER = "footer"
    LAYOUT = "layout"
    THEME_TOGGLE = "theme-toggle"
    PROTECTED_ROUTE = "protected-route"
    # Routing / entry points
    APP = "app"
    APP_ROUTES = "app-routes"
    HOME_PAGE = "home-page"
    ABOUT_PAGE = "about-page"
    DASHBOARD_PAGE = "dashboard-page"
    ROOT_LAYOUT = "root-layout"
    PROVIDERS = "providers"
    CUSTOM_APP = "custom-app"
    # State
    ZUSTAND_STORE = "zustand-store"
    REDUX_SLICE = "redux-slice"
    REDUX_STORE = "redux-store"
    REDUX_HOOKS = "redux-hooks"
    QUERY_CLIENT = "query-client"
    CURRENT_USER_HOOK = "current-user-hook"
    # Shared modules
    LOCAL_STORAGE_HOOK = "local-storage-hook"
    UTILS = "utils"
    TYPES = "types"
    API_CLIENT = "api-client"
    ENV_EXAMPLE = "env-example"
    # Styling
    STYLESHEET = "stylesheet"
    TAILWIND_CONFIG = "tailwind-config"
    POSTCSS_CONFIG = "postcss-config"
    SHADCN_CONFIG = "shadcn-config"
    SHADCN_UTILS = "shadcn-utils"
    VITE_CONFIG = "vite-config"
    # Code quality
    ESLINT_CONFIG = "eslint-config"
    PRETTIER_CONFIG = "prettier-config"
    PRETTIER_IGNORE = "prettier-ignore"
    LINT_STAGED_CONFIG = "lint-staged-config"
    COMMITLINT_CONFIG = "commitlint-config"
    HUSKY_PRE_COMMIT = "husky-pre-commit"
    HUSKY_COMMIT_MSG = "husky-commit-msg"
    # Testing
    VITEST_CONFIG = "vitest-config"
    TEST_SETUP = "test-setup"
    BUTTON_TEST = "button-test"


class GeneratedFile(BaseModel):
    """A rendered file: project-relative path plus literal content."""

    model_config = ConfigDict(frozen=True)

    relative_path: str
    content: str


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


def stylesheet_path(config: ProjectConfig) -> str:
    if not config.is_nextjs:
        return "src/index.css"
    if config.is_app_router:
        return "src/app/globals.css"
    return "src/styles/globals.css"


def config_file_ext(config: ProjectConfig) -> str:
    """Extension for root-level ESM config files (tailwind, vitest...)."""
    if config.is_typescript:
        return "ts"
    return FRAMEWORK_FRAGMENTS[config.framework].esm_config_ext


def _page_path(config: ProjectConfig, vite_name: str, route: str) -> str:
    ext = config.component_ext
    if not config.is_nextjs:
        return f"src/pages/{vite_name}.{ext}"
    if config.is_app_router:
        prefix = f"src/app/{route}/" if route else "src/app/"
        return f"{prefix}page.{ext}"
    return f"src/pages/{route or 'index'}.{ext}"


_PATHS: dict[FileKind, Callable[[ProjectConfig], str]] = {
    FileKind.BUTTON: lambda c: f"src/components/ui/Button.{c.component_ext}",
    FileKind.NAVBAR: lambda c: f"src/components/layout/Navbar.{c.component_ext}",
    FileKind.FOOTER: lambda c: f"src/components/layout/Footer.{c.component_ext}",
    FileKind.LAYOUT: lambda c: f"src/components/layout/Layout.{c.component_ext}",
    FileKind.THEME_TOGGLE: lambda c: f"src/components/common/ThemeToggle.{c.component_ext}",
    FileKind.PROTECTED_ROUTE: lambda c: f"src/components/common/ProtectedRoute.{c.component_ext}",
    FileKind.APP: lambda c: f"src/App.{c.component_ext}",
    FileKind.APP_ROUTES: lambda c: f"src/routes/AppRoutes.{c.component_ext}",
    FileKind.HOME_PAGE: lambda c: _page_path(c, "HomePage", ""),
    FileKind.ABOUT_PAGE: lambda c: _page_path(c, "AboutPage", "about"),
    FileKind.DASHBOARD_PAGE: lambda c: _page_path(c, "DashboardPage", "dashboard"),
    FileKind.ROOT_LAYOUT: lambda c: f"src/app/layout.{c.component_ext}",
    FileKind.PROVIDERS: lambda c: f"src/app/providers.{c.component_ext}",
    FileKind.CUSTOM_APP: lambda c: f"src/pages/_app.{c.component_ext}",
    FileKind.ZUSTAND_STORE: lambda c: f"src/store/useAuth.{c.module_ext}",
    FileKind.REDUX_SLICE: lambda c: f"src/store/authSlice.{c.module_ext}",
    FileKind.REDUX_STORE: lambda c: f"src/store/store.{c.module_ext}",
    FileKind.REDUX_HOOKS: lambda c: f"src/store/hooks.{c.module_ext}",
    FileKind.QUERY_CLIENT: lambda c: f"src/store/queryClient.{c.module_ext}",
    FileKind.CURRENT_USER_HOOK: lambda c: f"src/hooks/useCurrentUser.{c.module_ext}",
    FileKind.LOCAL_STORAGE_HOOK: lambda c: f"src/hooks/useLocalStorage.{c.module_ext}",
    FileKind.UTILS: lambda c: f"src/utils/index.{c.module_ext}",
    FileKind.TYPES: lambda c: "src/types/index.ts",
    FileKind.API_CLIENT: lambda c: f"src/lib/api.{c.module_ext}",
    FileKind.ENV_EXAMPLE: lambda c: ".env.example",
    FileKind.STYLESHEET: stylesheet_path,
    FileKind.TAILWIND_CONFIG: lambda c: f"tailwind.config.{config_file_ext(c)}",
    FileKind.POSTCSS_CONFIG: lambda c: f"postcss.config.{FRAMEWORK_FRAGMENTS[c.framework].esm_config_ext}",
    FileKind.SHADCN_CONFIG: lambda c: "components.json",
    FileKind.SHADCN_UTILS: lambda c: f"src/lib/utils.{c.module_ext}",
    FileKind.VITE_CONFIG: lambda c: f"vite.config.{c.module_ext}",
    FileKind.ESLINT_CONFIG: lambda c: f"eslint.config.{FRAMEWORK_FRAGMENTS[c.framework].esm_config_ext}",
    FileKind.PRETTIER_CONFIG: lambda c: ".prettierrc",
    FileKind.PRETTIER_IGNORE: lambda c: ".prettierignore",
    FileKind.LINT_STAGED_CONFIG: lambda c: ".lintstagedrc.json",
    FileKind.COMMITLINT_CONFIG: lambda c: f"commitlint.config.{FRAMEWORK_FRAGMENTS[c.framework].esm_config_ext}",
    FileKind.HUSKY_PRE_COMMIT: lambda c: ".husky/pre-commit",
    FileKind.HUSKY_COMMIT_MSG: lambda c: ".husky/commit-msg",
    FileKind.VITEST_CONFIG: lambda c: f"vitest.config.{config_file_ext(c)}",
    FileKind.TEST_SETUP: lambda c: f"src/test/setup.{c.module_ext}",
    FileKind.BUTTON_TEST: lambda c: f"src/__tests__/Button.test.{c.component_ext}",
}


def output_path(kind: FileKind, config: ProjectConfig) -> str:
    """Project-relative path (POSIX separators) of *kind* under *config*."""
    return _PATHS[kind](config)


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

_TEMPLATES: dict[FileKind, Callable[[ProjectConfig], str]] = {
    FileKind.BUTTON: lambda c: "components/Button.j2",
    FileKind.NAVBAR: lambda c: "components/Navbar.j2",
    FileKind.FOOTER: lambda c: "components/Footer.j2",
    FileKind.LAYOUT: lambda c: "components/Layout.j2",
    FileKind.THEME_TOGGLE: lambda c: "components/ThemeToggle.j2",
    FileKind.PROTECTED_ROUTE: lambda c: "components/ProtectedRoute.j2",
    FileKind.APP: lambda c: "app/App.j2",
    FileKind.APP_ROUTES: lambda c: "app/AppRoutes.j2",
    FileKind.HOME_PAGE: lambda c: "pages/Home.j2",
    FileKind.ABOUT_PAGE: lambda c: "pages/About.j2",
    FileKind.DASHBOARD_PAGE: lambda c: "pages/Dashboard.j2",
    FileKind.ROOT_LAYOUT: lambda c: "app/RootLayout.j2",
    FileKind.PROVIDERS: lambda c: "app/Providers.j2",
    FileKind.CUSTOM_APP: lambda c: "app/CustomApp.j2",
    FileKind.ZUSTAND_STORE: lambda c: "store/zustand.j2",
    FileKind.REDUX_SLICE: lambda c: "store/authSlice.j2",
    FileKind.REDUX_STORE: lambda c: "store/reduxStore.j2",
    FileKind.REDUX_HOOKS: lambda c: "store/reduxHooks.j2",
    FileKind.QUERY_CLIENT: lambda c: "store/queryClient.j2",
    FileKind.CURRENT_USER_HOOK: lambda c: "hooks/useCurrentUser.j2",
    FileKind.LOCAL_STORAGE_HOOK: lambda c: "hooks/useLocalStorage.j2",
    FileKind.UTILS: lambda c: "lib/utils.j2",
    FileKind.TYPES: lambda c: "lib/types.j2",
    FileKind.API_CLIENT: lambda c: "lib/api.j2",
    FileKind.ENV_EXAMPLE: lambda c: "config/env.example.j2",
    FileKind.STYLESHEET: lambda c: STYLING_FRAGMENTS[c.styling].stylesheet_template,
    FileKind.TAILWIND_CONFIG: lambda c: "config/tailwind.config.j2",
    FileKind.POSTCSS_CONFIG: lambda c: "config/postcss.config.j2",
    FileKind.SHADCN_CONFIG: lambda c: "config/components.json.j2",
    FileKind.SHADCN_UTILS: lambda c: "lib/cn.j2",
    FileKind.VITE_CONFIG: lambda c: "config/vite.config.j2",
    FileKind.ESLINT_CONFIG: lambda c: (
        "quality/next-eslint.config.j2" if c.is_nextjs else "quality/eslint.config.j2"
    ),
    FileKind.PRETTIER_CONFIG: lambda c: "quality/prettierrc.j2",
    FileKind.PRETTIER_IGNORE: lambda c: "quality/prettierignore.j2",
    FileKind.LINT_STAGED_CONFIG: lambda c: "quality/lintstagedrc.json.j2",
    FileKind.COMMITLINT_CONFIG: lambda c: "quality/commitlint.config.j2",
    FileKind.HUSKY_PRE_COMMIT: lambda c: "quality/pre-commit.j2",
    FileKind.HUSKY_COMMIT_MSG: lambda c: "quality/commit-msg.j2",
    FileKind.VITEST_CONFIG: lambda c: "testing/vitest.config.j2",
    FileKind.TEST_SETUP: lambda c: "testing/setup.j2",
    FileKind.BUTTON_TEST: lambda c: "testing/Button.test.j2",
}

if set(_PATHS) != set(FileKind) or set(_TEMPLATES) != set(FileKind):
    raise RuntimeError("Every FileKind needs both an output path and a template")


_COMPONENT_NAMES: dict[FileKind, tuple[str, str]] = {
    # kind -> (React/Vite name, Next.js name)
    FileKind.HOME_PAGE: ("HomePage", "Home"),
    FileKind.ABOUT_PAGE: ("AboutPage", "About"),
    FileKind.DASHBOARD_PAGE: ("DashboardPage", "Dashboard"),
}


_STYLING_LABELS: dict[Styling, str] = {
    Styling.TAILWIND: "Tailwind CSS",
    Styling.SHADCN: "shadcn/ui",
    Styling.VANILLA_CSS: "plain CSS",
    Styling.NONE: "inline styles",
}

_STATE_LABELS: dict[StateManagement, str] = {
    StateManagement.REDUX: "Redux Toolkit",
    StateManagement.ZUSTAND: "Zustand",
    StateManagement.TANSTACK_QUERY: "TanStack Query",
    StateManagement.NONE: "",
}


def stack_features(config: ProjectConfig) -> list[str]:
    """Human-readable list of the selected stack, used by the starter pages."""
    features = [
        FRAMEWORK_FRAGMENTS[config.framework].name,
        "TypeScript" if config.is_typescript else "JavaScript",
        _STYLING_LABELS[config.styling],
    ]
    if _STATE_LABELS[config.state_management]:
        features.append(_STATE_LABELS[config.state_management])
    if config.api_client:
        features.append("Axios")
    if config.testing:
        features.append("Vitest")
    if config.code_quality:
        features.append("ESLint & Prettier")
    return features


# ---------------------------------------------------------------------------
# Selector
# ---------------------------------------------------------------------------


class TemplateVariantSelector:
    """Renders file content for a ``(FileKind, ProjectConfig)`` pair."""

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or TemplateRenderer()

    def render(self, kind: FileKind, config: ProjectConfig) -> str:
        """Return the literal content of *kind* for *config*."""
        template = _TEMPLATES[kind](config)
        return self.renderer.render(template, self.build_context(kind, config))

    def generate(self, kind: FileKind, config: ProjectConfig) -> GeneratedFile:
        return GeneratedFile(
            relative_path=output_path(kind, config),
            content=self.render(kind, config),
        )

    # -- Context building --------------------------------------------------

    def build_context(self, kind: FileKind, config: ProjectConfig) -> dict[str, Any]:
        """Build the Jinja2 template context from the selected fragments."""
        framework = FRAMEWORK_FRAGMENTS[config.framework]
        language = LANGUAGE_FRAGMENTS[config.language]
        styling = STYLING_FRAGMENTS[config.styling]
        names = _COMPONENT_NAMES.get(kind, ("", ""))

        return {
            "config": config,
            "project_name": config.project_name,
            "fw": framework,
            "lang": language,
            "ts": language.ts,
            "typescript": language.annotate,
            "style": styling,
            "icons": ICON_FRAGMENTS[config.icons],
            "pm": commands_for(config.package_manager),
            # Framework / router
            "is_vite": config.framework is Framework.REACT_VITE,
            "is_app_router": config.is_app_router,
            "use_client": config.is_app_router,
            "src_root": framework.src_root_from_pages,
            "component_name": names[1] if config.is_nextjs else names[0],
            # Styling
            "uses_tailwind": config.uses_tailwind,
            "shadcn": config.styling is Styling.SHADCN,
            "tailwind_v4": (
                config.styling is Styling.TAILWIND
                and config.tailwind_version is TailwindVersion.V4
            ),
            "theme_toggle": has_theme_toggle(config),
            "stylesheet_path": stylesheet_path(config),
            "tailwind_config_path": output_path(FileKind.TAILWIND_CONFIG, config),
            # State
            "redux": config.state_management is StateManagement.REDUX,
            "zustand": config.state_management is StateManagement.ZUSTAND,
            "tanstack": config.state_management is StateManagement.TANSTACK_QUERY,
            "protected_route": has_protected_route(config),
            "providers": needs_providers(config),
            # Features
            "api_client": config.api_client,
            "testing": config.testing,
            "stack_features": stack_features(config),
        }


def has_theme_toggle(config: ProjectConfig) -> bool:
    """ThemeToggle relies on Tailwind's class-based dark mode."""
    return config.uses_tailwind


def has_protected_route(config: ProjectConfig) -> bool:
    """ProtectedRoute needs react-router and an auth store."""
    return config.framework is Framework.REACT_VITE and config.has_auth_store


def needs_providers(config: ProjectConfig) -> bool:
    """Whether the state library needs a React context provider."""
    return config.state_management in (StateManagement.REDUX, StateManagement.TANSTACK_QUERY)


@lru_cache(maxsize=1)
def default_selector() -> TemplateVariantSelector:
    return TemplateVariantSelector()


def render(kind: FileKind, config: ProjectConfig) -> str:
    """Module-level shortcut for ``default_selector().render``."""
    return default_selector().render(kind, config)
