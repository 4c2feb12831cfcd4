"""Dependency batches contributed by each configuration axis.

Batches are produced in a fixed order -- styling, state management, icons,
routing, API client, testing, code quality -- and each becomes one
``InstallDependencies`` step.  Every axis has a total mapping from its enum
tag to the batch it contributes.
"""

from __future__ import annotations

from typing import Callable, NamedTuple

from prtw.config import (
    Framework,
    Icons,
    ProjectConfig,
    StateManagement,
    Styling,
    TailwindVersion,
)
from prtw.scaffolder.plan import Dependency


class Batch(NamedTuple):
    description: str
    packages: tuple[Dependency, ...]


def _prod(*names: str) -> tuple[Dependency, ...]:
    return tuple(Dependency(name=n) for n in names)


def _dev(*names: str) -> tuple[Dependency, ...]:
    return tuple(Dependency(name=n, dev=True) for n in names)


# ---------------------------------------------------------------------------
# Styling
# ---------------------------------------------------------------------------

TAILWIND_V3_PACKAGES = _dev("tailwindcss@^3", "postcss", "autoprefixer")


def _tailwind(config: ProjectConfig) -> Batch | None:
    if config.tailwind_version is TailwindVersion.V4:
        if config.framework is Framework.REACT_VITE:
            packages = _dev("tailwindcss@^4", "@tailwindcss/vite")
        else:
            packages = _dev("tailwindcss@^4", "@tailwindcss/postcss", "postcss")
    else:
        packages = TAILWIND_V3_PACKAGES
    return Batch("Tailwind CSS", packages)


def _shadcn(config: ProjectConfig) -> Batch | None:
    packages = (
        TAILWIND_V3_PACKAGES
        + _prod("class-variance-authority", "clsx", "tailwind-merge", "tailwindcss-animate")
    )
    if config.is_typescript:
        packages += _dev("@types/node")
    return Batch("Shadcn/UI", packages)


def _no_styling_packages(config: ProjectConfig) -> Batch | None:
    return None


STYLING_BATCHES: dict[Styling, Callable[[ProjectConfig], Batch | None]] = {
    Styling.TAILWIND: _tailwind,
    Styling.SHADCN: _shadcn,
    Styling.VANILLA_CSS: _no_styling_packages,
    Styling.NONE: _no_styling_packages,
}


# ---------------------------------------------------------------------------
# State management / icons / routing
# ---------------------------------------------------------------------------

STATE_BATCHES: dict[StateManagement, Batch | None] = {
    StateManagement.REDUX: Batch("Redux Toolkit", _prod("@reduxjs/toolkit", "react-redux")),
    StateManagement.ZUSTAND: Batch("Zustand", _prod("zustand")),
    StateManagement.TANSTACK_QUERY: Batch(
        "TanStack Query",
        _prod("@tanstack/react-query") + _dev("@tanstack/react-query-devtools"),
    ),
    StateManagement.NONE: None,
}

ICON_BATCHES: dict[Icons, Batch | None] = {
    Icons.LUCIDE: Batch("Lucide React", _prod("lucide-react")),
    Icons.REACT_ICONS: Batch("React Icons", _prod("react-icons")),
    Icons.ICONIFY: Batch("Iconify", _prod("@iconify/react")),
    Icons.NONE: None,
}

ROUTING_BATCHES: dict[Framework, Batch | None] = {
    Framework.REACT_VITE: Batch("React Router", _prod("react-router-dom")),
    # Next.js ships its own file-system router
    Framework.NEXTJS: None,
}


# ---------------------------------------------------------------------------
# Feature switches
# ---------------------------------------------------------------------------

API_CLIENT_BATCH = Batch("Axios", _prod("axios"))

_TESTING_PACKAGES = _dev(
    "vitest",
    "jsdom",
    "@testing-library/react",
    "@testing-library/dom",
    "@testing-library/jest-dom",
)

_CODE_QUALITY_PACKAGES = _dev(
    "prettier",
    "eslint-config-prettier",
    "eslint-plugin-prettier",
    "husky",
    "lint-staged",
    "@commitlint/cli",
    "@commitlint/config-conventional",
)


def testing_batch(config: ProjectConfig) -> Batch:
    packages = _TESTING_PACKAGES
    if config.is_nextjs:
        packages += _dev("@vitejs/plugin-react")
    return Batch("Vitest & Testing Library", packages)


def code_quality_batch(config: ProjectConfig) -> Batch:
    if config.is_nextjs:
        # create-next-app --eslint already installs ESLint and eslint-config-next
        packages = _dev("@eslint/eslintrc") + _CODE_QUALITY_PACKAGES
    else:
        packages = _dev("eslint") + _CODE_QUALITY_PACKAGES
    return Batch("ESLint, Prettier, Husky & Commitlint", packages)


def dependency_batches(config: ProjectConfig) -> list[Batch]:
    """Return the non-empty dependency batches for *config*, in install order."""
    candidates = [
        STYLING_BATCHES[config.styling](config),
        STATE_BATCHES[config.state_management],
        ICON_BATCHES[config.icons],
        ROUTING_BATCHES[config.framework],
        API_CLIENT_BATCH if config.api_client else None,
        testing_batch(config) if config.testing else None,
        code_quality_batch(config) if config.code_quality else None,
    ]
    return [batch for batch in candidates if batch is not None and batch.packages]


for _axis, _table in (
    (Styling, STYLING_BATCHES),
    (StateManagement, STATE_BATCHES),
    (Icons, ICON_BATCHES),
    (Framework, ROUTING_BATCHES),
):
    if set(_table) != set(_axis):
        raise RuntimeError(f"Dependency table for {_axis.__name__} is not exhaustive")
