"""create-prtw configuration.

Two pydantic v2 models live here:

* ``ProjectConfig`` -- the immutable set of scaffolding answers (framework,
  styling, state management...) that drives plan compilation and template
  rendering.
* ``Config`` -- tool settings (output directory, dry-run, verbosity) that can
  be seeded from environment variables and overridden on the command line.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


PROJECT_NAME_PATTERN = r"^[A-Za-z0-9_-]+$"


# ---------------------------------------------------------------------------
# Enumerations (one closed set per configuration axis)
# ---------------------------------------------------------------------------


class Framework(str, Enum):
    """Base framework the project is bootstrapped with."""
    REACT_VITE = "react-vite"
    NEXTJS = "nextjs"


class Router(str, Enum):
    """Next.js routing system. Only meaningful for ``Framework.NEXTJS``."""
    APP = "app"
    PAGES = "pages"


class Language(str, Enum):
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"


class PackageManager(str, Enum):
    NPM = "npm"
    YARN = "yarn"
    BUN = "bun"


class Styling(str, Enum):
    """Styling solution. Shadcn is built on top of Tailwind."""
    TAILWIND = "tailwind"
    SHADCN = "shadcn"
    VANILLA_CSS = "vanilla-css"
    NONE = "none"


class TailwindVersion(str, Enum):
    """Tailwind major version. Only meaningful for ``Styling.TAILWIND``."""
    V3 = "v3"
    V4 = "v4"


class StateManagement(str, Enum):
    REDUX = "redux"
    ZUSTAND = "zustand"
    TANSTACK_QUERY = "tanstack-query"
    NONE = "none"


class Icons(str, Enum):
    LUCIDE = "lucide"
    REACT_ICONS = "react-icons"
    ICONIFY = "iconify"
    NONE = "none"


# ---------------------------------------------------------------------------
# Project configuration (scaffolding answers)
# ---------------------------------------------------------------------------


class ProjectConfig(BaseModel):
    """Resolved scaffolding choices for a single project.

    Instances are immutable.  Gated fields (``router`` and
    ``tailwind_version``) are ``None`` unless their governing field selects
    them; the model does not enforce that rule itself because the plan
    compiler re-validates gating and reports ``InvalidConfiguration``.
    """

    model_config = ConfigDict(frozen=True)

    project_name: str = Field(..., min_length=1, pattern=PROJECT_NAME_PATTERN)
    framework: Framework = Framework.REACT_VITE
    router: Optional[Router] = None
    language: Language = Language.TYPESCRIPT
    package_manager: PackageManager = PackageManager.NPM
    styling: Styling = Styling.TAILWIND
    tailwind_version: Optional[TailwindVersion] = None
    state_management: StateManagement = StateManagement.NONE
    icons: Icons = Icons.NONE
    code_quality: bool = False
    testing: bool = False
    api_client: bool = False

    # -- Convenience flags used by the compiler and the templates ---------

    @property
    def is_nextjs(self) -> bool:
        return self.framework is Framework.NEXTJS

    @property
    def is_app_router(self) -> bool:
        return self.is_nextjs and self.router is Router.APP

    @property
    def is_typescript(self) -> bool:
        return self.language is Language.TYPESCRIPT

    @property
    def uses_tailwind(self) -> bool:
        """True for every styling option that needs Tailwind installed."""
        return self.styling in (Styling.TAILWIND, Styling.SHADCN)

    @property
    def has_auth_store(self) -> bool:
        """True when the selected state library ships an auth store."""
        return self.state_management in (StateManagement.REDUX, StateManagement.ZUSTAND)

    @property
    def component_ext(self) -> str:
        """Extension for files containing JSX."""
        return "tsx" if self.is_typescript else "jsx"

    @property
    def module_ext(self) -> str:
        """Extension for plain modules without JSX."""
        return "ts" if self.is_typescript else "js"

    # -- Construction helpers --------------------------------------------

    @classmethod
    def with_defaults(cls, **values: Any) -> "ProjectConfig":
        """Build a config, filling gated fields only where they apply.

        ``router`` defaults to the App Router for Next.js projects and
        ``tailwind_version`` to v3 for Tailwind projects.  Gated values passed
        for a framework/styling that does not use them are dropped.
        """
        config = cls(**values)
        updates: dict[str, Any] = {}
        if config.is_nextjs:
            updates["router"] = config.router or Router.APP
        else:
            updates["router"] = None
        if config.styling is Styling.TAILWIND:
            updates["tailwind_version"] = config.tailwind_version or TailwindVersion.V3
        else:
            updates["tailwind_version"] = None
        return config.model_copy(update=updates)

    def save(self, path: Path) -> Path:
        """Persist the answers to a JSON file so a run can be replayed."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "ProjectConfig":
        """Load answers previously written by :meth:`save`."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)


# ---------------------------------------------------------------------------
# Tool settings
# ---------------------------------------------------------------------------


_TRUTHY = {"1", "true", "yes", "on"}


class Config(BaseModel):
    """Global create-prtw settings.

    Instances are created once by the CLI entry point and passed to the
    ``Pipeline``.
    """

    output_dir: Path = Field(default=Path("."), description="Parent directory of the new project")
    dry_run: bool = Field(default=False, description="Compile and print the plan without running it")
    verbose: bool = Field(default=False, description="Emit debug logging")
    default_package_manager: PackageManager = Field(default=PackageManager.NPM)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            PRTW_OUTPUT_DIR, PRTW_DRY_RUN, PRTW_VERBOSE, PRTW_PACKAGE_MANAGER.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("PRTW_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["PRTW_OUTPUT_DIR"])
        if os.environ.get("PRTW_DRY_RUN"):
            kwargs["dry_run"] = os.environ["PRTW_DRY_RUN"].strip().lower() in _TRUTHY
        if os.environ.get("PRTW_VERBOSE"):
            kwargs["verbose"] = os.environ["PRTW_VERBOSE"].strip().lower() in _TRUTHY
        if os.environ.get("PRTW_PACKAGE_MANAGER"):
            kwargs["default_package_manager"] = PackageManager(
                os.environ["PRTW_PACKAGE_MANAGER"].strip().lower()
            )
        return cls(**kwargs)

    def project_root(self, project_name: str) -> Path:
        """Return where the project named *project_name* will be created."""
        return self.output_dir / project_name
