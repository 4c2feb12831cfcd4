"""Interactive answer collection.

``AnswerCollector`` turns command-line answers into a fully resolved
``ProjectConfig``, prompting with Rich for anything left unanswered.  Gated
questions (Next.js router, Tailwind version) are only asked when the
governing answer selects them.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, NamedTuple

from rich.console import Console
from rich.prompt import Confirm, Prompt

from prtw.config import (
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
from prtw.errors import InvalidConfiguration
from prtw.utils import console as default_console
from prtw.utils import print_error, validate_project_name

logger = logging.getLogger(__name__)


class Choice(NamedTuple):
    field: str
    question: str
    options: type[Enum]
    default: Enum


class Toggle(NamedTuple):
    field: str
    question: str
    default: bool


_FRAMEWORK = Choice("framework", "Which framework?", Framework, Framework.REACT_VITE)
_ROUTER = Choice("router", "Which Next.js router?", Router, Router.APP)
_LANGUAGE = Choice("language", "Which language?", Language, Language.TYPESCRIPT)
_STYLING = Choice("styling", "Which styling solution?", Styling, Styling.TAILWIND)
_TAILWIND_VERSION = Choice(
    "tailwind_version", "Which Tailwind CSS version?", TailwindVersion, TailwindVersion.V3
)
_STATE = Choice(
    "state_management", "Which state management library?", StateManagement, StateManagement.NONE
)
_ICONS = Choice("icons", "Which icon library?", Icons, Icons.NONE)

_TOGGLES: tuple[Toggle, ...] = (
    Toggle("code_quality", "Set up ESLint, Prettier, Husky and Commitlint?", False),
    Toggle("testing", "Set up Vitest and Testing Library?", False),
    Toggle("api_client", "Add an Axios API client?", False),
)


class AnswerCollector:
    """Builds a ``ProjectConfig`` from pre-supplied answers and prompts.

    Args:
        interactive: When ``False`` unanswered questions take their default
            instead of prompting.
        default_package_manager: Default offered for the package manager.
        console: Console used for prompts.
    """

    def __init__(
        self,
        interactive: bool = True,
        default_package_manager: PackageManager = PackageManager.NPM,
        console: Console | None = None,
    ) -> None:
        self.interactive = interactive
        self.default_package_manager = default_package_manager
        self.console = console or default_console

    def collect(self, answers: dict[str, Any] | None = None) -> ProjectConfig:
        """Resolve every answer and return the configuration.

        *answers* maps ``ProjectConfig`` field names to values supplied on the
        command line; ``None`` values count as unanswered.  Gated answers
        given for a governor that does not select them are passed through
        unchanged so the plan compiler can reject them.
        """
        given = {k: v for k, v in (answers or {}).items() if v is not None}
        values: dict[str, Any] = {"project_name": self._project_name(given.get("project_name"))}

        values["framework"] = self._choose(_FRAMEWORK, given)
        if values["framework"] is Framework.NEXTJS:
            values["router"] = self._choose(_ROUTER, given)
        elif "router" in given:
            values["router"] = Router(given["router"])

        values["language"] = self._choose(_LANGUAGE, given)
        package_manager = Choice(
            "package_manager", "Which package manager?", PackageManager, self.default_package_manager
        )
        values["package_manager"] = self._choose(package_manager, given)

        values["styling"] = self._choose(_STYLING, given)
        if values["styling"] is Styling.TAILWIND:
            values["tailwind_version"] = self._choose(_TAILWIND_VERSION, given)
        elif "tailwind_version" in given:
            values["tailwind_version"] = TailwindVersion(given["tailwind_version"])

        values["state_management"] = self._choose(_STATE, given)
        values["icons"] = self._choose(_ICONS, given)
        for toggle in _TOGGLES:
            values[toggle.field] = self._confirm(toggle, given)

        config = ProjectConfig(**values)
        logger.debug("Collected configuration: %s", config.model_dump(mode="json"))
        return config

    # -- Individual questions ----------------------------------------------

    def _project_name(self, given: str | None) -> str:
        if given is not None:
            return given
        if not self.interactive:
            raise InvalidConfiguration("project_name", "a project name is required without prompts")
        while True:
            name = Prompt.ask("Project name", console=self.console).strip()
            error = validate_project_name(name)
            if error is None:
                return name
            print_error(error)

    def _choose(self, choice: Choice, given: dict[str, Any]) -> Enum:
        if choice.field in given:
            return choice.options(given[choice.field])
        if not self.interactive:
            return choice.default
        answer = Prompt.ask(
            choice.question,
            choices=[option.value for option in choice.options],
            default=choice.default.value,
            console=self.console,
        )
        return choice.options(answer)

    def _confirm(self, toggle: Toggle, given: dict[str, Any]) -> bool:
        if toggle.field in given:
            return bool(given[toggle.field])
        if not self.interactive:
            return toggle.default
        return Confirm.ask(toggle.question, default=toggle.default, console=self.console)
