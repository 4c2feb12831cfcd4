"""Unit tests for interactive answer collection (prtw.prompts).

Tests cover:
- Full interactive flow with gated questions
- Non-interactive defaults (--yes)
- Pre-supplied answers skip their prompts
- Project name re-prompting on invalid input
- Gated answers passed through for the compiler to reject
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from prtw.config import (
    Framework,
    Icons,
    Language,
    PackageManager,
    Router,
    StateManagement,
    Styling,
    TailwindVersion,
)
from prtw.errors import InvalidConfiguration
from prtw.prompts import AnswerCollector
from prtw.scaffolder.compiler import compile_plan


pytestmark = pytest.mark.unit


def _questions(mock) -> list[str]:
    return [call.args[0] for call in mock.call_args_list]


# ---------------------------------------------------------------------------
# Interactive
# ---------------------------------------------------------------------------


class TestInteractive:
    def test_next_flow_asks_router_not_tailwind_version(self):
        answers = ["my-app", "nextjs", "pages", "javascript", "yarn", "shadcn", "zustand", "lucide"]
        with patch("prtw.prompts.Prompt.ask", side_effect=answers) as ask, patch(
            "prtw.prompts.Confirm.ask", side_effect=[True, False, True]
        ) as confirm:
            config = AnswerCollector().collect()

        assert config.project_name == "my-app"
        assert config.framework is Framework.NEXTJS
        assert config.router is Router.PAGES
        assert config.language is Language.JAVASCRIPT
        assert config.package_manager is PackageManager.YARN
        assert config.styling is Styling.SHADCN
        assert config.tailwind_version is None
        assert config.state_management is StateManagement.ZUSTAND
        assert config.icons is Icons.LUCIDE
        assert (config.code_quality, config.testing, config.api_client) == (True, False, True)
        assert "Which Next.js router?" in _questions(ask)
        assert "Which Tailwind CSS version?" not in _questions(ask)
        assert confirm.call_count == 3

    def test_vite_flow_asks_tailwind_version_not_router(self):
        answers = ["app", "react-vite", "typescript", "npm", "tailwind", "v4", "none", "none"]
        with patch("prtw.prompts.Prompt.ask", side_effect=answers) as ask, patch(
            "prtw.prompts.Confirm.ask", return_value=False
        ):
            config = AnswerCollector().collect()

        assert config.router is None
        assert config.tailwind_version is TailwindVersion.V4
        assert "Which Next.js router?" not in _questions(ask)
        assert "Which Tailwind CSS version?" in _questions(ask)

    def test_choices_and_defaults_offered(self):
        with patch("prtw.prompts.Prompt.ask", side_effect=["react-vite", "bun"]) as ask, patch(
            "prtw.prompts.Confirm.ask", return_value=False
        ):
            collector = AnswerCollector(default_package_manager=PackageManager.BUN)
            collector.collect({"project_name": "x", "language": "typescript", "styling": "none",
                               "state_management": "none", "icons": "none"})

        framework_call, pm_call = ask.call_args_list
        assert framework_call.kwargs["choices"] == ["react-vite", "nextjs"]
        assert framework_call.kwargs["default"] == "react-vite"
        assert pm_call.kwargs["choices"] == ["npm", "yarn", "bun"]
        assert pm_call.kwargs["default"] == "bun"

    def test_supplied_answers_are_not_prompted(self):
        given = {
            "project_name": "given",
            "framework": "react-vite",
            "language": "typescript",
            "package_manager": "npm",
            "styling": "vanilla-css",
            "state_management": "redux",
            "icons": "none",
            "code_quality": False,
            "testing": True,
            "api_client": False,
        }
        with patch("prtw.prompts.Prompt.ask") as ask, patch("prtw.prompts.Confirm.ask") as confirm:
            config = AnswerCollector().collect(given)
        ask.assert_not_called()
        confirm.assert_not_called()
        assert config.testing is True
        assert config.code_quality is False

    def test_invalid_name_is_asked_again(self):
        given = {"framework": "nextjs", "router": "app", "language": "typescript",
                 "package_manager": "npm", "styling": "none", "state_management": "none",
                 "icons": "none", "code_quality": False, "testing": False, "api_client": False}
        with patch("prtw.prompts.Prompt.ask", side_effect=["bad name", "  ", "good-name"]) as ask, patch(
            "prtw.prompts.print_error"
        ) as print_error:
            config = AnswerCollector().collect(given)
        assert config.project_name == "good-name"
        assert ask.call_count == 3
        assert print_error.call_count == 2


# ---------------------------------------------------------------------------
# Non-interactive
# ---------------------------------------------------------------------------


class TestNonInteractive:
    def test_defaults(self):
        with patch("prtw.prompts.Prompt.ask") as ask, patch("prtw.prompts.Confirm.ask") as confirm:
            config = AnswerCollector(interactive=False).collect({"project_name": "quick"})
        ask.assert_not_called()
        confirm.assert_not_called()
        assert config.framework is Framework.REACT_VITE
        assert config.router is None
        assert config.styling is Styling.TAILWIND
        assert config.tailwind_version is TailwindVersion.V3
        assert config.state_management is StateManagement.NONE
        assert not (config.code_quality or config.testing or config.api_client)

    def test_next_defaults_to_app_router(self):
        config = AnswerCollector(interactive=False).collect(
            {"project_name": "site", "framework": "nextjs", "styling": "shadcn"}
        )
        assert config.router is Router.APP
        assert config.tailwind_version is None

    def test_default_package_manager(self):
        collector = AnswerCollector(interactive=False, default_package_manager=PackageManager.YARN)
        assert collector.collect({"project_name": "x"}).package_manager is PackageManager.YARN

    def test_none_values_count_as_unanswered(self):
        config = AnswerCollector(interactive=False).collect(
            {"project_name": "x", "framework": None, "testing": None}
        )
        assert config.framework is Framework.REACT_VITE
        assert config.testing is False

    def test_missing_name_raises(self):
        with pytest.raises(InvalidConfiguration) as exc_info:
            AnswerCollector(interactive=False).collect({})
        assert exc_info.value.field == "project_name"

    def test_gated_answer_without_governor_reaches_compiler(self):
        config = AnswerCollector(interactive=False).collect(
            {"project_name": "x", "framework": "react-vite", "router": "pages"}
        )
        assert config.router is Router.PAGES
        with pytest.raises(InvalidConfiguration) as exc_info:
            compile_plan(config)
        assert exc_info.value.field == "router"

    def test_tailwind_version_without_tailwind_reaches_compiler(self):
        config = AnswerCollector(interactive=False).collect(
            {"project_name": "x", "styling": "none", "tailwind_version": "v4"}
        )
        with pytest.raises(InvalidConfiguration) as exc_info:
            compile_plan(config)
        assert exc_info.value.field == "tailwind_version"
