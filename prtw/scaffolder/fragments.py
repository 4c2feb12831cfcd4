"""Per-axis template fragments.

Every configuration axis that influences generated content (framework,
language, styling, icons) is a closed enum with a total mapping from each
tag to a fragment object.  Skeleton templates combine one fragment per axis,
so adding a value to an axis means adding one fragment, never another copy
of every file.

Mappings are checked for exhaustiveness when the module is imported.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping

from prtw.config import Framework, Icons, Language, Styling


def _require_total(mapping: Mapping[Enum, object], axis: type[Enum]) -> None:
    missing = [member.value for member in axis if member not in mapping]
    if missing:
        raise RuntimeError(f"{axis.__name__} fragments missing for: {', '.join(missing)}")


# ---------------------------------------------------------------------------
# Framework
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FrameworkFragment:
    """Framework-dependent pieces of generated source."""

    name: str
    is_vite: bool
    link_import: str
    link_attr: str
    # Import root for ``src/`` as seen from page modules
    src_root_from_pages: str
    # Extension of ESM config files (tailwind/postcss) in a JS project
    esm_config_ext: str
    env_api_url: str
    env_api_var: str
    tailwind_content: tuple[str, ...]
    scripts: Mapping[str, str]


FRAMEWORK_FRAGMENTS: dict[Framework, FrameworkFragment] = {
    Framework.REACT_VITE: FrameworkFragment(
        name="React (Vite)",
        is_vite=True,
        link_import="import { Link } from 'react-router-dom';",
        link_attr="to",
        src_root_from_pages="..",
        esm_config_ext="js",
        env_api_url="import.meta.env.VITE_API_URL",
        env_api_var="VITE_API_URL",
        tailwind_content=("./index.html", "./src/**/*.{js,ts,jsx,tsx}"),
        scripts={
            "dev": "vite",
            "build": "vite build",
            "start": "vite preview",
            "preview": "vite preview",
        },
    ),
    Framework.NEXTJS: FrameworkFragment(
        name="Next.js",
        is_vite=False,
        link_import="import Link from 'next/link';",
        link_attr="href",
        src_root_from_pages="@",
        esm_config_ext="mjs",
        env_api_url="process.env.NEXT_PUBLIC_API_URL",
        env_api_var="NEXT_PUBLIC_API_URL",
        tailwind_content=("./src/**/*.{js,ts,jsx,tsx,mdx}",),
        scripts={
            "dev": "next dev",
            "build": "next build",
            "start": "next start",
        },
    ),
}


# ---------------------------------------------------------------------------
# Language
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LanguageFragment:
    """Type-annotation switch and file extensions."""

    annotate: bool
    component_ext: str
    module_ext: str

    def ts(self, annotation: str) -> str:
        """Return *annotation* for TypeScript output, nothing for JavaScript."""
        return annotation if self.annotate else ""


LANGUAGE_FRAGMENTS: dict[Language, LanguageFragment] = {
    Language.JAVASCRIPT: LanguageFragment(annotate=False, component_ext="jsx", module_ext="js"),
    Language.TYPESCRIPT: LanguageFragment(annotate=True, component_ext="tsx", module_ext="ts"),
}


# ---------------------------------------------------------------------------
# Styling
# ---------------------------------------------------------------------------

# Element roles shared by every layout/page template.
ROLES: tuple[str, ...] = (
    "layout",
    "main",
    "navbar",
    "navbar_inner",
    "brand",
    "nav_links",
    "nav_link",
    "nav_actions",
    "menu_button",
    "mobile_menu",
    "mobile_link",
    "theme_toggle",
    "footer",
    "page",
    "page_title",
    "page_text",
    "page_actions",
)


@dataclass(frozen=True)
class StylingFragment:
    """How a styling option turns element roles into JSX attributes.

    Class-driven fragments (Tailwind, Shadcn, VanillaCss) map each role to a
    class string.  The inline fragment (no styling) maps each role to a JS
    style object literal, collected in a ``styles`` constant.
    """

    mode: str  # "class" or "inline"
    stylesheet_template: str
    roles: Mapping[str, str]
    button_base: str
    button_variants: Mapping[str, str]
    button_sizes: Mapping[str, str]
    uses_tailwind: bool = False

    @property
    def inline(self) -> bool:
        return self.mode == "inline"

    def attr(self, role: str) -> str:
        """JSX attribute applying *role*'s styling."""
        if self.inline:
            return f"style={{styles.{role}}}"
        return f'className="{self.roles[role]}"'

    def value(self, text: str) -> str:
        """Literal for a button table entry (quoted class or style object)."""
        if self.inline:
            return text
        return f"'{text}'"

    @property
    def button_value_type(self) -> str:
        return "React.CSSProperties" if self.inline else "string"

    def styles_block(self, *roles: str, annotate: bool = False) -> str:
        """``const styles = {...}`` declaration for inline mode, else empty.

        The declaration ends with a blank line so templates can place it
        directly in front of the component definition.
        """
        if not self.inline:
            return ""
        annotation = ": Record<string, React.CSSProperties>" if annotate else ""
        lines = [f"const styles{annotation} = {{"]
        for role in roles:
            lines.append(f"  {role}: {self.roles[role]},")
        lines.append("};")
        return "\n".join(lines) + "\n\n"


_TAILWIND_ROLES: dict[str, str] = {
    "layout": "flex min-h-screen flex-col bg-white text-gray-900 dark:bg-gray-950 dark:text-gray-100",
    "main": "flex-1",
    "navbar": "border-b border-gray-200 bg-white dark:border-gray-800 dark:bg-gray-900",
    "navbar_inner": "mx-auto flex h-16 max-w-6xl items-center justify-between px-4",
    "brand": "text-lg font-semibold text-gray-900 dark:text-white",
    "nav_links": "hidden items-center gap-6 md:flex",
    "nav_link": "text-sm font-medium text-gray-600 hover:text-gray-900 dark:text-gray-300 dark:hover:text-white",
    "nav_actions": "flex items-center gap-2",
    "menu_button": "inline-flex items-center justify-center rounded-md p-2 text-gray-700 hover:bg-gray-100 md:hidden dark:text-gray-200 dark:hover:bg-gray-800",
    "mobile_menu": "border-t border-gray-200 px-4 py-3 md:hidden dark:border-gray-800",
    "mobile_link": "block py-2 text-sm font-medium text-gray-700 dark:text-gray-200",
    "theme_toggle": "inline-flex items-center justify-center rounded-md p-2 text-gray-700 hover:bg-gray-100 dark:text-gray-200 dark:hover:bg-gray-800",
    "footer": "border-t border-gray-200 py-6 text-center text-sm text-gray-500 dark:border-gray-800 dark:text-gray-400",
    "page": "mx-auto max-w-6xl px-4 py-12",
    "page_title": "text-3xl font-bold tracking-tight",
    "page_text": "mt-4 text-gray-600 dark:text-gray-300",
    "page_actions": "mt-8 flex gap-3",
}

_SHADCN_ROLES: dict[str, str] = {
    "layout": "flex min-h-screen flex-col bg-background text-foreground",
    "main": "flex-1",
    "navbar": "border-b bg-background",
    "navbar_inner": "container mx-auto flex h-16 items-center justify-between px-4",
    "brand": "text-lg font-semibold",
    "nav_links": "hidden items-center gap-6 md:flex",
    "nav_link": "text-sm font-medium text-muted-foreground transition-colors hover:text-foreground",
    "nav_actions": "flex items-center gap-2",
    "menu_button": "inline-flex items-center justify-center rounded-md p-2 hover:bg-accent hover:text-accent-foreground md:hidden",
    "mobile_menu": "border-t px-4 py-3 md:hidden",
    "mobile_link": "block py-2 text-sm font-medium text-muted-foreground hover:text-foreground",
    "theme_toggle": "inline-flex items-center justify-center rounded-md p-2 hover:bg-accent hover:text-accent-foreground",
    "footer": "border-t py-6 text-center text-sm text-muted-foreground",
    "page": "container mx-auto px-4 py-12",
    "page_title": "text-3xl font-bold tracking-tight",
    "page_text": "mt-4 text-muted-foreground",
    "page_actions": "mt-8 flex gap-3",
}

_VANILLA_ROLES: dict[str, str] = {
    "layout": "layout",
    "main": "layout__main",
    "navbar": "navbar",
    "navbar_inner": "navbar__inner",
    "brand": "navbar__brand",
    "nav_links": "navbar__links",
    "nav_link": "navbar__link",
    "nav_actions": "navbar__actions",
    "menu_button": "navbar__toggle",
    "mobile_menu": "navbar__mobile",
    "mobile_link": "navbar__mobile-link",
    "theme_toggle": "navbar__toggle",
    "footer": "footer",
    "page": "page",
    "page_title": "page__title",
    "page_text": "page__text",
    "page_actions": "page__actions",
}

_INLINE_ROLES: dict[str, str] = {
    "layout": "{ display: 'flex', flexDirection: 'column', minHeight: '100vh' }",
    "main": "{ flex: 1 }",
    "navbar": "{ borderBottom: '1px solid #e5e7eb', backgroundColor: '#ffffff' }",
    "navbar_inner": "{ display: 'flex', alignItems: 'center', justifyContent: 'space-between', maxWidth: '72rem', height: '4rem', margin: '0 auto', padding: '0 1rem' }",
    "brand": "{ fontSize: '1.125rem', fontWeight: 600, color: '#111827', textDecoration: 'none' }",
    "nav_links": "{ display: 'flex', alignItems: 'center', gap: '1.5rem' }",
    "nav_link": "{ fontSize: '0.875rem', fontWeight: 500, color: '#4b5563', textDecoration: 'none' }",
    "nav_actions": "{ display: 'flex', alignItems: 'center', gap: '0.5rem' }",
    "menu_button": "{ background: 'none', border: 'none', padding: '0.5rem', fontSize: '1.25rem', cursor: 'pointer' }",
    "mobile_menu": "{ borderTop: '1px solid #e5e7eb', padding: '0.75rem 1rem' }",
    "mobile_link": "{ display: 'block', padding: '0.5rem 0', color: '#374151', textDecoration: 'none' }",
    "theme_toggle": "{ background: 'none', border: 'none', padding: '0.5rem', cursor: 'pointer' }",
    "footer": "{ borderTop: '1px solid #e5e7eb', padding: '1.5rem 0', textAlign: 'center', fontSize: '0.875rem', color: '#6b7280' }",
    "page": "{ maxWidth: '72rem', margin: '0 auto', padding: '3rem 1rem' }",
    "page_title": "{ fontSize: '1.875rem', fontWeight: 700, margin: 0 }",
    "page_text": "{ marginTop: '1rem', color: '#4b5563' }",
    "page_actions": "{ display: 'flex', gap: '0.75rem', marginTop: '2rem' }",
}


STYLING_FRAGMENTS: dict[Styling, StylingFragment] = {
    Styling.TAILWIND: StylingFragment(
        mode="class",
        stylesheet_template="styles/tailwind.css.j2",
        roles=_TAILWIND_ROLES,
        button_base=(
            "inline-flex items-center justify-center rounded-md font-medium transition-colors "
            "focus-visible:outline-none focus-visible:ring-2 focus-visible:ring-blue-500 "
            "focus-visible:ring-offset-2 disabled:pointer-events-none disabled:opacity-50"
        ),
        button_variants={
            "primary": "bg-blue-600 text-white hover:bg-blue-700",
            "secondary": "bg-gray-600 text-white hover:bg-gray-700",
            "outline": "border border-gray-300 bg-transparent text-gray-900 hover:bg-gray-100 dark:border-gray-700 dark:text-gray-100 dark:hover:bg-gray-800",
        },
        button_sizes={
            "sm": "h-9 px-3 text-sm",
            "md": "h-10 px-4 py-2",
            "lg": "h-11 px-8 text-lg",
        },
        uses_tailwind=True,
    ),
    Styling.SHADCN: StylingFragment(
        mode="class",
        stylesheet_template="styles/shadcn.css.j2",
        roles=_SHADCN_ROLES,
        button_base=(
            "inline-flex items-center justify-center rounded-md font-medium transition-colors "
            "focus-visible:outline-none focus-visible:ring-2 focus-visible:ring-ring "
            "focus-visible:ring-offset-2 disabled:pointer-events-none disabled:opacity-50"
        ),
        button_variants={
            "primary": "bg-primary text-primary-foreground hover:bg-primary/90",
            "secondary": "bg-secondary text-secondary-foreground hover:bg-secondary/80",
            "outline": "border border-input bg-background hover:bg-accent hover:text-accent-foreground",
        },
        button_sizes={
            "sm": "h-9 px-3 text-sm",
            "md": "h-10 px-4 py-2",
            "lg": "h-11 px-8 text-lg",
        },
        uses_tailwind=True,
    ),
    Styling.VANILLA_CSS: StylingFragment(
        mode="class",
        stylesheet_template="styles/vanilla.css.j2",
        roles=_VANILLA_ROLES,
        button_base="btn",
        button_variants={
            "primary": "btn--primary",
            "secondary": "btn--secondary",
            "outline": "btn--outline",
        },
        button_sizes={
            "sm": "btn--sm",
            "md": "btn--md",
            "lg": "btn--lg",
        },
    ),
    Styling.NONE: StylingFragment(
        mode="inline",
        stylesheet_template="styles/plain.css.j2",
        roles=_INLINE_ROLES,
        button_base=(
            "{ display: 'inline-flex', alignItems: 'center', justifyContent: 'center', "
            "borderRadius: '6px', fontWeight: 500 }"
        ),
        button_variants={
            "primary": "{ backgroundColor: '#3b82f6', color: '#ffffff', border: 'none' }",
            "secondary": "{ backgroundColor: '#6b7280', color: '#ffffff', border: 'none' }",
            "outline": "{ backgroundColor: 'transparent', color: '#3b82f6', border: '1px solid #3b82f6' }",
        },
        button_sizes={
            "sm": "{ padding: '8px 16px', fontSize: '14px' }",
            "md": "{ padding: '10px 20px', fontSize: '16px' }",
            "lg": "{ padding: '12px 24px', fontSize: '18px' }",
        },
    ),
}


# ---------------------------------------------------------------------------
# Icons
# ---------------------------------------------------------------------------

ICON_ROLES: tuple[str, ...] = ("menu", "close", "sun", "moon")


@dataclass(frozen=True)
class IconFragment:
    """Import statement and JSX glyph expression per icon role.

    ``names`` maps each role to the imported symbol (or the Iconify icon id).
    With no icon library the glyphs are plain text and nothing is imported.
    """

    package: str | None
    names: Mapping[str, str]
    style: str  # "named", "iconify" or "text"

    def import_for(self, *roles: str) -> str:
        """Import statement covering the glyphs for *roles*."""
        if self.style == "text":
            return ""
        if self.style == "iconify":
            return f"import {{ Icon }} from '{self.package}';"
        symbols = ", ".join(self.names[role] for role in roles)
        return f"import {{ {symbols} }} from '{self.package}';"

    def glyph(self, role: str) -> str:
        """JS expression rendering the glyph for *role*."""
        name = self.names[role]
        if self.style == "text":
            return f"'{name}'"
        if self.style == "iconify":
            return f'<Icon icon="{name}" width={{20}} height={{20}} aria-hidden="true" />'
        return f'<{name} size={{20}} aria-hidden="true" />'


ICON_FRAGMENTS: dict[Icons, IconFragment] = {
    Icons.LUCIDE: IconFragment(
        package="lucide-react",
        names={"menu": "Menu", "close": "X", "sun": "Sun", "moon": "Moon"},
        style="named",
    ),
    Icons.REACT_ICONS: IconFragment(
        package="react-icons/hi",
        names={"menu": "HiMenu", "close": "HiX", "sun": "HiSun", "moon": "HiMoon"},
        style="named",
    ),
    Icons.ICONIFY: IconFragment(
        package="@iconify/react",
        names={
            "menu": "mdi:menu",
            "close": "mdi:close",
            "sun": "mdi:weather-sunny",
            "moon": "mdi:weather-night",
        },
        style="iconify",
    ),
    Icons.NONE: IconFragment(
        package=None,
        names={"menu": "☰", "close": "✕", "sun": "☀", "moon": "☾"},
        style="text",
    ),
}


_require_total(FRAMEWORK_FRAGMENTS, Framework)
_require_total(LANGUAGE_FRAGMENTS, Language)
_require_total(STYLING_FRAGMENTS, Styling)
_require_total(ICON_FRAGMENTS, Icons)
for _styling, _fragment in STYLING_FRAGMENTS.items():
    if set(_fragment.roles) != set(ROLES):
        raise RuntimeError(f"Styling fragment '{_styling.value}' does not cover every role")
