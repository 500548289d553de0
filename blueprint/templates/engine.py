"""Jinja2 template engine for the built-in catalog.

Provides the TemplateEngine class which loads Jinja2 templates from the
``blueprint/templates/files/`` directory and renders them with a context
dictionary derived from a :class:`~blueprint.config.BlueprintConfig`.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from blueprint.config import BlueprintConfig


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "files"


# ---------------------------------------------------------------------------
# TemplateEngine
# ---------------------------------------------------------------------------


class TemplateEngine:
    """Renders the ``.j2`` files of the template catalog.

    Undefined variables raise instead of rendering as empty strings, so a
    template that references a missing key fails loudly during rendering.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self.env.filters["pascal_case"] = _pascal_case_filter

    # -- Rendering ---------------------------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"common/pubspec.yaml.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)


def build_context(config: BlueprintConfig) -> dict[str, Any]:
    """Build the Jinja2 variables for *config*.

    Only configuration values end up here; the output directory is never
    exposed to templates.
    """
    return {
        "app_name": config.app_name,
        "platforms": [p.value for p in config.platforms],
        "state_management": config.state_management.value,
        "ci_provider": config.ci_provider.value,
        "features": config.features(),
        "include_theme": config.include_theme,
        "include_localization": config.include_localization,
        "include_env": config.include_env,
        "include_api": config.include_api,
        "include_tests": config.include_tests,
        "include_hive": config.include_hive,
    }


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------


def _pascal_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``SomeThing``."""
    parts = re.split(r"[-_\s]+", value)
    return "".join(word.capitalize() for word in parts if word)
