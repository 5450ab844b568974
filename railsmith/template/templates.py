"""Jinja2 template rendering for generated file bodies.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``railsmith/template/templates/`` directory and renders them with
project-specific context data.  Rendering is pure: the output is written by
the sequencer's file actions, never by the renderer itself.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for project scaffolding.

    The renderer discovers ``.j2`` template files under a configurable
    template directory.  Templates are rendered with a context dictionary that
    typically contains project metadata (app name, Ruby version, database).
    Undefined variables raise instead of rendering as empty strings.
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

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"config/initializers/cors.rb.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)
