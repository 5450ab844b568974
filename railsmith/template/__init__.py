"""The Rails application template and its file bodies.

Quick usage::

    from railsmith.config import Config
    from railsmith.template import RailsTemplate

    registry = RailsTemplate(Config(project_root=Path("blog")).to_context()).build_registry()
"""

from railsmith.template.rails import RailsTemplate, build_registry
from railsmith.template.templates import TemplateRenderer

__all__ = [
    "RailsTemplate",
    "TemplateRenderer",
    "build_registry",
]
