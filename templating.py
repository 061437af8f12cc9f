"""Jinja2 rendering for the intake form and notification bodies."""

import logging
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"


class TemplateRenderer:
    def __init__(self, template_dir: Path = TEMPLATE_DIR):
        self._template_dir = template_dir
        self._env: Optional[Environment] = None

    def _get_env(self) -> Environment:
        """Lazy load the Jinja2 environment."""
        if self._env is None:
            if not self._template_dir.exists():
                logger.warning(f"Template directory not found: {self._template_dir}")
            self._env = Environment(
                loader=FileSystemLoader(str(self._template_dir)),
                autoescape=select_autoescape(["html", "xml"]),
                undefined=StrictUndefined,
                keep_trailing_newline=True,
            )
        return self._env

    def render(self, template_name: str, **context) -> str:
        """Render a template; jinja2 errors propagate to the caller."""
        return self._get_env().get_template(template_name).render(**context)


template_renderer = TemplateRenderer()
