"""Jinja2 email template renderer."""

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateError, TemplateNotFound, select_autoescape

from warden.adapter.error import EmailTemplateError
from warden.domain.service.email import TemplateRenderer

TEMPLATE_DIR = Path(__file__).parent / "templates"


class Jinja2TemplateRenderer(TemplateRenderer):
    """Renders HTML templates from a directory."""

    def __init__(self, template_dir: Path = TEMPLATE_DIR) -> None:
        self.environment = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        try:
            template = self.environment.get_template(template_name)
        except TemplateNotFound as e:
            raise EmailTemplateError(f"Email template not found: {template_name}") from e

        try:
            return template.render(**context)
        except TemplateError as e:
            raise EmailTemplateError(f"Email template {template_name} failed to render: {e}") from e
