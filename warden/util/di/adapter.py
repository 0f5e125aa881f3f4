"""Adapter DI providers (non-mockable)."""

from dishka import Scope, provide

from warden.adapter.email.template import Jinja2TemplateRenderer
from warden.domain.service import TemplateRenderer
from warden.util.di.base import ProviderBase


class ProdAdapterProvider(ProviderBase):
    """Adapters that need no external service."""

    scope = Scope.APP

    @provide
    def get_template_renderer(self) -> TemplateRenderer:
        """Provide the packaged Jinja2 email templates."""
        return Jinja2TemplateRenderer()
