"""Named HTML templates and the Jinja2 renderer that binds them."""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import Any

from jinja2 import Environment, TemplateError

from vc_print.exceptions import ConfigUnavailableError, RenderError

logger = logging.getLogger(__name__)

PACKAGED_TEMPLATES = "templates"


class TemplateStore:
    """Read-only lookup of HTML template sources by logical name.

    Templates are read from ``template_dir`` when it is set, otherwise from
    the templates shipped inside the package.
    """

    def __init__(self, template_dir: Path | str | None = None) -> None:
        self._template_dir = Path(template_dir) if template_dir else None

    def get(self, name: str) -> str:
        try:
            if self._template_dir is not None:
                return (self._template_dir / name).read_text(encoding="utf-8")
            return resources.files("vc_print").joinpath(PACKAGED_TEMPLATES).joinpath(name).read_text(encoding="utf-8")
        except (OSError, ValueError) as e:
            raise ConfigUnavailableError(f"Template {name!r} is not available: {e}") from e


def display_value(value: Any) -> str:
    """Render a credential subject value as display text.

    Multi-language values arrive as ``[{"language": ..., "value": ...}]``;
    the first entry is shown.
    """
    if value is None:
        return ""
    if isinstance(value, list):
        if not value:
            return ""
        return display_value(value[0])
    if isinstance(value, dict):
        if "value" in value:
            return display_value(value["value"])
        return ", ".join(display_value(item) for item in value.values())
    return str(value)


class TemplateRenderer:
    """Template merge engine, created once at start-up and shared read-only."""

    def __init__(self, environment: Environment | None = None) -> None:
        self._environment = environment or Environment(
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._environment.filters.setdefault("display_value", display_value)

    def render(self, source: str, variables: dict[str, Any], name: str = "Credential Template") -> str:
        """Bind ``variables`` into the template ``source`` and return the HTML."""
        try:
            return self._environment.from_string(source).render(variables)
        except TemplateError as e:
            logger.error("Binding %s failed: %s", name, e)
            raise RenderError(e) from e
