"""Credential document templates and PDF composition."""

from .document import (
    DocumentComposer,
    FontProvider,
    partition_display_fields,
    row_properties_margin,
)
from .templates import TemplateRenderer, TemplateStore, display_value

__all__ = [
    "DocumentComposer",
    "FontProvider",
    "TemplateRenderer",
    "TemplateStore",
    "display_value",
    "partition_display_fields",
    "row_properties_margin",
]
