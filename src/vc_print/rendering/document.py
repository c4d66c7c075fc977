"""
Credential document composition.

Display fields are split into a header group (the first two) and a body
group (the rest), bound into the credential HTML template together with
styling, the issuer logo and the QR code, and converted to PDF.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import Any

from xhtml2pdf import pisa
from xhtml2pdf.default import DEFAULT_CSS

from vc_print.exceptions import RenderError
from vc_print.rendering.templates import TemplateRenderer, TemplateStore

logger = logging.getLogger(__name__)

HEADER_FIELD_COUNT = 2
ROW_SPACING = 40


def partition_display_fields(
    display_fields: dict[str, Any],
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Return ``(header, body)``: the first two entries, then everything else."""
    header: dict[str, Any] = {}
    body: dict[str, Any] = {}
    for label, value in display_fields.items():
        if len(header) < HEADER_FIELD_COUNT:
            header[label] = value
        else:
            body[label] = value
    return header, body


def row_properties_margin(row_count: int) -> int:
    """Vertical offset the template uses to centre the body rows.

    Zero rows gives -40; the template is expected to cope with that.
    """
    if row_count % 2 == 0:
        return (row_count // 2 - 1) * ROW_SPACING
    return (row_count // 2) * ROW_SPACING


@dataclass(frozen=True, slots=True)
class FontProvider:
    """Default fonts for PDF conversion.

    The built-in Helvetica family ships regular, bold, italic and bold-italic
    faces. ``faces`` registers TrueType files instead, keyed by
    ``(font-weight, font-style)``.
    """

    family: str = "Helvetica"
    faces: dict[tuple[str, str], str] = field(default_factory=dict)

    def css(self) -> str:
        rules = [
            f"@font-face {{ font-family: {self.family}; src: url('{path}'); "
            f"font-weight: {weight}; font-style: {style}; }}"
            for (weight, style), path in self.faces.items()
        ]
        rules.append(f"html, body, table, td, th, p, div, span {{ font-family: {self.family}; }}")
        return "\n".join(rules)


class DocumentComposer:
    """Bind credential fields into the named template and convert it to PDF."""

    def __init__(
        self,
        renderer: TemplateRenderer,
        template_store: TemplateStore,
        template_name: str = "credential.html",
        font_provider: FontProvider | None = None,
    ) -> None:
        self._renderer = renderer
        self._template_store = template_store
        self._template_name = template_name
        self._font_provider = font_provider or FontProvider()

    def build_variables(
        self,
        display_fields: dict[str, Any],
        text_color: str,
        background_color: str,
        title_name: str,
        logo_url: str,
        base64_qr_code: str,
    ) -> dict[str, Any]:
        header, body = partition_display_fields(display_fields)
        return {
            "logoUrl": logo_url,
            "headerProperties": header,
            "rowProperties": body,
            "keyFontColor": text_color,
            "bgColor": background_color,
            "rowPropertiesMargin": row_properties_margin(len(body)),
            "titleName": title_name,
            "base64QRCode": base64_qr_code,
        }

    def render_html(self, variables: dict[str, Any]) -> str:
        source = self._template_store.get(self._template_name)
        return self._renderer.render(source, variables, name=self._template_name)

    def convert_to_pdf(self, html: str) -> bytes:
        output = io.BytesIO()
        try:
            status = pisa.CreatePDF(
                html,
                dest=output,
                encoding="utf-8",
                default_css=DEFAULT_CSS + self._font_provider.css(),
            )
        except Exception as e:
            raise RenderError(e) from e
        if status.err:
            raise RenderError(f"{status.err} error(s) converting HTML to PDF")
        return output.getvalue()

    def compose(
        self,
        display_fields: dict[str, Any],
        text_color: str,
        background_color: str,
        title_name: str,
        logo_url: str,
        base64_qr_code: str,
    ) -> bytes:
        """
        Render the credential document.

        Raises:
            ConfigUnavailableError: the template cannot be found
            RenderError: binding or PDF conversion failed
        """
        variables = self.build_variables(
            display_fields, text_color, background_color, title_name, logo_url, base64_qr_code
        )
        html = self.render_html(variables)
        logger.debug("Converting %d byte credential HTML to PDF", len(html))
        return self.convert_to_pdf(html)
