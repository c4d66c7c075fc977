"""Verifiable credential issuance and PDF generation."""

from __future__ import annotations

import io
import logging
from typing import Any

from opentelemetry import trace

from vc_print.config import VcPrintSettings, get_settings
from vc_print.encoding.qr import QRCodeResult, generate_qr_code
from vc_print.exceptions import IssuerExchangeUnavailableError
from vc_print.http_client import RestApiClient
from vc_print.keystore import PKCS12KeyStore
from vc_print.models import CredentialTypeDescriptor, IssuerProfile, VerifiableCredential
from vc_print.proof import ProofBuilder
from vc_print.rendering.document import DocumentComposer
from vc_print.rendering.templates import TemplateRenderer, TemplateStore

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def build_display_fields(
    credential_type: CredentialTypeDescriptor,
    credential: VerifiableCredential,
) -> dict[str, Any]:
    """Map display label -> credential value for the declared subject properties.

    Only properties the credential definition declares are shown, in its order.
    A label already taken by an earlier property is qualified with the
    property key, so every declared property keeps its own entry.
    """
    properties = credential.credential_subject
    fields: dict[str, Any] = {}
    for key, label in credential_type.credential_definition.display_labels().items():
        if label in fields:
            qualified = f"{label} ({key})"
            suffix = 2
            while qualified in fields:
                qualified = f"{label} ({key} {suffix})"
                suffix += 1
            logger.warning(
                "Display label %r is used by more than one property, showing %r as %r", label, key, qualified
            )
            label = qualified
        fields[label] = properties.get(key)
    return fields


class CredentialDocumentService:
    """Request a credential from its issuer and render it as a PDF with a QR code."""

    def __init__(
        self,
        proof_builder: ProofBuilder,
        http_client: RestApiClient,
        composer: DocumentComposer,
        qr_image_size: int = 200,
    ) -> None:
        self._proof_builder = proof_builder
        self._http_client = http_client
        self._composer = composer
        self._qr_image_size = qr_image_size

    def request_credential(
        self,
        issuer: IssuerProfile,
        credential_type: CredentialTypeDescriptor,
        access_token: str,
        credential_endpoint: str,
    ) -> VerifiableCredential:
        credential_request = self._proof_builder.build(issuer, credential_type, access_token)
        logger.debug("VC credential request for %s: format=%s", issuer.credential_issuer, credential_request.format)

        response = self._http_client.post_api(
            credential_endpoint, credential_request.to_dict(), bearer_token=access_token
        )
        if response is None:
            raise IssuerExchangeUnavailableError("VC credential issue API not accessible")
        try:
            return VerifiableCredential.from_response(response)
        except ValueError as e:
            raise IssuerExchangeUnavailableError(f"VC credential issue API returned no credential: {e}") from e

    def generate_qr_code(self, credential: VerifiableCredential) -> QRCodeResult:
        result = generate_qr_code(credential, image_size=self._qr_image_size)
        if result.is_degraded:
            logger.warning("Rendering credential document without QR code: %s", result.reason)
        return result

    def generate_pdf_for_verifiable_credential(
        self,
        access_token: str,
        issuer: IssuerProfile,
        credential_type: CredentialTypeDescriptor,
        credential_endpoint: str,
    ) -> io.BytesIO:
        """
        Issue a credential and render it as a PDF document.

        Raises:
            KeyMaterialUnavailableError: the proof signing key cannot be loaded
            SigningFailureError: the proof JWT cannot be produced
            IssuerExchangeUnavailableError: the issuer returned no credential
            RenderError: the document cannot be rendered
        """
        with tracer.start_as_current_span("generate_pdf_for_verifiable_credential") as span:
            span.set_attribute("vc.issuer", issuer.credential_issuer)
            span.set_attribute("vc.credential_type", credential_type.id)

            display = credential_type.primary_display
            credential = self.request_credential(issuer, credential_type, access_token, credential_endpoint)
            qr_code = self.generate_qr_code(credential)
            span.set_attribute("vc.qr_degraded", qr_code.is_degraded)

            document = self._composer.compose(
                build_display_fields(credential_type, credential),
                text_color=display.text_color,
                background_color=display.background_color,
                title_name=display.name,
                logo_url=issuer.logo_url,
                base64_qr_code=qr_code.base64_png,
            )
            logger.info("Rendered credential document for %s (%d bytes)", issuer.credential_issuer, len(document))
            return io.BytesIO(document)


def create_service(
    settings: VcPrintSettings | None = None,
    http_client: RestApiClient | None = None,
) -> CredentialDocumentService:
    """Wire the pipeline from settings. Call once at start-up."""
    settings = settings or get_settings()
    http_client = http_client or RestApiClient(timeout=settings.http_timeout_seconds)
    key_store = PKCS12KeyStore(settings.keystore_path, settings.keystore_filename, settings.keystore_password)
    composer = DocumentComposer(
        TemplateRenderer(),
        TemplateStore(settings.template_dir),
        template_name=settings.credential_template,
    )
    return CredentialDocumentService(
        ProofBuilder(key_store),
        http_client,
        composer,
        qr_image_size=settings.qr_image_size,
    )
