"""Render verifiable credentials as PDF documents with an embedded QR code."""

from .exceptions import (
    CodeGenerationError,
    ConfigUnavailableError,
    IssuerExchangeUnavailableError,
    KeyMaterialUnavailableError,
    RenderError,
    SigningFailureError,
    UnknownIssuerError,
    VcPrintError,
)
from .issuers import IssuerRegistry
from .service import CredentialDocumentService, build_display_fields, create_service

__all__ = [
    "CodeGenerationError",
    "ConfigUnavailableError",
    "CredentialDocumentService",
    "IssuerExchangeUnavailableError",
    "IssuerRegistry",
    "KeyMaterialUnavailableError",
    "RenderError",
    "SigningFailureError",
    "UnknownIssuerError",
    "VcPrintError",
    "build_display_fields",
    "create_service",
]
