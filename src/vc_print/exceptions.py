"""
Custom exceptions for the credential document pipeline.
"""

from http import HTTPStatus


class VcPrintError(Exception):
    """Base exception class for credential document generation."""

    def __init__(self, message, status_code=None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code if status_code is not None else HTTPStatus.INTERNAL_SERVER_ERROR


class ConfigUnavailableError(VcPrintError):
    """Raised when the issuer or template configuration cannot be loaded."""

    def __init__(self, message="Issuer configuration is not available.") -> None:
        super().__init__(message, HTTPStatus.SERVICE_UNAVAILABLE)


class UnknownIssuerError(VcPrintError):
    """Raised when the requested issuer is not present in the configuration."""

    def __init__(self, issuer_id) -> None:
        super().__init__(f"Unknown issuer: {issuer_id}", HTTPStatus.NOT_FOUND)
        self.issuer_id = issuer_id


class IssuerExchangeUnavailableError(VcPrintError):
    """Raised when an issuer endpoint returns no usable response."""

    def __init__(self, message="Issuer API is not accessible.") -> None:
        super().__init__(message, HTTPStatus.BAD_GATEWAY)


class KeyMaterialUnavailableError(VcPrintError):
    """Raised when the signing key cannot be loaded from the key store."""

    def __init__(self, message) -> None:
        super().__init__(message, HTTPStatus.INTERNAL_SERVER_ERROR)


class SigningFailureError(VcPrintError):
    """Raised when the proof JWT cannot be constructed."""

    def __init__(self, reason) -> None:
        super().__init__(f"Proof signing failed: {reason}", HTTPStatus.INTERNAL_SERVER_ERROR)


class CodeGenerationError(VcPrintError):
    """Raised when the QR code cannot be produced.

    The pipeline recovers from this one locally; see ``vc_print.encoding.qr``.
    """

    def __init__(self, reason) -> None:
        super().__init__(f"QR code generation failed: {reason}", HTTPStatus.INTERNAL_SERVER_ERROR)


class RenderError(VcPrintError):
    """Raised when template binding or PDF conversion fails."""

    def __init__(self, reason) -> None:
        super().__init__(f"Credential document rendering failed: {reason}", HTTPStatus.INTERNAL_SERVER_ERROR)
