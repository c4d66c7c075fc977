"""REST facade for issuer discovery and credential PDF download."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

from fastapi import FastAPI, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse, StreamingResponse

from vc_print.config import VcPrintSettings, get_settings
from vc_print.exceptions import VcPrintError
from vc_print.http_client import RestApiClient
from vc_print.issuers import IssuerRegistry
from vc_print.logging_config import setup_logging
from vc_print.service import CredentialDocumentService, create_service

logger = logging.getLogger(__name__)


def get_bearer_token(authorization: str | None) -> str:
    """Extract bearer token from Authorization header."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return authorization[7:]


def create_app(service: CredentialDocumentService, registry: IssuerRegistry) -> FastAPI:
    app = FastAPI(
        title="VC Print",
        description="Verifiable credential PDF download",
        version="0.1.0",
    )

    @app.exception_handler(VcPrintError)
    async def handle_vc_print_error(request: Request, exc: VcPrintError) -> JSONResponse:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=int(exc.status_code),
            content={"errorCode": type(exc).__name__, "errorMessage": exc.message},
        )

    @app.get("/issuers")
    def list_issuers(search: str | None = None) -> dict[str, Any]:
        return {"issuers": [asdict(issuer) for issuer in registry.get_all_issuers(search)]}

    @app.get("/issuers/{issuer_id}")
    def get_issuer(issuer_id: str) -> dict[str, Any]:
        return asdict(registry.get_issuer_config(issuer_id))

    @app.get("/issuers/{issuer_id}/credentialTypes")
    def list_credential_types(issuer_id: str, search: str | None = None) -> dict[str, Any]:
        return asdict(registry.get_credentials_supported(issuer_id, search))

    @app.get("/issuers/{issuer_id}/credentials/{credential_type_id}/download")
    def download_credential(
        issuer_id: str,
        credential_type_id: str,
        authorization: str | None = Header(None),
    ) -> StreamingResponse:
        access_token = get_bearer_token(authorization)
        issuer = registry.get_issuer_config(issuer_id)
        supported = registry.get_credentials_supported(issuer_id)
        credential_type = next(
            (item for item in supported.supported_credentials if item.id == credential_type_id),
            None,
        )
        if credential_type is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Credential type {credential_type_id} not offered by {issuer_id}",
            )
        document = service.generate_pdf_for_verifiable_credential(
            access_token, issuer, credential_type, issuer.credential_endpoint
        )
        return StreamingResponse(
            document,
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{credential_type_id}.pdf"'},
        )

    @app.get("/health")
    def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    return app


def build_app(settings: VcPrintSettings | None = None) -> FastAPI:
    """Application factory used by the ASGI server."""
    settings = settings or get_settings()
    setup_logging(settings.service_name)
    http_client = RestApiClient(timeout=settings.http_timeout_seconds)
    registry = IssuerRegistry.from_file(settings.issuers_config, http_client)
    return create_app(create_service(settings, http_client), registry)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(build_app(), host="0.0.0.0", port=8000)
