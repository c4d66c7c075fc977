"""Issuer configuration lookup and credential type discovery."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path

from vc_print.exceptions import ConfigUnavailableError, IssuerExchangeUnavailableError, UnknownIssuerError
from vc_print.http_client import RestApiClient
from vc_print.models import CredentialTypeDescriptor, IssuerProfile, IssuerSupportedCredentials

logger = logging.getLogger(__name__)

ConfigLoader = Callable[[], str | None]


def file_config_loader(path: Path | str) -> ConfigLoader:
    """Loader reading the issuers configuration from a JSON file."""

    def load() -> str | None:
        try:
            return Path(path).read_text(encoding="utf-8")
        except OSError as e:
            logger.error("Issuers configuration %s cannot be read: %s", path, e)
            return None

    return load


def _matches(text: str, search: str) -> bool:
    return search.lower() in text.lower()


class IssuerRegistry:
    """Issuers known to this deployment and the credential types they offer."""

    def __init__(self, config_loader: ConfigLoader, http_client: RestApiClient) -> None:
        self._config_loader = config_loader
        self._http_client = http_client

    @classmethod
    def from_file(cls, path: Path | str, http_client: RestApiClient) -> IssuerRegistry:
        return cls(file_config_loader(path), http_client)

    def _load_issuers(self) -> list[IssuerProfile]:
        raw = self._config_loader()
        if raw is None:
            raise ConfigUnavailableError()
        try:
            data = json.loads(raw)
            return [IssuerProfile.from_dict(item) for item in data.get("issuers") or []]
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise ConfigUnavailableError(f"Issuers configuration is malformed: {e}") from e

    def get_all_issuers(self, search: str | None = None) -> list[IssuerProfile]:
        """Enabled issuers, narrowed to display titles containing ``search``."""
        issuers = [issuer for issuer in self._load_issuers() if issuer.is_enabled]
        if not search:
            return issuers
        return [
            issuer
            for issuer in issuers
            if any(_matches(display.title, search) for display in issuer.display)
        ]

    def get_all_issuers_with_all_fields(self) -> list[IssuerProfile]:
        return self._load_issuers()

    def get_issuer_config(self, issuer_id: str) -> IssuerProfile:
        for issuer in self._load_issuers():
            if issuer.credential_issuer == issuer_id:
                return issuer
        raise UnknownIssuerError(issuer_id)

    def get_credentials_supported(self, issuer_id: str, search: str | None = None) -> IssuerSupportedCredentials:
        """
        Fetch the credential types an issuer publishes at its well-known endpoint.

        An issuer missing from the configuration yields an empty result.

        Raises:
            IssuerExchangeUnavailableError: the well-known endpoint gave no response
        """
        issuer = next(
            (item for item in self._load_issuers() if item.credential_issuer == issuer_id),
            None,
        )
        if issuer is None:
            return IssuerSupportedCredentials()

        response = self._http_client.get_api(issuer.wellknown_endpoint)
        if response is None:
            raise IssuerExchangeUnavailableError()

        supported = [
            CredentialTypeDescriptor.from_dict(item)
            for item in response.get("credentials_supported") or []
        ]
        if search:
            supported = [
                credential
                for credential in supported
                if any(_matches(display.name, search) for display in credential.display)
            ]
        return IssuerSupportedCredentials(
            authorization_endpoint=issuer.authorization_endpoint,
            supported_credentials=tuple(supported),
        )
