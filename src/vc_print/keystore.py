"""Read-only access to the PKCS#12 key store holding proof signing keys."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.serialization import pkcs12

from vc_print.exceptions import KeyMaterialUnavailableError

logger = logging.getLogger(__name__)

PrivateKey = rsa.RSAPrivateKey | ec.EllipticCurvePrivateKey
PublicKey = rsa.RSAPublicKey | ec.EllipticCurvePublicKey


@dataclass(frozen=True, slots=True)
class KeyMaterial:
    """Signing key pair and certificate found under one alias."""

    alias: str
    private_key: PrivateKey
    certificate: x509.Certificate | None

    @property
    def public_key(self) -> PublicKey:
        if self.certificate is not None:
            return self.certificate.public_key()
        return self.private_key.public_key()


class PKCS12KeyStore:
    """Loads key material from ``<path>/<file_name>`` protected by ``password``."""

    def __init__(self, path: Path | str, file_name: str, password: str) -> None:
        self._file = Path(path) / file_name
        self._password = password.encode("utf-8") if password else None

    def load(self, alias: str) -> KeyMaterial:
        """
        Load the key stored under ``alias``.

        Raises:
            KeyMaterialUnavailableError: the file is missing or unreadable, the
                password is wrong, or the store holds no key for ``alias``.
        """
        try:
            data = self._file.read_bytes()
        except OSError as e:
            raise KeyMaterialUnavailableError(f"Key store {self._file} cannot be read: {e}") from e

        try:
            bundle = pkcs12.load_pkcs12(data, self._password)
        except ValueError as e:
            raise KeyMaterialUnavailableError(f"Key store {self._file} cannot be opened: {e}") from e

        if bundle.key is None:
            raise KeyMaterialUnavailableError(f"Key store {self._file} holds no private key")
        if not isinstance(bundle.key, (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey)):
            raise KeyMaterialUnavailableError(f"Unsupported key type {type(bundle.key).__name__}")

        certificate = None
        if bundle.cert is not None:
            friendly_name = bundle.cert.friendly_name
            if friendly_name is not None and friendly_name.decode("utf-8") != alias:
                raise KeyMaterialUnavailableError(f"No key with alias {alias!r} in {self._file}")
            certificate = bundle.cert.certificate

        logger.debug("Loaded signing key %s from %s", alias, self._file)
        return KeyMaterial(alias=alias, private_key=bundle.key, certificate=certificate)

    def get_public_key(self, alias: str) -> PublicKey:
        return self.load(alias).public_key
