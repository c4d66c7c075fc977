"""Proof-of-possession JWTs and credential requests for OIDC4VCI issuance."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from jwt.algorithms import ECAlgorithm, RSAAlgorithm

from vc_print.exceptions import SigningFailureError
from vc_print.keystore import KeyMaterial, PKCS12KeyStore
from vc_print.models import (
    CredentialRequest,
    CredentialRequestDefinition,
    CredentialRequestProof,
    CredentialTypeDescriptor,
    IssuerProfile,
)

logger = logging.getLogger(__name__)

PROOF_JWT_TYPE = "openid4vci-proof+jwt"

ProofTypePolicy = Callable[[Sequence[str]], str]


def select_first_proof_type(proof_types_supported: Sequence[str]) -> str:
    """Use the first proof type the issuer lists. No negotiation."""
    if not proof_types_supported:
        raise SigningFailureError("credential type declares no supported proof types")
    return proof_types_supported[0]


def _public_jwk(key_material: KeyMaterial) -> tuple[str, dict[str, Any]]:
    public_key = key_material.public_key
    if isinstance(public_key, rsa.RSAPublicKey):
        return "RS256", json.loads(RSAAlgorithm.to_jwk(public_key))
    if isinstance(public_key, ec.EllipticCurvePublicKey):
        return "ES256", json.loads(ECAlgorithm.to_jwk(public_key))
    raise SigningFailureError(f"unsupported public key type {type(public_key).__name__}")


def _access_token_nonce(access_token: str) -> str | None:
    """Return the ``c_nonce`` claim of a JWT access token, if it has one."""
    try:
        claims = jwt.decode(access_token, options={"verify_signature": False})
    except jwt.PyJWTError:
        logger.debug("Access token is not a JWT, proof will carry no nonce")
        return None
    nonce = claims.get("c_nonce")
    return str(nonce) if nonce is not None else None


@dataclass(slots=True)
class ProofConfig:
    """Runtime configuration for proof signing."""

    lifetime: timedelta = timedelta(seconds=18000)


class ProofBuilder:
    """Build signed credential requests using keys from the PKCS#12 key store."""

    def __init__(
        self,
        key_store: PKCS12KeyStore,
        config: ProofConfig | None = None,
        proof_type_policy: ProofTypePolicy = select_first_proof_type,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._key_store = key_store
        self._config = config or ProofConfig()
        self._proof_type_policy = proof_type_policy
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def sign_proof(self, issuer: IssuerProfile, access_token: str) -> str:
        """
        Sign a proof JWT for the issuer audience and client id.

        The proof is tied to the access token only through its ``nonce``
        claim, which is present only when the access token is a JWT carrying
        ``c_nonce``. For an opaque access token the claims do not depend on
        the token at all.

        Raises:
            KeyMaterialUnavailableError: the signing key cannot be loaded
            SigningFailureError: the JWT cannot be produced
        """
        key_material = self._key_store.load(issuer.client_alias)
        algorithm, public_jwk = _public_jwk(key_material)

        now = self._clock()
        payload: dict[str, Any] = {
            "iss": issuer.client_id,
            "aud": issuer.credential_audience,
            "iat": int(now.timestamp()),
            "exp": int((now + self._config.lifetime).timestamp()),
        }
        nonce = _access_token_nonce(access_token)
        if nonce is not None:
            payload["nonce"] = nonce

        headers = {"typ": PROOF_JWT_TYPE, "jwk": public_jwk}
        try:
            return jwt.encode(payload, key_material.private_key, algorithm=algorithm, headers=headers)
        except (jwt.PyJWTError, ValueError, TypeError) as e:
            raise SigningFailureError(e) from e

    def build(
        self,
        issuer: IssuerProfile,
        credential_type: CredentialTypeDescriptor,
        access_token: str,
    ) -> CredentialRequest:
        proof_type = self._proof_type_policy(credential_type.proof_types_supported)
        proof_jwt = self.sign_proof(issuer, access_token)
        return CredentialRequest(
            format=credential_type.format,
            proof=CredentialRequestProof(proof_type=proof_type, jwt=proof_jwt),
            credential_definition=CredentialRequestDefinition(
                type=credential_type.credential_definition.type,
            ),
        )


__all__ = [
    "PROOF_JWT_TYPE",
    "ProofBuilder",
    "ProofConfig",
    "select_first_proof_type",
]
