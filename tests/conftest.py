"""
Test configuration for the vc-print test suite.
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import httpx
import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import pkcs12
from cryptography.x509.oid import NameOID

from vc_print.http_client import RestApiClient
from vc_print.keystore import PKCS12KeyStore
from vc_print.models import CredentialTypeDescriptor, IssuerDisplay, IssuerProfile, Logo

KEY_ALIAS = "client-alias"
KEYSTORE_PASSWORD = "keystore-secret"
KEYSTORE_FILENAME = "oidckeystore.p12"

CREDENTIAL_ENDPOINT = "https://issuer.example/v1/credential"
WELLKNOWN_ENDPOINT = "https://issuer.example/.well-known/openid-credential-issuer"

ISSUERS_CONFIG = {
    "issuers": [
        {
            "credential_issuer": "Sunbird",
            "client_id": "client1",
            "client_alias": "client-alias",
            "credential_audience": "aud1",
            "display": [{"name": "Sunbird", "title": "Sunbird Insurance", "language": "en", "logo": {"url": ""}}],
            "authorization_endpoint": "https://issuer.example/authorize",
            "credential_endpoint": "https://issuer.example/v1/credential",
            ".well-known": WELLKNOWN_ENDPOINT,
            "enabled": "true",
        },
        {
            "credential_issuer": "Mosip",
            "client_id": "client2",
            "display": [{"name": "MOSIP", "title": "National ID", "language": "en"}],
            "enabled": "true",
        },
        {
            "credential_issuer": "Retired",
            "display": [{"name": "Retired", "title": "Retired Insurance"}],
            "enabled": "false",
        },
    ]
}


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "pdf: mark test as PDF related")


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        if "pdf" in item.name.lower():
            item.add_marker(pytest.mark.pdf)


def build_self_signed_certificate(private_key, common_name: str) -> x509.Certificate:
    subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.now(timezone.utc)
    return (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(subject)
        .public_key(private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=365))
        .sign(private_key, hashes.SHA256())
    )


def write_keystore(directory: Path, private_key, alias: str = KEY_ALIAS, password: str = KEYSTORE_PASSWORD) -> Path:
    certificate = build_self_signed_certificate(private_key, "vc-print test client")
    data = pkcs12.serialize_key_and_certificates(
        name=alias.encode("utf-8"),
        key=private_key,
        cert=certificate,
        cas=None,
        encryption_algorithm=serialization.BestAvailableEncryption(password.encode("utf-8")),
    )
    path = directory / KEYSTORE_FILENAME
    path.write_bytes(data)
    return path


@pytest.fixture(scope="session")
def rsa_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def keystore_dir(tmp_path, rsa_private_key) -> Path:
    write_keystore(tmp_path, rsa_private_key)
    return tmp_path


@pytest.fixture
def key_store(keystore_dir) -> PKCS12KeyStore:
    return PKCS12KeyStore(keystore_dir, KEYSTORE_FILENAME, KEYSTORE_PASSWORD)


@pytest.fixture
def issuer() -> IssuerProfile:
    return IssuerProfile(
        credential_issuer="Sunbird",
        client_id="client1",
        client_alias=KEY_ALIAS,
        credential_audience="aud1",
        display=(IssuerDisplay(name="Sunbird", title="Sunbird Insurance", logo=Logo(url="")),),
        authorization_endpoint="https://issuer.example/authorize",
        credential_endpoint=CREDENTIAL_ENDPOINT,
        wellknown_endpoint=WELLKNOWN_ENDPOINT,
    )


@pytest.fixture
def credential_type_data() -> dict:
    return {
        "id": "InsuranceCredential",
        "format": "ldp_vc",
        "scope": "sunbird_rc_insurance_vc_ldp",
        "proof_types_supported": ["jwt", "cwt"],
        "credential_definition": {
            "type": ["VerifiableCredential", "InsuranceCredential"],
            "credentialSubject": {
                "name": {"display": [{"name": "Name", "locale": "en"}]},
                "dob": {"display": [{"name": "DOB", "locale": "en"}]},
            },
        },
        "display": [
            {
                "name": "Health Insurance",
                "locale": "en",
                "background_color": "#FDFAF9",
                "text_color": "#7C4616",
            }
        ],
    }


@pytest.fixture
def credential_type(credential_type_data) -> CredentialTypeDescriptor:
    return CredentialTypeDescriptor.from_dict(credential_type_data)


@pytest.fixture
def credential_document() -> dict:
    return {
        "@context": ["https://www.w3.org/2018/credentials/v1"],
        "type": ["VerifiableCredential", "InsuranceCredential"],
        "issuer": "did:web:issuer.example",
        "issuanceDate": "2024-01-15T10:00:00.000Z",
        "credentialSubject": {
            "id": "did:jwk:holder",
            "name": "Jane Doe",
            "dob": "1990-04-01",
            "policyNumber": "PN-0001",
        },
        "proof": {
            "type": "Ed25519Signature2020",
            "created": "2024-01-15T10:00:00Z",
            "proofPurpose": "assertionMethod",
            "verificationMethod": "did:web:issuer.example#key-0",
            "proofValue": "z3FXQjecWufY46yg5abdVZsXqLhxhueuSoZgNSARiKBk",
        },
    }


class RecordingIssuer:
    """``httpx.MockTransport`` handler standing in for an issuer."""

    def __init__(self, credential: dict | None, well_known: dict | None = None) -> None:
        self.credential = credential
        self.well_known = well_known
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "GET" and str(request.url) == WELLKNOWN_ENDPOINT:
            if self.well_known is None:
                return httpx.Response(503)
            return httpx.Response(200, json=self.well_known)
        if request.method == "POST" and str(request.url) == CREDENTIAL_ENDPOINT:
            if self.credential is None:
                return httpx.Response(500, json={"error": "unavailable"})
            return httpx.Response(200, json={"format": "ldp_vc", "credential": self.credential})
        return httpx.Response(404)

    @property
    def last_body(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def recording_issuer(credential_document, credential_type_data) -> RecordingIssuer:
    return RecordingIssuer(
        credential_document,
        well_known={
            "credential_issuer": "Sunbird",
            "credential_endpoint": CREDENTIAL_ENDPOINT,
            "credentials_supported": [credential_type_data],
        },
    )


@pytest.fixture
def http_client(recording_issuer) -> RestApiClient:
    return RestApiClient(client=httpx.Client(transport=httpx.MockTransport(recording_issuer)))
