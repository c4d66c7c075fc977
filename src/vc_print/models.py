"""Data structures for issuer metadata, credential requests and credentials."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

W3C_CREDENTIALS_CONTEXT = "https://www.w3.org/2018/credentials/v1"


@dataclass(frozen=True, slots=True)
class Logo:
    url: str = ""
    alt_text: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Logo:
        data = data or {}
        return cls(url=data.get("url") or "", alt_text=data.get("alt_text") or "")


@dataclass(frozen=True, slots=True)
class IssuerDisplay:
    """Localised display metadata published for an issuer."""

    name: str = ""
    title: str = ""
    description: str = ""
    language: str = ""
    logo: Logo = field(default_factory=Logo)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IssuerDisplay:
        return cls(
            name=data.get("name") or "",
            title=data.get("title") or "",
            description=data.get("description") or "",
            language=data.get("language") or "",
            logo=Logo.from_dict(data.get("logo")),
        )


@dataclass(frozen=True, slots=True)
class IssuerProfile:
    """An issuer entry from the issuers configuration blob."""

    credential_issuer: str
    client_id: str = ""
    client_alias: str = ""
    credential_audience: str = ""
    display: tuple[IssuerDisplay, ...] = ()
    authorization_endpoint: str = ""
    token_endpoint: str = ""
    credential_endpoint: str = ""
    wellknown_endpoint: str = ""
    redirect_uri: str = ""
    enabled: str = "true"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IssuerProfile:
        return cls(
            credential_issuer=data["credential_issuer"],
            client_id=data.get("client_id") or "",
            client_alias=data.get("client_alias") or "",
            credential_audience=data.get("credential_audience") or "",
            display=tuple(IssuerDisplay.from_dict(item) for item in data.get("display") or []),
            authorization_endpoint=data.get("authorization_endpoint") or "",
            token_endpoint=data.get("token_endpoint") or "",
            credential_endpoint=data.get("credential_endpoint") or "",
            wellknown_endpoint=data.get("wellknown_endpoint") or data.get(".well-known") or "",
            redirect_uri=data.get("redirect_uri") or "",
            enabled=str(data.get("enabled", "true")).lower(),
        )

    @property
    def is_enabled(self) -> bool:
        return self.enabled == "true"

    @property
    def logo_url(self) -> str:
        """URL of the first display logo, or an empty string."""
        return next((item.logo.url for item in self.display), "")


@dataclass(frozen=True, slots=True)
class CredentialDisplay:
    """Styling for a credential type."""

    name: str = ""
    locale: str = ""
    logo: Logo = field(default_factory=Logo)
    background_color: str = ""
    text_color: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CredentialDisplay:
        return cls(
            name=data.get("name") or "",
            locale=data.get("locale") or "",
            logo=Logo.from_dict(data.get("logo")),
            background_color=data.get("background_color") or "",
            text_color=data.get("text_color") or "",
        )


@dataclass(frozen=True, slots=True)
class CredentialDefinition:
    """Credential type list and the subject properties an issuer displays.

    ``credential_subject`` maps a subject property key to its display
    labels; insertion order is the order the properties are rendered in.
    """

    type: tuple[str, ...] = ()
    credential_subject: dict[str, tuple[str, ...]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> CredentialDefinition:
        data = data or {}
        subject: dict[str, tuple[str, ...]] = {}
        for key, value in (data.get("credentialSubject") or {}).items():
            labels = tuple(item.get("name") or "" for item in (value or {}).get("display") or [])
            subject[key] = labels
        return cls(type=tuple(data.get("type") or ()), credential_subject=subject)

    def display_labels(self) -> dict[str, str]:
        """Map each subject property key to its first display label."""
        return {key: labels[0] if labels else key for key, labels in self.credential_subject.items()}


@dataclass(frozen=True, slots=True)
class CredentialTypeDescriptor:
    """One entry of an issuer's ``credentials_supported`` metadata."""

    id: str = ""
    format: str = ""
    scope: str = ""
    proof_types_supported: tuple[str, ...] = ()
    credential_definition: CredentialDefinition = field(default_factory=CredentialDefinition)
    display: tuple[CredentialDisplay, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CredentialTypeDescriptor:
        return cls(
            id=data.get("id") or "",
            format=data.get("format") or "",
            scope=data.get("scope") or "",
            proof_types_supported=tuple(data.get("proof_types_supported") or ()),
            credential_definition=CredentialDefinition.from_dict(data.get("credential_definition")),
            display=tuple(CredentialDisplay.from_dict(item) for item in data.get("display") or []),
        )

    @property
    def primary_display(self) -> CredentialDisplay:
        return self.display[0] if self.display else CredentialDisplay()


@dataclass(frozen=True, slots=True)
class IssuerSupportedCredentials:
    """Credential types an issuer offers, with its authorization endpoint."""

    authorization_endpoint: str = ""
    supported_credentials: tuple[CredentialTypeDescriptor, ...] = ()


@dataclass(frozen=True, slots=True)
class CredentialRequestProof:
    proof_type: str
    jwt: str

    def to_dict(self) -> dict[str, Any]:
        return {"proof_type": self.proof_type, "jwt": self.jwt}


@dataclass(frozen=True, slots=True)
class CredentialRequestDefinition:
    type: tuple[str, ...]
    context: tuple[str, ...] = (W3C_CREDENTIALS_CONTEXT,)

    def to_dict(self) -> dict[str, Any]:
        return {"type": list(self.type), "@context": list(self.context)}


@dataclass(frozen=True, slots=True)
class CredentialRequest:
    """Proof-of-possession request sent to the issuer's credential endpoint.

    Bound to one access token and one audience; build a new one per attempt.
    """

    format: str
    proof: CredentialRequestProof
    credential_definition: CredentialRequestDefinition

    def to_dict(self) -> dict[str, Any]:
        return {
            "format": self.format,
            "proof": self.proof.to_dict(),
            "credential_definition": self.credential_definition.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class VerifiableCredential:
    """Issued credential document, kept as the issuer returned it."""

    document: dict[str, Any]

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> VerifiableCredential:
        """
        Take the credential out of an issuer's credential response.

        ``credentialSubject`` may be one object or an array of objects;
        anything else is rejected.

        Raises:
            ValueError: the response carries no usable credential
        """
        credential = response.get("credential") if isinstance(response, dict) else None
        if not isinstance(credential, dict):
            raise ValueError("credential response has no credential object")
        _subject_object(credential.get("credentialSubject"))
        return cls(document=credential)

    @property
    def credential_subject(self) -> dict[str, Any]:
        """The displayed subject; the first one when the credential has several."""
        return _subject_object(self.document.get("credentialSubject"))


def _subject_object(subject: Any) -> dict[str, Any]:
    if subject is None:
        return {}
    if isinstance(subject, list):
        subject = subject[0] if subject else {}
    if not isinstance(subject, dict):
        raise ValueError(f"credentialSubject is a {type(subject).__name__}, not an object")
    return subject


__all__ = [
    "W3C_CREDENTIALS_CONTEXT",
    "CredentialDefinition",
    "CredentialDisplay",
    "CredentialRequest",
    "CredentialRequestDefinition",
    "CredentialRequestProof",
    "CredentialTypeDescriptor",
    "IssuerDisplay",
    "IssuerProfile",
    "IssuerSupportedCredentials",
    "Logo",
    "VerifiableCredential",
]
