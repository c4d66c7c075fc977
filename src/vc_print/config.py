"""Configuration helpers for credential document generation."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VcPrintSettings(BaseSettings):
    """Environment-driven settings, read once at process start."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    service_name: str = Field(default="vc-print", alias="VC_PRINT_SERVICE_NAME")

    # PKCS#12 key store holding the proof signing key
    keystore_filename: str = Field(default="oidckeystore.p12", alias="VC_PRINT_KEYSTORE_FILENAME")
    keystore_password: str = Field(default="", alias="VC_PRINT_KEYSTORE_PASSWORD")
    keystore_path: Path = Field(default=Path("certs"), alias="VC_PRINT_KEYSTORE_PATH")

    issuers_config: Path = Field(default=Path("mimoto-issuers-config.json"), alias="VC_PRINT_ISSUERS_CONFIG")
    template_dir: Path | None = Field(default=None, alias="VC_PRINT_TEMPLATE_DIR")
    credential_template: str = Field(default="credential.html", alias="VC_PRINT_CREDENTIAL_TEMPLATE")

    http_timeout_seconds: float = Field(default=30.0, alias="VC_PRINT_HTTP_TIMEOUT_SECONDS")
    qr_image_size: int = Field(default=200, alias="VC_PRINT_QR_IMAGE_SIZE")


@lru_cache
def get_settings() -> VcPrintSettings:
    """Return a cached settings instance."""

    return VcPrintSettings()
