"""
Credential payload compaction for QR embedding.

The chain is fixed: canonical JSON -> zlib deflate (level 9) -> base45.
Base45 output stays inside the QR alphanumeric character set, so the
symbol needs fewer modules than it would for base64 text.
"""

from __future__ import annotations

import json
import zlib
from typing import Any

from base45 import b45encode

from vc_print.exceptions import CodeGenerationError
from vc_print.models import VerifiableCredential


def serialize(document: dict[str, Any]) -> bytes:
    """Canonical byte form: sorted keys, no insignificant whitespace, UTF-8."""
    return json.dumps(document, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def compress(data: bytes) -> bytes:
    """Deflate the whole buffer at once at maximum compression."""
    return zlib.compress(data, level=zlib.Z_BEST_COMPRESSION)


def base45_encode(data: bytes) -> str:
    encoded = b45encode(data)
    return encoded.decode("ascii") if isinstance(encoded, bytes) else encoded


def compact(credential: VerifiableCredential | dict[str, Any]) -> str:
    """
    Compact the full credential document into a base45 string.

    No length cap is applied here; see ``vc_print.encoding.qr.check_capacity``.

    Raises:
        CodeGenerationError: the document cannot be serialized or encoded
    """
    document = credential.document if isinstance(credential, VerifiableCredential) else credential
    try:
        return base45_encode(compress(serialize(document)))
    except (TypeError, ValueError, zlib.error) as e:
        raise CodeGenerationError(e) from e
