"""Credential payload compaction and QR rendering."""

from .compaction import compact
from .qr import (
    CapacityCheck,
    QRCodeDegraded,
    QRCodeImage,
    QRCodeResult,
    check_capacity,
    encode,
    generate_qr_code,
)

__all__ = [
    "CapacityCheck",
    "QRCodeDegraded",
    "QRCodeImage",
    "QRCodeResult",
    "check_capacity",
    "compact",
    "encode",
    "generate_qr_code",
]
