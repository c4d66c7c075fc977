"""
QR code generation for credential documents.

``encode`` turns a compacted payload into a base64 PNG and raises
``CodeGenerationError`` on any fault. ``generate_qr_code`` runs the whole
chain for a credential and never raises: a fault comes back as
``QRCodeDegraded`` so the document can still be produced without a code.
"""

from __future__ import annotations

import base64
import io
import logging
from dataclasses import dataclass
from typing import Any

import qrcode
from PIL import Image
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q

from vc_print.encoding.compaction import compact
from vc_print.exceptions import CodeGenerationError
from vc_print.models import VerifiableCredential

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_SIZE = 200

# Alphanumeric-mode capacity of a version 40 symbol, in characters
ALPHANUMERIC_CAPACITY = {
    ERROR_CORRECT_L: 4296,
    ERROR_CORRECT_M: 3391,
    ERROR_CORRECT_Q: 2420,
    ERROR_CORRECT_H: 1852,
}


@dataclass(frozen=True, slots=True)
class CapacityCheck:
    payload_length: int
    capacity: int

    @property
    def fits(self) -> bool:
        return self.payload_length <= self.capacity


@dataclass(frozen=True, slots=True)
class QRCodeImage:
    """A rendered QR code."""

    base64_png: str
    payload_length: int

    is_degraded = False
    reason = None

    @property
    def data_uri(self) -> str:
        return f"data:image/png;base64,{self.base64_png}"


@dataclass(frozen=True, slots=True)
class QRCodeDegraded:
    """No QR code could be produced; the document is rendered without one."""

    reason: str

    is_degraded = True
    base64_png = ""
    data_uri = ""


QRCodeResult = QRCodeImage | QRCodeDegraded


def check_capacity(payload: str, error_correction: int = ERROR_CORRECT_M) -> CapacityCheck:
    """Compare ``payload`` with the largest QR symbol at ``error_correction``.

    Reports only; the payload is never truncated.
    """
    result = CapacityCheck(len(payload), ALPHANUMERIC_CAPACITY[error_correction])
    if not result.fits:
        logger.warning(
            "QR payload of %d characters exceeds symbol capacity of %d",
            result.payload_length,
            result.capacity,
        )
    return result


def _rasterize(qr: qrcode.QRCode, image_size: int) -> Image.Image:
    """Scale modules by a whole number and centre the symbol on the target square."""
    total_modules = qr.modules_count + 2 * qr.border
    qr.box_size = max(1, image_size // total_modules)
    symbol = qr.make_image(fill_color="black", back_color="white").get_image().convert("L")
    if symbol.width >= image_size:
        return symbol
    canvas = Image.new("L", (image_size, image_size), 255)
    offset = (image_size - symbol.width) // 2
    canvas.paste(symbol, (offset, offset))
    return canvas


def encode(payload: str, image_size: int = DEFAULT_IMAGE_SIZE) -> str:
    """
    Encode ``payload`` as a QR code PNG and return it base64 encoded.

    Error correction and version are left to the library defaults.

    Raises:
        CodeGenerationError: the payload does not fit or the image cannot be written
    """
    qr = qrcode.QRCode(version=None, box_size=1)
    check_capacity(payload, qr.error_correction)
    try:
        qr.add_data(payload)
        qr.make(fit=True)
        image = _rasterize(qr, image_size)
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
    except Exception as e:
        raise CodeGenerationError(e) from e
    return base64.b64encode(buffer.getvalue()).decode("ascii")


def generate_qr_code(
    credential: VerifiableCredential | dict[str, Any],
    image_size: int = DEFAULT_IMAGE_SIZE,
) -> QRCodeResult:
    """Compact and encode ``credential``; faults become ``QRCodeDegraded``."""
    try:
        payload = compact(credential)
        return QRCodeImage(base64_png=encode(payload, image_size), payload_length=len(payload))
    except CodeGenerationError as e:
        logger.error("Exception while generating qr code: %s", e.message, exc_info=True)
        return QRCodeDegraded(reason=e.message)


__all__ = [
    "ALPHANUMERIC_CAPACITY",
    "DEFAULT_IMAGE_SIZE",
    "CapacityCheck",
    "QRCodeDegraded",
    "QRCodeImage",
    "QRCodeResult",
    "check_capacity",
    "encode",
    "generate_qr_code",
]
