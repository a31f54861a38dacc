from __future__ import annotations

import io

import qrcode

from ..core.constants import QR_PAYLOAD_PREFIX


def card_payload(student_id: int) -> str:
    return f"{QR_PAYLOAD_PREFIX}{int(student_id)}"


def render_card_png(student_id: int, *, box_size: int = 10, border: int = 4) -> bytes:
    """PNG bytes of the QR card the kiosk identifier reads back."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(card_payload(student_id))
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
