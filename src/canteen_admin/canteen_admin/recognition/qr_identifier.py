from __future__ import annotations

import io
import logging
from typing import Optional

from PIL import Image, UnidentifiedImageError

from ..core.exceptions import ValidationError
from .identifier import StudentIdentifier, parse_payload

logger = logging.getLogger(__name__)


class QRCodeIdentifier(StudentIdentifier):
    """Reads the student id off a printed QR card held up to the kiosk camera."""

    def identify(self, image: bytes) -> Optional[int]:
        # pyzbar loads the zbar shared library on import; only kiosks need it.
        from pyzbar.pyzbar import decode as pyzbar_decode

        try:
            frame = Image.open(io.BytesIO(image))
            frame.load()
        except (UnidentifiedImageError, OSError) as e:
            raise ValidationError("Captured image could not be read") from e

        for symbol in pyzbar_decode(frame):
            payload = symbol.data.decode("utf-8", errors="ignore")
            student_id = parse_payload(payload)
            if student_id is not None:
                return student_id
            logger.debug("Ignoring foreign QR payload %r", payload)
        return None
