from __future__ import annotations

from typing import Optional, Protocol

from ..core.constants import QR_PAYLOAD_PREFIX


class StudentIdentifier(Protocol):
    """Resolves a captured kiosk frame to a student id, or None for no match."""

    def identify(self, image: bytes) -> Optional[int]:
        raise NotImplementedError


def parse_payload(payload: str) -> Optional[int]:
    payload = (payload or "").strip()
    if not payload.startswith(QR_PAYLOAD_PREFIX):
        return None
    raw_id = payload[len(QR_PAYLOAD_PREFIX):]
    return int(raw_id) if raw_id.isdigit() else None
