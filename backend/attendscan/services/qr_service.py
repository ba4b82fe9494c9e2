"""QR code generation and session payload parsing."""
import base64
import io
import json
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Dict, Union

import qrcode

from attendscan.models.attendance_session import AttendanceSession
from attendscan.utils.errors import InvalidPayload
from attendscan.utils.helpers import parse_iso_datetime

@dataclass(frozen=True)
class SessionPayload:
    """Snapshot of a session as carried by a scanned QR code."""
    classId: str
    className: str
    instructorId: str
    instructorName: str
    timestamp: str
    expiresAt: str
    date: str
    sessionId: str
    course: str
    section: str

    @classmethod
    def from_dict(cls, data: Dict) -> 'SessionPayload':
        """Validate shape and types before any business logic sees the payload."""
        if not isinstance(data, dict):
            raise InvalidPayload("QR code does not contain a session object")

        values = {}
        for field in fields(cls):
            if field.name not in data:
                raise InvalidPayload(f"QR code is missing field: {field.name}")
            value = data[field.name]
            if not isinstance(value, str):
                raise InvalidPayload(f"QR code field {field.name} must be a string")
            values[field.name] = value

        if not values['classId'].strip() or not values['sessionId'].strip():
            raise InvalidPayload("QR code does not identify a session")

        payload = cls(**values)
        # Both datetimes must parse even though the stored session is authoritative
        for name in ('timestamp', 'expiresAt'):
            payload._parse(name)
        return payload

    def _parse(self, name: str) -> datetime:
        try:
            return parse_iso_datetime(getattr(self, name))
        except ValueError:
            raise InvalidPayload(f"QR code field {name} is not an ISO-8601 datetime")

class QRService:
    """Service for QR code operations."""

    @staticmethod
    def encode_payload(session: AttendanceSession) -> str:
        """Compact JSON string placed inside the QR code."""
        return json.dumps(session.to_payload(), separators=(',', ':'))

    @staticmethod
    def generate_qr_image(data: str) -> str:
        """Render ``data`` as a PNG QR code and return it as a data URI."""
        qr = qrcode.QRCode(
            version=None,  # Auto-determine size
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=2,
        )
        qr.add_data(data)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffered = io.BytesIO()
        img.save(buffered, format="PNG")
        img_str = base64.b64encode(buffered.getvalue()).decode()

        return f"data:image/png;base64,{img_str}"

    @staticmethod
    def generate_session_qr(session: AttendanceSession) -> Dict:
        """Payload, encoded string and rendered image for a session."""
        qr_string = QRService.encode_payload(session)
        return {
            'payload': session.to_payload(),
            'qr_data': qr_string,
            'qr_image': QRService.generate_qr_image(qr_string)
        }

    @staticmethod
    def looks_like_payload(presented: Union[str, Dict]) -> bool:
        """Scanned codes carry a JSON object; manual entry is a bare code."""
        if isinstance(presented, dict):
            return True
        return isinstance(presented, str) and presented.lstrip().startswith('{')

    @staticmethod
    def parse_payload(presented: Union[str, Dict]) -> SessionPayload:
        """Decode and schema-validate a scanned payload. Raises InvalidPayload."""
        if isinstance(presented, str):
            try:
                presented = json.loads(presented)
            except json.JSONDecodeError:
                raise InvalidPayload("Invalid QR code format")
        return SessionPayload.from_dict(presented)
