"""Tests for QR payload encoding and parsing."""
import json

import pytest

from attendscan.services.qr_service import QRService, SessionPayload
from attendscan.services.session_service import SessionService
from attendscan.utils.errors import InvalidPayload

from tests.conftest import T0

PAYLOAD_FIELDS = {
    'classId', 'className', 'instructorId', 'instructorName', 'timestamp',
    'expiresAt', 'date', 'sessionId', 'course', 'section'
}

@pytest.fixture
def session(app, instructor):
    return SessionService.create_session(
        instructor, course='CS101', class_name='Lecture 1', section='A',
        duration_minutes=30, now=T0
    )

def test_encode_payload_carries_every_field(session):
    payload = json.loads(QRService.encode_payload(session))

    assert set(payload) == PAYLOAD_FIELDS
    assert all(isinstance(value, str) for value in payload.values())
    assert payload['sessionId'] == session.session_code
    assert payload['instructorId'] == str(session.instructor_id)
    assert payload['timestamp'] == '2025-03-10T09:00:00.000Z'
    assert payload['expiresAt'] == '2025-03-10T09:30:00.000Z'

def test_parse_payload_from_scanned_string(session):
    parsed = QRService.parse_payload(QRService.encode_payload(session))

    assert parsed.classId == session.class_id
    assert parsed.sessionId == session.session_code
    assert parsed.timestamp == '2025-03-10T09:00:00.000Z'

def test_generate_session_qr(session):
    result = QRService.generate_session_qr(session)

    assert result['qr_image'].startswith('data:image/png;base64,')
    assert json.loads(result['qr_data']) == result['payload']

@pytest.mark.parametrize('presented, expected', [
    ('{"classId": "x"}', True),
    ('  {"classId": "x"}', True),
    ({'classId': 'x'}, True),
    ('ABC12345', False),
    (12345678, False),
])
def test_looks_like_payload(presented, expected):
    assert QRService.looks_like_payload(presented) is expected

def test_parse_payload_rejects_bad_json():
    with pytest.raises(InvalidPayload):
        QRService.parse_payload('{not json')

def test_parse_payload_rejects_non_object():
    with pytest.raises(InvalidPayload):
        QRService.parse_payload('["a", "b"]')

def test_payload_missing_field(session):
    data = session.to_payload()
    del data['sessionId']
    with pytest.raises(InvalidPayload) as exc:
        SessionPayload.from_dict(data)
    assert 'sessionId' in exc.value.message

def test_payload_field_must_be_string(session):
    data = session.to_payload()
    data['instructorId'] = session.instructor_id
    with pytest.raises(InvalidPayload):
        SessionPayload.from_dict(data)

def test_payload_datetimes_must_parse(session):
    data = session.to_payload()
    data['expiresAt'] = 'tomorrow'
    with pytest.raises(InvalidPayload):
        SessionPayload.from_dict(data)

def test_payload_blank_session_id(session):
    data = session.to_payload()
    data['sessionId'] = '   '
    with pytest.raises(InvalidPayload):
        SessionPayload.from_dict(data)
