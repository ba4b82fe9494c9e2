"""Tests for student identifier formatting."""
import pytest

from attendscan.utils.student_id import format_student_id, is_formatted_student_id

@pytest.mark.parametrize('raw, expected', [
    ('123', '00-0123'),
    ('1234567', '12-3456'),
    ('123456', '12-3456'),
    ('12-3456', '12-3456'),
    ('ID 25/0042', '25-0042'),
    (250042, '25-0042'),
    ('', '00-0000'),
])
def test_format_student_id(raw, expected):
    assert format_student_id(raw) == expected

def test_format_is_idempotent():
    once = format_student_id('98 76 5')
    assert format_student_id(once) == once

def test_format_none_passes_through():
    assert format_student_id(None) is None

def test_is_formatted_student_id():
    assert is_formatted_student_id('00-0123')
    assert not is_formatted_student_id('000123')
    assert not is_formatted_student_id('1-23456')
    assert not is_formatted_student_id('')
