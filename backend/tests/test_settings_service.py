"""Tests for instructor settings."""
import pytest
import pytz

from attendscan.services.settings_service import SettingsService
from attendscan.utils.errors import InvalidInput, NotAuthenticated

def test_defaults_without_row(app, instructor):
    settings = SettingsService.get_settings(instructor.id)

    assert settings == {
        'system_name': 'AttendScan',
        'university': 'Your University',
        'late_threshold_minutes': 15,
        'default_duration_minutes': 60,
        'timezone': 'UTC'
    }

def test_partial_update_keeps_other_values(app, instructor):
    SettingsService.save_settings(instructor, {'university': 'State University'})
    SettingsService.save_settings(instructor, {'late_threshold_minutes': 10})

    settings = SettingsService.get_settings(instructor.id)

    assert settings['university'] == 'State University'
    assert settings['late_threshold_minutes'] == 10
    assert settings['system_name'] == 'AttendScan'

@pytest.mark.parametrize('data', [
    {'late_threshold_minutes': -1},
    {'late_threshold_minutes': '15'},
    {'late_threshold_minutes': True},
    {'default_duration_minutes': 45},
    {'timezone': 'Mars/Olympus_Mons'},
    {'timezone': 8},
    {'system_name': ''},
])
def test_invalid_settings(app, instructor, data):
    with pytest.raises(InvalidInput):
        SettingsService.save_settings(instructor, data)

def test_students_cannot_save_settings(app, student):
    with pytest.raises(NotAuthenticated):
        SettingsService.save_settings(student, {'late_threshold_minutes': 5})

def test_timezone_for(app, instructor):
    assert SettingsService.timezone_for(instructor.id) == pytz.utc

    SettingsService.save_settings(instructor, {'timezone': 'Europe/Berlin'})

    assert SettingsService.timezone_for(instructor.id).zone == 'Europe/Berlin'
