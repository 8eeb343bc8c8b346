"""
HackReg Backend - Registration Window and Settings Tests
==========================================================

What:  is_registration_alive() around the close datetime, and the settings
       validators that feed it.
"""

from datetime import datetime, timedelta, timezone

import pytest

from hackreg.config import REGISTRATION_TIMEZONE, Settings, settings
from hackreg.services.registration import is_registration_alive


class TestIsRegistrationAlive:
    """Tests for is_registration_alive()."""

    def test_open_before_close(self):
        now = settings.registration_close_datetime - timedelta(seconds=1)
        assert is_registration_alive(now) is True

    def test_closed_at_close(self):
        assert is_registration_alive(settings.registration_close_datetime) is False

    def test_closed_after_close(self):
        now = settings.registration_close_datetime + timedelta(days=1)
        assert is_registration_alive(now) is False

    def test_compares_instants_across_timezones(self):
        close = settings.registration_close_datetime
        just_before = (close - timedelta(seconds=1)).astimezone(timezone(timedelta(hours=9)))
        assert is_registration_alive(just_before) is True


class TestSettings:
    """Validators on Settings."""

    def test_default_close_is_in_registration_timezone(self):
        default = Settings.model_fields["registration_close_datetime"].default
        assert default.utcoffset() == timedelta(hours=-6)

    def test_naive_close_gets_registration_timezone(self):
        configured = Settings(registration_close_datetime=datetime(2030, 1, 1, 12, 0))
        assert configured.registration_close_datetime.tzinfo == REGISTRATION_TIMEZONE

    def test_invalid_log_level_rejected(self):
        with pytest.raises(ValueError):
            Settings(log_level="CHATTY")

    def test_production_rejects_sqlite(self):
        configured = Settings(
            environment="production", database_url="sqlite+aiosqlite:///./prod.db"
        )
        with pytest.raises(ValueError):
            configured.validate_required_for_production()

    def test_non_production_skips_checks(self):
        Settings(environment="test").validate_required_for_production()
