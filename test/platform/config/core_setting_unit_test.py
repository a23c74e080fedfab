"""
Unit tests for Settings loading

Test Coverage:
1. The shipped .env.example loads, including list-valued fields
2. Comma-separated CORS origins are split by the validator
"""

from pathlib import Path

import pytest

from src.platform.config.core_setting import Settings


pytestmark = pytest.mark.unit

ENV_EXAMPLE = Path(__file__).resolve().parents[3] / '.env.example'


class TestSettings:
    def test_env_example_loads(self):
        settings = Settings(_env_file=ENV_EXAMPLE)  # type: ignore[call-arg]

        assert settings.BACKEND_CORS_ORIGINS == [
            'http://localhost:3000',
            'http://localhost:8000',
        ]
        assert settings.NEARLY_SOLD_OUT_THRESHOLD == 5
        assert settings.ANNOUNCEMENT_CACHE_KEY == 'RECENT_ANNOUNCEMENTS'

    def test_comma_separated_origins_are_split(self):
        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
            BACKEND_CORS_ORIGINS='http://a.test, http://b.test,',
        )

        assert settings.BACKEND_CORS_ORIGINS == ['http://a.test', 'http://b.test']
