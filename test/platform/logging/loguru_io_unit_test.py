"""
Unit tests for the @Logger.io decorator

Test Coverage:
1. Return values pass through sync and async wrappers
2. Exceptions are re-raised unless reraise=False
3. Sensitive keywords are masked and long content is truncated
"""

import pytest

from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger, LoguruIO
from src.platform.logging.loguru_io_config import MASK, MAX_CONTENT_LENGTH, custom_logger


pytestmark = pytest.mark.unit


class TestLoggerIo:
    def test_sync_return_value(self):
        @Logger.io
        def add(a, b):
            return a + b

        assert add(1, 2) == 3

    @pytest.mark.asyncio
    async def test_async_return_value(self):
        @Logger.io
        async def greet(name):
            return f'hi {name}'

        assert await greet('ada') == 'hi ada'

    @pytest.mark.asyncio
    async def test_custom_error_is_reraised(self):
        @Logger.io
        async def register():
            raise ConflictError('You have already registered')

        with pytest.raises(ConflictError):
            await register()

    def test_reraise_false_returns_none(self):
        @Logger.io(reraise=False)
        def explode():
            raise RuntimeError('boom')

        assert explode() is None

    def test_unknown_kwargs_are_dropped(self):
        @Logger.io
        def only_a(a):
            return a

        assert only_a(a=1, injected='extra') == 1


class TestMaskSensitive:
    def setup_method(self):
        self.io = LoguruIO(custom_logger, truncate_content=False)

    def test_sensitive_keys_are_masked_recursively(self):
        masked = self.io.mask_sensitive(
            {'token': 'abc', 'nested': {'Password': 'pw', 'email': 'a@b.c'}}
        )

        assert masked == {'token': MASK, 'nested': {'Password': MASK, 'email': 'a@b.c'}}

    def test_tuples_keep_their_type(self):
        assert self.io.mask_sensitive(({'secret': 1},)) == ({'secret': MASK},)

    def test_long_content_is_truncated(self):
        io = LoguruIO(custom_logger, truncate_content=True)

        truncated = io.mask_sensitive('x' * (MAX_CONTENT_LENGTH + 10))

        assert truncated.endswith(f'({MAX_CONTENT_LENGTH + 10} chars)')
