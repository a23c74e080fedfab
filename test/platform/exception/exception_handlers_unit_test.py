"""
Unit tests for the FastAPI exception handlers

Test Coverage:
1. CustomBaseError subclasses render as {"detail": message} with their status
2. Unhandled exceptions become a generic 500
"""

from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest

from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.exception.exceptions import (
    AuthenticationError,
    ConflictError,
    DomainError,
    InternalTransactionError,
    NotFoundError,
    UnsupportedQueryError,
)


pytestmark = pytest.mark.unit


def _app_raising(error: Exception) -> TestClient:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get('/boom')
    async def boom():
        raise error

    return TestClient(app, raise_server_exceptions=False)


class TestCustomErrorHandler:
    @pytest.mark.parametrize(
        'error, status_code',
        [
            (DomainError('The name is required'), 400),
            (UnsupportedQueryError('Only one inequality field is allowed'), 400),
            (AuthenticationError(), 401),
            (InternalTransactionError('Unknown exception'), 403),
            (NotFoundError('No Conference found'), 404),
            (ConflictError('You have already registered'), 409),
        ],
    )
    def test_status_and_detail(self, error, status_code):
        response = _app_raising(error).get('/boom')

        assert response.status_code == status_code
        assert response.json() == {'detail': error.message}


class TestGeneralHandler:
    def test_unexpected_error_is_a_500(self):
        response = _app_raising(RuntimeError('disk on fire')).get('/boom')

        assert response.status_code == 500
        assert response.json() == {'detail': 'Internal server error'}
