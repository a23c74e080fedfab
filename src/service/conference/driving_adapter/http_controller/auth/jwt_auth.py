"""
Identity provider backed by JWT bearer tokens

Tokens are issued by an external identity service; this side only verifies
them. Claims used: 'sub' or 'user_id' for the user id, 'email'.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import jwt

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import AuthenticationError
from src.service.conference.domain.value_object.identity import Identity


class JwtAuth:
    def __init__(self) -> None:
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM
        self.token_expire_days = 7

    def create_jwt_token(self, identity: Identity) -> str:
        """Issue a token for an identity (local runs and tests)."""
        payload = {
            'sub': identity.user_id,
            'exp': datetime.now(timezone.utc) + timedelta(days=self.token_expire_days),
            'iat': datetime.now(timezone.utc),
            'user_id': identity.user_id,
            'email': identity.email,
        }

        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError:
            raise AuthenticationError('Invalid token')

    def get_identity_from_jwt(self, token: Optional[str]) -> Optional[Identity]:
        """None for anonymous requests; AuthenticationError for a bad token."""
        if not token:
            return None

        payload = self.decode_jwt_token(token)
        user_id = payload.get('user_id') or payload.get('sub')
        email = payload.get('email')
        if not user_id or not email:
            raise AuthenticationError('Invalid token')

        return Identity(user_id=str(user_id), email=email)
