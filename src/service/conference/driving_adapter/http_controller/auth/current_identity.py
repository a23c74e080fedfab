from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.platform.config.di import Container
from src.service.conference.domain.value_object.identity import Identity
from src.service.conference.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


bearer_scheme = HTTPBearer(auto_error=False)


@inject
async def get_optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> Optional[Identity]:
    """Resolve the caller; anonymous requests yield None and use cases decide."""
    token = credentials.credentials if credentials else None
    return jwt_auth.get_identity_from_jwt(token)
