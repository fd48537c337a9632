from dataclasses import dataclass
from typing import Callable

from fastapi import Depends, Header, HTTPException, status

from storefront.auth.jwt import TokenError, decode_jwt, unauthorized
from storefront.config import allowed_roles_list, settings


@dataclass
class AuthContext:
    user_id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"


def get_auth_context(authorization: str | None = Header(default=None)) -> AuthContext:
    if not authorization or not authorization.startswith("Bearer "):
        raise unauthorized("Missing bearer token")

    token = authorization.removeprefix("Bearer ").strip()
    try:
        payload = decode_jwt(token, settings.jwt_secret)
    except TokenError as err:
        raise unauthorized("Invalid token") from err

    role = payload.get("role")
    user_id = payload.get("sub")
    if role not in allowed_roles_list() or not isinstance(user_id, str) or not user_id:
        raise unauthorized("Invalid token claims")

    return AuthContext(user_id=user_id, role=role)


def require_roles(*roles: str) -> Callable[[AuthContext], AuthContext]:
    def dependency(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
        if auth.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient role")
        return auth

    return dependency


require_admin = require_roles("ADMIN")
