import pytest
from fastapi import HTTPException

from storefront.auth.dependencies import get_auth_context, require_roles
from storefront.auth.jwt import TokenError, decode_jwt, issue_jwt
from storefront.config import settings


def _bearer(payload: dict, secret: str | None = None, expires_in_s: int = 3600) -> str:
    return f"Bearer {issue_jwt(payload, secret or settings.jwt_secret, expires_in_s)}"


def test_get_auth_context_requires_bearer_token():
    with pytest.raises(HTTPException) as exc_info:
        get_auth_context(None)

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Missing bearer token"


def test_get_auth_context_rejects_foreign_signature():
    with pytest.raises(HTTPException) as exc_info:
        get_auth_context(_bearer({"sub": "cust-a", "role": "CUSTOMER"}, secret="other-secret"))

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Invalid token"


def test_get_auth_context_rejects_unknown_role():
    with pytest.raises(HTTPException) as exc_info:
        get_auth_context(_bearer({"sub": "someone", "role": "MERCHANT"}))

    assert exc_info.value.detail == "Invalid token claims"


def test_get_auth_context_returns_identity():
    auth = get_auth_context(_bearer({"sub": "admin-1", "role": "ADMIN"}))

    assert auth.user_id == "admin-1"
    assert auth.role == "ADMIN"
    assert auth.is_admin


def test_require_roles_rejects_other_roles():
    customer = get_auth_context(_bearer({"sub": "cust-a", "role": "CUSTOMER"}))

    with pytest.raises(HTTPException) as exc_info:
        require_roles("ADMIN")(customer)

    assert exc_info.value.status_code == 403


def test_decode_jwt_rejects_expired_and_malformed_tokens():
    expired = issue_jwt({"sub": "cust-a", "role": "CUSTOMER"}, "secret", expires_in_s=-10)

    with pytest.raises(TokenError, match="Expired"):
        decode_jwt(expired, "secret")
    with pytest.raises(TokenError, match="Malformed"):
        decode_jwt("not-a-token", "secret")
