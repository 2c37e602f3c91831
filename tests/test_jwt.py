from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from app.auth.jwt import create_access_token, verify_token
from app.config import JWTConfig
from app.errors import AuthError

CONFIG = JWTConfig(secret="jwt-secret", expiration_hours=2, issuer="habitta-test")


def test_token_with_active_tenant():
    token = create_access_token(CONFIG, user_id=7, email="a@b.com", tenant_id=3, role="sindico")
    claims = verify_token(CONFIG, token)
    assert claims.user_id == 7
    assert claims.email == "a@b.com"
    assert claims.active_tenant_id == 3
    assert claims.active_role == "sindico"
    assert claims.has_active_tenant


def test_orphan_token_has_no_tenant_claim():
    token = create_access_token(CONFIG, user_id=7, email="a@b.com")
    payload = jwt.get_unverified_claims(token)
    assert "active_tenant_id" not in payload
    claims = verify_token(CONFIG, token)
    assert claims.active_tenant_id is None
    assert claims.active_role is None
    assert not claims.has_active_tenant


def test_token_signed_with_other_secret_is_rejected():
    other = JWTConfig(secret="other-secret", issuer="habitta-test")
    token = create_access_token(other, user_id=1, email="a@b.com")
    with pytest.raises(AuthError) as exc:
        verify_token(CONFIG, token)
    assert exc.value.message == "invalid or expired token"


def test_expired_token_is_rejected():
    past = datetime.now(timezone.utc) - timedelta(hours=3)
    payload = {
        "sub": "1",
        "user_id": 1,
        "email": "a@b.com",
        "iat": int(past.timestamp()),
        "exp": int((past + timedelta(hours=1)).timestamp()),
        "iss": CONFIG.issuer,
    }
    token = jwt.encode(payload, CONFIG.secret, algorithm=CONFIG.algorithm)
    with pytest.raises(AuthError):
        verify_token(CONFIG, token)


def test_tampered_token_is_rejected():
    token = create_access_token(CONFIG, user_id=1, email="a@b.com", tenant_id=1, role="morador")
    header, payload, signature = token.split(".")
    tampered = ".".join([header, payload[:-2] + ("AA" if payload[-2:] != "AA" else "BB"), signature])
    with pytest.raises(AuthError):
        verify_token(CONFIG, tampered)


def test_wrong_issuer_is_rejected():
    token = create_access_token(JWTConfig(secret=CONFIG.secret, issuer="outro"), user_id=1, email="a@b.com")
    with pytest.raises(AuthError):
        verify_token(CONFIG, token)
