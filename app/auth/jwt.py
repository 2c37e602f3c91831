from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from app.config import JWTConfig
from app.errors import AuthError

INVALID_TOKEN_MESSAGE = "invalid or expired token"


@dataclass(frozen=True)
class TokenClaims:
    """Conteúdo do token já validado."""

    user_id: int
    email: str
    active_tenant_id: int | None = None
    active_role: str | None = None

    @property
    def has_active_tenant(self) -> bool:
        return bool(self.active_tenant_id)


def create_access_token(
    config: JWTConfig,
    *,
    user_id: int,
    email: str,
    tenant_id: int | None = None,
    role: str | None = None,
) -> str:
    """
    Cria um token JWT.

    Args:
        config: segredo, emissor e validade
        user_id: ID do usuário
        email: email do usuário
        tenant_id: tenant ativo (None = sessão sem tenant, usuário órfão)
        role: papel do usuário no tenant ativo

    Returns:
        Token JWT codificado
    """
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "user_id": user_id,
        "email": email,
        "iat": int(now.timestamp()),
        "nbf": int(now.timestamp()),
        "exp": int((now + timedelta(hours=config.expiration_hours)).timestamp()),
        "iss": config.issuer,
    }
    if tenant_id:
        payload["active_tenant_id"] = tenant_id
        payload["active_role"] = role
    return jwt.encode(payload, config.secret, algorithm=config.algorithm)


def verify_token(config: JWTConfig, token: str) -> TokenClaims:
    """
    Verifica e decodifica um token JWT.

    Raises:
        AuthError: assinatura inválida, token expirado ou claims malformadas
    """
    try:
        payload = jwt.decode(
            token,
            config.secret,
            algorithms=[config.algorithm],
            issuer=config.issuer,
        )
    except JWTError:
        # Evita vazar detalhes internos no payload de erro.
        raise AuthError(INVALID_TOKEN_MESSAGE)

    try:
        user_id = int(payload.get("user_id") or payload["sub"])
        tenant_raw = payload.get("active_tenant_id")
        return TokenClaims(
            user_id=user_id,
            email=str(payload.get("email", "")),
            active_tenant_id=int(tenant_raw) if tenant_raw else None,
            active_role=payload.get("active_role"),
        )
    except (KeyError, TypeError, ValueError):
        raise AuthError(INVALID_TOKEN_MESSAGE)
