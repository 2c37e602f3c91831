from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from app.api.deps import get_settings
from app.auth.jwt import TokenClaims, verify_token
from app.config import Settings
from app.db.session import get_session
from app.errors import AuthError, AuthzError
from app.model.user import User
from app.repository import user as user_repo

bearer = HTTPBearer(auto_error=False)


def get_token_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    settings: Settings = Depends(get_settings),
) -> TokenClaims:
    """Unauthenticated -> Authenticated: exige Bearer válido (senão 401)."""
    if not credentials or not credentials.credentials:
        raise AuthError("authorization header required")
    return verify_token(settings.jwt, credentials.credentials)


def require_active_tenant(claims: TokenClaims = Depends(get_token_claims)) -> TokenClaims:
    """
    Authenticated -> TenantScoped: o token precisa carregar active_tenant_id.

    Não consulta o banco; a claim é confiável durante a vida do token.
    """
    if not claims.has_active_tenant:
        raise AuthzError("tenant ID not found in token")
    return claims


def require_role(*allowed_roles: str):
    """
    Dependency factory para verificar o papel carregado no token.

    Args:
        allowed_roles: papéis aceitos (ex: "admin", "sindico")

    Returns:
        Dependency function
    """
    allowed = frozenset(str(getattr(r, "value", r)) for r in allowed_roles)

    def role_checker(claims: TokenClaims = Depends(get_token_claims)) -> TokenClaims:
        if not claims.active_role:
            raise AuthzError("user role not found in token")
        if claims.active_role not in allowed:
            raise AuthzError("insufficient permissions")
        return claims

    return role_checker


def get_current_user(
    claims: TokenClaims = Depends(get_token_claims),
    session: Session = Depends(get_session),
) -> User:
    """Dependency que retorna o usuário autenticado (ativo e não removido)."""
    user = user_repo.get_by_id(session, claims.user_id)
    if not user or not user.active:
        raise AuthError("user not found")
    return user
