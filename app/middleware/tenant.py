from __future__ import annotations

from typing import Any, Awaitable, Callable

from fastapi import Request

from app.auth.jwt import verify_token
from app.errors import AuthError


async def tenant_context_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Any]],
):
    """
    Middleware de contexto (não-enforcement):

    - Se houver Authorization: Bearer <token>, decodifica via verify_token()
    - Coloca {user_id, tenant_id, role} em request.state
    - NÃO consulta DB e NÃO bloqueia request em caso de token inválido
      (o enforcement real fica nas dependencies: get_token_claims() / require_active_tenant()).
    """
    auth = request.headers.get("authorization")
    if not auth or not auth.startswith("Bearer "):
        return await call_next(request)

    token = auth.removeprefix("Bearer ").strip()
    if not token:
        return await call_next(request)

    try:
        claims = verify_token(request.app.state.settings.jwt, token)
    except AuthError:
        # Não muda o comportamento de endpoints públicos (ex.: /health).
        return await call_next(request)

    request.state.user_id = claims.user_id
    request.state.tenant_id = claims.active_tenant_id
    request.state.role = claims.active_role

    return await call_next(request)


def get_tenant_id(request: Request) -> int | None:
    """
    Helper leve para extrair tenant_id do contexto.
    Preferir enforcement via require_active_tenant().
    """
    return getattr(request.state, "tenant_id", None)
