from datetime import datetime, timezone

from fastapi import APIRouter

from app.api.account import router as account_router
from app.api.auth import router as auth_router
from app.api.document import router as document_router
from app.api.invite import router as invite_router
from app.api.tenant import router as tenant_router
from app.api.unit import router as unit_router
from app.api.user import router as user_router

router = APIRouter()  # Sem tag padrão - cada router define sua própria tag

api_router = APIRouter(prefix="/api")
api_router.include_router(auth_router)
api_router.include_router(account_router)
# invite antes de tenant: /tenants/invites não pode cair em /tenants/{tenant_id}
api_router.include_router(invite_router)
api_router.include_router(tenant_router)
api_router.include_router(user_router)
api_router.include_router(unit_router)
api_router.include_router(document_router)

router.include_router(api_router)


@router.get("/health", tags=["System"])
def health():
    """Health check endpoint (sem autenticação)."""
    return {"status": "healthy", "time": datetime.now(timezone.utc).isoformat()}
