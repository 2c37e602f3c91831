"""Helpers para montar cenários nos testes."""
from app.model.user_tenant import UserRole, UserTenant
from app.services import auth_service, tenant_service

TEST_PASSWORD = "secret123"


def make_user(session, email: str, name: str = "Usuário Teste", password: str = TEST_PASSWORD):
    return auth_service.register(session, email=email, password=password, name=name)


def make_tenant(session, owner, name: str = "Condomínio Azul", cnpj: str = "11.111.111/0001-11"):
    """Cria o tenant pelo fluxo self-service (owner vira síndico)."""
    return tenant_service.create_tenant_by_user(session, user_id=owner.id, name=name, cnpj=cnpj)


def add_member(session, user, tenant, role: UserRole = UserRole.MORADOR, is_active: bool = True):
    membership = UserTenant(user_id=user.id, tenant_id=tenant.id, role=role, is_active=is_active)
    session.add(membership)
    session.commit()
    session.refresh(membership)
    return membership


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
