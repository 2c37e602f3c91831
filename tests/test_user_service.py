import pytest
from sqlmodel import select

from app.auth.password import verify_password
from app.errors import NotFoundError, ValidationError
from app.model.user import User
from app.model.user_tenant import UserRole
from app.services import unit_service, user_service
from tests.factories import TEST_PASSWORD, add_member, make_tenant, make_user


@pytest.fixture
def owner(session):
    return make_user(session, "owner@example.com", name="Zeca Síndico")


@pytest.fixture
def tenant(session, owner):
    return make_tenant(session, owner)


def test_list_users_paginated_with_search(session, tenant, owner):
    for i in range(12):
        add_member(session, make_user(session, f"morador{i:02d}@example.com", name=f"Morador {i:02d}"), tenant)
    outsider = make_user(session, "fora@example.com", name="Morador Fora")
    other = make_tenant(session, outsider, name="Outro", cnpj="2")
    assert other.id != tenant.id

    first = user_service.list_users(session, tenant_id=tenant.id, page=1, per_page=10)
    assert first.total == 13
    assert first.total_pages == 2
    assert len(first.data) == 10

    second = user_service.list_users(session, tenant_id=tenant.id, page=2, per_page=10)
    assert len(second.data) == 3

    found = user_service.list_users(session, tenant_id=tenant.id, search="morador0")
    assert found.total == 10
    assert all(u.email != "fora@example.com" for u in found.data)


def test_get_user_in_tenant_includes_role(session, tenant, owner):
    user = user_service.get_user_in_tenant(session, tenant_id=tenant.id, user_id=owner.id)
    assert user.role == UserRole.SINDICO.value
    assert user.is_active


def test_get_user_from_other_tenant_is_not_found(session, tenant):
    outsider = make_user(session, "fora@example.com")
    with pytest.raises(NotFoundError):
        user_service.get_user_in_tenant(session, tenant_id=tenant.id, user_id=outsider.id)


def test_update_membership(session, tenant):
    member = make_user(session, "m@example.com")
    add_member(session, member, tenant)
    unit = unit_service.create_unit(session, tenant_id=tenant.id, number="101")

    updated = user_service.update_membership(
        session, tenant_id=tenant.id, user_id=member.id, is_active=False, unit_id=unit.id
    )
    assert updated.is_active is False
    assert updated.unit_id == unit.id

    cleared = user_service.update_membership(session, tenant_id=tenant.id, user_id=member.id, clear_unit=True)
    assert cleared.unit_id is None
    assert cleared.is_active is False


def test_update_membership_rejects_unit_from_other_tenant(session, tenant, owner):
    other = make_tenant(session, owner, name="Outro", cnpj="2")
    foreign_unit = unit_service.create_unit(session, tenant_id=other.id, number="101")
    member = make_user(session, "m@example.com")
    add_member(session, member, tenant)

    with pytest.raises(NotFoundError):
        user_service.update_membership(session, tenant_id=tenant.id, user_id=member.id, unit_id=foreign_unit.id)


def test_remove_from_tenant_keeps_user(session, tenant):
    member = make_user(session, "m@example.com")
    add_member(session, member, tenant)

    user_service.remove_from_tenant(session, tenant_id=tenant.id, user_id=member.id)

    assert session.exec(select(User).where(User.id == member.id)).one()
    assert [t.tenant_id for t in user_service.list_my_tenants(session, member.id)] == []
    with pytest.raises(NotFoundError):
        user_service.remove_from_tenant(session, tenant_id=tenant.id, user_id=member.id)


def test_update_profile(session, owner):
    updated = user_service.update_profile(session, owner.id, name="Novo Nome", phone="11 99999-0000")
    assert updated.name == "Novo Nome"
    assert updated.phone == "11 99999-0000"
    with pytest.raises(ValidationError):
        user_service.update_profile(session, owner.id, phone="1" * 21)


def test_update_password(session, owner):
    with pytest.raises(ValidationError):
        user_service.update_password(session, owner.id, old_password="errada", new_password="novasenha")
    with pytest.raises(ValidationError):
        user_service.update_password(session, owner.id, old_password=TEST_PASSWORD, new_password="123")

    user_service.update_password(session, owner.id, old_password=TEST_PASSWORD, new_password="novasenha")
    session.refresh(owner)
    assert verify_password("novasenha", owner.password_hash)


def test_list_my_tenants(session, owner, tenant):
    other = make_tenant(session, owner, name="Beta", cnpj="2")
    mine = user_service.list_my_tenants(session, owner.id)
    assert {(t.tenant_id, t.role) for t in mine} == {(tenant.id, "sindico"), (other.id, "sindico")}
