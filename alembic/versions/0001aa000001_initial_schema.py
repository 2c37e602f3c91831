"""initial schema: tenant, user, user_tenant, unit, folder, document, invite

Revision ID: 0001aa000001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001aa000001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _base_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "tenant",
        *_base_columns(),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("cnpj", sa.String(length=18), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_tenant_name"), "tenant", ["name"], unique=False)
    op.create_index(op.f("ix_tenant_cnpj"), "tenant", ["cnpj"], unique=True)
    op.create_index(op.f("ix_tenant_deleted_at"), "tenant", ["deleted_at"], unique=False)

    op.create_table(
        "unit",
        *_base_columns(),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("number", sa.String(length=50), nullable=False),
        sa.Column("block", sa.String(length=50), nullable=True),
        sa.Column("floor", sa.Integer(), nullable=True),
        sa.Column("area", sa.Numeric(10, 2), nullable=True),
        sa.Column("owner_name", sa.String(), nullable=True),
        sa.Column("owner_email", sa.String(), nullable=True),
        sa.Column("owner_phone", sa.String(length=20), nullable=True),
        sa.Column("occupied", sa.Boolean(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenant.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tenant_id", "number", name="uq_unit_tenant_number"),
    )
    op.create_index(op.f("ix_unit_tenant_id"), "unit", ["tenant_id"], unique=False)
    op.create_index(op.f("ix_unit_block"), "unit", ["block"], unique=False)
    op.create_index(op.f("ix_unit_deleted_at"), "unit", ["deleted_at"], unique=False)

    op.create_table(
        "user",
        *_base_columns(),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("cpf", sa.String(length=14), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("unit_id", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["unit_id"], ["unit.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_user_email"),
    )
    op.create_index(op.f("ix_user_email"), "user", ["email"], unique=False)
    op.create_index(op.f("ix_user_cpf"), "user", ["cpf"], unique=False)
    op.create_index(op.f("ix_user_unit_id"), "user", ["unit_id"], unique=False)
    op.create_index(op.f("ix_user_deleted_at"), "user", ["deleted_at"], unique=False)

    op.create_table(
        "user_tenant",
        *_base_columns(),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(length=7), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["user.id"]),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenant.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "tenant_id", name="uq_user_tenant_user_tenant"),
    )
    op.create_index(op.f("ix_user_tenant_user_id"), "user_tenant", ["user_id"], unique=False)
    op.create_index(op.f("ix_user_tenant_tenant_id"), "user_tenant", ["tenant_id"], unique=False)
    op.create_index(op.f("ix_user_tenant_role"), "user_tenant", ["role"], unique=False)
    op.create_index(op.f("ix_user_tenant_is_active"), "user_tenant", ["is_active"], unique=False)
    op.create_index(op.f("ix_user_tenant_deleted_at"), "user_tenant", ["deleted_at"], unique=False)

    op.create_table(
        "folder",
        *_base_columns(),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenant.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_folder_tenant_id"), "folder", ["tenant_id"], unique=False)
    op.create_index(op.f("ix_folder_deleted_at"), "folder", ["deleted_at"], unique=False)

    op.create_table(
        "document",
        *_base_columns(),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("folder_id", sa.Integer(), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("original_name", sa.String(length=255), nullable=False),
        sa.Column("content_type", sa.String(length=100), nullable=False),
        sa.Column("size", sa.Integer(), nullable=False),
        sa.Column("s3_key", sa.String(length=500), nullable=False),
        sa.Column("uploaded_by_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenant.id"]),
        sa.ForeignKeyConstraint(["folder_id"], ["folder.id"]),
        sa.ForeignKeyConstraint(["uploaded_by_id"], ["user.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("s3_key"),
    )
    op.create_index(op.f("ix_document_tenant_id"), "document", ["tenant_id"], unique=False)
    op.create_index(op.f("ix_document_folder_id"), "document", ["folder_id"], unique=False)
    op.create_index(op.f("ix_document_uploaded_by_id"), "document", ["uploaded_by_id"], unique=False)
    op.create_index(op.f("ix_document_deleted_at"), "document", ["deleted_at"], unique=False)

    op.create_table(
        "invite",
        *_base_columns(),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("role", sa.String(length=7), nullable=False),
        sa.Column("token", sa.String(), nullable=False),
        sa.Column("status", sa.String(length=9), nullable=False),
        sa.Column("invited_by_user_id", sa.Integer(), nullable=False),
        sa.Column("accepted_by_user_id", sa.Integer(), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenant.id"]),
        sa.ForeignKeyConstraint(["invited_by_user_id"], ["user.id"]),
        sa.ForeignKeyConstraint(["accepted_by_user_id"], ["user.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_invite_tenant_id"), "invite", ["tenant_id"], unique=False)
    op.create_index(op.f("ix_invite_email"), "invite", ["email"], unique=False)
    op.create_index(op.f("ix_invite_token"), "invite", ["token"], unique=True)
    op.create_index(op.f("ix_invite_status"), "invite", ["status"], unique=False)
    op.create_index(op.f("ix_invite_invited_by_user_id"), "invite", ["invited_by_user_id"], unique=False)
    op.create_index(op.f("ix_invite_deleted_at"), "invite", ["deleted_at"], unique=False)


def downgrade() -> None:
    for table in ("invite", "document", "folder", "user_tenant", "user", "unit", "tenant"):
        op.drop_table(table)
